"""Core business logic layer.

Subpackages:
- planning: scoring, week composition, swap suggestions, reason chips
- shopping: name/unit normalisation, aggregation and price estimates

Everything here is pure: the recipe catalog and any history are passed in.
"""
__all__ = ["planning", "shopping"]
