import re
import json
import base64
import logging
from json import JSONDecodeError
from typing import Any, Dict, List, Optional

import httpx
from bs4 import BeautifulSoup
from openai import OpenAI, OpenAIError
from fastapi import APIRouter, Depends, File, HTTPException, Request, UploadFile

from mealplan.domain.Recipe import Recipe
from mealplan.infra.Recipe_Repository import RecipeRepository
from mealplan.utilities import config
from mealplan.utilities.constants import (
    PANTRY_SCAN_PROMPT,
    RECIPE_IMAGE_PROMPT,
    RECIPE_URL_PROMPT,
    RECIPES_JSON_FORMAT,
    SYSTEM_PROMPT,
)
from mealplan.utilities.rate_limit import FixedWindowRateLimiter
from mealplan.utilities.validators import (
    GenerateRecipesRequest,
    HouseholdInput,
    RecipeUrlRequest,
    decode_generated_recipe,
    decode_generated_recipes,
)

logger = logging.getLogger(__name__)

MAX_PAGE_CHARS = 20000
ALLOWED_IMAGE_TYPES = ("image/jpeg", "image/png", "image/webp", "image/gif")


class AIServiceError(Exception):
    """Upstream AI call failed; carries the HTTP status the API should answer with."""

    def __init__(self, message: str, status_code: int = 502, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details


# === Helper: Get OpenAI Client ===
def _get_openai_client() -> OpenAI:
    """Return an OpenAI client, or raise AIServiceError(503) when no key is configured."""
    if not config.OPENAI_API_KEY:
        raise AIServiceError("AI service is not configured (OPENAI_API_KEY missing)", status_code=503)
    return OpenAI(api_key=config.OPENAI_API_KEY, timeout=config.AI_REQUEST_TIMEOUT_SECONDS)


def _call_model(client: OpenAI, model_input: Any) -> str:
    try:
        response = client.responses.create(model=config.OPENAI_MODEL, input=model_input)
    except OpenAIError as e:
        logger.error("OpenAI request failed: %s", e)
        raise AIServiceError("AI request failed", details=str(e)) from e
    text = (response.output_text or "").strip()
    if not text:
        logger.warning("AI returned an empty response")
        raise AIServiceError("AI returned an empty response")
    return text


# === Text Cleaning Helpers ===
def _strip_code_fences(text: str) -> str:
    """Remove common markdown code fences and leading/trailing whitespace."""
    text = re.sub(r"```(?:json)?\n(.*?)```", r"\1", text, flags=re.S)
    text = re.sub(r"^```|```$", "", text)
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    """Remove common trailing commas in JSON-like text to help json.loads succeed."""
    return re.sub(r",\s*(\}|\])", r"\1", text)


def _extract_json_by_balancing(text: str) -> Optional[str]:
    """Extract the first JSON object/array by balancing braces/brackets."""
    start = None
    stack = []
    in_string = False
    escape = False

    for i, ch in enumerate(text):
        if ch == '"' and not escape:
            in_string = not in_string
        if in_string and ch == "\\" and not escape:
            escape = True
            continue
        else:
            escape = False

        if not in_string:
            if ch in "{[":
                if start is None:
                    start = i
                stack.append(ch)
            elif ch in "}]":
                if not stack:
                    continue
                opening = stack.pop()
                if (opening == "{" and ch != "}") or (opening == "[" and ch != "]"):
                    return None
                if not stack and start is not None:
                    return text[start:i + 1]
    return None


def parse_ai_json(text: str) -> Any:
    """Decode model output that should be JSON but may be fenced or padded with prose."""
    try:
        return json.loads(text)
    except JSONDecodeError:
        pass
    cleaned = _remove_trailing_commas(_strip_code_fences(text))
    try:
        return json.loads(cleaned)
    except JSONDecodeError:
        candidate = _extract_json_by_balancing(cleaned)
    if candidate:
        try:
            return json.loads(_remove_trailing_commas(candidate))
        except JSONDecodeError:
            logger.error("Failed to decode extracted JSON from AI output")
    raise AIServiceError("AI output is not valid JSON", details=text[:500])


# === Prompts ===
def build_generation_prompt(household: HouseholdInput, count: int, exclude_titles: List[str],
                            specific_days: Optional[List[str]] = None) -> str:
    lines = [
        f"Suggest {count} dinner recipes for a family of {household.adults} adults"
        + (f" and {len(household.kids)} kids (ages {', '.join(str(a) for a in household.kids)})" if household.kids else "")
        + ".",
        f"Cuisines: {', '.join(household.cuisines)}.",
        f"Weeknight dinners must take at most {household.max_cook_time.weeknight} minutes; "
        f"weekend dinners at most {household.max_cook_time.weekend} minutes.",
        f"Budget per meal: ${household.budget_per_meal.min:g}-${household.budget_per_meal.max:g}.",
    ]
    if household.total_servings:
        lines.append(f"Each recipe should serve {household.total_servings}.")
    if household.allergies:
        lines.append(f"Never use: {', '.join(household.allergies)} (allergies).")
    if household.avoid_foods:
        lines.append(f"Avoid: {', '.join(household.avoid_foods)}.")
    if household.favorite_ingredients:
        lines.append(f"Favourite ingredients: {', '.join(household.favorite_ingredients)}.")
    diet = [flag.replace('_', ' ') for flag, on in household.diet.model_dump().items() if on]
    if diet:
        lines.append(f"Diet preferences: {', '.join(diet)}.")
    if household.pantry:
        lines.append(f"Try to use what is in the pantry: {', '.join(p.name for p in household.pantry)}.")
    if specific_days:
        lines.append(f"The recipes are for: {', '.join(specific_days)}.")
    if exclude_titles:
        lines.append(f"Do not suggest any of these: {', '.join(exclude_titles)}.")
    return "\n".join(lines)


# === Operations ===
def generate_recipes(request: GenerateRecipesRequest, repo: Optional[RecipeRepository] = None) -> List[Recipe]:
    """Ask the model for recipes, keep the ones that decode cleanly and store them as custom recipes."""
    repo = repo or RecipeRepository()
    excluded = set(request.exclude_recipe_ids)
    exclude_titles = [r.title for r in (repo.get_by_id(i) for i in excluded) if r is not None]
    client = _get_openai_client()
    prompt = build_generation_prompt(request.household, request.number_of_recipes, exclude_titles,
                                     request.specific_days)
    text = _call_model(client, SYSTEM_PROMPT + RECIPES_JSON_FORMAT + "\n" + prompt)

    recipes = []
    for result in decode_generated_recipes(parse_ai_json(text)):
        if not result.ok:
            logger.warning("Rejected AI recipe: %s", result.error)
            continue
        if result.recipe.id in excluded:
            continue
        recipes.append(result.recipe)
    if not recipes:
        raise AIServiceError("AI did not return any valid recipes")

    repo.add_custom(recipes)
    logger.info("Stored %d AI generated recipes", len(recipes))
    return recipes


def _image_input(prompt: str, image_bytes: bytes, content_type: str) -> List[Dict[str, Any]]:
    encoded = base64.b64encode(image_bytes).decode("ascii")
    return [{
        "role": "user",
        "content": [
            {"type": "input_text", "text": prompt},
            {"type": "input_image", "image_url": f"data:{content_type};base64,{encoded}"},
        ],
    }]


def scan_pantry_image(image_bytes: bytes, content_type: str) -> List[Dict[str, Any]]:
    client = _get_openai_client()
    payload = parse_ai_json(_call_model(client, _image_input(PANTRY_SCAN_PROMPT, image_bytes, content_type)))
    items = payload.get("ingredients", []) if isinstance(payload, dict) else payload
    if not isinstance(items, list):
        raise AIServiceError("AI response did not contain an ingredient list")
    names = []
    for item in items:
        name = item.get("name") if isinstance(item, dict) else item
        if isinstance(name, str) and name.strip():
            names.append(name.strip().lower())
    return [{"name": n} for n in dict.fromkeys(names)]


def extract_recipe_from_image(image_bytes: bytes, content_type: str) -> Recipe:
    client = _get_openai_client()
    payload = parse_ai_json(_call_model(client, _image_input(RECIPE_IMAGE_PROMPT, image_bytes, content_type)))
    result = decode_generated_recipe(payload, domain="photo", chef="Photo import")
    if not result.ok:
        raise AIServiceError("Could not read a recipe from the image", details=result.error)
    return result.recipe


def html_to_text(html: str) -> str:
    """Visible page text for the model, with any JSON-LD recipe data kept up front."""
    soup = BeautifulSoup(html, "html.parser")
    structured = [script.string.strip() for script in soup.find_all("script", type="application/ld+json")
                  if script.string and script.string.strip()]
    for tag in soup(["script", "style", "noscript"]):
        tag.decompose()
    text = " ".join(structured + [soup.get_text(" ", strip=True)])
    return re.sub(r"\s+", " ", text).strip()[:MAX_PAGE_CHARS]


def fetch_page_text(url: str) -> str:
    try:
        resp = httpx.get(url, timeout=config.AI_REQUEST_TIMEOUT_SECONDS, follow_redirects=True,
                         headers={"User-Agent": "mealplan/1.0"})
        resp.raise_for_status()
    except httpx.HTTPError as e:
        logger.error("Fetching %s failed: %s", url, e)
        raise AIServiceError("Could not fetch the recipe page", details=str(e)) from e
    return html_to_text(resp.text)


def extract_recipe_from_url(url: str) -> Recipe:
    page = fetch_page_text(url)
    client = _get_openai_client()
    payload = parse_ai_json(_call_model(client, RECIPE_URL_PROMPT + "\n\nURL: " + url + "\n\n" + page))
    domain = httpx.URL(url).host
    result = decode_generated_recipe(payload, domain=domain, chef=domain)
    if not result.ok:
        raise AIServiceError("Could not find a recipe on that page", details=result.error)
    result.recipe.source.url = url
    return result.recipe


# === FastAPI Endpoints ===
router = APIRouter(prefix="/api")
rate_limiter = FixedWindowRateLimiter()


def client_ip(request: Request) -> str:
    forwarded = request.headers.get("x-forwarded-for")
    if forwarded:
        return forwarded.split(",")[0].strip()
    return request.client.host if request.client else "unknown"


def enforce_rate_limit(request: Request):
    ip = client_ip(request)
    if not rate_limiter.allow(ip):
        logger.warning("Rate limit exceeded for %s on %s", ip, request.url.path)
        raise HTTPException(
            status_code=429,
            detail="Rate limit exceeded. Please wait a minute before trying again.",
            headers={"Retry-After": str(rate_limiter.retry_after(ip))},
        )


def _to_http(e: AIServiceError) -> HTTPException:
    return HTTPException(status_code=e.status_code, detail={"error": e.message, "details": e.details})


def _read_image(image: UploadFile) -> bytes:
    if image.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported image type: {image.content_type}")
    data = image.file.read()
    if not data:
        raise HTTPException(status_code=400, detail="Empty image upload")
    return data


@router.post("/generate-recipes", dependencies=[Depends(enforce_rate_limit)])
def generate_recipes_endpoint(body: GenerateRecipesRequest):
    try:
        recipes = generate_recipes(body)
    except AIServiceError as e:
        raise _to_http(e)
    return {"success": True, "recipes": [r.to_dict() for r in recipes], "count": len(recipes)}


@router.post("/scan-pantry-image", dependencies=[Depends(enforce_rate_limit)])
def scan_pantry_image_endpoint(image: UploadFile = File(...)):
    data = _read_image(image)
    try:
        ingredients = scan_pantry_image(data, image.content_type)
    except AIServiceError as e:
        raise _to_http(e)
    return {"ingredients": ingredients}


@router.post("/extract-recipe-from-image", dependencies=[Depends(enforce_rate_limit)])
def extract_recipe_from_image_endpoint(image: UploadFile = File(...)):
    data = _read_image(image)
    try:
        recipe = extract_recipe_from_image(data, image.content_type)
    except AIServiceError as e:
        raise _to_http(e)
    return recipe.to_dict()


@router.post("/extract-recipe-from-url", dependencies=[Depends(enforce_rate_limit)])
def extract_recipe_from_url_endpoint(body: RecipeUrlRequest):
    try:
        recipe = extract_recipe_from_url(body.url)
    except AIServiceError as e:
        raise _to_http(e)
    return recipe.to_dict()
