import io
from reportlab.lib.pagesizes import A4, landscape
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet


def generate_pdf_for_week(plan, catalog):
    """Week dinner plan as a PDF table: Day / Dinner / Time / Serves / Cost / Notes."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(
        buf, pagesize=landscape(A4),
        rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20
    )

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Dinner Plan: week of {plan.start.strftime('%d %b %Y')}", styles["Title"]),
        Spacer(1, 16),
    ]

    data = [["Day", "Dinner", "Time", "Serves", "Cost", "Notes"]]
    for day in plan.days:
        recipe = catalog.get_by_id(day.recipe_id)
        if recipe is None:
            title, time_str, notes = day.recipe_id, "-", "Recipe missing, pick a replacement"
        else:
            title = recipe.title
            time_str = f"{recipe.time_mins}m" if recipe.time_mins else "-"
            notes = day.notes or ("Cook double for leftovers" if day.bulk else "")
        data.append([
            day.date.strftime("%a %d %b"),
            title,
            time_str,
            str(day.scaled_servings),
            f"${day.cost_estimate:.2f}",
            notes,
        ])
    data.append(["", "Total", "", "", f"${plan.cost_estimate:.2f}", ""])

    table = Table(data, repeatRows=1)
    table.setStyle(TableStyle([
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
        ("ALIGN", (0, 0), (-1, -1), "LEFT"),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, -1), (-1, -1), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, 0), 12),
        ("BOTTOMPADDING", (0, 0), (-1, 0), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
    ]))

    elements.append(table)
    if plan.conflicts:
        elements.append(Spacer(1, 12))
        for conflict in plan.conflicts:
            elements.append(Paragraph(f"Conflict: {conflict}", styles["Normal"]))
    doc.build(elements)
    return buf.getvalue()
