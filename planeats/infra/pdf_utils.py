import io
from collections import defaultdict

from reportlab.lib.pagesizes import A4
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet


def _fmt_amount(amount) -> str:
    if isinstance(amount, float) and amount.is_integer():
        return str(int(amount))
    return f"{amount:g}" if isinstance(amount, float) else str(amount)


def generate_shopping_list_pdf(plan) -> bytes:
    """Render the plan's shopping list as a PDF, one table section per category."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=A4, rightMargin=20, leftMargin=20, topMargin=20, bottomMargin=20)

    styles = getSampleStyleSheet()
    elements = [
        Paragraph(f"Shopping List - {plan.title}", styles["Title"]),
        Paragraph(f"{plan.start_date} to {plan.end_date}", styles["Normal"]),
        Spacer(1, 16),
    ]

    grouped = defaultdict(list)
    for item in plan.shopping_list:
        grouped[item.category].append(item)

    if not grouped:
        elements.append(Paragraph("The shopping list is empty.", styles["Normal"]))

    for category in sorted(grouped):
        elements.append(Paragraph(category.capitalize(), styles["Heading2"]))
        data = [["Ingredient", "Amount", "Unit", "Purchased"]]
        for item in grouped[category]:
            data.append([item.ingredient, _fmt_amount(item.amount), item.unit, "x" if item.purchased else ""])

        table = Table(data, repeatRows=1, colWidths=[220, 80, 80, 80])
        table.setStyle(TableStyle([
            ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#4CAF50")),
            ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
            ("ALIGN", (1, 0), (-1, -1), "CENTER"),
            ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
            ("BOTTOMPADDING", (0, 0), (-1, 0), 8),
            ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 12))

    doc.build(elements)
    return buf.getvalue()
