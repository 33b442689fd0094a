import io
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.platypus import SimpleDocTemplate, Table, TableStyle, Paragraph, Spacer
from reportlab.lib import colors
from reportlab.lib.styles import getSampleStyleSheet

from kondate.logic.history.timeline import format_day
from kondate.utilities.constants import SLOTS, SLOT_LABELS

HEADER_COLOR = colors.HexColor("#E07A5F")
STRIPE_COLOR = colors.HexColor("#FDF3EE")


def generate_pdf_for_window(plan_id, window):
    """Render the rolling window as a printable table: Day / Breakfast / Lunch / Dinner."""
    buf = io.BytesIO()
    doc = SimpleDocTemplate(buf, pagesize=landscape(A4),
                            rightMargin=15 * mm, leftMargin=15 * mm, topMargin=12 * mm, bottomMargin=12 * mm)
    styles = getSampleStyleSheet()

    keys = window.keys()
    heading = "3-Day Meal Plan"
    if keys:
        heading += f": {format_day(keys[0])} to {format_day(keys[-1])}"
    rows = [["Day"] + [SLOT_LABELS[slot] for slot in SLOTS]]
    empty_cells = []
    for row_no, (key, slots) in enumerate(window.items(), start=1):
        meals = slots.to_dict()
        rows.append([format_day(key)] + [meals[slot] or "-" for slot in SLOTS])
        empty_cells.extend((col, row_no) for col, slot in enumerate(SLOTS, start=1) if not meals[slot])

    commands = [
        ("BACKGROUND", (0, 0), (-1, 0), HEADER_COLOR),
        ("TEXTCOLOR", (0, 0), (-1, 0), colors.white),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTNAME", (0, 1), (0, -1), "Helvetica-Bold"),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("ROWBACKGROUNDS", (0, 1), (-1, -1), [colors.white, STRIPE_COLOR]),
        ("BOX", (0, 0), (-1, -1), 0.8, HEADER_COLOR),
        ("INNERGRID", (0, 0), (-1, -1), 0.25, colors.lightgrey),
        ("TOPPADDING", (0, 0), (-1, -1), 8),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 8),
    ]
    commands += [("TEXTCOLOR", cell, cell, colors.grey) for cell in empty_cells]
    table = Table(rows, colWidths=[45 * mm] + [70 * mm] * len(SLOTS), repeatRows=1)
    table.setStyle(TableStyle(commands))

    doc.build([
        Paragraph(heading, styles["Title"]),
        Paragraph(f"Plan ID: {plan_id}", styles["Normal"]),
        Spacer(1, 6 * mm),
        table,
    ])
    return buf.getvalue()
