# backend/utils/pdf.py

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from typing import List, Optional, Sequence

from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.units import mm
from reportlab.pdfgen import canvas

from models.inventory import InventoryItem
from utils.formatting import format_number

logger = logging.getLogger(__name__)

# Optional Unicode font; Helvetica is used when it is missing
FONT_DIR = Path("assets/fonts")
FONT_REGULAR_PATH = FONT_DIR / "DejaVuSans.ttf"
FONT_BOLD_PATH = FONT_DIR / "DejaVuSans-Bold.ttf"

FONT_REGULAR_NAME = "Helvetica"
FONT_BOLD_NAME = "Helvetica-Bold"

_fonts_inited = False
def _init_fonts():
    """Registers DejaVu fonts in ReportLab when they are shipped with the app."""
    global _fonts_inited, FONT_REGULAR_NAME, FONT_BOLD_NAME
    if _fonts_inited:
        return
    _fonts_inited = True
    if not FONT_REGULAR_PATH.exists():
        return
    try:
        from reportlab.pdfbase import pdfmetrics
        from reportlab.pdfbase.ttfonts import TTFont

        pdfmetrics.registerFont(TTFont("DejaVuSans", str(FONT_REGULAR_PATH)))
        FONT_REGULAR_NAME = "DejaVuSans"
        if FONT_BOLD_PATH.exists():
            pdfmetrics.registerFont(TTFont("DejaVuSans-Bold", str(FONT_BOLD_PATH)))
            FONT_BOLD_NAME = "DejaVuSans-Bold"
        else:
            FONT_BOLD_NAME = FONT_REGULAR_NAME
    except Exception as e:
        logger.warning(f"Font init warning: {e}")


# (header, x position in mm, alignment)
INVENTORY_COLUMNS = [
    ("Sr. No", 12, "left"),
    ("Product", 28, "left"),
    ("Category", 95, "left"),
    ("Unit", 140, "left"),
    ("Min", 170, "right"),
    ("Max", 190, "right"),
    ("Reorder", 212, "right"),
    ("Stock", 232, "right"),
    ("Price/Unit", 255, "right"),
    ("Value", 285, "right"),
]


def _inventory_cells(item: InventoryItem) -> List[str]:
    return [
        format_number(item.sr_no),
        str(item.product)[:38],
        str(item.category)[:25],
        str(item.unit)[:12],
        format_number(item.minimum_quantity),
        format_number(item.maximum_quantity),
        format_number(item.reorder_quantity),
        format_number(item.stock),
        format_number(item.price_per_unit, max_decimals=2),
        format_number(item.value, max_decimals=2),
    ]


def generate_inventory_pdf(items: Sequence[InventoryItem], client_name: Optional[str] = None,
                           title: str = "Inventory Report") -> bytes:
    """
    Renders an inventory table to PDF:
    - header with client name and generation date
    - one row per item, low/negative stock rows in red
    - totals line (products, stock value)
    """
    _init_fonts()

    buffer = BytesIO()
    c = canvas.Canvas(buffer, pagesize=landscape(A4))
    width, height = landscape(A4)

    def draw_text(x, y, text, font=None, size=9, align="left", color=(0, 0, 0)):
        c.setFillColorRGB(*color)
        c.setFont(font or FONT_REGULAR_NAME, size)
        text_str = str(text) if text is not None else ""
        if align == "right":
            c.drawRightString(x, y, text_str)
        elif align == "center":
            c.drawCentredString(x, y, text_str)
        else:
            c.drawString(x, y, text_str)
        c.setFillColorRGB(0, 0, 0)

    def draw_table_header(y):
        c.setFillColorRGB(0.95, 0.95, 0.95)
        c.rect(10 * mm, y - 2 * mm, width - 20 * mm, 8 * mm, fill=1, stroke=0)
        c.setFillColorRGB(0, 0, 0)
        for label, x, align in INVENTORY_COLUMNS:
            draw_text(x * mm, y, label, font=FONT_BOLD_NAME, align=align)
        return y - 8 * mm

    # --- HEADER ---
    y = height - 15 * mm
    heading = f"{title} - {client_name}" if client_name else title
    draw_text(12 * mm, y, heading, font=FONT_BOLD_NAME, size=16)
    draw_text(width - 12 * mm, y, datetime.now().strftime("%d/%m/%Y %H:%M"), align="right")
    y -= 6 * mm
    c.setLineWidth(0.5)
    c.line(10 * mm, y, width - 10 * mm, y)
    y -= 10 * mm

    # --- TABLE ---
    y = draw_table_header(y)
    for item in items:
        color = (0.8, 0.1, 0.1) if item.needs_attention else (0, 0, 0)
        for (label, x, align), cell in zip(INVENTORY_COLUMNS, _inventory_cells(item)):
            draw_text(x * mm, y, cell, align=align, color=color)
        c.setLineWidth(0.1)
        c.line(10 * mm, y - 2 * mm, width - 10 * mm, y - 2 * mm)
        y -= 6 * mm

        # New page
        if y < 20 * mm:
            c.showPage()
            y = draw_table_header(height - 15 * mm)

    # --- TOTALS ---
    total_value = sum(i.value for i in items if i.value == i.value)
    y -= 4 * mm
    draw_text(12 * mm, y, f"Products: {len(items)}", font=FONT_BOLD_NAME)
    draw_text(285 * mm, y, f"Total value: Rs. {format_number(total_value, max_decimals=2)}",
              font=FONT_BOLD_NAME, align="right")

    c.showPage()
    c.save()
    return buffer.getvalue()
