import os
from reportlab.pdfgen import canvas
from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib import colors

from .models import Invoice
from .utils import fmt_money_pdf, fmt_pct, truncate
from .logging_setup import get_logger

log = get_logger(__name__)

# =====================================================
# LAYOUT (mm desde la esquina inferior izquierda, A4 210×297)
# =====================================================
LAYOUT = {
    # Encabezado
    "TITLE_X": 30, "TITLE_Y": 270, "TITLE_SIZE": 24,
    "META_X": 145,
    "META_Ys": (275, 260, 245),             # número, fecha, vencimiento (rótulo; valor 5 mm abajo)
    "META_VALUE_GAP": 5,

    # Emisor / cliente
    "FROM_X": 30, "FROM_Y": 240,
    "TO_X": 30, "TO_Y": 200,
    "PARTY_LINE_H": 5,

    # Tabla
    "TABLE_Y": 165,
    "COLS": {"descripcion": 35, "cantidad": 100, "precio": 120, "total": 150},
    "TABLE_LEFT": 30, "TABLE_RIGHT": 180,
    "ROW_LINE_H": 7,
    "DESC_MAX_CHARS": 40,
    "BOTTOM_LIMIT_Y": 60,                   # debajo de esto, página nueva

    # Totales
    "TOTALS_LABEL_X": 100, "TOTALS_VALUE_X": 150,
    "TOTALS_LINE_H": 5,
    "TOTALS_BLOCK_H": 25,                   # alto aprox. del bloque de totales

    # Pie
    "FOOTER_Y": 30,
    "FOOTER_TEXT": "¡Gracias por su confianza!",
}

FONT_REG, FONT_BOLD, FONT_ITALIC = "Helvetica", "Helvetica-Bold", "Helvetica-Oblique"

COLOR_ACCENT = colors.Color(0.0, 0.35, 0.7)
COLOR_TEXT = colors.black
COLOR_LINE = colors.Color(0.5, 0.5, 0.5)
COLOR_SEPARATOR = colors.Color(0.95, 0.95, 0.95)


class RenderError(Exception):
    """No se pudo generar el PDF de la factura."""


def pdf_path_for(invoice_id: str, output_dir: str) -> str:
    return os.path.join(output_dir, f"invoice_{invoice_id}.pdf")


def _text(c: canvas.Canvas, x_mm, y_mm, text, font=FONT_REG, size=10, color=COLOR_TEXT):
    c.setFillColor(color)
    c.setFont(font, size)
    c.drawString(x_mm * mm, y_mm * mm, str(text))


def _line(c: canvas.Canvas, x1, y1, x2, y2, width=0.5, color=COLOR_LINE):
    c.setStrokeColor(color)
    c.setLineWidth(width)
    c.line(x1 * mm, y1 * mm, x2 * mm, y2 * mm)


def _draw_header(c: canvas.Canvas, inv: Invoice, L: dict):
    _text(c, L["TITLE_X"], L["TITLE_Y"], "FACTURA", FONT_BOLD, L["TITLE_SIZE"], COLOR_ACCENT)

    gap = L["META_VALUE_GAP"]
    for y, label, value in zip(L["META_Ys"], ("FACTURA Nº", "FECHA", "VENCIMIENTO"), (inv.id, inv.date, inv.due_date)):
        _text(c, L["META_X"], y, label, FONT_BOLD, 11, COLOR_ACCENT)
        _text(c, L["META_X"], y - gap, value, FONT_REG, 11)


def _draw_party(c: canvas.Canvas, x, y, title, name, id_label, cif, address, extra, L: dict):
    lh = L["PARTY_LINE_H"]
    _text(c, x, y, title, FONT_BOLD, 14, COLOR_ACCENT)
    _text(c, x, y - lh, name, FONT_BOLD, 12)
    _text(c, x, y - 2 * lh, f"{id_label}: {cif}", FONT_REG, 10)
    _text(c, x, y - 3 * lh, address, FONT_REG, 10)
    yy = y - 4 * lh
    for line in extra:
        _text(c, x, yy, line, FONT_REG, 10)
        yy -= lh


def _draw_table_header(c: canvas.Canvas, y, L: dict):
    cols = L["COLS"]
    for key, label in (("descripcion", "DESCRIPCIÓN"), ("cantidad", "CANT."), ("precio", "PRECIO"), ("total", "TOTAL")):
        _text(c, cols[key], y, label, FONT_BOLD, 10, COLOR_ACCENT)
    _line(c, L["TABLE_LEFT"], y - 2, L["TABLE_RIGHT"], y - 2, 0.5)


def _draw_totals(c: canvas.Canvas, inv: Invoice, y, L: dict) -> float:
    lx, vx, lh = L["TOTALS_LABEL_X"], L["TOTALS_VALUE_X"], L["TOTALS_LINE_H"]
    rows = (
        ("SUBTOTAL:", fmt_money_pdf(inv.subtotal)),
        (f"IVA ({fmt_pct(inv.rule.iva)}):", fmt_money_pdf(inv.iva_amount)),
        (f"IRPF ({fmt_pct(inv.rule.irpf)}):", "-" + fmt_money_pdf(inv.irpf_amount)),
    )
    for label, value in rows:
        _text(c, lx, y, label, FONT_BOLD, 10)
        _text(c, vx, y, value, FONT_REG, 10)
        y -= lh
    y -= 3
    _line(c, lx, y + 3, L["TABLE_RIGHT"], y + 3, 1.0, COLOR_TEXT)
    y -= 5
    _text(c, lx, y, "TOTAL:", FONT_BOLD, 16, COLOR_ACCENT)
    _text(c, vx, y, fmt_money_pdf(inv.total), FONT_BOLD, 16, COLOR_ACCENT)
    return y


def _draw_footer(c: canvas.Canvas, L: dict):
    fy = L["FOOTER_Y"]
    _line(c, L["TABLE_LEFT"], fy + 5, L["TABLE_RIGHT"], fy + 5, 0.5)
    c.setFillColor(COLOR_LINE)
    c.setFont(FONT_ITALIC, 10)
    c.drawCentredString(105 * mm, fy * mm, L["FOOTER_TEXT"])


# =====================================================
# Generación de PDF (paginado simple)
# =====================================================

def generar_pdf(invoice: Invoice, output_dir: str, layout: dict | None = None) -> str:
    """Dibuja la factura en <output_dir>/invoice_<id>.pdf y devuelve la ruta."""
    L = layout or LAYOUT
    out_path = pdf_path_for(invoice.id, output_dir)
    try:
        os.makedirs(output_dir, exist_ok=True)
        c = canvas.Canvas(out_path, pagesize=A4)
        c.setTitle(f"Factura {invoice.id} - {invoice.client.name}")
        c.setAuthor(invoice.user.name)

        _draw_header(c, invoice, L)

        u = invoice.user
        extra_u = []
        if u.email: extra_u.append(f"Email: {u.email}")
        if u.iban:  extra_u.append(f"IBAN: {u.iban}")
        _draw_party(c, L["FROM_X"], L["FROM_Y"], "EMISOR", u.name, "CIF/NIE", u.cif, u.address, extra_u, L)

        cl = invoice.client
        extra_c = [f"Email: {cl.email}"] if cl.email else []
        _draw_party(c, L["TO_X"], L["TO_Y"], "FACTURAR A", cl.name, "CIF/NIF", cl.cif, cl.address, extra_c, L)

        y = L["TABLE_Y"]
        _draw_table_header(c, y, L)
        y -= 8
        cols = L["COLS"]
        n = len(invoice.items)
        for i, it in enumerate(invoice.items):
            if y < L["BOTTOM_LIMIT_Y"]:
                c.showPage()
                y = L["TITLE_Y"]
                _draw_table_header(c, y, L)
                y -= 8
            _text(c, cols["descripcion"], y, truncate(it.description, L["DESC_MAX_CHARS"]), FONT_REG, 9)
            _text(c, cols["cantidad"], y, str(it.quantity), FONT_REG, 9)
            _text(c, cols["precio"], y, fmt_money_pdf(it.price), FONT_REG, 9)
            _text(c, cols["total"], y, fmt_money_pdf(it.total()), FONT_REG, 9)
            if i < n - 1:
                _line(c, cols["descripcion"], y - 2, L["TABLE_RIGHT"] - 5, y - 2, 0.2, COLOR_SEPARATOR)
            y -= L["ROW_LINE_H"]

        # Totales: si no caben, página nueva
        if y < L["BOTTOM_LIMIT_Y"] + L["TOTALS_BLOCK_H"]:
            c.showPage()
            y = L["TITLE_Y"]
        _line(c, L["TABLE_LEFT"], y + 4, L["TABLE_RIGHT"], y + 4, 0.5)
        y -= 4
        _draw_totals(c, invoice, y, L)
        _draw_footer(c, L)

        c.showPage()
        c.save()
    except Exception as e:
        log.exception("Error generando PDF de la factura %s", invoice.id)
        raise RenderError(f"No se pudo generar el PDF '{out_path}': {e}") from e

    log.info("PDF generado: %s", out_path)
    return out_path
