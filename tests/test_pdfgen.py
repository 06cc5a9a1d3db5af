import os
import pytest

from facturas.models import Invoice, Item, Rule
from facturas.pdfgen import RenderError, generar_pdf, pdf_path_for


def test_generates_pdf_file(tmp_path, invoice):
    out = generar_pdf(invoice, str(tmp_path / "pdfs"))
    assert out == pdf_path_for(invoice.id, str(tmp_path / "pdfs"))
    assert os.path.basename(out) == "invoice_INV-001.pdf"
    with open(out, "rb") as fh:
        assert fh.read(5) == b"%PDF-"


def test_many_items_spill_to_new_pages(tmp_path, user, client):
    items = [Item(f"Concepto número {i} con una descripción bastante larga", i, 1.5) for i in range(60)]
    inv = Invoice.build("LARGA", "2024-01-01", "2024-01-31", user, client, Rule(21, 15), items)
    out = generar_pdf(inv, str(tmp_path))
    with open(out, "rb") as fh:
        data = fh.read()
    pages = data.count(b"/Type /Page") - data.count(b"/Type /Pages")
    assert pages >= 2


def test_render_error_when_output_dir_is_a_file(tmp_path, invoice):
    f = tmp_path / "ocupado"
    f.write_text("x")
    with pytest.raises(RenderError):
        generar_pdf(invoice, str(f))
