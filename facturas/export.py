# facturas/export.py
import os
import pandas as pd
from openpyxl.styles import Font
from openpyxl.utils import get_column_letter

from .models import Invoice
from .logging_setup import get_logger

log = get_logger(__name__)

LEDGER_COLUMNS = [
    "id", "date", "due_date", "client_name", "client_cif",
    "iva", "irpf", "subtotal", "iva_amount", "irpf_amount", "total",
]
ITEM_COLUMNS = ["invoice_id", "description", "quantity", "price", "line_total"]
MONEY_COLUMNS = {"subtotal", "iva_amount", "irpf_amount", "total", "price", "line_total"}


def invoices_dataframe(invoices: list[Invoice]) -> pd.DataFrame:
    """Libro de facturas: una fila por factura, ordenado por fecha e id."""
    rows = [{
        "id": inv.id,
        "date": inv.date,
        "due_date": inv.due_date,
        "client_name": inv.client.name,
        "client_cif": inv.client.cif,
        "iva": inv.rule.iva,
        "irpf": inv.rule.irpf,
        "subtotal": inv.subtotal,
        "iva_amount": inv.iva_amount,
        "irpf_amount": inv.irpf_amount,
        "total": inv.total,
    } for inv in invoices]
    df = pd.DataFrame(rows, columns=LEDGER_COLUMNS)
    if not df.empty:
        df = df.sort_values(["date", "id"], kind="stable").reset_index(drop=True)
    return df


def items_dataframe(invoices: list[Invoice]) -> pd.DataFrame:
    rows = []
    for inv in invoices:
        for it in inv.items:
            rows.append({
                "invoice_id": inv.id,
                "description": it.description,
                "quantity": it.quantity,
                "price": it.price,
                "line_total": it.total(),
            })
    return pd.DataFrame(rows, columns=ITEM_COLUMNS)


def _format_sheet(ws, columns: list[str]):
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for idx, name in enumerate(columns, start=1):
        letter = get_column_letter(idx)
        if name in MONEY_COLUMNS:
            for (cell,) in ws.iter_rows(min_row=2, min_col=idx, max_col=idx):
                cell.number_format = "#,##0.00"
        max_len = max((len(str(c.value or "")) for (c,) in ws.iter_rows(min_col=idx, max_col=idx)), default=10)
        ws.column_dimensions[letter].width = min(max(max_len + 2, 10), 40)


def exportar_excel(invoices: list[Invoice], path: str) -> str:
    """Escribe dos hojas: 'Facturas' (una fila por factura) y 'Conceptos'."""
    folder = os.path.dirname(os.path.abspath(path))
    os.makedirs(folder, exist_ok=True)

    df_inv = invoices_dataframe(invoices)
    df_items = items_dataframe(invoices)

    with pd.ExcelWriter(path, engine="openpyxl") as writer:
        df_inv.to_excel(writer, sheet_name="Facturas", index=False)
        df_items.to_excel(writer, sheet_name="Conceptos", index=False)
        _format_sheet(writer.sheets["Facturas"], LEDGER_COLUMNS)
        _format_sheet(writer.sheets["Conceptos"], ITEM_COLUMNS)

    log.info("Exportadas %d factura(s) a %s", len(df_inv), path)
    return path
