# facturas/invoicing.py
"""
Alta de facturas: completa los campos opcionales (número, fecha de emisión y
vencimiento), construye la Invoice con sus totales y la guarda.
"""
from __future__ import annotations

import datetime
import uuid
from typing import Callable, Iterable, Optional

from jsonModels.invoices_repo import InvoiceRepository

from .logging_setup import get_logger
from .models import Client, Invoice, Item, Rule, User

log = get_logger(__name__)

DATE_FMT = "%Y-%m-%d"
DEFAULT_DUE_DAYS = 30


def _today(today: Optional[datetime.date]) -> datetime.date:
    return today if today is not None else datetime.date.today()


def resolve_invoice_id(invoice_id: Optional[str] = None) -> str:
    """El número indicado tal cual; si viene vacío, un UUID4 nuevo. No se comprueba si ya existe."""
    if invoice_id:
        return invoice_id
    return str(uuid.uuid4())


def resolve_issue_date(date_str: Optional[str] = None, today: Optional[datetime.date] = None) -> str:
    if date_str:
        return date_str
    return _today(today).strftime(DATE_FMT)


def resolve_due_date(
    issue_date: str,
    due_date: Optional[str] = None,
    today: Optional[datetime.date] = None,
    days: int = DEFAULT_DUE_DAYS,
) -> str:
    """
    Vencimiento indicado tal cual; si no, emisión + 30 días naturales.
    Si la fecha de emisión no se puede leer, hoy + 30 días (no es un error).
    Si la suma se sale del calendario, la propia fecha de emisión.
    """
    if due_date:
        return due_date
    try:
        base = datetime.datetime.strptime(issue_date, DATE_FMT).date()
    except (TypeError, ValueError):
        log.warning("Fecha de emisión ilegible (%r); vencimiento calculado desde hoy", issue_date)
        base = _today(today)
    try:
        due = base + datetime.timedelta(days=days)
    except OverflowError:
        log.warning("Vencimiento fuera de calendario desde %s; se usa la fecha de emisión", base)
        due = base
    return due.strftime(DATE_FMT)


class InvoiceService:
    def __init__(
        self,
        invoices: InvoiceRepository,
        renderer: Optional[Callable[[Invoice], str]] = None,
    ):
        self.invoices = invoices
        self.renderer = renderer

    def create_invoice(
        self,
        user: User,
        client: Client,
        rule: Rule,
        items: Iterable[Item],
        invoice_id: Optional[str] = None,
        date: Optional[str] = None,
        due_date: Optional[str] = None,
        today: Optional[datetime.date] = None,
    ) -> Invoice:
        inv_id = resolve_invoice_id(invoice_id)
        issue = resolve_issue_date(date, today)
        due = resolve_due_date(issue, due_date, today)

        invoice = Invoice.build(inv_id, issue, due, user, client, rule, items)
        # Errores del almacén se propagan sin envolver.
        self.invoices.save(invoice)
        log.info("Factura %s creada (cliente=%s, total=%.2f)", invoice.id, client.cif, invoice.total)
        return invoice

    def list_invoices(self) -> list[Invoice]:
        return self.invoices.list()

    def generate_pdf(self, invoice: Invoice) -> str:
        if self.renderer is None:
            raise RuntimeError("No hay generador de PDF configurado")
        return self.renderer(invoice)
