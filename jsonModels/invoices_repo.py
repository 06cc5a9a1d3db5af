# jsonModels/invoices_repo.py
from __future__ import annotations

from typing import Optional

from facturas.models import Invoice

from .store import RecordStore

KIND_INVOICES = "invoices"


class InvoiceRepository:
    """Facturas en invoices/<id>.json. Un id repetido sobrescribe la anterior."""

    def __init__(self, store: RecordStore):
        self.store = store

    def save(self, invoice: Invoice) -> Invoice:
        self.store.save(KIND_INVOICES, invoice.id, invoice)
        return invoice

    def find(self, invoice_id: str) -> Optional[Invoice]:
        return self.store.load(KIND_INVOICES, invoice_id, Invoice)

    def list(self) -> list[Invoice]:
        return self.store.list(KIND_INVOICES, Invoice)
