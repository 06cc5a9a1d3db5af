# jsonModels/__init__.py
from __future__ import annotations

from .clients_repo import KIND_CLIENTS, ClientRepository
from .errors import DecodeFailure, DirectoryUnavailable, InvalidKey, StoreError, WriteFailure
from .invoices_repo import KIND_INVOICES, InvoiceRepository
from .store import RecordStore
from .users_repo import UserRepository


def open_store(base_dir: str) -> RecordStore:
    """Crea (si hace falta) <base>/clients y <base>/invoices y devuelve el almacén."""
    return RecordStore(base_dir, kinds=(KIND_CLIENTS, KIND_INVOICES))


__all__ = [
    "RecordStore", "open_store",
    "UserRepository", "ClientRepository", "InvoiceRepository",
    "KIND_CLIENTS", "KIND_INVOICES",
    "StoreError", "DirectoryUnavailable", "WriteFailure", "DecodeFailure", "InvalidKey",
]
