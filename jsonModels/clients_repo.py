# jsonModels/clients_repo.py
from __future__ import annotations

from typing import Optional

from facturas.models import Client

from .store import RecordStore

KIND_CLIENTS = "clients"


class ClientRepository:
    """Clientes guardados en clients/<cif>.json. Guardar el mismo CIF reemplaza."""

    def __init__(self, store: RecordStore):
        self.store = store

    def save(self, client: Client) -> Client:
        self.store.save(KIND_CLIENTS, client.cif, client)
        return client

    def create(self, name: str, cif: str, address: str, email: Optional[str] = None) -> Client:
        return self.save(Client(name=name, cif=cif, address=address, email=email))

    def find(self, cif: str) -> Optional[Client]:
        return self.store.load(KIND_CLIENTS, cif, Client)

    def list(self) -> list[Client]:
        return self.store.list(KIND_CLIENTS, Client)
