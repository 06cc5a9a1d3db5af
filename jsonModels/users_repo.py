# jsonModels/users_repo.py
from __future__ import annotations

import dataclasses
from typing import Optional

from facturas.models import User

from .store import RecordStore

USER_RECORD = "user"


class UserRepository:
    """Perfil del emisor: un único registro en <base>/user.json."""

    def __init__(self, store: RecordStore):
        self.store = store

    def get_current(self) -> Optional[User]:
        return self.store.get_singleton(USER_RECORD, User)

    def save(self, user: User) -> User:
        self.store.save_singleton(USER_RECORD, user)
        return user

    def create(
        self,
        name: str,
        address: str,
        cif: str,
        email: Optional[str] = None,
        iban: Optional[str] = None,
    ) -> User:
        return self.save(User(name=name, address=address, cif=cif, email=email, iban=iban))

    def replace(self, current: User, **changes) -> User:
        """
        Devuelve un User nuevo con los cambios aplicados y lo persiste.
        El llamador se queda con el valor devuelto; aquí no se guarda estado.
        """
        updated = dataclasses.replace(current, **changes)
        return self.save(updated)
