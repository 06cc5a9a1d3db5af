# facturas/models.py
"""
Registros del dominio: User (emisor), Client, Item, Rule e Invoice.

Son inmutables: "modificar" es construir uno nuevo y volver a guardarlo con
la misma llave. Las facturas guardan copias de User y Client tal como
estaban al emitirse, no referencias.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable, Optional


def _opt_str(v: Any) -> Optional[str]:
    if v is None:
        return None
    if not isinstance(v, str):
        raise TypeError(f"Se esperaba texto, llegó {type(v).__name__}")
    return v


def _req_str(d: dict, key: str) -> str:
    v = d[key]
    if not isinstance(v, str):
        raise TypeError(f"'{key}' debe ser texto")
    return v


def _req_num(d: dict, key: str) -> float:
    v = d[key]
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise TypeError(f"'{key}' debe ser numérico")
    return float(v)


@dataclass(frozen=True)
class User:
    name: str
    address: str
    cif: str
    email: Optional[str] = None
    iban: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "address": self.address,
            "cif": self.cif,
            "email": self.email,
            "iban": self.iban,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "User":
        return cls(
            name=_req_str(d, "name"),
            address=_req_str(d, "address"),
            cif=_req_str(d, "cif"),
            email=_opt_str(d.get("email")),
            iban=_opt_str(d.get("iban")),
        )

    def __str__(self) -> str:
        lines = [f"Nombre: {self.name}", f"CIF/NIE: {self.cif}", f"Dirección: {self.address}"]
        if self.email:
            lines.append(f"Email: {self.email}")
        if self.iban:
            lines.append(f"IBAN: {self.iban}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Client:
    name: str
    cif: str
    address: str
    email: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "cif": self.cif,
            "address": self.address,
            "email": self.email,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Client":
        return cls(
            name=_req_str(d, "name"),
            cif=_req_str(d, "cif"),
            address=_req_str(d, "address"),
            email=_opt_str(d.get("email")),
        )

    def __str__(self) -> str:
        lines = [f"Nombre: {self.name}", f"CIF/NIF: {self.cif}", f"Dirección: {self.address}"]
        if self.email:
            lines.append(f"Email: {self.email}")
        return "\n".join(lines)


@dataclass(frozen=True)
class Item:
    description: str
    quantity: int
    price: float

    def total(self) -> float:
        return self.quantity * self.price

    def to_dict(self) -> dict[str, Any]:
        return {"description": self.description, "quantity": self.quantity, "price": self.price}

    @classmethod
    def from_dict(cls, d: dict) -> "Item":
        qty = d["quantity"]
        if isinstance(qty, bool) or not isinstance(qty, int):
            raise TypeError("'quantity' debe ser entero")
        if qty < 0:
            raise ValueError("'quantity' no puede ser negativa")
        return cls(description=_req_str(d, "description"), quantity=qty, price=_req_num(d, "price"))

    def __str__(self) -> str:
        return f"{self.description}: {self.quantity} x {self.price:.2f}€ = {self.total():.2f}€"


@dataclass(frozen=True)
class Rule:
    """Porcentajes de IVA (suma) e IRPF (retención, resta)."""
    iva: float
    irpf: float

    def to_dict(self) -> dict[str, Any]:
        return {"iva": self.iva, "irpf": self.irpf}

    @classmethod
    def from_dict(cls, d: dict) -> "Rule":
        return cls(iva=_req_num(d, "iva"), irpf=_req_num(d, "irpf"))

    def __str__(self) -> str:
        return f"IVA: {self.iva:g}%, IRPF: {self.irpf:g}%"


def compute_totals(items: Iterable[Item], rule: Rule) -> tuple[float, float, float, float]:
    """(subtotal, iva_amount, irpf_amount, total)."""
    subtotal = sum((it.total() for it in items), 0.0)
    iva_amount = subtotal * rule.iva / 100.0
    irpf_amount = subtotal * rule.irpf / 100.0
    total = subtotal + iva_amount - irpf_amount
    return subtotal, iva_amount, irpf_amount, total


@dataclass(frozen=True)
class Invoice:
    id: str
    date: str
    due_date: str
    user: User
    client: Client
    rule: Rule
    items: tuple[Item, ...] = field(default_factory=tuple)
    # Sin totales se calculan de items y rule; si vienen (from_dict), se respetan.
    subtotal: Optional[float] = None
    iva_amount: Optional[float] = None
    irpf_amount: Optional[float] = None
    total: Optional[float] = None

    def __post_init__(self):
        if not isinstance(self.items, tuple):
            object.__setattr__(self, "items", tuple(self.items))
        if None in (self.subtotal, self.iva_amount, self.irpf_amount, self.total):
            subtotal, iva_amount, irpf_amount, total = compute_totals(self.items, self.rule)
            object.__setattr__(self, "subtotal", subtotal)
            object.__setattr__(self, "iva_amount", iva_amount)
            object.__setattr__(self, "irpf_amount", irpf_amount)
            object.__setattr__(self, "total", total)

    @classmethod
    def build(
        cls,
        id: str,
        date: str,
        due_date: str,
        user: User,
        client: Client,
        rule: Rule,
        items: Iterable[Item],
    ) -> "Invoice":
        """Construye la factura calculando los cuatro totales a partir de items y rule."""
        return cls(
            id=id, date=date, due_date=due_date,
            user=user, client=client, rule=rule, items=tuple(items),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "date": self.date,
            "due_date": self.due_date,
            "user": self.user.to_dict(),
            "client": self.client.to_dict(),
            "rule": self.rule.to_dict(),
            "items": [it.to_dict() for it in self.items],
            "subtotal": self.subtotal,
            "iva_amount": self.iva_amount,
            "irpf_amount": self.irpf_amount,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, d: dict) -> "Invoice":
        # Los totales guardados se respetan tal cual (no se recalculan al leer).
        raw_items = d["items"]
        if not isinstance(raw_items, list):
            raise TypeError("'items' debe ser una lista")
        return cls(
            id=_req_str(d, "id"),
            date=_req_str(d, "date"),
            due_date=_req_str(d, "due_date"),
            user=User.from_dict(d["user"]),
            client=Client.from_dict(d["client"]),
            rule=Rule.from_dict(d["rule"]),
            items=tuple(Item.from_dict(x) for x in raw_items),
            subtotal=_req_num(d, "subtotal"),
            iva_amount=_req_num(d, "iva_amount"),
            irpf_amount=_req_num(d, "irpf_amount"),
            total=_req_num(d, "total"),
        )

    def __str__(self) -> str:
        out = [
            f"FACTURA #{self.id} - {self.date}",
            f"Vencimiento: {self.due_date}",
            "",
            "EMISOR:",
            str(self.user),
            "",
            "CLIENTE:",
            str(self.client),
            "",
            "CONCEPTOS:",
        ]
        for i, it in enumerate(self.items, start=1):
            out.append(f"{i}. {it}")
        out += [
            "",
            "RESUMEN:",
            f"Subtotal: {self.subtotal:.2f}€",
            f"IVA ({self.rule.iva:g}%): {self.iva_amount:.2f}€",
            f"IRPF ({self.rule.irpf:g}%): -{self.irpf_amount:.2f}€",
            f"TOTAL: {self.total:.2f}€",
        ]
        return "\n".join(out)
