# facturas/validation.py
"""Validación de formato de lo que escribe el usuario en los prompts."""
from __future__ import annotations

import datetime


class ValidationError(ValueError):
    pass


class InvalidEmail(ValidationError):
    def __init__(self, email: str):
        self.email = email
        super().__init__(f"Email con formato inválido: {email}")


class InvalidCif(ValidationError):
    def __init__(self, cif: str):
        self.cif = cif
        super().__init__(f"CIF/NIE con formato inválido: {cif}")


class InvalidIban(ValidationError):
    def __init__(self, iban: str):
        self.iban = iban
        super().__init__(f"IBAN con formato inválido: {iban}")


class InvalidDate(ValidationError):
    def __init__(self, date: str):
        self.date = date
        super().__init__(f"Fecha con formato inválido: {date} (use AAAA-MM-DD)")


class InvalidPercentage(ValidationError):
    def __init__(self, value: float):
        self.value = value
        super().__init__(f"Porcentaje inválido: {value} (debe estar entre 0 y 100)")


class RequiredFieldEmpty(ValidationError):
    def __init__(self, field: str):
        self.field = field
        super().__init__(f"Campo obligatorio vacío: {field}")


def validate_email(email: str) -> str:
    """Vacío es válido (campo opcional)."""
    if not email:
        return email
    if "@" not in email or "." not in email:
        raise InvalidEmail(email)
    if email.startswith("@") or email.endswith("@"):
        raise InvalidEmail(email)
    return email


def validate_cif(cif: str) -> str:
    if not cif:
        raise RequiredFieldEmpty("CIF/NIE")
    if not (8 <= len(cif) <= 12):
        raise InvalidCif(cif)
    return cif


def validate_iban(iban: str) -> str:
    if not iban:
        return iban
    if not (15 <= len(iban) <= 34):
        raise InvalidIban(iban)
    if not iban.isalnum():
        raise InvalidIban(iban)
    return iban


def validate_date(date_str: str) -> str:
    if not date_str:
        return date_str
    try:
        datetime.datetime.strptime(date_str, "%Y-%m-%d")
    except ValueError:
        raise InvalidDate(date_str)
    return date_str


def validate_percentage(value: float, name: str = "") -> float:
    try:
        v = float(value)
    except (TypeError, ValueError):
        raise InvalidPercentage(value)
    if not (0.0 <= v <= 100.0):
        raise InvalidPercentage(v)
    return v


def validate_required(value: str, field: str) -> str:
    if not (value or "").strip():
        raise RequiredFieldEmpty(field)
    return value
