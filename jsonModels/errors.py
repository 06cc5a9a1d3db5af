# jsonModels/errors.py
from __future__ import annotations


class StoreError(Exception):
    """Error base del almacén de registros (un archivo JSON por registro)."""


class DirectoryUnavailable(StoreError):
    """No se pudo crear o acceder a la carpeta base o a una subcarpeta."""


class WriteFailure(StoreError):
    """No se pudo escribir el registro en disco."""


class DecodeFailure(StoreError):
    """El archivo existe pero no tiene la forma del registro esperado."""


class InvalidKey(StoreError):
    """La llave no sirve como nombre de archivo (vacía o con separadores)."""
