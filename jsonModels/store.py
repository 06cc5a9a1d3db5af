# jsonModels/store.py
from __future__ import annotations

import json
import os
from typing import Any, Iterable, Optional, Protocol, TypeVar

from facturas.logging_setup import get_logger

from .errors import DecodeFailure, DirectoryUnavailable, InvalidKey, WriteFailure

log = get_logger(__name__)

# Errores que cuentan como "registro ilegible" (JSON roto, UTF-8 inválido,
# campos faltantes o con tipo equivocado, anidamiento excesivo).
DECODE_ERRORS = (json.JSONDecodeError, UnicodeDecodeError, KeyError, TypeError, ValueError, RecursionError)


class Record(Protocol):
    def to_dict(self) -> dict[str, Any]: ...


R = TypeVar("R")


def _ensure_dir(path: str) -> str:
    try:
        os.makedirs(path, exist_ok=True)
    except OSError as e:
        raise DirectoryUnavailable(f"No se pudo crear la carpeta '{path}': {e}") from e
    if not os.path.isdir(path):
        raise DirectoryUnavailable(f"'{path}' existe pero no es una carpeta")
    return path


def _check_key(key: str) -> str:
    k = "" if key is None else str(key)
    if not k.strip() or k in (".", ".."):
        raise InvalidKey(f"Llave inválida: {key!r}")
    if "/" in k or "\\" in k or os.sep in k or (os.altsep and os.altsep in k):
        raise InvalidKey(f"La llave no puede contener separadores de ruta: {key!r}")
    if "\x00" in k:
        raise InvalidKey(f"La llave no puede contener caracteres nulos: {key!r}")
    return k


def encode_record(record: Record) -> str:
    return json.dumps(record.to_dict(), ensure_ascii=False, indent=2)


def decode_record(text: str, record_type: type[R]) -> R:
    data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError(f"Se esperaba un objeto JSON, llegó {type(data).__name__}")
    return record_type.from_dict(data)


class RecordStore:
    """
    Almacén clave -> registro, un archivo JSON por registro:

        <base>/<nombre>.json          singletons (ej: user.json)
        <base>/<kind>/<llave>.json    un archivo por registro

    - save() reemplaza el archivo de la llave (no hay "insert").
    - list() se salta los archivos ilegibles y los deja en last_skipped.
    - Sin locks ni transacciones entre registros: un solo proceso a la vez.
    """

    def __init__(self, base_dir: str, kinds: Iterable[str] = ("clients", "invoices"), ext: str = "json"):
        self.base_dir = os.path.abspath(os.path.expanduser(str(base_dir)))
        self.kinds = tuple(kinds)
        self.ext = ext.lstrip(".")
        self.last_skipped: list[str] = []

        _ensure_dir(self.base_dir)
        for kind in self.kinds:
            _ensure_dir(os.path.join(self.base_dir, kind))
        log.debug("Almacén listo en %s (kinds=%s)", self.base_dir, ",".join(self.kinds))

    # --------------------------
    # Rutas
    # --------------------------
    def kind_dir(self, kind: str) -> str:
        return os.path.join(self.base_dir, _check_key(kind))

    def record_path(self, kind: str, key: str) -> str:
        return os.path.join(self.kind_dir(kind), f"{_check_key(key)}.{self.ext}")

    def singleton_path(self, name: str) -> str:
        return os.path.join(self.base_dir, f"{_check_key(name)}.{self.ext}")

    # --------------------------
    # Escritura
    # --------------------------
    def _write_text(self, path: str, text: str) -> None:
        tmp_path = path + ".tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as fh:
                fh.write(text)
            os.replace(tmp_path, path)
        except OSError as e:
            try:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
            except OSError:
                pass
            raise WriteFailure(f"No se pudo escribir '{path}': {e}") from e

    def save(self, kind: str, key: str, record: Record) -> str:
        """Guarda (o reemplaza) el registro bajo <kind>/<key>. Devuelve la ruta."""
        path = self.record_path(kind, key)
        text = encode_record(record)
        _ensure_dir(os.path.dirname(path))
        self._write_text(path, text)
        log.debug("Guardado %s/%s", kind, key)
        return path

    def save_singleton(self, name: str, record: Record) -> str:
        path = self.singleton_path(name)
        text = encode_record(record)
        _ensure_dir(self.base_dir)
        self._write_text(path, text)
        log.debug("Guardado singleton %s", name)
        return path

    # --------------------------
    # Lectura
    # --------------------------
    @staticmethod
    def _read_text(path: str) -> str:
        with open(path, "r", encoding="utf-8") as fh:
            return fh.read()

    def _load_path(self, path: str, record_type: type[R]) -> Optional[R]:
        if not os.path.exists(path):
            return None
        try:
            return decode_record(self._read_text(path), record_type)
        except DECODE_ERRORS as e:
            raise DecodeFailure(f"Registro ilegible en '{path}': {e}") from e

    def load(self, kind: str, key: str, record_type: type[R]) -> Optional[R]:
        """Lee un registro por llave. None si no existe."""
        return self._load_path(self.record_path(kind, key), record_type)

    def get_singleton(self, name: str, record_type: type[R]) -> Optional[R]:
        """None si el archivo no existe (ej: todavía no hay perfil)."""
        return self._load_path(self.singleton_path(name), record_type)

    def list(self, kind: str, record_type: type[R]) -> list[R]:
        """
        Decodifica cada <kind>/*.json por separado.
        Un archivo ilegible no corta el listado: se registra en el log y en
        last_skipped, y se sigue con el resto.
        """
        folder = self.kind_dir(kind)
        self.last_skipped = []
        if not os.path.isdir(folder):
            return []

        suffix = "." + self.ext
        out: list[R] = []
        for fname in sorted(os.listdir(folder)):
            path = os.path.join(folder, fname)
            if not fname.endswith(suffix) or not os.path.isfile(path):
                continue
            try:
                out.append(decode_record(self._read_text(path), record_type))
            except DECODE_ERRORS as e:
                self.last_skipped.append(path)
                log.warning("Registro ilegible omitido: %s (%s)", path, e)

        if self.last_skipped:
            log.warning("%s: %d registro(s) omitido(s)", kind, len(self.last_skipped))
        return out
