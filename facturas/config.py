# facturas/config.py
from __future__ import annotations
import os, json
from typing import Dict, Any, List, Mapping, Optional

# --------------------------
# Carpeta de la aplicación
# --------------------------
APP_DIR_NAME = ".facturas"


def app_home(environ: Optional[Mapping[str, str]] = None) -> str:
    env = os.environ if environ is None else environ
    raw = (env.get("FACTURAS_HOME") or "").strip()
    if raw:
        return os.path.abspath(os.path.expanduser(os.path.expandvars(raw)))
    return os.path.join(os.path.expanduser("~"), APP_DIR_NAME)


def config_path(environ: Optional[Mapping[str, str]] = None) -> str:
    return os.path.join(app_home(environ), "config.json")


class ConfigError(ValueError):
    """Valores de configuración fuera de rango o con formato inválido."""


# --------------------------
# Defaults
# --------------------------
LOG_LEVELS = ("ERROR", "WARNING", "INFO", "DEBUG")


def default_config(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    home = app_home(environ)
    return {
        "storage_dir": home,
        "pdf_dir": os.path.join(home, "pdfs"),
        "default_iva": 21.0,
        "default_irpf": 15.0,
        "currency": "EUR",
        "welcome_message": "Bienvenido a Facturador",
        "confirm_prompts": True,
        "log_dir": os.path.join(home, "logs"),
        "log_level": "INFO",
    }


# Variables de entorno -> clave de config
ENV_KEYS: Dict[str, str] = {
    "FACTURAS_STORAGE_PATH": "storage_dir",
    "FACTURAS_PDF_DIR": "pdf_dir",
    "FACTURAS_DEFAULT_IVA": "default_iva",
    "FACTURAS_DEFAULT_IRPF": "default_irpf",
    "FACTURAS_LOG_DIR": "log_dir",
    "FACTURAS_LOG_LEVEL": "log_level",
}

_PATH_KEYS = ("storage_dir", "pdf_dir", "log_dir")
_RATE_KEYS = ("default_iva", "default_irpf")


def _load_json(path: str) -> Dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
            return data if isinstance(data, dict) else {}
    except Exception:
        return {}


def _norm_path(p: Any) -> str:
    return os.path.abspath(os.path.expanduser(os.path.expandvars(str(p).strip())))


def _parse_rate(key: str, value: Any) -> float:
    try:
        return float(str(value).strip().replace(",", "."))
    except (TypeError, ValueError):
        raise ConfigError(f"{key}: '{value}' no es un número")


_TRUE_WORDS = ("true", "1", "yes", "si", "sí", "s")
_FALSE_WORDS = ("false", "0", "no", "n")


def _parse_bool(key: str, value: Any) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    raise ConfigError(f"{key}: '{value}' no es verdadero/falso")


def validate_config(cfg: Dict[str, Any]) -> Dict[str, Any]:
    """Lanza ConfigError si algún valor está fuera de rango."""
    for key in _RATE_KEYS:
        v = cfg.get(key)
        if isinstance(v, bool) or not isinstance(v, (int, float)):
            raise ConfigError(f"{key} debe ser numérico")
        if not (0.0 <= float(v) <= 100.0):
            raise ConfigError(f"{key} debe estar entre 0 y 100, llegó: {v}")
    if str(cfg.get("log_level", "")).upper() not in LOG_LEVELS:
        raise ConfigError(f"log_level inválido: {cfg.get('log_level')}")
    for key in _PATH_KEYS:
        if not str(cfg.get(key) or "").strip():
            raise ConfigError(f"{key} no puede estar vacío")
    return cfg


def _merge(base: Dict[str, Any], raw: Mapping[str, Any]) -> Dict[str, Any]:
    cfg = dict(base)
    for key in _PATH_KEYS:
        if key in raw and str(raw[key]).strip():
            cfg[key] = _norm_path(raw[key])
    for key in _RATE_KEYS:
        if key in raw and str(raw[key]).strip():
            cfg[key] = _parse_rate(key, raw[key])
    if "currency" in raw and str(raw["currency"]).strip():
        cfg["currency"] = str(raw["currency"]).strip().upper()
    if "welcome_message" in raw and isinstance(raw["welcome_message"], str):
        cfg["welcome_message"] = raw["welcome_message"]
    if "confirm_prompts" in raw:
        cfg["confirm_prompts"] = _parse_bool("confirm_prompts", raw["confirm_prompts"])
    if "log_level" in raw and str(raw["log_level"]).strip():
        cfg["log_level"] = str(raw["log_level"]).strip().upper()
    return cfg


def load_from_file(path: str, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    if not os.path.exists(path):
        raise ConfigError(f"No existe el archivo de configuración: {path}")
    raw = _load_json(path)
    if not raw:
        raise ConfigError(f"Archivo de configuración vacío o inválido: {path}")
    return validate_config(_merge(default_config(environ), raw))


def load_from_env(environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    env = os.environ if environ is None else environ
    raw = {key: env[var] for var, key in ENV_KEYS.items() if (env.get(var) or "").strip()}
    return validate_config(_merge(default_config(environ), raw))


def load_app_config(path: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
    """
    Orden: archivo de config -> variables de entorno -> defaults.
    Una fuente que no pasa validate_config se descarta y se prueba la siguiente.
    """
    p = path or config_path(environ)
    try:
        return load_from_file(p, environ)
    except ConfigError:
        pass
    try:
        return load_from_env(environ)
    except ConfigError:
        pass
    return default_config(environ)


APP_CONFIG = load_app_config()

# --------------------------
# Parámetros principales
# --------------------------
STORAGE_DIR: str    = APP_CONFIG["storage_dir"]
PDF_DIR: str        = APP_CONFIG["pdf_dir"]
DEFAULT_IVA: float  = APP_CONFIG["default_iva"]
DEFAULT_IRPF: float = APP_CONFIG["default_irpf"]
APP_CURRENCY: str   = APP_CONFIG["currency"]

# --------------------------
# Logging (rutas y nivel)
# --------------------------
LOG_DIR: str   = APP_CONFIG["log_dir"]
LOG_LEVEL: str = str(APP_CONFIG.get("log_level", "INFO")).strip().upper()
if LOG_LEVEL not in LOG_LEVELS:
    LOG_LEVEL = "INFO"


__all__: List[str] = [
    "APP_DIR_NAME", "app_home", "config_path",
    "ConfigError", "default_config", "validate_config",
    "load_from_file", "load_from_env", "load_app_config",
    "APP_CONFIG", "STORAGE_DIR", "PDF_DIR", "DEFAULT_IVA", "DEFAULT_IRPF", "APP_CURRENCY",
    "LOG_DIR", "LOG_LEVEL", "LOG_LEVELS",
]
