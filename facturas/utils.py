# facturas/utils.py
import math
from .config import APP_CURRENCY


def to_float(val, default=0.0) -> float:
    try:
        if val is None:
            return default
        if isinstance(val, str):
            txt = val.strip().replace(" ", "")
            if not txt:
                return default
            # "1.234,56" -> 1234.56 ; "1234,5" -> 1234.5
            if "," in txt and "." in txt:
                txt = txt.replace(".", "").replace(",", ".")
            else:
                txt = txt.replace(",", ".")
            f = float(txt)
        else:
            f = float(val)
        if math.isnan(f) or math.isinf(f):
            return default
        return f
    except Exception:
        return default


def nz(x, default=0.0):
    try:
        f = float(x)
        if math.isnan(f) or math.isinf(f):
            return default
        return f
    except Exception:
        return default


def _symbol(cur: str) -> str:
    c = (cur or "").upper()
    if c == "EUR":
        return "€"
    if c == "USD":
        return "$"
    if c == "GBP":
        return "£"
    # Fallback genérico
    return c


def fmt_money(n: float, currency: str | None = None) -> str:
    """Ej: 1060.00€ (símbolo detrás, como se escribe en España)."""
    n = nz(n, 0.0)
    return f"{n:0.2f}{_symbol(currency or APP_CURRENCY)}"


def fmt_money_pdf(n: float, currency: str | None = None) -> str:
    """Ej: "1060.00 €" (con espacio; la fuente base del PDF lleva el símbolo)."""
    n = nz(n, 0.0)
    return f"{n:0.2f} {_symbol(currency or APP_CURRENCY)}"


def fmt_pct(p: float) -> str:
    return f"{nz(p, 0.0):g}%"


def truncate(text: str, max_len: int = 40) -> str:
    s = str(text or "")
    if len(s) <= max_len:
        return s
    return s[: max_len - 3] + "..."
