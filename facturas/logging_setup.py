# facturas/logging_setup.py
import os, logging, sys
from . import config

_LEVEL_MAP = {
    "ERROR":   logging.ERROR,
    "WARNING": logging.WARNING,
    "INFO":    logging.INFO,
    "DEBUG":   logging.DEBUG,
}

_STATE = {"level": config.LOG_LEVEL, "log_dir": config.LOG_DIR}
_LOGGERS: dict[str, logging.Logger] = {}


def _build_formatter() -> logging.Formatter:
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    datefmt = "%Y-%m-%d %H:%M:%S"
    return logging.Formatter(fmt, datefmt)


def _get_log_file() -> str:
    log_dir = _STATE["log_dir"]
    try: os.makedirs(log_dir, exist_ok=True)
    except Exception: pass
    return os.path.join(log_dir, "app.log")


def _level() -> int:
    return _LEVEL_MAP.get(str(_STATE["level"]).upper(), logging.INFO)


def _attach_handlers(logger: logging.Logger) -> None:
    for h in list(logger.handlers):
        logger.removeHandler(h)
        h.close()

    level = _level()
    logger.setLevel(level)

    # File handler (si la carpeta no es escribible, solo consola)
    try:
        fh = logging.FileHandler(_get_log_file(), encoding="utf-8")
        fh.setLevel(level); fh.setFormatter(_build_formatter())
        logger.addHandler(fh)
    except OSError:
        pass
    # Console handler (stderr)
    ch = logging.StreamHandler(stream=sys.stderr)
    ch.setLevel(level); ch.setFormatter(_build_formatter())
    logger.addHandler(ch)
    logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if name in _LOGGERS and logger.handlers:
        return logger
    _attach_handlers(logger)
    _LOGGERS[name] = logger
    return logger


def init_logging(level: str | None = None, log_dir: str | None = None) -> None:
    """Cambia nivel y/o carpeta de logs y reconfigura los loggers ya creados."""
    if level:
        lv = str(level).strip().upper()
        _STATE["level"] = lv if lv in _LEVEL_MAP else "INFO"
    if log_dir:
        _STATE["log_dir"] = os.path.abspath(os.path.expanduser(str(log_dir)))
    for logger in _LOGGERS.values():
        _attach_handlers(logger)
