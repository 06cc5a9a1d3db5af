# facturas/app.py
import sys, argparse
from functools import partial

from jsonModels import (
    ClientRepository, DirectoryUnavailable, InvoiceRepository, StoreError, UserRepository, open_store,
)

from . import config
from .cli import Menu, Prompter, create_user
from .invoicing import InvoiceService
from .logging_setup import get_logger, init_logging
from .pdfgen import generar_pdf

log = get_logger(__name__)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="facturador", description="Facturas para autónomos: clientes, facturas y PDF.")
    parser.add_argument("--storage-dir", help="Carpeta de datos (por defecto ~/.facturas)")
    parser.add_argument("--pdf-dir", help="Carpeta donde se guardan los PDF")
    parser.add_argument("--log-level", choices=config.LOG_LEVELS, help="Nivel de log")
    return parser


def main(argv=None, prompter: Prompter | None = None) -> int:
    args = _build_parser().parse_args(argv)
    cfg = dict(config.APP_CONFIG)
    if args.storage_dir: cfg["storage_dir"] = args.storage_dir
    if args.pdf_dir:     cfg["pdf_dir"] = args.pdf_dir
    if args.log_level:   cfg["log_level"] = args.log_level

    init_logging(level=cfg["log_level"], log_dir=cfg["log_dir"])
    p = prompter or Prompter()

    try:
        store = open_store(cfg["storage_dir"])
    except DirectoryUnavailable as e:
        log.error("No se pudo preparar el almacenamiento: %s", e)
        p.say(f"❌ {e}")
        return 1
    log.info("Almacenamiento en %s", store.base_dir)

    users = UserRepository(store)
    clients = ClientRepository(store)
    service = InvoiceService(InvoiceRepository(store), renderer=partial(generar_pdf, output_dir=cfg["pdf_dir"]))

    p.say(cfg["welcome_message"])
    try:
        user = users.get_current()
    except StoreError as e:
        log.exception("No se pudo leer el perfil de usuario")
        p.say(f"❌ {e}")
        return 1
    if user is None:
        user = create_user(p, users)

    menu = Menu(
        p, users, clients, service, user,
        export_dir=cfg["storage_dir"],
        default_iva=cfg["default_iva"],
        default_irpf=cfg["default_irpf"],
        confirm_prompts=cfg["confirm_prompts"],
    )
    try:
        menu.run()
    except (KeyboardInterrupt, EOFError):
        p.say("")
        log.info("Sesión interrumpida por el usuario")
    return 0


if __name__ == "__main__":
    sys.exit(main())
