# facturas/cli.py
"""
Menú interactivo de consola. Todo lo que se lee del teclado pasa por
Prompter, así los flujos se pueden probar con respuestas guionadas.
"""
from __future__ import annotations

import os
from typing import Callable, Optional

from jsonModels import ClientRepository, StoreError, UserRepository

from .config import DEFAULT_IRPF, DEFAULT_IVA
from .export import exportar_excel
from .invoicing import InvoiceService
from .logging_setup import get_logger
from .models import Client, Item, Rule, User
from .pdfgen import RenderError
from .utils import fmt_money, to_float
from .validation import (
    ValidationError,
    validate_cif,
    validate_date,
    validate_email,
    validate_iban,
    validate_percentage,
    validate_required,
)

log = get_logger(__name__)

MENU_OPTIONS = [
    "Crear factura",
    "Listar facturas",
    "Crear cliente",
    "Listar clientes",
    "Actualizar perfil",
    "Exportar facturas a Excel",
    "Salir",
]


class Prompter:
    def __init__(self, input_fn: Callable[[str], str] = input, print_fn: Callable[..., None] = print):
        self._input = input_fn
        self.say = print_fn

    def text(self, prompt: str, default: str = "", validator: Optional[Callable[[str], object]] = None) -> str:
        suffix = f" [{default}]" if default else ""
        while True:
            raw = self._input(f"{prompt}{suffix}: ").strip()
            value = raw or default
            if validator is None:
                return value
            try:
                validator(value)
                return value
            except ValidationError as e:
                self.say(f"Error: {e}")

    def number(self, prompt: str, default: float, validator: Optional[Callable[[float], object]] = None) -> float:
        while True:
            raw = self._input(f"{prompt} [{default:g}]: ").strip()
            if not raw:
                value = float(default)
            else:
                value = to_float(raw, float("nan"))
                if value != value:
                    self.say(f"Error: '{raw}' no es un número")
                    continue
            if validator is None:
                return value
            try:
                validator(value)
                return value
            except ValidationError as e:
                self.say(f"Error: {e}")

    def integer(self, prompt: str, default: int = 1, minimum: int = 0) -> int:
        while True:
            raw = self._input(f"{prompt} [{default}]: ").strip()
            if not raw:
                return default
            try:
                v = int(raw)
            except ValueError:
                self.say(f"Error: '{raw}' no es un entero")
                continue
            if v < minimum:
                self.say(f"Error: debe ser mayor o igual a {minimum}")
                continue
            return v

    def confirm(self, prompt: str, default: bool = True) -> bool:
        hint = "S/n" if default else "s/N"
        while True:
            raw = self._input(f"{prompt} ({hint}): ").strip().lower()
            if not raw:
                return default
            if raw in ("s", "si", "sí", "y", "yes"):
                return True
            if raw in ("n", "no"):
                return False

    def select(self, prompt: str, options: list[str]) -> int:
        for i, opt in enumerate(options, start=1):
            self.say(f"  {i}. {opt}")
        while True:
            raw = self._input(f"{prompt}: ").strip()
            try:
                n = int(raw)
            except ValueError:
                n = 0
            if 1 <= n <= len(options):
                return n - 1
            self.say(f"Elija un número entre 1 y {len(options)}")


def _opt(value: str) -> Optional[str]:
    return value or None


# =========================
# Perfil
# =========================
def create_user(p: Prompter, users: UserRepository) -> User:
    p.say("Configuremos su perfil de emisor")
    name = p.text("Nombre", validator=lambda v: validate_required(v, "Nombre"))
    cif = p.text("CIF/NIE", validator=validate_cif)
    address = p.text("Dirección", validator=lambda v: validate_required(v, "Dirección"))
    email = p.text("Email (opcional, Enter para omitir)", validator=validate_email)
    iban = p.text("IBAN (opcional, Enter para omitir)", validator=validate_iban)
    user = users.create(name, address, cif, _opt(email), _opt(iban))
    p.say("Perfil creado.")
    return user


def update_user(p: Prompter, users: UserRepository, current: User, confirm: bool = True) -> User:
    """Devuelve el User nuevo (o el mismo si no se cambia nada)."""
    p.say("Perfil actual:")
    p.say(str(current))
    if confirm and not p.confirm("¿Desea actualizar su perfil?", True):
        return current
    updated = users.replace(
        current,
        name=p.text("Nombre", current.name),
        cif=p.text("CIF/NIE", current.cif, validator=validate_cif),
        address=p.text("Dirección", current.address),
        email=_opt(p.text("Email (opcional)", current.email or "", validator=validate_email)),
        iban=_opt(p.text("IBAN (opcional)", current.iban or "", validator=validate_iban)),
    )
    p.say("Perfil actualizado.")
    return updated


# =========================
# Clientes
# =========================
def create_client(p: Prompter, clients: ClientRepository) -> Client:
    name = p.text("Nombre del cliente", validator=lambda v: validate_required(v, "Nombre"))
    cif = p.text("CIF/NIF del cliente", validator=validate_cif)
    address = p.text("Dirección del cliente", validator=lambda v: validate_required(v, "Dirección"))
    email = p.text("Email del cliente (opcional)", validator=validate_email)
    if clients.find(cif) is not None:
        p.say(f"Ya existía un cliente con CIF/NIF {cif}; se reemplaza.")
    client = clients.create(name, cif, address, _opt(email))
    p.say("Cliente guardado.")
    return client


def list_clients(p: Prompter, clients: ClientRepository) -> list[Client]:
    items = clients.list()
    if not items:
        p.say("No hay clientes.")
        return items
    for i, c in enumerate(items, start=1):
        p.say(f"{i}. {c.name} ({c.cif})")
    return items


def select_client(p: Prompter, clients: ClientRepository) -> Optional[Client]:
    items = clients.list()
    if not items:
        p.say("No hay clientes. Cree uno primero.")
        if p.confirm("¿Crear un cliente ahora?", True):
            return create_client(p, clients)
        return None
    options = [f"{c.name} ({c.cif})" for c in items] + ["Crear cliente nuevo", "← Volver"]
    idx = p.select("Seleccione un cliente", options)
    if idx == len(items):
        return create_client(p, clients)
    if idx == len(items) + 1:
        return None
    return items[idx]


# =========================
# Facturas
# =========================
def create_invoice(
    p: Prompter,
    clients: ClientRepository,
    service: InvoiceService,
    user: User,
    default_iva: float = DEFAULT_IVA,
    default_irpf: float = DEFAULT_IRPF,
):
    client = select_client(p, clients)
    if client is None:
        return None

    invoice_id = p.text("Número de factura (Enter para autogenerar)")
    date = p.text("Fecha (AAAA-MM-DD, Enter para hoy)", validator=validate_date)
    due_date = p.text("Vencimiento (AAAA-MM-DD, Enter para +30 días)", validator=validate_date)

    iva = p.number("IVA %", default_iva, validator=lambda v: validate_percentage(v, "IVA"))
    irpf = p.number("IRPF %", default_irpf, validator=lambda v: validate_percentage(v, "IRPF"))

    items: list[Item] = []
    while True:
        desc = p.text("Descripción del concepto", validator=lambda v: validate_required(v, "Descripción"))
        qty = p.integer("Cantidad", 1, minimum=0)
        price = p.number("Precio unitario (€)", 0.0)
        items.append(Item(desc, qty, price))
        if not p.confirm("¿Añadir otro concepto?", True):
            break

    invoice = service.create_invoice(
        user, client, Rule(iva, irpf), items,
        invoice_id=_opt(invoice_id), date=_opt(date), due_date=_opt(due_date),
    )
    p.say("Factura creada:")
    p.say(str(invoice))
    if p.confirm("¿Generar PDF?", True):
        _generate_pdf(p, service, invoice)
    return invoice


def _generate_pdf(p: Prompter, service: InvoiceService, invoice) -> Optional[str]:
    try:
        path = service.generate_pdf(invoice)
    except RenderError as e:
        p.say(f"Error al generar el PDF: {e}")
        return None
    p.say(f"PDF generado: {path}")
    return path


def list_invoices(p: Prompter, service: InvoiceService):
    invoices = service.list_invoices()
    if not invoices:
        p.say("No hay facturas.")
        return invoices
    for i, inv in enumerate(invoices, start=1):
        p.say(f"{i}. Factura #{inv.id} - {inv.date}")
        p.say(f"   Cliente: {inv.client.name}")
        p.say(f"   Total: {fmt_money(inv.total)}")
    if p.confirm("¿Ver detalle de una factura?", False):
        options = [f"Factura #{inv.id} - {inv.date}" for inv in invoices] + ["← Volver"]
        idx = p.select("Seleccione una factura", options)
        if idx < len(invoices):
            p.say(str(invoices[idx]))
            if p.confirm("¿Generar PDF?", False):
                _generate_pdf(p, service, invoices[idx])
    return invoices


def export_invoices(p: Prompter, service: InvoiceService, default_dir: str):
    default_path = os.path.join(default_dir, "facturas.xlsx")
    path = p.text("Ruta del Excel", default_path)
    if os.path.splitext(path)[1].lower() != ".xlsx":
        path += ".xlsx"
        p.say(f"El archivo se guardará como {path}")
    invoices = service.list_invoices()
    exportar_excel(invoices, path)
    p.say(f"Exportadas {len(invoices)} factura(s) a {path}")
    return path


# =========================
# Bucle principal
# =========================
class Menu:
    def __init__(
        self,
        prompter: Prompter,
        users: UserRepository,
        clients: ClientRepository,
        service: InvoiceService,
        user: User,
        export_dir: str,
        default_iva: float = DEFAULT_IVA,
        default_irpf: float = DEFAULT_IRPF,
        confirm_prompts: bool = True,
    ):
        self.p = prompter
        self.users = users
        self.clients = clients
        self.service = service
        self.user = user
        self.export_dir = export_dir
        self.default_iva = default_iva
        self.default_irpf = default_irpf
        self.confirm_prompts = confirm_prompts

    def step(self) -> bool:
        """Muestra el menú una vez. True = salir."""
        choice = self.p.select("Seleccione una opción", MENU_OPTIONS)
        try:
            if choice == 0:
                create_invoice(self.p, self.clients, self.service, self.user, self.default_iva, self.default_irpf)
            elif choice == 1:
                list_invoices(self.p, self.service)
            elif choice == 2:
                create_client(self.p, self.clients)
            elif choice == 3:
                list_clients(self.p, self.clients)
            elif choice == 4:
                self.user = update_user(self.p, self.users, self.user, self.confirm_prompts)
            elif choice == 5:
                export_invoices(self.p, self.service, self.export_dir)
            else:
                self.p.say("¡Gracias por usar Facturador!")
                return True
        except StoreError as e:
            log.exception("Error de almacenamiento en la opción '%s'", MENU_OPTIONS[choice])
            self.p.say(f"Error de almacenamiento: {e}")
        except OSError as e:
            log.exception("Error de archivo en la opción '%s'", MENU_OPTIONS[choice])
            self.p.say(f"Error de archivo: {e}")
        return False

    def run(self) -> None:
        while not self.step():
            pass
