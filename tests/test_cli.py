import pytest

from facturas import app
from facturas.cli import Menu, Prompter, create_client, create_invoice, update_user
from facturas.invoicing import InvoiceService
from jsonModels import ClientRepository, InvoiceRepository, UserRepository


class Script:
    """Respuestas guionadas para Prompter; guarda todo lo impreso."""

    def __init__(self, answers):
        self.answers = list(answers)
        self.printed = []

    def input(self, prompt):
        if not self.answers:
            raise EOFError(prompt)
        return self.answers.pop(0)

    def print(self, *args):
        self.printed.append(" ".join(str(a) for a in args))

    def prompter(self):
        return Prompter(self.input, self.print)

    @property
    def output(self):
        return "\n".join(self.printed)


def test_create_client_retries_invalid_fields(store):
    s = Script(["Acme", "123", "B12345678", "Calle 1", "no-email", "hola@acme.es"])
    clients = ClientRepository(store)
    c = create_client(s.prompter(), clients)
    assert c.cif == "B12345678" and c.email == "hola@acme.es"
    assert clients.list() == [c]
    assert "CIF/NIE con formato inválido" in s.output
    assert "Email con formato inválido" in s.output


def test_create_invoice_flow(store, user, client):
    clients = ClientRepository(store)
    clients.save(client)
    service = InvoiceService(InvoiceRepository(store))
    s = Script([
        "1",              # cliente
        "F-1",            # número
        "2024-12-15",     # fecha
        "",               # vencimiento por defecto
        "",               # IVA por defecto
        "",               # IRPF por defecto
        "Web", "1", "1000",
        "n",              # otro concepto
        "n",              # PDF
    ])
    inv = create_invoice(s.prompter(), clients, service, user, 21.0, 15.0)
    assert inv.id == "F-1"
    assert inv.due_date == "2025-01-14"
    assert inv.total == pytest.approx(1060.0)
    assert service.list_invoices() == [inv]
    assert "TOTAL: 1060.00€" in s.output


def test_update_user_returns_new_value(store, user):
    users = UserRepository(store)
    users.save(user)
    s = Script(["s", "Jane Doe", "", "", "", ""])
    updated = update_user(s.prompter(), users, user)
    assert updated.name == "Jane Doe"
    assert updated.cif == user.cif and updated.iban == user.iban
    assert users.get_current() == updated
    assert user.name == "John Doe"


def test_menu_keeps_updated_user(store, user):
    users = UserRepository(store)
    users.save(user)
    s = Script(["5", "s", "Jane", "", "", "", "", "7"])
    menu = Menu(s.prompter(), users, ClientRepository(store), InvoiceService(InvoiceRepository(store)),
                user, export_dir=store.base_dir)
    menu.run()
    assert menu.user.name == "Jane"
    assert "Gracias" in s.output


def test_main_first_run(tmp_path):
    s = Script(["John Doe", "12345678A", "123 Main St", "", "", "4", "7"])
    code = app.main(["--storage-dir", str(tmp_path / "datos"), "--pdf-dir", str(tmp_path / "pdfs")],
                    prompter=s.prompter())
    assert code == 0
    assert (tmp_path / "datos" / "user.json").is_file()
    assert "No hay clientes." in s.output


def test_main_fails_when_storage_unavailable(tmp_path):
    f = tmp_path / "ocupado"
    f.write_text("x")
    s = Script([])
    assert app.main(["--storage-dir", str(f)], prompter=s.prompter()) == 1


def test_export_without_xlsx_extension_is_completed(store, user, invoice, tmp_path):
    InvoiceRepository(store).save(invoice)
    target = tmp_path / "salida" / "libro.txt"
    s = Script(["6", str(target), "7"])
    menu = Menu(s.prompter(), UserRepository(store), ClientRepository(store),
                InvoiceService(InvoiceRepository(store)), user, export_dir=store.base_dir)
    menu.run()
    assert (tmp_path / "salida" / "libro.txt.xlsx").is_file()
    assert "Exportadas 1 factura(s)" in s.output
    assert "Gracias" in s.output
