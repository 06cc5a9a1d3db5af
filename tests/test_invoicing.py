import datetime
import os
import pytest

from facturas.invoicing import (
    DEFAULT_DUE_DAYS, InvoiceService, resolve_due_date, resolve_invoice_id, resolve_issue_date,
)
from facturas.models import Item, Rule
from jsonModels import InvoiceRepository, WriteFailure


def test_due_date_defaults_to_thirty_days():
    assert DEFAULT_DUE_DAYS == 30
    assert resolve_due_date("2024-01-01") == "2024-01-31"


def test_due_date_rolls_over_year():
    assert resolve_due_date("2024-12-15") == "2025-01-14"
    assert resolve_due_date("2024-02-15") == "2024-03-16"  # bisiesto


def test_explicit_due_date_is_kept_verbatim():
    assert resolve_due_date("2024-01-01", "2024-06-30") == "2024-06-30"
    assert resolve_due_date("no-es-fecha", "lo que sea") == "lo que sea"


def test_unparsable_issue_date_falls_back_to_today():
    today = datetime.date(2023, 12, 20)
    assert resolve_due_date("20/12/2023", today=today) == "2024-01-19"
    assert resolve_due_date("", today=today) == "2024-01-19"


def test_due_date_past_calendar_end_keeps_issue_date():
    assert resolve_due_date("9999-12-15") == "9999-12-15"
    assert resolve_due_date("9999-12-01") == "9999-12-31"


def test_issue_date_default_is_today():
    assert resolve_issue_date(None, today=datetime.date(2024, 3, 5)) == "2024-03-05"
    assert resolve_issue_date("", today=datetime.date(2024, 3, 5)) == "2024-03-05"
    assert resolve_issue_date("2020-01-01") == "2020-01-01"


def test_issue_date_without_today_uses_local_date():
    assert resolve_issue_date() == datetime.date.today().strftime("%Y-%m-%d")


def test_invoice_id_generation():
    a, b = resolve_invoice_id(), resolve_invoice_id("")
    assert a and b and a != b
    assert resolve_invoice_id("F-2024-007") == "F-2024-007"


@pytest.fixture
def service(store):
    return InvoiceService(InvoiceRepository(store))


def test_create_invoice_persists_and_returns(service, store, user, client):
    inv = service.create_invoice(
        user, client, Rule(21.0, 15.0), [Item("Web Development", 1, 1000.0)],
        invoice_id="INV-001", date="2024-12-15",
    )
    assert inv.id == "INV-001"
    assert inv.due_date == "2025-01-14"
    assert inv.total == pytest.approx(1060.0)
    assert os.path.isfile(os.path.join(store.base_dir, "invoices", "INV-001.json"))
    assert service.list_invoices() == [inv]


def test_create_invoice_generates_distinct_ids(service, user, client):
    today = datetime.date(2024, 1, 1)
    a = service.create_invoice(user, client, Rule(21, 15), [Item("a", 1, 1.0)], today=today)
    b = service.create_invoice(user, client, Rule(21, 15), [Item("a", 1, 1.0)], today=today)
    assert a.id and b.id and a.id != b.id
    assert a.date == "2024-01-01" and a.due_date == "2024-01-31"
    assert len(service.list_invoices()) == 2


def test_explicit_id_collision_overwrites(service, user, client):
    service.create_invoice(user, client, Rule(21, 15), [Item("a", 1, 1.0)], invoice_id="DUP")
    second = service.create_invoice(user, client, Rule(21, 15), [Item("b", 2, 5.0)], invoice_id="DUP")
    assert service.list_invoices() == [second]


class _FailingRepo:
    def save(self, invoice):
        raise WriteFailure("disco lleno")

    def list(self):
        return []


def test_storage_failure_propagates_unchanged(user, client):
    service = InvoiceService(_FailingRepo())
    with pytest.raises(WriteFailure, match="disco lleno"):
        service.create_invoice(user, client, Rule(21, 15), [Item("a", 1, 1.0)])


def test_generate_pdf_uses_renderer(service, invoice):
    service.renderer = lambda inv: f"/tmp/invoice_{inv.id}.pdf"
    assert service.generate_pdf(invoice) == "/tmp/invoice_INV-001.pdf"


def test_generate_pdf_without_renderer(service, invoice):
    with pytest.raises(RuntimeError):
        service.generate_pdf(invoice)
