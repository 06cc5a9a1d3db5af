import pytest

from facturas.models import Client, User
from jsonModels import ClientRepository, InvoiceRepository, UserRepository


def test_user_profile_lifecycle(store):
    users = UserRepository(store)
    assert users.get_current() is None

    created = users.create("John Doe", "123 Main St", "12345678A", None, None)
    assert users.get_current() == created

    updated = users.replace(created, email="john@example.com", iban="ES1234567890123456789012")
    assert updated is not created
    assert created.email is None
    assert updated.email == "john@example.com"
    assert users.get_current() == updated


def test_user_replace_rejects_unknown_field(store, user):
    users = UserRepository(store)
    with pytest.raises(TypeError):
        users.replace(user, telefono="600000000")


def test_clients_keyed_by_cif(store):
    clients = ClientRepository(store)
    a = clients.create("Acme", "B12345678", "Calle 1")
    b = clients.create("Beta", "B87654321", "Calle 2", "beta@example.com")
    assert sorted(clients.list(), key=lambda c: c.cif) == [a, b]
    assert clients.find("B87654321") == b
    assert clients.find("X0000000") is None


def test_client_save_is_replace(store):
    clients = ClientRepository(store)
    clients.create("Acme", "B12345678", "Calle 1")
    second = clients.create("Acme SL", "B12345678", "Calle Nueva 9", "hola@acme.es")
    assert clients.list() == [second]


def test_invoice_repository_round_trip(store, invoice):
    repo = InvoiceRepository(store)
    repo.save(invoice)
    assert repo.list() == [invoice]
    assert repo.find(invoice.id) == invoice
    assert repo.find("otra") is None


def test_invoice_keeps_client_snapshot(store, invoice):
    clients = ClientRepository(store)
    repo = InvoiceRepository(store)
    repo.save(invoice)
    clients.save(Client("Nombre Nuevo", invoice.client.cif, "Otra dirección"))
    assert repo.find(invoice.id).client == invoice.client
    assert repo.find(invoice.id).user == invoice.user
    assert isinstance(repo.find(invoice.id).user, User)
