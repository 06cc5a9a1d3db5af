import os, shutil, tempfile
import pytest

# La config se lee al importar facturas.config: apuntamos la carpeta de la app
# a un temporal antes de que ningún test importe el paquete.
_APP_HOME = tempfile.mkdtemp(prefix="facturas_home_")
os.environ["FACTURAS_HOME"] = _APP_HOME
for _var in ("FACTURAS_STORAGE_PATH", "FACTURAS_PDF_DIR", "FACTURAS_DEFAULT_IVA",
             "FACTURAS_DEFAULT_IRPF", "FACTURAS_LOG_DIR", "FACTURAS_LOG_LEVEL"):
    os.environ.pop(_var, None)


@pytest.fixture(autouse=True, scope="session")
def _init_logging_for_tests(tmp_path_factory):
    # Cada corrida de tests escribe logs a un directorio temporal
    log_dir = tmp_path_factory.mktemp("logs")
    from facturas.logging_setup import init_logging
    init_logging(level="DEBUG", log_dir=str(log_dir))

    yield
    shutil.rmtree(_APP_HOME, ignore_errors=True)


@pytest.fixture
def store(tmp_path):
    from jsonModels import open_store
    return open_store(str(tmp_path / "data"))


@pytest.fixture
def user():
    from facturas.models import User
    return User("John Doe", "123 Main St", "12345678A", "john@example.com", "ES1234567890123456789012")


@pytest.fixture
def client():
    from facturas.models import Client
    return Client("Acme Corp", "98765432C", "789 Business Blvd", None)


@pytest.fixture
def invoice(user, client):
    from facturas.models import Invoice, Item, Rule
    return Invoice.build(
        "INV-001", "2024-01-01", "2024-01-31", user, client, Rule(21.0, 15.0),
        [Item("Web Development", 1, 1000.0), Item("Hosting", 12, 9.99)],
    )
