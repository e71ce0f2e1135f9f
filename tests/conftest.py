"""
Fixtures compartidas para Pytest.
Configura base de datos de test, clientes HTTP y principales con token.
"""

from collections.abc import AsyncGenerator
from decimal import Decimal

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import NullPool

from jurisconnect.config import get_settings
from jurisconnect.core.security import hash_password
from jurisconnect.database import Base, get_db
from jurisconnect.main import app
from jurisconnect.models.demanda import Demanda, DemandaStatus
from jurisconnect.models.principal import (
    Admin,
    Client,
    Correspondent,
    CorrespondentCategory,
)
from tests.utils import TEST_PASSWORD, auth_headers

settings = get_settings()

# ── Engine de test (SQLite async) ────────────────────
TEST_DATABASE_URL = "sqlite+aiosqlite:///./test.db"

test_engine = create_async_engine(TEST_DATABASE_URL, echo=False, poolclass=NullPool)
test_session_factory = async_sessionmaker(
    test_engine, class_=AsyncSession, expire_on_commit=False
)


# pysqlite no emite BEGIN por sí mismo; sin esto los SAVEPOINT de la
# auditoría no funcionan sobre SQLite.
@event.listens_for(test_engine.sync_engine, "connect")
def _sqlite_connect(dbapi_connection, connection_record):
    dbapi_connection.isolation_level = None


@event.listens_for(test_engine.sync_engine, "begin")
def _sqlite_begin(conn):
    conn.exec_driver_sql("BEGIN")


@pytest_asyncio.fixture(autouse=True)
async def setup_database():
    """Crea y destruye las tablas para cada test."""
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


@pytest.fixture(autouse=True)
def upload_dir(tmp_path, monkeypatch):
    """Los anexos de los tests se guardan en un directorio temporal."""
    target = tmp_path / "uploads"
    monkeypatch.setattr(settings, "UPLOAD_DIR", str(target))
    return target


@pytest_asyncio.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provee una sesión de DB de test."""
    async with test_session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def client(db_session: AsyncSession) -> AsyncGenerator[AsyncClient, None]:
    """Cliente HTTP de test que usa la DB de test."""

    async def _get_test_db():
        try:
            yield db_session
            await db_session.commit()
        except Exception:
            await db_session.rollback()
            raise

    app.dependency_overrides[get_db] = _get_test_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ── Principales ──────────────────────────────────────

async def _persist(db: AsyncSession, obj):
    db.add(obj)
    await db.commit()
    await db.refresh(obj)
    return obj


@pytest_asyncio.fixture
async def admin(db_session: AsyncSession) -> Admin:
    return await _persist(db_session, Admin(
        name="Admin Test",
        email="admin@test.com",
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest_asyncio.fixture
async def client_principal(db_session: AsyncSession) -> Client:
    return await _persist(db_session, Client(
        full_name="Maria Souza",
        office="Souza Advogados",
        phone="11999990000",
        email="maria@test.com",
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest_asyncio.fixture
async def other_client(db_session: AsyncSession) -> Client:
    return await _persist(db_session, Client(
        full_name="Pedro Lima",
        phone="11988880000",
        email="pedro@test.com",
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest_asyncio.fixture
async def correspondent(db_session: AsyncSession) -> Correspondent:
    return await _persist(db_session, Correspondent(
        full_name="Joao Pereira",
        category=CorrespondentCategory.ATTORNEY,
        oab_number="SP123456",
        cpf="12345678901",
        phone="11977770000",
        email="joao@test.com",
        served_jurisdictions=["São Paulo", "Campinas"],
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest_asyncio.fixture
async def other_correspondent(db_session: AsyncSession) -> Correspondent:
    return await _persist(db_session, Correspondent(
        full_name="Ana Costa",
        category=CorrespondentCategory.PROXY,
        cpf="98765432100",
        phone="11966660000",
        email="ana@test.com",
        served_jurisdictions=["Santos"],
        hashed_password=hash_password(TEST_PASSWORD),
    ))


@pytest.fixture
def admin_headers(admin: Admin) -> dict:
    return auth_headers(admin)


@pytest.fixture
def client_headers(client_principal: Client) -> dict:
    return auth_headers(client_principal)


@pytest.fixture
def correspondent_headers(correspondent: Correspondent) -> dict:
    return auth_headers(correspondent)


@pytest.fixture
def other_correspondent_headers(other_correspondent: Correspondent) -> dict:
    return auth_headers(other_correspondent)


# ── Demandas ─────────────────────────────────────────

@pytest_asyncio.fixture
async def demanda(db_session: AsyncSession, client_principal: Client) -> Demanda:
    """Demanda pendiente del cliente de test, sin corresponsal."""
    return await _persist(db_session, Demanda(
        client_id=client_principal.id,
        title="Audiência de conciliação",
        description="Comparecer à audiência na 3ª Vara Cível",
        process_number="0001234-56.2026.8.26.0100",
        category="audiencia",
        proposed_value=Decimal("350.00"),
        status=DemandaStatus.PENDING,
    ))
