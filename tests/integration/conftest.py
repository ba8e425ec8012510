import pytest
import pytest_asyncio
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.orm import sessionmaker
from sqlmodel import SQLModel
from sqlmodel.ext.asyncio.session import AsyncSession

import src.domain  # noqa: F401
from src.depends import build_engine, get_session
from src.domain.product import Product
from src.adapter.repositories.product_repository import SqlAlchemyProductRepository
from src.adapter.repositories.tax_document_repository import SqlAlchemyTaxDocumentRepository
from src.adapter.services.numbering_service import SqlAlchemyDocumentNumberingService


@pytest_asyncio.fixture(scope="function")
async def engine(tmp_path):
    """File-backed SQLite database, one per test"""
    engine = build_engine(f"sqlite+aiosqlite:///{tmp_path / 'tax_documents_test.db'}")

    async with engine.begin() as conn:
        await conn.run_sync(SQLModel.metadata.create_all)

    yield engine

    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(engine, class_=AsyncSession, expire_on_commit=False, autoflush=False)


@pytest_asyncio.fixture
async def db_session(session_factory):
    """Create a new database session for each test"""
    async with session_factory() as session:
        yield session


@pytest_asyncio.fixture
async def products(session_factory):
    """Catalog: two products for tenant_a, one for tenant_b"""
    async with session_factory() as session:
        rows = {
            "widget": Product(tenant_id="tenant_a", name="Widget", sku="W-1", sale_price=Decimal("1000")),
            "setup": Product(tenant_id="tenant_a", name="Setup fee", sku="S-1", sale_price=Decimal("500")),
            "gadget": Product(tenant_id="tenant_b", name="Gadget", sku="G-1", sale_price=Decimal("10")),
        }
        session.add_all(rows.values())
        await session.commit()
        return {key: product.id for key, product in rows.items()}


@pytest.fixture
def build_repo():
    """Document repository wired to real numbering and product adapters"""

    def _build(session: AsyncSession) -> SqlAlchemyTaxDocumentRepository:
        return SqlAlchemyTaxDocumentRepository(
            session,
            numbering_service=SqlAlchemyDocumentNumberingService(session),
            product_repo=SqlAlchemyProductRepository(session),
        )

    return _build


@pytest_asyncio.fixture
async def client(db_session):
    """Create test client with database session override"""
    from src.api.app import create_app
    from config import ApplicationConfig

    app = create_app(ApplicationConfig)

    async def override_get_session():
        yield db_session

    app.dependency_overrides[get_session] = override_get_session

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
