from decimal import Decimal
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import sessionmaker
from sqlmodel.ext.asyncio.session import AsyncSession
from config import ApplicationConfig
from src.app.services.totals_calculator import DocumentTotalsCalculator


def build_engine(db_uri: str, lock_timeout_ms: int = ApplicationConfig.LOCK_TIMEOUT_MS) -> AsyncEngine:
    """
    Async engine with bounded lock waits

    PostgreSQL: lock_timeout / statement_timeout server settings.
    SQLite: busy timeout, BEGIN IMMEDIATE so writers queue instead of
    deadlocking, and foreign keys switched on.
    """
    if db_uri.startswith("postgresql+asyncpg"):
        return create_async_engine(
            db_uri,
            echo=False,
            future=True,
            connect_args={
                "server_settings": {
                    "lock_timeout": str(lock_timeout_ms),
                    "statement_timeout": str(ApplicationConfig.STATEMENT_TIMEOUT_MS),
                }
            },
        )

    if db_uri.startswith("sqlite"):
        engine = create_async_engine(
            db_uri,
            echo=False,
            future=True,
            connect_args={"timeout": lock_timeout_ms / 1000},
        )

        @event.listens_for(engine.sync_engine, "connect")
        def _on_connect(dbapi_connection, connection_record):
            dbapi_connection.isolation_level = None
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            cursor.close()

        @event.listens_for(engine.sync_engine, "begin")
        def _on_begin(conn):
            conn.exec_driver_sql("BEGIN IMMEDIATE")

        return engine

    return create_async_engine(db_uri, echo=False, future=True)


engine = build_engine(ApplicationConfig.DB_URI)

AsyncSessionLocal = sessionmaker(
    engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
)


async def get_session() -> AsyncSession:
    async with AsyncSessionLocal() as session:
        yield session


def get_totals_calculator() -> DocumentTotalsCalculator:
    return DocumentTotalsCalculator(tax_rate=Decimal(ApplicationConfig.TAX_RATE))
