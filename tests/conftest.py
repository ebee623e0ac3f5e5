"""Shared test fixtures."""

from datetime import date
from decimal import Decimal

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from finratio.core.database import get_db
from finratio.main import app
from finratio.models import Base, Ratio, Subcategory, Transaction, User
from finratio.services.ratio_catalog import RatioCatalogService


@pytest.fixture
async def engine():
    """In-memory SQLite database with the full schema."""
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
async def catalog(db):
    """Default hierarchy and ratio definitions."""
    await RatioCatalogService(db).install_defaults()
    await db.commit()


@pytest.fixture
async def subcategories(db, catalog) -> dict[str, int]:
    """Subcategory name -> id."""
    result = await db.execute(select(Subcategory))
    return {s.name: s.id for s in result.scalars().all()}


@pytest.fixture
async def ratios(db, catalog) -> dict[str, int]:
    """Ratio code -> id."""
    result = await db.execute(select(Ratio))
    return {r.code: r.id for r in result.scalars().all()}


async def _create_user(db, email: str, full_name: str) -> User:
    user = User(email=email, full_name=full_name)
    db.add(user)
    await db.commit()
    return user


@pytest.fixture
async def user(db):
    return await _create_user(db, "budi@example.com", "Budi Santoso")


@pytest.fixture
async def other_user(db):
    return await _create_user(db, "sari@example.com", "Sari Wulandari")


@pytest.fixture
def add_transaction(db, user, subcategories):
    """Factory: book a committed transaction on a subcategory by name."""

    async def _add(
        subcategory: str,
        amount,
        on: date,
        owner: User | None = None,
        description: str = "test entry",
    ) -> Transaction:
        txn = Transaction(
            user_id=(owner or user).id,
            subcategory_id=subcategories[subcategory],
            amount=Decimal(str(amount)),
            date=on,
            description=description,
        )
        db.add(txn)
        await db.commit()
        return txn

    return _add


@pytest.fixture
async def client(session_factory):
    """Async test client for the FastAPI app, bound to the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(user) -> dict[str, str]:
    return {"X-User-Id": str(user.id)}
