"""
Pytest configuration and fixtures for storefront tests.
"""
import os

import pytest

# Set test environment before importing app modules
os.environ["ENVIRONMENT"] = "development"
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key-for-unit-tests-only"
os.environ["REDIS_URL"] = ""
os.environ["DEBUG"] = "false"

from httpx import ASGITransport, AsyncClient  # noqa: E402
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from storefront.api.deps import Principal, get_current_admin  # noqa: E402
from storefront.core.database import Base, get_db  # noqa: E402
from storefront.main import app  # noqa: E402
from storefront.models import Category, Product  # noqa: E402


def make_engine(url: str = "sqlite+aiosqlite://"):
    if url == "sqlite+aiosqlite://":
        # One shared connection so every session sees the same in-memory database
        return create_async_engine(url, poolclass=StaticPool, connect_args={"check_same_thread": False})
    return create_async_engine(url)


@pytest.fixture
async def engine():
    engine = make_engine()
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)


@pytest.fixture
async def db_session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def admin_principal() -> Principal:
    return Principal(subject="admin-1", role="admin")


@pytest.fixture
async def client(session_factory, admin_principal):
    """HTTP client against the app with the test database and an admin caller."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    async def override_get_current_admin():
        return admin_principal

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_current_admin] = override_get_current_admin
    try:
        async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
            yield ac
    finally:
        app.dependency_overrides.clear()


@pytest.fixture
async def catalog(db_session):
    """A small catalog: two active products, one inactive, two categories (one unpublished)."""
    comics = Category(name="Comics", slug="comics", image_url="https://cdn.example.com/comics.png")
    hidden = Category(name="Hidden", slug="hidden", is_published=False)
    db_session.add_all([comics, hidden])
    await db_session.flush()

    tee = Product(
        name="Logo Tee",
        slug="logo-tee",
        price=20,
        images=["https://cdn.example.com/tee-front.png", "https://cdn.example.com/tee-back.png"],
        category_id=comics.id,
    )
    mug = Product(name="Mug", slug=None, price=12.5, images=[], category_id=comics.id)
    retired = Product(name="Retired Poster", slug="retired-poster", price=5, is_active=False)
    db_session.add_all([tee, mug, retired])
    await db_session.commit()

    return {"tee": tee, "mug": mug, "retired": retired, "comics": comics, "hidden": hidden}
