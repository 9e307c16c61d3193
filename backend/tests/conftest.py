"""
Test fixtures - in-memory SQLite database + HTTP client
"""
from datetime import datetime

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from backend.database import Base, get_db
from backend.main import app
from backend.models.leaf_collection import LeafCollection, LeafType


@pytest_asyncio.fixture()
async def db_session():
    """Create a fresh in-memory SQLite database for each test"""
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", echo=False)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    session_factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)

    async with session_factory() as session:
        yield session

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


def raw_collection(reg_no=101, qty=0, gross=0.0, net_weight=0.0, log_time=None, **overrides):
    """Raw collection row as the weighing station writes it"""
    values = dict(
        reg_no=reg_no,
        route="Kandedola",
        dealer="K. Perera",
        leaf_type=LeafType.NORMAL,
        qty=qty,
        gross=gross,
        net_weight=net_weight,
        is_deduction=False,
        mode="Web",
        log_time=log_time or datetime.now(),
    )
    values.update(overrides)
    return LeafCollection(**values)


def deduction_row(reg_no=101, log_time=None, **overrides):
    values = dict(
        reg_no=reg_no,
        route="Kandedola",
        dealer="K. Perera",
        leaf_type=LeafType.NORMAL,
        qty=1,
        is_deduction=True,
        mode="App",
        log_time=log_time or datetime.now(),
    )
    values.update(overrides)
    return LeafCollection(**values)


@pytest.fixture()
def make_raw():
    return raw_collection


@pytest.fixture()
def make_deduction():
    return deduction_row


@pytest_asyncio.fixture()
async def add_rows(db_session):
    """Insert rows and commit"""

    async def _add(*rows):
        db_session.add_all(rows)
        await db_session.commit()
        return rows

    return _add


@pytest_asyncio.fixture()
async def client(db_session):
    """httpx AsyncClient bound to the FastAPI app"""

    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test", follow_redirects=True) as ac:
        yield ac

    app.dependency_overrides.clear()
