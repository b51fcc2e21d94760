from datetime import date

import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import create_async_engine, AsyncSession, async_sessionmaker

from app.main import app
from app.core import models
from app.core.database import Base, get_db
from app.core.store import StatementStore


# Fresh SQLite file per test, so every test starts from an empty statements table
@pytest_asyncio.fixture(scope="function")
async def db_session(tmp_path):
    test_engine = create_async_engine(
        f"sqlite+aiosqlite:///{tmp_path / 'test.sqlite'}", echo=False
    )
    async with test_engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    TestingSessionLocal = async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False
    )
    async with TestingSessionLocal() as session:
        yield session
        await session.rollback()

    await test_engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def store(db_session: AsyncSession):
    return StatementStore(db_session)


# Client
@pytest_asyncio.fixture(scope="function")
async def client(db_session: AsyncSession):
    async def override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = override_get_db

    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test"
    ) as ac:
        yield ac

    app.dependency_overrides.clear()


# Three statements over two months: 1500 in, 240.5 out
@pytest_asyncio.fixture(scope="function")
async def test_statements(db_session: AsyncSession):
    statements = [
        models.Statement(
            date=date(2024, 1, 5),
            description="Salary",
            amount=1500.0,
            type="credit",
            source="january.pdf",
        ),
        models.Statement(
            date=date(2024, 1, 20),
            description="Groceries",
            amount=120.5,
            type="debit",
            source="january.pdf",
        ),
        models.Statement(
            date=date(2024, 2, 3),
            description="Electricity bill",
            amount=120.0,
            type="debit",
            source="february.pdf",
        ),
    ]
    db_session.add_all(statements)
    await db_session.commit()
    for statement in statements:
        await db_session.refresh(statement)
    return statements
