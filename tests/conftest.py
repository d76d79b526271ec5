import pytest
from decimal import Decimal
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool
from tripledger.db.session import Base, get_db
from tripledger.main import app
from tripledger.models.expense import Expense
from tripledger.models.expense_split import ExpenseSplit


TRIP_ID = "trip-1"


@pytest.fixture
def make_expense():
    """Return a factory for unsaved Expense rows."""
    def _make(expense_id, amount, payer_id, trip_id=TRIP_ID, title="Dinner"):
        return Expense(
            id=expense_id,
            trip_id=trip_id,
            title=title,
            amount=Decimal(amount),
            payer_id=payer_id,
        )
    return _make


@pytest.fixture
def make_split():
    """Return a factory for unsaved ExpenseSplit rows."""
    def _make(expense_id, user_id, amount):
        return ExpenseSplit(
            expense_id=expense_id,
            user_id=user_id,
            amount=Decimal(amount),
        )
    return _make


@pytest.fixture
async def session_factory():
    """In-memory database shared by every session of one test."""
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield async_sessionmaker(engine, expire_on_commit=False)

    await engine.dispose()


@pytest.fixture
async def client(session_factory):
    """Return an HTTP client talking to the app on the test database."""
    async def override_get_db():
        async with session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


@pytest.fixture
def expenses_url():
    return f"/api/v1/trips/{TRIP_ID}/expenses/"


@pytest.fixture
def trip_url():
    return f"/api/v1/trips/{TRIP_ID}"
