import pytest
import pytest_asyncio
import asyncio
from httpx import AsyncClient, ASGITransport

from detailing_admin.main import app
from detailing_admin.core.config import settings
from detailing_admin.core.security import hash_password
from detailing_admin.core.sessions import SessionStore, get_session_store
from detailing_admin.services.bookings import InMemoryBookingSource, get_booking_source
from detailing_admin.services.expenses import InMemoryExpenseSource, get_expense_source

ADMIN_PASSWORD = "s3cret-detail"


class InMemoryRedis:
    """Async stand-in for the handful of Redis commands the session store uses."""

    def __init__(self):
        self.data = {}
        self.ttls = {}
        self.closed = False

    async def ping(self):
        return True

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        self.ttls[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed

    async def aclose(self):
        self.closed = True

    def expire_all(self):
        self.data.clear()
        self.ttls.clear()


class ManualClock:
    """Drives SessionKeepAlive without real waiting."""

    def __init__(self):
        self.now = 0.0
        self._waiters = []

    async def sleep(self, delay):
        future = asyncio.get_running_loop().create_future()
        self._waiters.append((self.now + delay, future))
        await future

    async def advance(self, seconds):
        self.now += seconds
        due = [w for w in self._waiters if w[0] <= self.now]
        self._waiters = [w for w in self._waiters if w[0] > self.now]
        for _, future in due:
            if not future.done():
                future.set_result(None)
        await self.settle()

    async def settle(self, rounds: int = 10):
        for _ in range(rounds):
            await asyncio.sleep(0)

    async def wait_for_sleepers(self, count: int = 1, rounds: int = 1000):
        for _ in range(rounds):
            if self.pending >= count:
                return
            await asyncio.sleep(0)
        raise AssertionError(f"expected {count} sleeping task(s), found {self.pending}")

    @property
    def pending(self):
        return sum(1 for _, f in self._waiters if not f.done())


@pytest.fixture
def fake_redis():
    return InMemoryRedis()


@pytest.fixture
def session_store(fake_redis):
    return SessionStore(fake_redis)


@pytest.fixture
def manual_clock():
    return ManualClock()


@pytest.fixture
def sample_bookings():
    return [
        {"_id": "b1", "name": "Ana", "date": "2026-03-02", "time": "09:00", "status": "completed", "amount": 120},
        {"_id": "b2", "name": "Ben", "date": "2026-03-15", "time": "11:00", "status": " Paid ", "baseSum": "$80.00", "tip": "10"},
        {"_id": "b3", "name": "Cal", "date": "2026-04-01", "time": "10:00", "status": "pending", "perCarTotals": [50, "25.50"]},
        {"_id": "b4", "name": "Dee", "date": "2026-04-20", "time": "14:00", "status": "cancelled", "total": 60},
        {"_id": "b5", "name": "Eve", "date": "2026-04-22", "time": "08:30", "status": "settled",
         "vehicles": [{"lineTotal": 70}, {"lineTotal": "30"}]},
    ]


@pytest.fixture
def booking_source(sample_bookings):
    return InMemoryBookingSource(sample_bookings)


@pytest.fixture
def sample_expenses():
    return [
        {"_id": "e1", "date": "2026-03-10", "amount": 60, "category": "chemicals", "supplier": "Meguiars"},
        {"_id": "e2", "date": "2026-05-02", "amount": 25.5, "category": "other"},
    ]


@pytest.fixture
def expense_source(sample_expenses):
    return InMemoryExpenseSource(sample_expenses)


@pytest.fixture
def admin_settings(monkeypatch):
    monkeypatch.setattr(settings, "ADMIN_PASSWORD", ADMIN_PASSWORD)
    monkeypatch.setattr(settings, "ADMIN_PASSWORD_HASH", None)
    monkeypatch.setattr(settings, "LOGIN_FAILURE_DELAY", 0.0)
    return settings


@pytest_asyncio.fixture
async def test_client(session_store, booking_source, expense_source, admin_settings):
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_booking_source] = lambda: booking_source
    app.dependency_overrides[get_expense_source] = lambda: expense_source
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        yield client
    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def admin_token(session_store):
    return await session_store.create({"role": "admin"})


@pytest.fixture
def admin_cookie(admin_token):
    return {"Cookie": f"{settings.SESSION_COOKIE_NAME}={admin_token}"}


@pytest.fixture
def admin_password():
    return ADMIN_PASSWORD


@pytest.fixture
def admin_password_hash():
    return hash_password(ADMIN_PASSWORD)


def pytest_configure(config):
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
    config.addinivalue_line(
        "markers", "auth: marks tests related to authentication"
    )
    config.addinivalue_line(
        "markers", "revenue: marks tests related to revenue resolution"
    )
    config.addinivalue_line(
        "markers", "guard: marks tests related to the admin route guard"
    )
    config.addinivalue_line(
        "markers", "keepalive: marks tests related to session keep-alive"
    )
    config.addinivalue_line(
        "markers", "expenses: marks tests related to expenses and profit"
    )
