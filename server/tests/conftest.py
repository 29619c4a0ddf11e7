"""Shared test configuration and fixtures for check-in kiosk tests"""

import logging
import os
from datetime import date, datetime, timedelta, timezone

# Keep the app's module-level engine off the working directory
os.environ.setdefault("DATABASE_URL", "sqlite://")

import fakeredis
import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from checkin_kiosk.main import app
from checkin_kiosk.models.attendee import SHEET_HEADERS, Attendee
from checkin_kiosk.services.attendee_table import AttendeeTable, SqlAttendeeTable
from checkin_kiosk.services.checkin_provider import get_checkin_service
from checkin_kiosk.services.checkin_service import CheckInService
from checkin_kiosk.services.table_cache import TableSnapshotCache
from checkin_kiosk.utils.clock import SystemClock
from tests.config import test_config

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


class FixedClock(SystemClock):
    """Starts at 2025-01-03T06:05:09Z and advances one second per reading"""

    def __init__(self, start: datetime | None = None):
        self.current = start or datetime(2025, 1, 3, 6, 5, 9, tzinfo=timezone.utc)

    def now(self) -> datetime:
        value = self.current
        self.current = self.current + timedelta(seconds=1)
        return value


class InMemoryTable(AttendeeTable):
    """Grid held in memory, counting reads and writes like a spreadsheet would see them"""

    def __init__(self, grid):
        self.grid = grid
        self.read_count = 0
        self.write_count = 0

    def read_grid(self):
        self.read_count += 1
        return [list(row) for row in self.grid]

    def mark_checked_in(self, grid_index, attendee_id, timestamp):
        row = self.grid[grid_index]
        row.extend([""] * (len(SHEET_HEADERS) - len(row)))
        row[6] = "CheckedIn"
        row[7] = timestamp
        self.write_count += 1
        return True


def sample_grid():
    """Header plus three attendees; the last one is the rehearsal account"""
    return [
        list(SHEET_HEADERS),
        ["A1", "0912345678", "王小明", "Intro", "2025/01/03", "Workshop", "", ""],
        ["A2", 922333444, "李小華", "Advanced", "2025-01-10", "Lecture", "", ""],
        ["T1", "0987654321", "測試帳號", "Rehearsal", "2025/01/03", "Demo"],
    ]


@pytest.fixture
def redis_client():
    """Isolated fake Redis server per test"""
    server = fakeredis.FakeServer()
    client = fakeredis.FakeRedis(server=server, decode_responses=True)
    yield client
    client.flushdb()


@pytest.fixture
def table_cache(redis_client):
    return TableSnapshotCache(
        redis_client,
        key=test_config["cache_key"],
        ttl_seconds=test_config["cache_ttl_seconds"],
        max_bytes=test_config["cache_max_bytes"],
    )


@pytest.fixture
def attendee_table():
    return InMemoryTable(sample_grid())


@pytest.fixture
def clock():
    return FixedClock()


@pytest.fixture
def checkin_service(attendee_table, table_cache, clock):
    """CheckInService over the in-memory grid and fake Redis"""
    return CheckInService(
        attendee_table,
        table_cache,
        clock=clock,
        test_phone=test_config["test_phone"],
        phone_country_code=test_config["phone_country_code"],
        time_zone=test_config["time_zone"],
    )


@pytest.fixture
def _db_session():
    """Private DB session for fixtures only.

    Prefer the `sql_table` fixture in tests.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    session = Session(engine)

    yield session

    session.close()
    engine.dispose()


@pytest.fixture
def sql_table(_db_session):
    """SqlAttendeeTable seeded with two attendees"""
    table = SqlAttendeeTable(_db_session)
    table.add_attendees(
        [
            Attendee(
                id="A1",
                phone="0912345678",
                name="王小明",
                course_name="Intro",
                course_date=date(2025, 1, 3),
                course_type="Workshop",
            ),
            Attendee(
                id="T1",
                phone="0987654321",
                name="測試帳號",
                course_name="Rehearsal",
                course_date=date(2025, 1, 3),
                course_type="Demo",
            ),
        ]
    )
    return table


@pytest.fixture
def api_client(checkin_service):
    """TestClient whose kiosk endpoint uses the in-memory check-in service"""

    original_overrides = app.dependency_overrides.copy()

    app.dependency_overrides.clear()
    app.dependency_overrides[get_checkin_service] = lambda: checkin_service

    client = TestClient(app)

    yield client

    app.dependency_overrides.clear()
    app.dependency_overrides.update(original_overrides)
