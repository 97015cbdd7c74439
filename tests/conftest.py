"""
Pytest fixtures for the CLEVIO engine test suite.

Provides:
- Structured JSON logging for the whole run, plus a log capture fixture
- A deterministic clock pinned to Monday 2025-03-03 09:00 UTC
- The packaged engine configuration
- An in-memory SQLite database with the reference ORM tables
- Client snapshot builders
"""

import json
import logging
from datetime import date, datetime, timezone
from io import StringIO

import pytest

from clevio_config import get_active_config
from clevio_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session,
    init_engine_from_url,
    reset_engine,
)
from clevio_kernel.domain.client import (
    Client,
    Member,
    PaymentInstrument,
    ServiceTier,
    TierSubscription,
)
from clevio_kernel.domain.clock import DeterministicClock
from clevio_kernel.domain.values import Money
from clevio_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)

TODAY = date(2025, 3, 3)
NOW = datetime(2025, 3, 3, 9, 0, tzinfo=timezone.utc)


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture clevio logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs):
            ...
            assert any(r["message"] == "session_booked" for r in captured_logs())
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("clevio")
    previous_level = root.level
    root.setLevel(logging.DEBUG)
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)
    root.setLevel(previous_level)


# =============================================================================
# Time and configuration
# =============================================================================


@pytest.fixture
def clock() -> DeterministicClock:
    return DeterministicClock(NOW)


@pytest.fixture(scope="session")
def engine_config():
    return get_active_config()


# =============================================================================
# Database
# =============================================================================


@pytest.fixture
def db_session():
    """Fresh in-memory SQLite database per test."""
    init_engine_from_url("sqlite://")
    create_tables()
    session = get_session()
    yield session
    session.close()
    drop_tables()
    reset_engine()


# =============================================================================
# Client builders
# =============================================================================


def make_members(count: int, salary: str = "15000") -> tuple[Member, ...]:
    return tuple(
        Member(member_id=f"m-{i}", compensation=Money.of(salary)) for i in range(count)
    )


def make_client(
    members: int = 5,
    tiers: tuple[ServiceTier, ...] = (ServiceTier.PAYROLL,),
    with_payment: bool = True,
    client_id: str = "client-1",
    started_on: date = TODAY,
) -> Client:
    return Client(
        client_id=client_id,
        members=make_members(members),
        subscriptions=tuple(TierSubscription(tier=t, started_on=started_on) for t in tiers),
        payment_instrument=PaymentInstrument("4242") if with_payment else None,
    )


@pytest.fixture
def client_factory():
    return make_client
