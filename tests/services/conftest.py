"""Fixtures wiring the services to SQLite repositories and in-memory fakes."""

import pytest

from clevio_services.collaborators import ChargeRequest, ChargeResult, InMemoryNotificationSink
from clevio_services.repository import (
    SqlAdvisorySessionRepository,
    SqlBlackoutWindowRepository,
    SqlComplianceIssueRepository,
    SqlPayrollRunRepository,
)


class FakePaymentGateway:
    """Records charge requests; approves unless told to decline."""

    def __init__(self, decline_reason: str | None = None):
        self.decline_reason = decline_reason
        self.requests: list[ChargeRequest] = []
        self.refunds: list[str] = []

    def charge(self, request: ChargeRequest) -> ChargeResult:
        self.requests.append(request)
        if self.decline_reason is not None:
            return ChargeResult(succeeded=False, failure_reason=self.decline_reason)
        return ChargeResult(succeeded=True, reference=f"ch_{len(self.requests)}")

    def refund(self, reference: str, reason: str = "") -> ChargeResult:
        self.refunds.append(reference)
        return ChargeResult(succeeded=True, reference=f"re_{reference}")


class FailingPayrollRunRepository(SqlPayrollRunRepository):
    """Payroll run repository whose writes always fail."""

    def save(self, record):
        raise RuntimeError("database unavailable")


@pytest.fixture
def sink():
    return InMemoryNotificationSink()


@pytest.fixture
def gateway():
    return FakePaymentGateway()


@pytest.fixture
def session_repo(db_session):
    return SqlAdvisorySessionRepository(db_session)


@pytest.fixture
def window_repo(db_session):
    return SqlBlackoutWindowRepository(db_session)


@pytest.fixture
def run_repo(db_session):
    return SqlPayrollRunRepository(db_session)


@pytest.fixture
def issue_repo(db_session):
    return SqlComplianceIssueRepository(db_session)


@pytest.fixture
def declining_gateway():
    return FakePaymentGateway(decline_reason="card_declined")


@pytest.fixture
def failing_run_repo(db_session):
    return FailingPayrollRunRepository(db_session)
