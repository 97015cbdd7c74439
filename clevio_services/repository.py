"""
clevio_services.repository -- SQLAlchemy persistence collaborators.

Responsibility:
    Reference implementations of the repository protocols in
    ``clevio_services.collaborators`` backed by the ORM models in
    ``clevio_kernel.models``.  Every method accepts and returns frozen
    domain records, never ORM instances.

Architecture position:
    Services layer -- imperative shell.

Invariants enforced:
    - Repositories flush within the caller's transaction and never commit
      or roll back; ``session_scope()`` owns the unit of work.
    - ``save`` is an upsert keyed on the record id.

Failure modes:
    - RecordNotFoundError from ``get`` for an unknown id.
"""

from __future__ import annotations

from datetime import date
from typing import Generic, TypeVar

from sqlalchemy import select
from sqlalchemy.orm import Session

from clevio_kernel.db.base import Base
from clevio_kernel.domain.availability import BlackoutWindow
from clevio_kernel.domain.booking import AdvisorySession, PayrollRun
from clevio_kernel.domain.compliance import ComplianceIssue
from clevio_kernel.exceptions import RecordNotFoundError
from clevio_kernel.models import (
    AdvisorySessionModel,
    BlackoutWindowModel,
    ComplianceIssueModel,
    PayrollRunModel,
)

ModelType = TypeVar("ModelType", bound=Base)


class SqlRepository(Generic[ModelType]):
    """Shared get/save plumbing over one ORM model."""

    model: type[ModelType]
    kind: str = "Record"

    def __init__(self, session: Session):
        self.session = session

    def _get_model(self, record_id: str) -> ModelType:
        row = self.session.get(self.model, record_id)
        if row is None:
            raise RecordNotFoundError(self.kind, record_id)
        return row

    def get(self, record_id: str):
        return self._get_model(record_id).to_dto()

    def save(self, record):
        row = self.session.merge(self.model.from_dto(record))
        self.session.flush()
        return row.to_dto()


class SqlAdvisorySessionRepository(SqlRepository[AdvisorySessionModel]):
    model = AdvisorySessionModel
    kind = "AdvisorySession"

    def get(self, session_id: str) -> AdvisorySession:
        return super().get(session_id)

    def list_for_client(self, client_id: str) -> list[AdvisorySession]:
        stmt = (
            select(AdvisorySessionModel)
            .where(AdvisorySessionModel.client_id == client_id)
            .order_by(AdvisorySessionModel.scheduled_date, AdvisorySessionModel.scheduled_time)
        )
        return [row.to_dto() for row in self.session.scalars(stmt)]

    def list_all(self) -> list[AdvisorySession]:
        stmt = select(AdvisorySessionModel).order_by(
            AdvisorySessionModel.scheduled_date, AdvisorySessionModel.scheduled_time
        )
        return [row.to_dto() for row in self.session.scalars(stmt)]


class SqlPayrollRunRepository(SqlRepository[PayrollRunModel]):
    model = PayrollRunModel
    kind = "PayrollRun"

    def get(self, run_id: str) -> PayrollRun:
        return super().get(run_id)

    def list_for_client(self, client_id: str) -> list[PayrollRun]:
        stmt = (
            select(PayrollRunModel)
            .where(PayrollRunModel.client_id == client_id)
            .order_by(PayrollRunModel.run_date)
        )
        return [row.to_dto() for row in self.session.scalars(stmt)]


class SqlComplianceIssueRepository(SqlRepository[ComplianceIssueModel]):
    model = ComplianceIssueModel
    kind = "ComplianceIssue"

    def get(self, issue_id: str) -> ComplianceIssue:
        return super().get(issue_id)

    def list_for_client(self, client_id: str) -> list[ComplianceIssue]:
        stmt = (
            select(ComplianceIssueModel)
            .where(ComplianceIssueModel.client_id == client_id)
            .order_by(ComplianceIssueModel.detected_on)
        )
        return [row.to_dto() for row in self.session.scalars(stmt)]

    def list_all(self) -> list[ComplianceIssue]:
        stmt = select(ComplianceIssueModel).order_by(ComplianceIssueModel.detected_on)
        return [row.to_dto() for row in self.session.scalars(stmt)]


class SqlBlackoutWindowRepository(SqlRepository[BlackoutWindowModel]):
    model = BlackoutWindowModel
    kind = "BlackoutWindow"

    def delete(self, window_id: str) -> None:
        self.session.delete(self._get_model(window_id))
        self.session.flush()

    def list_between(self, start: date, end: date) -> list[BlackoutWindow]:
        """Windows with ``start <= on_date <= end``."""
        stmt = (
            select(BlackoutWindowModel)
            .where(BlackoutWindowModel.on_date >= start, BlackoutWindowModel.on_date <= end)
            .order_by(BlackoutWindowModel.on_date, BlackoutWindowModel.start_time)
        )
        return [row.to_dto() for row in self.session.scalars(stmt)]
