"""ORM models for the reference persistence collaborator."""

from clevio_kernel.models.advisory_session import AdvisorySessionModel, PayrollRunModel
from clevio_kernel.models.blackout_window import BlackoutWindowModel
from clevio_kernel.models.compliance_issue import ComplianceIssueModel

__all__ = [
    "AdvisorySessionModel",
    "BlackoutWindowModel",
    "ComplianceIssueModel",
    "PayrollRunModel",
]
