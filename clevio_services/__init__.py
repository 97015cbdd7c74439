"""
clevio_services -- Package init and public API.

Responsibility:
    Orchestration services that compose the pure engines (clevio_engines/)
    with the persistence, notification and payment collaborators.  This is
    the only layer that performs I/O.

Architecture position:
    Services -- orchestration over engines + kernel.

    Dependency direction:
        clevio_services/ -> clevio_engines/  (allowed)
        clevio_services/ -> clevio_kernel/   (allowed)
        clevio_engines/  -> clevio_services/ (FORBIDDEN)
        clevio_kernel/   -> clevio_services/ (FORBIDDEN)
"""

from clevio_kernel.logging_config import get_logger

logger = get_logger("services")

from clevio_services.booking_service import AdvisoryBookingService, SessionView
from clevio_services.collaborators import (
    ChargeRequest,
    ChargeResult,
    InMemoryNotificationSink,
    NotificationSink,
    PaymentGateway,
)
from clevio_services.compliance_service import ComplianceService
from clevio_services.payroll_service import PayrollSchedulingService
from clevio_services.repository import (
    SqlAdvisorySessionRepository,
    SqlBlackoutWindowRepository,
    SqlComplianceIssueRepository,
    SqlPayrollRunRepository,
)

__all__ = [
    "AdvisoryBookingService",
    "ChargeRequest",
    "ChargeResult",
    "ComplianceService",
    "InMemoryNotificationSink",
    "NotificationSink",
    "PaymentGateway",
    "PayrollSchedulingService",
    "SessionView",
    "SqlAdvisorySessionRepository",
    "SqlBlackoutWindowRepository",
    "SqlComplianceIssueRepository",
    "SqlPayrollRunRepository",
]
