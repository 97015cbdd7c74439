"""
clevio_services.payroll_service -- Payroll run scheduling.

Responsibility:
    Schedules the next payroll run for a client: eligibility gate, run date
    from the recurring rule (or a manually chosen date checked against the
    lead-time floor), fee quote on the roster's payroll amount, card charge
    through the payment collaborator, persistence and the PayrollScheduled
    notification.

Architecture position:
    Services layer.  Thin coordinator over clevio_engines.

Invariants enforced:
    - The card is charged only after every engine check passed.
    - A run is persisted only after a successful charge.
    - If the run cannot be stored the charge is refunded through the
      payment collaborator before the storage error propagates.

Failure modes:
    - RequirementUnmetError when ``run_payroll`` is locked.
    - InvalidScheduleRuleError / LeadTimeViolationError from the calculator.
    - PaymentDeclinedError when the payment collaborator refuses the charge.
    - RecordNotFoundError / InvalidTransitionError from complete/cancel.
"""

from __future__ import annotations

from datetime import date

from clevio_config.schema import EngineConfig
from clevio_engines.booking import PayrollRunStateMachine
from clevio_engines.eligibility import Capability, EligibilityEvaluator
from clevio_engines.fees import FeeCalculator, roster_payroll_amount
from clevio_engines.recurring import RecurringScheduleCalculator
from clevio_kernel.domain.booking import FeeBreakdown, PayrollRun
from clevio_kernel.domain.client import Client
from clevio_kernel.domain.clock import Clock
from clevio_kernel.domain.events import PayrollScheduled
from clevio_kernel.domain.schedule import PayrollScheduleRule
from clevio_kernel.exceptions import PaymentDeclinedError
from clevio_kernel.logging_config import LogContext, get_logger
from clevio_services.collaborators import (
    ChargeRequest,
    NotificationSink,
    PaymentGateway,
    PayrollRunRepository,
)

logger = get_logger("services.payroll")


class PayrollSchedulingService:
    """Quotes, schedules and closes payroll runs."""

    def __init__(
        self,
        config: EngineConfig,
        clock: Clock,
        runs: PayrollRunRepository,
        gateway: PaymentGateway,
        sink: NotificationSink,
    ):
        self._config = config
        self._clock = clock
        self._runs = runs
        self._gateway = gateway
        self._sink = sink
        self._evaluator = EligibilityEvaluator.from_config(config)
        self._fees = FeeCalculator.from_config(config)
        self._calculator = RecurringScheduleCalculator.from_config(config)
        self._machine = PayrollRunStateMachine()

    def quote(self, client: Client) -> FeeBreakdown:
        """Fees for the client's active tiers on its current roster."""
        base = roster_payroll_amount(client.members, self._config.currency)
        return self._fees.compute_fee(client.active_tiers, base)

    def upcoming_dates(self, rule: PayrollScheduleRule, count: int = 4) -> tuple[date, ...]:
        return self._calculator.upcoming(rule, None, self._clock.today(), count)

    def schedule_run(
        self,
        client: Client,
        rule: PayrollScheduleRule,
        run_date: date | None = None,
    ) -> PayrollRun:
        """Schedule and pay for the client's next payroll run.

        With no ``run_date`` the next occurrence of ``rule`` after the lead
        time is used; an explicit date must respect the lead time.
        """
        today = self._clock.today()
        with LogContext.bind(client_id=client.client_id):
            self._evaluator.require(client, Capability.RUN_PAYROLL)

            self._calculator.check_rule(rule)
            if run_date is None:
                run_date = self._calculator.next_occurrence(rule, None, today)
            else:
                self._calculator.validate_run_date(run_date, None, today)

            gross = roster_payroll_amount(client.members, self._config.currency)
            fees = self._fees.compute_fee(client.active_tiers, gross)

            result = self._gateway.charge(
                ChargeRequest(
                    client_id=client.client_id,
                    amount=fees.total,
                    description=f"Payroll service fees for {run_date.isoformat()}",
                    metadata={"run_date": run_date.isoformat()},
                )
            )
            if not result.succeeded:
                logger.warning(
                    "payroll_charge_declined",
                    extra={"run_date": run_date, "reason": result.failure_reason},
                )
                raise PaymentDeclinedError(client.client_id, result.failure_reason)

            try:
                run = self._runs.save(
                    PayrollRun(
                        client_id=client.client_id,
                        run_date=run_date,
                        gross_amount=gross,
                        fees=fees,
                        charge_reference=result.reference,
                    )
                )
            except Exception:
                self._refund_unrecorded_charge(result.reference, run_date)
                raise
            self._sink.publish(
                PayrollScheduled(
                    occurred_at=self._clock.now(),
                    run_id=run.run_id,
                    client_id=run.client_id,
                    run_date=run.run_date,
                    gross_amount=run.gross_amount,
                    fee_total=run.fees.total,
                )
            )
            logger.info(
                "payroll_scheduled",
                extra={
                    "run_id": run.run_id,
                    "run_date": run.run_date,
                    "gross_amount": run.gross_amount.amount,
                    "fee_total": run.fees.total.amount,
                },
            )
            return run

    def _refund_unrecorded_charge(self, reference: str | None, run_date: date) -> None:
        """Hand back a charge whose payroll run could not be stored."""
        logger.error(
            "payroll_run_save_failed",
            extra={"run_date": run_date, "charge_reference": reference},
            exc_info=True,
        )
        if reference is None:
            return
        refund = self._gateway.refund(reference, reason="payroll_run_not_recorded")
        if refund.succeeded:
            logger.warning("payroll_charge_refunded", extra={"charge_reference": reference})
        else:
            # charge and stored runs now disagree; needs manual reconciliation
            logger.error(
                "payroll_refund_failed",
                extra={"charge_reference": reference, "reason": refund.failure_reason},
            )

    def complete_run(self, run_id: str) -> PayrollRun:
        return self._runs.save(self._machine.complete(self._runs.get(run_id)))

    def cancel_run(self, run_id: str) -> PayrollRun:
        return self._runs.save(self._machine.cancel(self._runs.get(run_id)))
