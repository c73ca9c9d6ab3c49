"""
Audit Logger

DESIGN DECISION: Every action the shell performs for the user is logged.
This provides:
1. Complete traceability of profile and budget changes
2. Debugging capability when a figure looks wrong
3. A history of how the feedback loop moved the budget

The audit logger:
- Is async so storage writes do not block the shell
- Gracefully handles failures (a failed audit write never breaks the action)
- Supports correlation IDs to trace related events

The calculation engine never logs. Only the shell calls this.
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from liquid_finance.models.audit import AuditEvent, AuditEventBuilder
from liquid_finance.services.storage import AuditStorageInterface


# Configure structlog for local logging
structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.UnicodeDecoder(),
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


def configure_logging(level: str = "INFO") -> None:
    """Route structlog output through the stdlib root logger at `level`."""
    logging.basicConfig(format="%(message)s", level=getattr(logging, level))


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for persistence), when configured
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for persistence.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("liquid_finance.audit")

    async def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity.value in ("error", "critical"):
            self._logger.error("audit_event", **log_dict)
        elif event.severity.value == "warning":
            self._logger.warning("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            try:
                return await self._storage.append_event(event)
            except Exception as e:
                # Log failure but don't raise
                self._logger.error(
                    "audit_storage_failed",
                    error=str(e),
                    event_id=str(event.event_id),
                )
                return False

        return True

    async def log_profile_loaded(
        self,
        is_setup: bool,
        transaction_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log a profile load at session start."""
        event = AuditEventBuilder.profile_loaded(
            is_setup=is_setup,
            transaction_count=transaction_count,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_profile_saved(
        self,
        is_setup: bool,
        correlation_id: UUID,
    ) -> None:
        """Log profile save."""
        event = AuditEventBuilder.profile_saved(
            is_setup=is_setup,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_transaction_added(
        self,
        transaction_id: str,
        kind: str,
        category: str,
        amount: str,
        correlation_id: UUID,
    ) -> None:
        """Log a recorded transaction."""
        event = AuditEventBuilder.transaction_added(
            transaction_id=transaction_id,
            kind=kind,
            category=category,
            amount=amount,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_feedback_applied(
        self,
        sentiment: str,
        action: str,
        old_limit: int,
        new_limit: int,
        correlation_id: UUID,
    ) -> None:
        """Log a feedback loop adjustment."""
        event = AuditEventBuilder.feedback_applied(
            sentiment=sentiment,
            action=action,
            old_limit=old_limit,
            new_limit=new_limit,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_ratios_rebalanced(
        self,
        bucket: str,
        requested: int,
        ratios: dict,
        monthly_limit: int,
        correlation_id: UUID,
    ) -> None:
        """Log a ratio edit."""
        event = AuditEventBuilder.ratios_rebalanced(
            bucket=bucket,
            requested=requested,
            ratios=ratios,
            monthly_limit=monthly_limit,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_balance_calibrated(
        self,
        observed_balance: str,
        new_base_balance: str,
        correlation_id: UUID,
    ) -> None:
        """Log a balance calibration."""
        event = AuditEventBuilder.balance_calibrated(
            observed_balance=observed_balance,
            new_base_balance=new_base_balance,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_advice_received(
        self,
        plan_name: Optional[str],
        correlation_id: UUID,
    ) -> None:
        """Log usable advice."""
        event = AuditEventBuilder.advice_received(
            plan_name=plan_name,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_advice_failed(
        self,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log an advice service failure."""
        event = AuditEventBuilder.advice_failed(
            error_message=error_message,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_validation_failed(
        self,
        issues: list[dict],
        correlation_id: UUID,
    ) -> None:
        """Log validation failure."""
        event = AuditEventBuilder.validation_failed(
            issues=issues,
            correlation_id=correlation_id,
        )
        await self.log(event)

    async def log_data_reset(self, correlation_id: UUID) -> None:
        """Log a full reset."""
        await self.log(AuditEventBuilder.data_reset(correlation_id=correlation_id))

    async def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        await self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., a feedback tap).
    Pass it through all subsequent operations.
    """
    return uuid4()
