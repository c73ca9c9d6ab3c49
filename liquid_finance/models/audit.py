"""
Audit Models for Liquid Finance

Every action the shell takes on the user's behalf is logged:
1. Traceability of every change to the profile and ledger
2. Debugging information when a figure looks wrong
3. Ability to reconstruct how the budget evolved through feedback

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
The calculation engine itself never logs; only the shell does.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Profile
    PROFILE_LOADED = "profile_loaded"
    PROFILE_SAVED = "profile_saved"
    BALANCE_CALIBRATED = "balance_calibrated"
    RATIOS_REBALANCED = "ratios_rebalanced"

    # Ledger
    TRANSACTION_ADDED = "transaction_added"

    # Budget feedback loop
    FEEDBACK_APPLIED = "feedback_applied"

    # Advice collaborator
    ADVICE_RECEIVED = "advice_received"
    ADVICE_FAILED = "advice_failed"

    # Validation
    VALIDATION_FAILED = "validation_failed"

    # Maintenance
    DATA_RESET = "data_reset"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    Every significant action creates one of these.
    """

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=_utc_now,
        description="When the event occurred (UTC)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'profile', 'transaction')"
    )
    entity_id: Optional[str] = None

    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events of one user action"
    )

    description: str = Field(..., max_length=500)
    details: dict[str, Any] = Field(default_factory=dict)

    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(tx_id, kind, amount, correlation_id)
        event = AuditEventBuilder.feedback_applied("too_strict", action, correlation_id)
    """

    @staticmethod
    def profile_loaded(
        is_setup: bool,
        transaction_count: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_LOADED,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Profile loaded with {transaction_count} transaction(s)",
            details={
                "is_setup": is_setup,
                "transaction_count": transaction_count,
            },
        )

    @staticmethod
    def profile_saved(
        is_setup: bool,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.PROFILE_SAVED,
            entity_type="profile",
            correlation_id=correlation_id,
            description="Profile saved",
            details={"is_setup": is_setup},
            is_user_action=True,
        )

    @staticmethod
    def transaction_added(
        transaction_id: str,
        kind: str,
        category: str,
        amount: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            correlation_id=correlation_id,
            description=f"{kind.title()} of {amount} recorded",
            details={
                "kind": kind,
                "category": category,
                "amount": amount,
            },
            is_user_action=True,
        )

    @staticmethod
    def feedback_applied(
        sentiment: str,
        action: str,
        old_limit: int,
        new_limit: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.FEEDBACK_APPLIED,
            entity_type="budget",
            correlation_id=correlation_id,
            description=action,
            details={
                "sentiment": sentiment,
                "old_limit": old_limit,
                "new_limit": new_limit,
            },
            is_user_action=True,
        )

    @staticmethod
    def ratios_rebalanced(
        bucket: str,
        requested: int,
        ratios: dict,
        monthly_limit: int,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.RATIOS_REBALANCED,
            entity_type="budget",
            correlation_id=correlation_id,
            description=f"Budget ratios rebalanced after editing {bucket}",
            details={
                "bucket": bucket,
                "requested": requested,
                "ratios": ratios,
                "monthly_limit": monthly_limit,
            },
            is_user_action=True,
        )

    @staticmethod
    def balance_calibrated(
        observed_balance: str,
        new_base_balance: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BALANCE_CALIBRATED,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Balance calibrated to {observed_balance}",
            details={
                "observed_balance": observed_balance,
                "new_base_balance": new_base_balance,
            },
            is_user_action=True,
        )

    @staticmethod
    def advice_received(
        plan_name: Optional[str],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_RECEIVED,
            entity_type="advice",
            correlation_id=correlation_id,
            description=f"Investment advice received: {plan_name or 'unnamed plan'}",
        )

    @staticmethod
    def advice_failed(
        error_message: str,
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ADVICE_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="advice",
            correlation_id=correlation_id,
            description="Advice service failed, simulator inputs kept",
            error_message=error_message,
        )

    @staticmethod
    def validation_failed(
        issues: list[dict],
        correlation_id: UUID,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.VALIDATION_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="profile",
            correlation_id=correlation_id,
            description=f"Profile validation failed with {len(issues)} issue(s)",
            details={"issues": issues},
        )

    @staticmethod
    def data_reset(correlation_id: UUID) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DATA_RESET,
            severity=AuditSeverity.WARNING,
            correlation_id=correlation_id,
            description="All profile and transaction data cleared",
            is_user_action=True,
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            correlation_id=correlation_id,
            description=f"System error: {error_type}",
            details=details or {},
            error_message=error_message,
        )
