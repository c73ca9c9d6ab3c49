"""
Abstract Storage Interface

DESIGN DECISION: The engine never touches storage. The shell talks to the
persistence collaborator through this interface only. This allows us to:
1. Back the app with any store (device storage, SQLite, a remote API)
2. Use in-memory storage for testing
3. Keep the calculations decoupled from persistence

The interface is intentionally small - just the operations the shell needs:
load, replace the profile, append transactions, reset everything.
"""

from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from liquid_finance.models.audit import AuditEvent
from liquid_finance.models.ledger import Transaction
from liquid_finance.models.profile import Profile


class FinanceStorageInterface(ABC):
    """
    Abstract interface for profile and transaction storage.

    Transactions are append-only: there is no update or delete.
    """

    @abstractmethod
    async def load_profile(self) -> Optional[Profile]:
        """
        Load the stored profile.

        Returns:
            The stored profile, or None when none was saved
        """
        pass

    @abstractmethod
    async def save_profile(self, profile: Profile) -> None:
        """
        Replace the stored profile.

        Raises:
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def list_transactions(self) -> list[Transaction]:
        """
        Load all stored transactions.

        Returns:
            Transactions, newest first
        """
        pass

    @abstractmethod
    async def append_transaction(self, transaction: Transaction) -> None:
        """
        Append one transaction.

        Raises:
            DuplicateError: If a transaction with the same id exists
            StorageError: If the write fails
        """
        pass

    @abstractmethod
    async def reset(self) -> None:
        """Delete the profile and every transaction."""
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    async def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for one user action.

        Returns:
            List of related events in chronological order
        """
        pass

    @abstractmethod
    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events.

        Returns:
            List of recent events (newest first)
        """
        pass


class StorageError(Exception):
    """Base exception for storage operations."""
    pass


class DuplicateError(StorageError):
    """Attempted to insert a duplicate entity."""
    pass
