"""
In-Memory Storage

Reference implementation of the storage interfaces. Used by the tests and
as the default backend when the host app supplies none.

Models are frozen, so handing out the stored objects is safe; lists are
copied so callers cannot reorder the store.
"""

from typing import Optional
from uuid import UUID

from liquid_finance.models.audit import AuditEvent
from liquid_finance.models.ledger import Transaction
from liquid_finance.models.profile import Profile
from liquid_finance.services.storage.interface import (
    AuditStorageInterface,
    DuplicateError,
    FinanceStorageInterface,
)


class InMemoryFinanceStorage(FinanceStorageInterface):
    """Profile and transactions held in process memory."""

    def __init__(
        self,
        profile: Optional[Profile] = None,
        transactions: Optional[list[Transaction]] = None,
    ):
        self._profile = profile
        self._transactions: list[Transaction] = []
        self._ids: set[str] = set()
        for transaction in transactions or []:
            self._insert(transaction)

    def _insert(self, transaction: Transaction) -> None:
        if transaction.id in self._ids:
            raise DuplicateError(f"Transaction {transaction.id} already exists")
        # Newest first, like the app's activity feed
        self._transactions.insert(0, transaction)
        self._ids.add(transaction.id)

    async def load_profile(self) -> Optional[Profile]:
        return self._profile

    async def save_profile(self, profile: Profile) -> None:
        self._profile = profile

    async def list_transactions(self) -> list[Transaction]:
        return list(self._transactions)

    async def append_transaction(self, transaction: Transaction) -> None:
        self._insert(transaction)

    async def reset(self) -> None:
        self._profile = None
        self._transactions.clear()
        self._ids.clear()


class InMemoryAuditStorage(AuditStorageInterface):
    """Append-only audit trail held in process memory."""

    def __init__(self):
        self._events: list[AuditEvent] = []

    async def append_event(self, event: AuditEvent) -> bool:
        self._events.append(event)
        return True

    async def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        return [e for e in self._events if e.correlation_id == correlation_id]

    async def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        return list(reversed(self._events))[:limit]
