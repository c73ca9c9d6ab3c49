"""
Flow tests for the session orchestrator.

All collaborators are in-memory fakes and the clock is fixed.
"""

import asyncio
import pytest
from datetime import date, datetime
from decimal import Decimal

from pydantic import ValidationError

from liquid_finance.audit import AuditLogger, create_correlation_id
from liquid_finance.config import Settings, validate_all_settings
from liquid_finance.models import (
    AuditEventBuilder,
    AuditEventType,
    BudgetBucket,
    BudgetRatios,
    BudgetState,
    Category,
    InvestmentParams,
    Profile,
    Sentiment,
    TransactionType,
)
from liquid_finance.orchestrator import FinanceSession, create_app_components
from liquid_finance.services import (
    ADVICE_FALLBACK_MESSAGE,
    AdviceError,
    AdviceProvider,
    AuditStorageInterface,
    InMemoryAuditStorage,
    InMemoryFinanceStorage,
    InvestmentAdvice,
    StorageError,
)
from liquid_finance.validation import InvalidInputError

NOW = datetime(2025, 3, 15, 10, 0)


# =============================================================================
# FAKES
# =============================================================================

class StaticAdviceProvider(AdviceProvider):
    """Always answers with the same advice."""

    def __init__(self, advice: InvestmentAdvice):
        self.advice = advice
        self.prompts = []

    async def suggest_investment(self, prompt, profile, transactions):
        self.prompts.append(prompt)
        return self.advice


class FailingAdviceProvider(AdviceProvider):
    """Simulates an unreachable advice service."""

    async def suggest_investment(self, prompt, profile, transactions):
        raise AdviceError("upstream timeout")


class UnreachableAdviceProvider(AdviceProvider):
    """Fails below the advice layer with a plain network error."""

    async def suggest_investment(self, prompt, profile, transactions):
        raise ConnectionError("network down")


class ReadOnlyFinanceStorage(InMemoryFinanceStorage):
    """Loads fine, refuses every profile write."""

    async def save_profile(self, profile):
        raise StorageError("disk full")


class LockedLedgerStorage(InMemoryFinanceStorage):
    """Loads fine, refuses transaction writes and resets."""

    async def append_transaction(self, transaction):
        raise StorageError("write rejected")

    async def reset(self):
        raise StorageError("wipe rejected")


class FailingAuditStorage(AuditStorageInterface):
    """Audit backend that is always down."""

    async def append_event(self, event):
        raise RuntimeError("audit backend unavailable")

    async def get_events_by_correlation_id(self, correlation_id):
        return []

    async def get_recent_events(self, limit=100):
        return []


# =============================================================================
# HELPERS
# =============================================================================

def make_profile(base=0, needs=50, wants=30, savings=20, limit=30000):
    return Profile(
        is_setup=True,
        base_balance=Decimal(str(base)),
        monthly_income=80000.0,
        budget=BudgetState(
            ratios=BudgetRatios(
                needs_percent=needs,
                wants_percent=wants,
                savings_percent=savings,
            ),
            monthly_limit=limit,
        ),
    )


def make_session(profile=None, storage=None, advice_provider=None, settings=None):
    storage = storage or InMemoryFinanceStorage(profile=profile)
    audit_storage = InMemoryAuditStorage()
    session = FinanceSession(
        storage=storage,
        audit_logger=AuditLogger(audit_storage),
        advice_provider=advice_provider,
        settings=settings or Settings(),
        clock=lambda: NOW,
    )
    asyncio.run(session.load())
    return session, storage, audit_storage


def event_types(audit_storage):
    """Audited event types, oldest first."""
    events = asyncio.run(audit_storage.get_recent_events())
    return [e.event_type for e in reversed(events)]


# =============================================================================
# TESTS
# =============================================================================

class TestSessionLoad:
    """Tests for loading state from storage."""

    def test_empty_storage_gives_default_profile(self):
        """Test first launch."""
        session, _, audit_storage = make_session()

        assert session.profile == Profile.default()
        assert session.transactions == ()
        assert session.current_balance == Decimal("0")
        assert event_types(audit_storage) == [AuditEventType.PROFILE_LOADED]

    def test_default_profile_from_environment(self, monkeypatch):
        """Test that first-launch defaults come from configuration."""
        monkeypatch.setenv("BUDGET_DEFAULT_NEEDS_PERCENT", "60")
        monkeypatch.setenv("BUDGET_DEFAULT_WANTS_PERCENT", "25")
        monkeypatch.setenv("BUDGET_DEFAULT_SAVINGS_PERCENT", "15")
        monkeypatch.setenv("BUDGET_DEFAULT_MONTHLY_LIMIT", "45000")
        monkeypatch.setenv("DEFAULT_CURRENCY", "USD")

        session, _, _ = make_session()

        assert session.profile.currency == "USD"
        assert session.profile.budget.monthly_limit == 45000
        assert session.profile.budget.ratios.needs_percent == 60

    def test_stored_profile_wins(self):
        """Test that a saved profile replaces the defaults."""
        stored = make_profile(base=1234)
        session, _, _ = make_session(stored)
        assert session.profile == stored

    def test_create_app_components(self):
        """Test the factory wires a usable session."""
        session = create_app_components(clock=lambda: NOW)
        asyncio.run(session.load())

        assert isinstance(session, FinanceSession)
        assert session.profile.is_setup is False


class TestLedgerFlows:
    """Tests for recording transactions and calibrating."""

    def test_add_transaction(self):
        """Test that a transaction is stored, kept newest first and audited."""
        session, storage, audit_storage = make_session(make_profile())

        first = asyncio.run(session.add_transaction(
            90000, TransactionType.INCOME, Category.SALARY, note="March salary",
        ))
        second = asyncio.run(session.add_transaction(
            1200, TransactionType.EXPENSE, Category.FOOD,
        ))

        assert first.timestamp == NOW
        assert session.transactions == (second, first)
        assert asyncio.run(storage.list_transactions()) == [second, first]

        events = asyncio.run(audit_storage.get_recent_events())
        assert events[0].event_type == AuditEventType.TRANSACTION_ADDED
        assert events[0].entity_id == second.id
        assert events[1].description == "Income of 90000 recorded"

    def test_invalid_amount_is_not_recorded(self):
        """Test that a negative amount never reaches storage."""
        session, storage, _ = make_session()

        with pytest.raises(ValidationError):
            asyncio.run(session.add_transaction(
                -5, TransactionType.EXPENSE, Category.FOOD,
            ))

        assert session.transactions == ()
        assert asyncio.run(storage.list_transactions()) == []

    def test_ledger_summary(self):
        """Test the balance and monthly totals seen by the dashboard."""
        session, _, _ = make_session(make_profile(base=50000))

        asyncio.run(session.add_transaction(90000, TransactionType.INCOME, Category.SALARY))
        asyncio.run(session.add_transaction(15000, TransactionType.EXPENSE, Category.HOUSING))
        asyncio.run(session.add_transaction(10000, TransactionType.INVESTMENT, Category.INVESTMENT))

        summary = session.ledger_summary()

        assert summary.current_balance == Decimal("115000")
        assert session.current_balance == Decimal("115000")
        assert summary.monthly_income_actual == Decimal("90000")
        assert summary.monthly_expense_actual == Decimal("15000")

    def test_daily_expense_series(self):
        """Test the trailing window ends today."""
        session, _, _ = make_session()
        asyncio.run(session.add_transaction(300, TransactionType.EXPENSE, Category.TRANSPORT))

        series = session.daily_expense_series()

        assert len(series) == 14
        assert series[-1] == (date(2025, 3, 15), Decimal("300"))

    def test_calibrate_balance(self):
        """Test that only the base balance moves."""
        session, storage, audit_storage = make_session(make_profile())
        asyncio.run(session.add_transaction(90000, TransactionType.INCOME, Category.SALARY))
        asyncio.run(session.add_transaction(15000, TransactionType.EXPENSE, Category.HOUSING))

        new_base = asyncio.run(session.calibrate_balance(200000))

        assert new_base == Decimal("125000")
        assert session.current_balance == Decimal("200000")
        assert len(session.transactions) == 2
        assert asyncio.run(storage.load_profile()).base_balance == Decimal("125000")
        assert event_types(audit_storage)[-1] == AuditEventType.BALANCE_CALIBRATED

    def test_storage_failure_keeps_state(self):
        """Test that a failed write leaves the session untouched and is audited."""
        storage = ReadOnlyFinanceStorage(profile=make_profile(base=1000))
        session, _, audit_storage = make_session(storage=storage)

        with pytest.raises(StorageError):
            asyncio.run(session.calibrate_balance(5000))

        assert session.profile.base_balance == Decimal("1000")
        assert event_types(audit_storage)[-1] == AuditEventType.SYSTEM_ERROR

    def test_storage_failure_carries_correlation_id(self):
        """Test that a failed profile write can be traced by its correlation id."""
        storage = ReadOnlyFinanceStorage(profile=make_profile(base=1000))
        session, _, audit_storage = make_session(storage=storage)

        with pytest.raises(StorageError):
            asyncio.run(session.calibrate_balance(5000))

        error_event = asyncio.run(audit_storage.get_recent_events())[0]
        assert error_event.event_type == AuditEventType.SYSTEM_ERROR
        assert error_event.description == "System error: storage_save_failed"
        assert error_event.correlation_id is not None

        related = asyncio.run(
            audit_storage.get_events_by_correlation_id(error_event.correlation_id)
        )
        assert related == [error_event]

    def test_failed_append_is_audited(self):
        """Test that a rejected transaction write leaves the ledger unchanged."""
        storage = LockedLedgerStorage(profile=make_profile())
        session, _, audit_storage = make_session(storage=storage)

        with pytest.raises(StorageError):
            asyncio.run(session.add_transaction(
                500, TransactionType.EXPENSE, Category.FOOD,
            ))

        assert session.transactions == ()
        events = asyncio.run(audit_storage.get_recent_events())
        assert events[0].event_type == AuditEventType.SYSTEM_ERROR
        assert events[0].description == "System error: storage_append_failed"
        assert events[0].error_message == "write rejected"
        assert events[0].correlation_id is not None

    def test_failed_reset_is_audited(self):
        """Test that a rejected wipe keeps the profile and the ledger."""
        stored = make_profile(base=5000)
        storage = LockedLedgerStorage(profile=stored)
        session, _, audit_storage = make_session(storage=storage)

        with pytest.raises(StorageError):
            asyncio.run(session.reset())

        assert session.profile == stored
        events = asyncio.run(audit_storage.get_recent_events())
        assert events[0].event_type == AuditEventType.SYSTEM_ERROR
        assert events[0].description == "System error: storage_reset_failed"
        assert events[0].error_message == "wipe rejected"
        assert AuditEventType.DATA_RESET not in event_types(audit_storage)


class TestBudgetFlows:
    """Tests for feedback, ratio edits and profile saves."""

    def test_feedback_too_strict(self):
        """Test that feedback is persisted and audited."""
        session, storage, audit_storage = make_session(make_profile())

        action = asyncio.run(session.submit_feedback(Sentiment.TOO_STRICT))

        assert action == "Relaxed Budget: Wants +3%, Limit +5%"
        assert session.profile.budget.monthly_limit == 31500
        assert session.profile.budget.last_feedback_at == NOW
        assert asyncio.run(storage.load_profile()).budget.ratios.wants_percent == 33
        assert event_types(audit_storage)[-1] == AuditEventType.FEEDBACK_APPLIED

    def test_feedback_good_is_a_no_op(self):
        """Test that GOOD neither writes nor audits."""
        session, storage, audit_storage = make_session(make_profile())
        before = session.profile

        action = asyncio.run(session.submit_feedback(Sentiment.GOOD))

        assert action == "No changes needed"
        assert session.profile is before
        assert event_types(audit_storage) == [AuditEventType.PROFILE_LOADED]

    def test_strict_guards_from_environment(self, monkeypatch):
        """Test that the guard toggle is read from configuration."""
        monkeypatch.setenv("BUDGET_STRICT_FEEDBACK_GUARDS", "true")
        session, _, _ = make_session(make_profile(needs=68, wants=30, savings=2))

        asyncio.run(session.submit_feedback(Sentiment.TOO_STRICT))

        assert session.profile.budget.monthly_limit == 30000
        assert session.profile.budget.ratios.savings_percent == 2

    def test_default_guards_still_move_limit(self):
        """Test the default guard behaviour through the shell."""
        session, _, _ = make_session(make_profile(needs=68, wants=30, savings=2))

        asyncio.run(session.submit_feedback(Sentiment.TOO_STRICT))

        assert session.profile.budget.monthly_limit == 31500

    def test_edit_ratio_rederives_limit(self):
        """Test that a ratio edit recomputes the limit from the balance."""
        session, storage, audit_storage = make_session(make_profile(base=100000))

        budget = asyncio.run(session.edit_ratio(BudgetBucket.NEEDS, 60))

        assert budget.ratios == BudgetRatios(needs_percent=60, wants_percent=30, savings_percent=10)
        assert budget.monthly_limit == 90000
        assert asyncio.run(storage.load_profile()).budget == budget
        assert event_types(audit_storage)[-1] == AuditEventType.RATIOS_REBALANCED

    def test_edit_ratio_with_explicit_balance(self):
        """Test deriving the limit from a caller-supplied balance."""
        session, _, _ = make_session(make_profile(base=100000))

        budget = asyncio.run(session.edit_ratio(BudgetBucket.WANTS, 40, balance=50000))

        assert budget.ratios.savings_percent == 10
        assert budget.monthly_limit == 45000

    def test_edit_ratio_negative_balance(self):
        """Test that an overdrawn balance gives a zero limit."""
        session, _, _ = make_session(make_profile(base=-1000))

        budget = asyncio.run(session.edit_ratio(BudgetBucket.NEEDS, 50))

        assert budget.monthly_limit == 0

    def test_save_profile(self):
        """Test that a valid profile is stored and warnings are returned."""
        session, storage, audit_storage = make_session()
        profile = make_profile(base=0)

        result = asyncio.run(session.save_profile(profile))

        assert result.is_valid is True
        assert result.warnings  # limit above what a zero balance supports
        assert asyncio.run(storage.load_profile()) == profile
        assert event_types(audit_storage)[-1] == AuditEventType.PROFILE_SAVED

    def test_save_profile_rejects_errors(self):
        """Test that ratios not summing to 100 block the save."""
        session, storage, audit_storage = make_session()

        with pytest.raises(InvalidInputError, match="100%"):
            asyncio.run(session.save_profile(make_profile(needs=50, wants=30, savings=10)))

        assert asyncio.run(storage.load_profile()) is None
        assert session.profile == Profile.default()
        assert event_types(audit_storage)[-1] == AuditEventType.VALIDATION_FAILED

    def test_budget_overview(self):
        """Test targets next to actual spending."""
        session, _, _ = make_session(make_profile(base=100000))
        asyncio.run(session.add_transaction(15000, TransactionType.EXPENSE, Category.HOUSING))
        asyncio.run(session.add_transaction(3000, TransactionType.EXPENSE, Category.SHOPPING))

        overview = session.budget_overview()

        assert overview.allocation.needs_amount == 50000
        assert overview.spending.total_spent == Decimal("18000")
        assert overview.health_percent == pytest.approx(60.0)
        assert overview.remaining_limit == Decimal("12000")

    def test_reset(self):
        """Test that reset clears everything."""
        session, storage, audit_storage = make_session(make_profile(base=5000))
        asyncio.run(session.add_transaction(10, TransactionType.EXPENSE, Category.FOOD))

        asyncio.run(session.reset())

        assert session.profile == Profile.default()
        assert asyncio.run(storage.load_profile()) is None
        assert session.transactions == ()
        assert asyncio.run(storage.list_transactions()) == []
        assert event_types(audit_storage)[-1] == AuditEventType.DATA_RESET


class TestReadOnlyFigures:
    """Tests for projection, investment and pay figures."""

    def test_wealth_projection_uses_configured_horizon(self, monkeypatch):
        """Test the horizon comes from settings."""
        monkeypatch.setenv("PROJECTION_MONTHS", "36")
        session, _, _ = make_session(make_profile())

        snapshots = session.wealth_projection(annual_hike_percent=0.0)

        assert len(snapshots) == 4
        assert snapshots[0].projected_balance == 16000

    def test_default_investment_plan(self):
        """Test the simulator defaults."""
        session, _, _ = make_session()

        params = session.default_investment_params()
        plan = session.investment_plan()

        assert params == InvestmentParams()
        assert len(plan) == params.years + 1
        assert plan[0].balance == params.principal

    def test_monthly_take_home(self):
        """Test the pay estimate through the shell."""
        session, _, _ = make_session()
        assert session.monthly_take_home(1_200_000).monthly_net == 89041


class TestAdviceFlow:
    """Tests for the advice collaborator boundary."""

    CURRENT = InvestmentParams(principal=5000, monthly_contribution=500,
                               annual_rate_percent=8, years=3)

    def test_advice_replaces_params(self):
        """Test that usable advice is applied."""
        suggested = InvestmentParams(principal=100000, monthly_contribution=20000,
                                     annual_rate_percent=12, years=10, name="Nifty 50 SIP")
        provider = StaticAdviceProvider(InvestmentAdvice(
            explanation="Index funds suit a 10 year horizon.",
            params=suggested,
        ))
        session, _, audit_storage = make_session(advice_provider=provider)

        explanation, params = asyncio.run(
            session.request_advice("SIP 20k in Nifty for 10 years", self.CURRENT)
        )

        assert explanation == "Index funds suit a 10 year horizon."
        assert params == suggested
        assert provider.prompts == ["SIP 20k in Nifty for 10 years"]
        assert event_types(audit_storage)[-1] == AuditEventType.ADVICE_RECEIVED

    def test_advice_without_params_keeps_current(self):
        """Test an explanation-only answer."""
        provider = StaticAdviceProvider(InvestmentAdvice(explanation="Keep going."))
        session, _, _ = make_session(advice_provider=provider)

        explanation, params = asyncio.run(session.request_advice("hi", self.CURRENT))

        assert explanation == "Keep going."
        assert params is self.CURRENT

    def test_failure_returns_fallback(self):
        """Test that a failing service never changes the inputs."""
        session, _, audit_storage = make_session(advice_provider=FailingAdviceProvider())

        explanation, params = asyncio.run(session.request_advice("anything", self.CURRENT))

        assert explanation == ADVICE_FALLBACK_MESSAGE
        assert params is self.CURRENT
        events = asyncio.run(audit_storage.get_recent_events())
        assert events[0].event_type == AuditEventType.ADVICE_FAILED
        assert events[0].error_message == "upstream timeout"

    def test_unexpected_failure_returns_fallback(self):
        """Test that errors outside the advice layer also fall back."""
        session, _, audit_storage = make_session(advice_provider=UnreachableAdviceProvider())

        explanation, params = asyncio.run(session.request_advice("anything", self.CURRENT))

        assert explanation == ADVICE_FALLBACK_MESSAGE
        assert params is self.CURRENT
        events = asyncio.run(audit_storage.get_recent_events())
        assert events[0].event_type == AuditEventType.ADVICE_FAILED
        assert "network down" in events[0].error_message

    def test_no_provider_returns_fallback(self):
        """Test the session without an advice service."""
        session, _, _ = make_session()

        explanation, params = asyncio.run(session.request_advice("anything", self.CURRENT))

        assert explanation == ADVICE_FALLBACK_MESSAGE
        assert params is self.CURRENT


class TestAuditLogger:
    """Tests for audit persistence failures."""

    def test_failed_audit_write_does_not_break_action(self):
        """Test that the user action succeeds when auditing fails."""
        session = FinanceSession(
            storage=InMemoryFinanceStorage(),
            audit_logger=AuditLogger(FailingAuditStorage()),
            settings=Settings(),
            clock=lambda: NOW,
        )

        transaction = asyncio.run(session.add_transaction(
            250, TransactionType.EXPENSE, Category.FOOD,
        ))

        assert session.transactions == (transaction,)

    def test_log_reports_storage_failure(self):
        """Test the return value of a failed write."""

        logger = AuditLogger(FailingAuditStorage())
        event = AuditEventBuilder.data_reset(correlation_id=create_correlation_id())

        assert asyncio.run(logger.log(event)) is False

    def test_log_without_storage(self):
        """Test local-only logging."""

        logger = AuditLogger()
        event = AuditEventBuilder.data_reset(correlation_id=create_correlation_id())

        assert asyncio.run(logger.log(event)) is True


class TestSettings:
    """Tests for configuration checks."""

    def test_defaults_are_valid(self):
        """Test the startup check with no overrides."""
        results = validate_all_settings()
        assert results == {
            "projection": True,
            "budget": True,
            "investment": True,
            "app": True,
        }

    def test_bad_default_ratios_are_reported(self, monkeypatch):
        """Test that default ratios must sum to 100."""
        monkeypatch.setenv("BUDGET_DEFAULT_NEEDS_PERCENT", "60")

        results = validate_all_settings()

        assert results["budget"] is False
        assert "must sum to 100" in results["budget_error"]


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
