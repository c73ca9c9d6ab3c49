"""
Session Orchestrator for Liquid Finance

This module is the stateful shell around the pure calculation engine.
It owns the loaded profile and transactions and defines the flows for:
1. Recording transactions and calibrating the balance
2. Editing the budget (ratio edits, feedback loop)
3. Reading figures (ledger, budget overview, projection, investments, pay)
4. Asking the advice collaborator for an investment plan

DESIGN DECISION: The orchestrator enforces the boundaries:
- The engine never sees the clock, settings or storage; the shell passes them in
- Every change is persisted before the in-memory state moves on
- Every user action is audited
- A failing advice service never changes the simulator inputs
"""

from collections.abc import Callable
from datetime import date, datetime
from decimal import Decimal
from typing import Optional, Union
from uuid import UUID

from liquid_finance.audit import AuditLogger, create_correlation_id
from liquid_finance.audit.logger import configure_logging
from liquid_finance.config import Settings, get_settings
from liquid_finance.engine import (
    aggregate,
    allocate,
    apply_feedback,
    budget_health,
    calibrate_base_balance,
    daily_expenses,
    derive_limit,
    estimate_net_income,
    net_transaction_sum,
    project,
    rebalance_ratios,
    simulate_params,
    spending_by_bucket,
)
from liquid_finance.models import (
    BudgetBucket,
    BudgetOverview,
    BudgetRatios,
    BudgetState,
    Category,
    InvestmentParams,
    InvestmentSnapshot,
    LedgerSummary,
    NetIncomeBreakdown,
    Profile,
    ProjectionSnapshot,
    Sentiment,
    Transaction,
    TransactionType,
    ValidationResult,
)
from liquid_finance.services.advice import (
    ADVICE_FALLBACK_MESSAGE,
    AdviceError,
    AdviceProvider,
)
from liquid_finance.services.storage import (
    AuditStorageInterface,
    FinanceStorageInterface,
    InMemoryAuditStorage,
    InMemoryFinanceStorage,
    StorageError,
)
from liquid_finance.validation import InvalidInputError, ProfileValidator
from liquid_finance.validation.checks import Number

Clock = Callable[[], datetime]


class FinanceSession:
    """
    Holds one user's state and routes every calculation through the engine.

    Flow:
    1. load() pulls profile and transactions from storage
    2. Mutating calls compute the new state with the engine, persist it,
       then audit it
    3. Read calls are synchronous and never touch storage
    """

    def __init__(
        self,
        storage: FinanceStorageInterface,
        audit_logger: Optional[AuditLogger] = None,
        advice_provider: Optional[AdviceProvider] = None,
        settings: Optional[Settings] = None,
        clock: Optional[Clock] = None,
        validator: Optional[ProfileValidator] = None,
    ):
        settings = settings or get_settings()
        self._storage = storage
        self._audit_logger = audit_logger
        self._advice_provider = advice_provider
        self._budget_settings = settings.budget
        self._projection_settings = settings.projection
        self._investment_settings = settings.investment
        self._currency = settings.app.default_currency
        self._clock = clock or datetime.now
        self._validator = validator or ProfileValidator(self._budget_settings)

        self._profile = self.default_profile()
        self._transactions: list[Transaction] = []

    # -------------------------------------------------------------------------
    # State
    # -------------------------------------------------------------------------

    @property
    def profile(self) -> Profile:
        return self._profile

    @property
    def transactions(self) -> tuple[Transaction, ...]:
        """Recorded transactions, newest first."""
        return tuple(self._transactions)

    @property
    def current_balance(self) -> Decimal:
        return self._profile.base_balance + net_transaction_sum(self._transactions)

    def default_profile(self) -> Profile:
        """Profile for a user who has not completed setup, from configuration."""
        s = self._budget_settings
        return Profile(
            currency=self._currency,
            budget=BudgetState(
                ratios=BudgetRatios(
                    needs_percent=s.default_needs_percent,
                    wants_percent=s.default_wants_percent,
                    savings_percent=s.default_savings_percent,
                ),
                monthly_limit=s.default_monthly_limit,
            ),
        )

    async def load(self) -> Profile:
        """Load profile and transactions; the default profile when none was saved."""
        correlation_id = create_correlation_id()

        try:
            profile = await self._storage.load_profile()
            transactions = await self._storage.list_transactions()
        except StorageError as e:
            await self._audit_storage_error("storage_load_failed", e, correlation_id)
            raise

        self._profile = profile if profile is not None else self.default_profile()
        self._transactions = transactions

        if self._audit_logger:
            await self._audit_logger.log_profile_loaded(
                is_setup=self._profile.is_setup,
                transaction_count=len(transactions),
                correlation_id=correlation_id,
            )

        return self._profile

    async def _audit_storage_error(
        self,
        error_type: str,
        error: StorageError,
        correlation_id: UUID,
    ) -> None:
        if self._audit_logger:
            await self._audit_logger.log_error(
                error_type=error_type,
                error_message=str(error),
                correlation_id=correlation_id,
            )

    async def _replace_profile(self, profile: Profile, correlation_id: UUID) -> None:
        try:
            await self._storage.save_profile(profile)
        except StorageError as e:
            await self._audit_storage_error("storage_save_failed", e, correlation_id)
            raise
        self._profile = profile

    # -------------------------------------------------------------------------
    # Ledger flows
    # -------------------------------------------------------------------------

    async def add_transaction(
        self,
        amount: Number,
        kind: TransactionType,
        category: Category,
        note: Optional[str] = None,
        timestamp: Optional[datetime] = None,
    ) -> Transaction:
        """
        Record a transaction.

        Raises:
            pydantic.ValidationError: amount negative or malformed
            DuplicateError: storage already holds the id
            StorageError: the write failed (audited, then re-raised)
        """
        correlation_id = create_correlation_id()

        transaction = Transaction(
            amount=amount,
            kind=kind,
            category=category,
            timestamp=timestamp or self._clock(),
            note=note,
        )
        try:
            await self._storage.append_transaction(transaction)
        except StorageError as e:
            await self._audit_storage_error("storage_append_failed", e, correlation_id)
            raise
        self._transactions.insert(0, transaction)

        if self._audit_logger:
            await self._audit_logger.log_transaction_added(
                transaction_id=transaction.id,
                kind=transaction.kind.value,
                category=transaction.category.value,
                amount=str(transaction.amount),
                correlation_id=correlation_id,
            )

        return transaction

    async def calibrate_balance(self, observed_balance: Number) -> Decimal:
        """
        Match the derived balance to a real bank balance.

        Only the base balance changes; recorded transactions stay as they are.

        Returns:
            The new base balance
        """
        correlation_id = create_correlation_id()

        new_base = calibrate_base_balance(observed_balance, self._transactions)
        await self._replace_profile(
            self._profile.model_copy(update={"base_balance": new_base}),
            correlation_id,
        )

        if self._audit_logger:
            await self._audit_logger.log_balance_calibrated(
                observed_balance=str(observed_balance),
                new_base_balance=str(new_base),
                correlation_id=correlation_id,
            )

        return new_base

    # -------------------------------------------------------------------------
    # Profile and budget flows
    # -------------------------------------------------------------------------

    async def save_profile(self, profile: Profile) -> ValidationResult:
        """
        Validate and persist a full profile replacement.

        Returns:
            The validation result (warnings do not block the save)

        Raises:
            InvalidInputError: validation found errors; nothing was saved
        """
        correlation_id = create_correlation_id()

        balance = profile.base_balance + net_transaction_sum(self._transactions)
        result = self._validator.validate(profile, balance, self._clock())

        if result.has_errors:
            if self._audit_logger:
                await self._audit_logger.log_validation_failed(
                    issues=[
                        {"field": i.field, "type": i.issue_type, "message": i.message}
                        for i in result.issues
                    ],
                    correlation_id=correlation_id,
                )
            raise InvalidInputError(
                "profile",
                profile.name or "profile",
                self._validator.get_user_friendly_summary(result),
            )

        await self._replace_profile(profile, correlation_id)

        if self._audit_logger:
            await self._audit_logger.log_profile_saved(
                is_setup=profile.is_setup,
                correlation_id=correlation_id,
            )

        return result

    async def submit_feedback(self, sentiment: Sentiment) -> str:
        """
        Run the feedback loop on the current budget.

        Returns:
            Description of what changed, "No changes needed" for GOOD
        """
        correlation_id = create_correlation_id()

        old_budget = self._profile.budget
        new_budget, action = apply_feedback(
            old_budget,
            sentiment,
            now=self._clock(),
            strict_guards=self._budget_settings.strict_feedback_guards,
        )

        if new_budget is old_budget:
            return action

        await self._replace_profile(
            self._profile.model_copy(update={"budget": new_budget}),
            correlation_id,
        )

        if self._audit_logger:
            await self._audit_logger.log_feedback_applied(
                sentiment=sentiment.value,
                action=action,
                old_limit=old_budget.monthly_limit,
                new_limit=new_budget.monthly_limit,
                correlation_id=correlation_id,
            )

        return action

    async def edit_ratio(
        self,
        bucket: BudgetBucket,
        value: int,
        balance: Optional[Number] = None,
    ) -> BudgetState:
        """
        Edit the needs or wants percentage and re-derive the limit.

        Args:
            bucket: NEEDS or WANTS
            value: Requested percentage, clamped into [0, 100]
            balance: Balance the limit is derived from, defaults to the
                current balance

        Returns:
            The new budget state
        """
        correlation_id = create_correlation_id()

        ratios = rebalance_ratios(self._profile.budget.ratios, bucket, value)
        reference = self.current_balance if balance is None else balance
        limit = derive_limit(reference, ratios.needs_percent, ratios.wants_percent)

        new_budget = self._profile.budget.model_copy(update={
            "ratios": ratios,
            "monthly_limit": max(limit, 0),
        })
        await self._replace_profile(
            self._profile.model_copy(update={"budget": new_budget}),
            correlation_id,
        )

        if self._audit_logger:
            await self._audit_logger.log_ratios_rebalanced(
                bucket=bucket.value,
                requested=value,
                ratios=ratios.model_dump(),
                monthly_limit=new_budget.monthly_limit,
                correlation_id=correlation_id,
            )

        return new_budget

    async def reset(self) -> None:
        """Delete everything and start from the default profile."""
        correlation_id = create_correlation_id()

        try:
            await self._storage.reset()
        except StorageError as e:
            await self._audit_storage_error("storage_reset_failed", e, correlation_id)
            raise
        self._profile = self.default_profile()
        self._transactions = []

        if self._audit_logger:
            await self._audit_logger.log_data_reset(correlation_id=correlation_id)

    # -------------------------------------------------------------------------
    # Read-only figures
    # -------------------------------------------------------------------------

    def ledger_summary(
        self,
        reference: Optional[Union[date, datetime]] = None,
    ) -> LedgerSummary:
        return aggregate(
            self._profile.base_balance,
            self._transactions,
            reference or self._clock(),
            category_limit=self._budget_settings.category_breakdown_limit,
        )

    def daily_expense_series(
        self,
        reference: Optional[Union[date, datetime]] = None,
    ) -> list[tuple[date, Decimal]]:
        return daily_expenses(
            self._transactions,
            reference or self._clock(),
            days=self._budget_settings.daily_window_days,
        )

    def budget_overview(
        self,
        reference: Optional[Union[date, datetime]] = None,
    ) -> BudgetOverview:
        """
        Targets from the base balance next to this month's actual spending.

        Targets use the base balance, the calibration anchor, rather than
        the transaction-adjusted balance.
        """
        budget = self._profile.budget
        spending = spending_by_bucket(self._transactions, reference or self._clock())
        return BudgetOverview(
            allocation=allocate(self._profile.base_balance, budget.ratios),
            spending=spending,
            monthly_limit=budget.monthly_limit,
            health_percent=budget_health(spending.total_spent, budget.monthly_limit),
        )

    def wealth_projection(
        self,
        annual_hike_percent: Optional[float] = None,
    ) -> list[ProjectionSnapshot]:
        if annual_hike_percent is None:
            annual_hike_percent = self._projection_settings.annual_hike_percent
        return project(
            self._profile,
            months=self._projection_settings.months,
            annual_hike_percent=annual_hike_percent,
        )

    def default_investment_params(self) -> InvestmentParams:
        s = self._investment_settings
        return InvestmentParams(
            principal=s.default_principal,
            monthly_contribution=s.default_monthly_contribution,
            annual_rate_percent=s.default_annual_rate_percent,
            years=s.default_years,
        )

    def investment_plan(
        self,
        params: Optional[InvestmentParams] = None,
    ) -> list[InvestmentSnapshot]:
        return simulate_params(params or self.default_investment_params())

    def monthly_take_home(self, annual_fixed_pay: Number) -> NetIncomeBreakdown:
        return estimate_net_income(annual_fixed_pay)

    # -------------------------------------------------------------------------
    # Advice collaborator
    # -------------------------------------------------------------------------

    async def request_advice(
        self,
        prompt: str,
        current_params: InvestmentParams,
    ) -> tuple[str, InvestmentParams]:
        """
        Ask the advice service for a plan.

        Returns:
            (explanation, params). On failure the explanation is the fixed
            fallback message and params are `current_params` unchanged.
            Advice without parameters keeps `current_params` as well.
        """
        correlation_id = create_correlation_id()

        if self._advice_provider is None:
            if self._audit_logger:
                await self._audit_logger.log_advice_failed(
                    error_message="No advice provider configured",
                    correlation_id=correlation_id,
                )
            return ADVICE_FALLBACK_MESSAGE, current_params

        try:
            advice = await self._advice_provider.suggest_investment(
                prompt,
                self._profile,
                list(self._transactions),
            )
        except AdviceError as e:
            if self._audit_logger:
                await self._audit_logger.log_advice_failed(
                    error_message=str(e),
                    correlation_id=correlation_id,
                )
            return ADVICE_FALLBACK_MESSAGE, current_params
        except Exception as e:
            if self._audit_logger:
                await self._audit_logger.log_advice_failed(
                    error_message=f"{type(e).__name__}: {e}",
                    correlation_id=correlation_id,
                )
            return ADVICE_FALLBACK_MESSAGE, current_params

        if advice.params is None:
            return advice.explanation, current_params

        if self._audit_logger:
            await self._audit_logger.log_advice_received(
                plan_name=advice.params.name,
                correlation_id=correlation_id,
            )

        return advice.explanation, advice.params


def create_app_components(
    storage: Optional[FinanceStorageInterface] = None,
    audit_storage: Optional[AuditStorageInterface] = None,
    advice_provider: Optional[AdviceProvider] = None,
    clock: Optional[Clock] = None,
) -> FinanceSession:
    """
    Factory function to create a ready-to-load session.

    Args:
        storage: Persistence backend, in-memory when omitted
        audit_storage: Audit backend, in-memory when omitted
        advice_provider: Optional advice service
        clock: Source of "now", the system clock when omitted

    Returns:
        FinanceSession (call `await session.load()` before use)
    """
    settings = get_settings()
    configure_logging(settings.app.log_level)

    audit_logger = AuditLogger(audit_storage or InMemoryAuditStorage())

    return FinanceSession(
        storage=storage or InMemoryFinanceStorage(),
        audit_logger=audit_logger,
        advice_provider=advice_provider,
        settings=settings,
        clock=clock,
    )
