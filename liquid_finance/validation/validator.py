"""
Two-Stage Profile Validation

Runs before the shell persists a profile the user edited.

STAGE 1 - SCHEMA VALIDATION:
- Budget ratios must add up to 100
- A set-up profile needs an income to project from

STAGE 2 - SEMANTIC VALIDATION:
- Spending limit above what the balance supports
- Recurring expenses that eat the whole limit
- Savings ratio below the configured floor
- Scheduled income change with no new income

Stage 2 only runs when stage 1 passes. Errors block the save,
warnings are shown to the user.

IMPORTANT: Validation NEVER silently fixes issues.
It reports them for human review.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from liquid_finance.config import BudgetSettings, get_settings
from liquid_finance.engine.budget import derive_limit
from liquid_finance.models.profile import Profile
from liquid_finance.models.validation import ValidationIssue, ValidationResult


class ProfileValidator:
    """Validates a profile through a two-stage pipeline."""

    def __init__(self, settings: Optional[BudgetSettings] = None):
        self._settings = settings or get_settings().budget

    def _validate_schema(
        self,
        profile: Profile,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: Schema validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        ratios = profile.budget.ratios

        if ratios.total != 100:
            issues.append(ValidationIssue(
                field="budget.ratios",
                issue_type="inconsistent",
                message=(
                    f"Needs, wants and savings add up to {ratios.total}%, "
                    "they must add up to 100%"
                ),
                severity="error",
                suggested_fix="Adjust one of the percentages",
            ))

        if profile.is_setup and profile.monthly_income == 0:
            issues.append(ValidationIssue(
                field="monthly_income",
                issue_type="missing",
                message="Monthly income is zero, projections will stay flat",
                severity="warning",
                suggested_fix="Enter your monthly take-home income",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def _validate_semantic(
        self,
        profile: Profile,
        current_balance: Decimal,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: Semantic validation.

        Returns: (is_valid, list_of_issues)
        """
        issues = []
        budget = profile.budget
        ratios = budget.ratios

        supported = derive_limit(
            current_balance,
            ratios.needs_percent,
            ratios.wants_percent,
        )
        if budget.monthly_limit > supported:
            issues.append(ValidationIssue(
                field="budget.monthly_limit",
                issue_type="suspicious_value",
                message=(
                    f"Monthly limit ({budget.monthly_limit:,}) is above what your "
                    f"balance supports ({supported:,})"
                ),
                severity="warning",
                suggested_fix="Lower the limit or recalibrate your balance",
            ))

        if budget.recurring_expenses > budget.monthly_limit:
            issues.append(ValidationIssue(
                field="budget.recurring_expenses",
                issue_type="inconsistent",
                message="Recurring expenses exceed the monthly limit",
                severity="warning",
                suggested_fix="Please verify both figures",
            ))

        if ratios.savings_percent < self._settings.min_savings_percent:
            issues.append(ValidationIssue(
                field="budget.ratios.savings_percent",
                issue_type="suspicious_value",
                message=(
                    f"Savings ratio ({ratios.savings_percent}%) is below "
                    f"{self._settings.min_savings_percent}%"
                ),
                severity="warning",
            ))

        event = profile.future_income
        if event.enabled and event.new_monthly_income == 0:
            issues.append(ValidationIssue(
                field="future_income.new_monthly_income",
                issue_type="missing",
                message="A future income change is enabled but the new income is zero",
                severity="warning",
                suggested_fix="Enter the expected income or disable the change",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate(
        self,
        profile: Profile,
        current_balance: Decimal,
        checked_at: datetime,
    ) -> ValidationResult:
        """
        Run full two-stage validation pipeline.

        Args:
            profile: The profile about to be saved
            current_balance: Balance including transactions, for limit checks
            checked_at: Timestamp recorded on the result

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        schema_valid, schema_issues = self._validate_schema(profile)
        all_issues.extend(schema_issues)

        semantic_valid = False
        if schema_valid:
            semantic_valid, semantic_issues = self._validate_semantic(
                profile, current_balance
            )
            all_issues.extend(semantic_issues)

        warnings = [
            issue.message for issue in all_issues if issue.severity == "warning"
        ]

        return ValidationResult(
            checked_at=checked_at,
            schema_valid=schema_valid,
            semantic_valid=semantic_valid,
            is_valid=schema_valid and semantic_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_user_friendly_summary(
        self,
        result: ValidationResult,
    ) -> str:
        """Generate a user-friendly summary of validation results."""
        if result.is_valid and not result.warnings:
            return "✅ All checks passed!"

        lines = []

        if result.has_errors:
            lines.append("❌ Your settings could not be saved:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"   • {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"     💡 {issue.suggested_fix}")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("⚠️ Please double-check the following:")
            for warning in result.warnings:
                lines.append(f"   • {warning}")

        return "\n".join(lines)
