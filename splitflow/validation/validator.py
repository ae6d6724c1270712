"""
Two-Stage Purchase Validation

The ledger core assumes every purchase it receives refers to known
accounts and a known tag, and splits among at least one consumer. This
module is where those assumptions are checked, before a purchase ever
reaches the ledger.

STAGE 1 - REFERENCES:
- Buyer, consumers and tag are registered
- At least one consumer
- Non-zero amount

STAGE 2 - PLAUSIBILITY (only if stage 1 passed):
- Date not too far in the future
- Amount not absurdly large
- Buyer not among the consumers (allowed, but worth a note)

Validation NEVER fixes anything. It reports issues for the user to act on.
"""

from datetime import timedelta
from typing import Optional

from splitflow.config import AppSettings, get_settings
from splitflow.models.dates import format_date, today
from splitflow.models.money import CentsAmount
from splitflow.models.registry import Accounts, Tags
from splitflow.models.reports import ValidationIssue, ValidationResult
from splitflow.models.transaction import Purchase


class PurchaseValidator:
    """
    Validates a purchase against the account and tag registries.
    """

    def __init__(
        self,
        accounts: Accounts,
        tags: Tags,
        settings: Optional[AppSettings] = None,
    ):
        self._accounts = accounts
        self._tags = tags
        self._settings = settings or get_settings().app

    def _validate_references(
        self,
        purchase: Purchase,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 1: every name must be known and the split must be possible.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        if purchase.buyer not in self._accounts:
            issues.append(ValidationIssue(
                field="buyer",
                issue_type="unknown_account",
                message=f"Buyer '{purchase.buyer}' is not a known account",
                severity="error",
                suggested_fix=f"Choose one of: {', '.join(self._accounts.names())}",
            ))

        if len(purchase.consumers) == 0:
            issues.append(ValidationIssue(
                field="consumers",
                issue_type="missing",
                message="A purchase needs at least one consumer",
                severity="error",
            ))

        for account in purchase.consumers.accounts():
            if account not in self._accounts:
                issues.append(ValidationIssue(
                    field="consumers",
                    issue_type="unknown_account",
                    message=f"Consumer '{account}' is not a known account",
                    severity="error",
                ))

        if purchase.tag not in self._tags:
            issues.append(ValidationIssue(
                field="tag",
                issue_type="unknown_tag",
                message=f"Tag '{purchase.tag}' is not defined",
                severity="error",
                suggested_fix="Add the tag to the tag registry first",
            ))

        if not purchase.amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="invalid_value",
                message="Amount must be greater than zero",
                severity="error",
            ))

        if not purchase.desc:
            issues.append(ValidationIssue(
                field="desc",
                issue_type="missing",
                message="Purchase has no description",
                severity="warning",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def _validate_plausibility(
        self,
        purchase: Purchase,
    ) -> tuple[bool, list[ValidationIssue]]:
        """
        Stage 2: values that are allowed but probably mistyped.

        Returns: (is_valid, list_of_issues)
        """
        issues = []

        max_future_date = today() + timedelta(days=self._settings.future_date_tolerance_days)
        if purchase.date > max_future_date:
            issues.append(ValidationIssue(
                field="date",
                issue_type="future_date",
                message=f"Purchase date ({format_date(purchase.date)}) is in the future",
                severity="warning",
                suggested_fix="Please verify the date is correct",
            ))

        max_amount = CentsAmount(self._settings.max_purchase_cents)
        if purchase.amount > max_amount:
            issues.append(ValidationIssue(
                field="amount",
                issue_type="suspicious_value",
                message=f"Amount ({purchase.amount.as_string_exact(separators=True)}) seems unusually high",
                severity="warning",
                suggested_fix="Please verify this amount is correct",
            ))

        if purchase.buyer not in purchase.consumers:
            issues.append(ValidationIssue(
                field="buyer",
                issue_type="buyer_not_consumer",
                message=f"'{purchase.buyer}' pays but does not share the cost",
                severity="info",
            ))

        is_valid = not any(issue.severity == "error" for issue in issues)

        return is_valid, issues

    def validate(self, purchase: Purchase) -> ValidationResult:
        """
        Run the two-stage validation pipeline.

        Returns:
            ValidationResult with all issues found
        """
        all_issues = []

        references_valid, reference_issues = self._validate_references(purchase)
        all_issues.extend(reference_issues)

        # Only run stage 2 if stage 1 passes
        plausibility_valid = False
        if references_valid:
            plausibility_valid, plausibility_issues = self._validate_plausibility(purchase)
            all_issues.extend(plausibility_issues)

        warnings = [issue.message for issue in all_issues if issue.severity == "warning"]

        return ValidationResult(
            references_valid=references_valid,
            plausibility_valid=plausibility_valid,
            is_valid=references_valid and plausibility_valid,
            issues=all_issues,
            warnings=warnings,
        )

    def get_summary(self, result: ValidationResult) -> str:
        """Plain-text summary of a validation result."""
        if result.is_valid and not result.warnings:
            return "All checks passed."

        lines = []

        if result.has_errors:
            lines.append("The purchase cannot be entered:")
            for issue in result.issues:
                if issue.severity == "error":
                    lines.append(f"  - {issue.message}")
                    if issue.suggested_fix:
                        lines.append(f"    ({issue.suggested_fix})")

        if result.warnings:
            if lines:
                lines.append("")
            lines.append("Please verify the following:")
            for warning in result.warnings:
                lines.append(f"  - {warning}")

        return "\n".join(lines)
