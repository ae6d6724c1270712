"""
Report Models

Read-only results handed to the presentation layer: validation outcomes
for a purchase that is about to be entered, and per-account views of the
ledger with amounts already rendered for fixed-width columns.
"""

from datetime import date, datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field

from splitflow.models.money import CentsAmount, SignedCentsAmount


# =============================================================================
# VALIDATION MODELS
# =============================================================================

class ValidationIssue(BaseModel):
    """A single validation issue found."""

    field: str = Field(
        ...,
        description="Field with the issue"
    )
    issue_type: str = Field(
        ...,
        description="Type of issue (e.g., 'unknown_account', 'invalid_value', 'future_date')"
    )
    message: str = Field(
        ...,
        description="Human-readable description of the issue"
    )
    severity: str = Field(
        ...,
        pattern="^(error|warning|info)$",
        description="Issue severity"
    )
    suggested_fix: Optional[str] = Field(
        default=None,
        description="Suggested fix if available"
    )


class ValidationResult(BaseModel):
    """
    Result of the two-stage purchase validation.

    Stage 1: References (known accounts and tag, non-empty split)
    Stage 2: Plausibility (dates and amounts)
    """

    validated_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )

    references_valid: bool = Field(
        ...,
        description="Did reference validation pass?"
    )
    plausibility_valid: bool = Field(
        ...,
        description="Did plausibility validation pass?"
    )
    is_valid: bool = Field(
        ...,
        description="Overall validation result"
    )

    issues: list[ValidationIssue] = Field(
        default_factory=list,
        description="All validation issues found"
    )
    warnings: list[str] = Field(
        default_factory=list,
        description="Non-blocking warnings"
    )

    @property
    def has_errors(self) -> bool:
        """Check if there are any error-level issues."""
        return any(issue.severity == "error" for issue in self.issues)

    @property
    def error_count(self) -> int:
        """Count error-level issues."""
        return sum(1 for issue in self.issues if issue.severity == "error")


# =============================================================================
# LEDGER VIEWS
# =============================================================================

class TransactionRow(BaseModel):
    """One ledger entry as seen from one account."""

    index: int = Field(ge=0)
    account: str
    date: date
    date_text: str
    kind: str
    desc: str
    accounts: list[str]

    amount: CentsAmount
    internal_delta: SignedCentsAmount
    external_delta: SignedCentsAmount
    internal_flow: SignedCentsAmount

    amount_text: str
    internal_delta_text: str
    external_delta_text: str
    internal_flow_text: str


class AccountSummary(BaseModel):
    """Balances and current flow for one account."""

    account: str
    as_of: date
    transaction_count: int = Field(ge=0)

    internal_balance: SignedCentsAmount
    external_balance: SignedCentsAmount

    flow_by_tag: dict[str, CentsAmount] = Field(default_factory=dict)
    total_flow: CentsAmount
