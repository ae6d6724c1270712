"""
Tests for purchase validation

Dates are relative to today so the plausibility window is stable.
"""

from datetime import date, timedelta

import pytest

from splitflow.validation import PurchaseValidator


@pytest.fixture
def validator(accounts, tags, app_settings) -> PurchaseValidator:
    return PurchaseValidator(accounts, tags, app_settings)


def issue_types(result) -> set:
    return {(issue.field, issue.issue_type, issue.severity) for issue in result.issues}


class TestReferenceStage:
    """Tests for stage 1."""

    def test_valid_purchase(self, validator, make_purchase):
        """Test a purchase with nothing to report."""
        result = validator.validate(make_purchase(date.today(), 1000))

        assert result.is_valid
        assert result.references_valid
        assert result.plausibility_valid
        assert result.issues == []
        assert validator.get_summary(result) == "All checks passed."

    def test_unknown_buyer(self, validator, make_purchase):
        """Test that an unknown buyer blocks the purchase."""
        result = validator.validate(make_purchase(date.today(), 1000, buyer="dave"))

        assert not result.is_valid
        assert not result.references_valid
        assert ("buyer", "unknown_account", "error") in issue_types(result)

    def test_unknown_consumer(self, validator, make_purchase):
        """Test that every consumer must be known."""
        result = validator.validate(
            make_purchase(date.today(), 1000, consumers={"alice": 1, "dave": 1})
        )
        assert ("consumers", "unknown_account", "error") in issue_types(result)
        assert result.error_count == 1

    def test_unknown_tag(self, validator, make_purchase):
        """Test that the tag must be configured."""
        result = validator.validate(make_purchase(date.today(), 1000, tag="travel"))
        assert ("tag", "unknown_tag", "error") in issue_types(result)

    def test_no_consumers(self, validator, make_purchase):
        """Test that a purchase must be split among someone."""
        result = validator.validate(make_purchase(date.today(), 1000, consumers={}))
        assert ("consumers", "missing", "error") in issue_types(result)

    def test_zero_amount(self, validator, make_purchase):
        """Test that free purchases are refused."""
        result = validator.validate(make_purchase(date.today(), 0))
        assert ("amount", "invalid_value", "error") in issue_types(result)

    def test_stage_two_skipped_on_errors(self, validator, make_purchase):
        """Test that plausibility is not checked for broken references."""
        far_future = date.today() + timedelta(days=365)
        result = validator.validate(make_purchase(far_future, 1000, tag="travel"))

        assert not result.plausibility_valid
        assert all(issue.issue_type != "future_date" for issue in result.issues)

    def test_missing_description_is_warning(self, validator, make_purchase):
        """Test that an empty description does not block the purchase."""
        result = validator.validate(make_purchase(date.today(), 1000, desc="   "))

        assert result.is_valid
        assert result.warnings == ["Purchase has no description"]


class TestPlausibilityStage:
    """Tests for stage 2."""

    def test_future_date(self, validator, make_purchase):
        """Test that a far-future date is flagged but allowed."""
        day = date.today() + timedelta(days=30)
        result = validator.validate(make_purchase(day, 1000))

        assert result.is_valid
        assert ("date", "future_date", "warning") in issue_types(result)

    def test_near_future_within_tolerance(self, validator, make_purchase):
        """Test that a date inside the tolerance is fine."""
        result = validator.validate(make_purchase(date.today() + timedelta(days=7), 1000))
        assert result.issues == []

    def test_large_amount(self, validator, make_purchase):
        """Test that unusually large amounts are flagged."""
        result = validator.validate(make_purchase(date.today(), 2_000_000))

        assert result.is_valid
        assert ("amount", "suspicious_value", "warning") in issue_types(result)
        assert "20,000.00" in result.warnings[0]

    def test_buyer_not_consumer_is_info(self, validator, make_purchase):
        """Test that paying for others only is noted, not warned about."""
        result = validator.validate(
            make_purchase(date.today(), 1000, consumers={"bob": 1, "carol": 1})
        )

        assert result.is_valid
        assert result.warnings == []
        assert ("buyer", "buyer_not_consumer", "info") in issue_types(result)


class TestSummary:
    """Tests for the text summary."""

    def test_errors_and_fix(self, validator, make_purchase):
        """Test that errors come with their suggested fixes."""
        result = validator.validate(make_purchase(date.today(), 1000, buyer="dave"))
        summary = validator.get_summary(result)

        assert summary.startswith("The purchase cannot be entered:")
        assert "Buyer 'dave' is not a known account" in summary
        assert "Choose one of: alice, bob, carol" in summary

    def test_warnings_only(self, validator, make_purchase):
        """Test the summary of an accepted purchase with warnings."""
        result = validator.validate(make_purchase(date.today(), 1000, desc=""))
        summary = validator.get_summary(result)

        assert summary.startswith("Please verify the following:")
        assert "Purchase has no description" in summary


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
