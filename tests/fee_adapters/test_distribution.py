"""
Fee Distribution Tests.

============================================================
PURPOSE
============================================================
Tests for the integer distribution split and the validation
of distribution percentages.

TEST CATEGORIES:
- Percentage validation
- Exact splits and residual assignment
- Role aggregation

============================================================
"""

import pytest

from fee_adapters import (
    DistributionPercentages,
    FeeDistributionCalculator,
    InvalidDistributionError,
    RevenueRole,
    RevenueSplit,
    split,
)
from fee_adapters.protocols.voodoo_trade import FEE_DISTRIBUTION


VOODOO_PERCENTAGES = {
    "vmxFtmLp": 30,
    "vlp": 30,
    "esVmx": 10,
    "team": 20,
    "buyAndBurn": 5,
    "buyAndAddLiquidity": 5,
}


# ============================================================
# VALIDATION TESTS
# ============================================================

class TestDistributionPercentages:
    """Tests for DistributionPercentages validation."""

    def test_valid_percentages(self):
        """Test that a partition of 100 is accepted."""
        pct = DistributionPercentages(VOODOO_PERCENTAGES)

        assert pct.categories() == list(VOODOO_PERCENTAGES)
        assert pct.shares["team"] == 20

    def test_sum_not_100_raises(self):
        """Test that percentages not summing to 100 are rejected."""
        with pytest.raises(InvalidDistributionError, match="sum to 90"):
            DistributionPercentages({"a": 50, "b": 40})

    def test_sum_over_100_raises(self):
        """Test that over-allocation is rejected."""
        with pytest.raises(InvalidDistributionError):
            DistributionPercentages({"a": 60, "b": 50})

    def test_negative_percentage_raises(self):
        """Test that a negative share is rejected even if the sum is 100."""
        with pytest.raises(InvalidDistributionError):
            DistributionPercentages({"a": -10, "b": 110})

    def test_float_percentage_raises(self):
        """Test that non-integer shares are rejected."""
        with pytest.raises(InvalidDistributionError):
            DistributionPercentages({"a": 50.0, "b": 50})

    def test_bool_percentage_raises(self):
        """Test that booleans are not accepted as integers."""
        with pytest.raises(InvalidDistributionError):
            DistributionPercentages({"a": True, "b": 99})

    def test_empty_raises(self):
        """Test that an empty distribution is rejected."""
        with pytest.raises(InvalidDistributionError):
            DistributionPercentages({})

    def test_shares_are_read_only(self):
        """Test that shares cannot be mutated after validation."""
        pct = DistributionPercentages({"a": 100})

        with pytest.raises(TypeError):
            pct.shares["a"] = 50

    def test_primary_category_is_largest(self):
        """Test primary category selection."""
        pct = DistributionPercentages({"small": 10, "big": 70, "mid": 20})

        assert pct.primary_category == "big"

    def test_primary_category_tie_uses_declaration_order(self):
        """Test that ties go to the first declared category."""
        pct = DistributionPercentages({"x": 30, "y": 30, "z": 10, "w": 30})

        assert pct.primary_category == "x"

    def test_error_carries_percentages(self):
        """Test that the error exposes the offending input."""
        with pytest.raises(InvalidDistributionError) as exc_info:
            DistributionPercentages({"a": 1})

        assert exc_info.value.percentages == {"a": 1}
        assert exc_info.value.to_dict()["percentages"] == {"a": "1"}


class TestRevenueSplit:
    """Tests for RevenueSplit role mapping."""

    def test_missing_role_raises(self):
        """Test that every category needs a role."""
        with pytest.raises(InvalidDistributionError, match="missing"):
            RevenueSplit(
                percentages=DistributionPercentages({"a": 50, "b": 50}),
                roles={"a": RevenueRole.HOLDERS},
            )

    def test_unknown_role_category_raises(self):
        """Test that roles for undeclared categories are rejected."""
        with pytest.raises(InvalidDistributionError, match="unknown"):
            RevenueSplit(
                percentages=DistributionPercentages({"a": 100}),
                roles={"a": RevenueRole.HOLDERS, "b": RevenueRole.PROTOCOL},
            )

    def test_role_percentages(self):
        """Test role percentage aggregation for Voodoo Trade."""
        assert FEE_DISTRIBUTION.role_percentage(RevenueRole.HOLDERS) == 50
        assert FEE_DISTRIBUTION.role_percentage(RevenueRole.SUPPLY_SIDE) == 30
        assert FEE_DISTRIBUTION.role_percentage(RevenueRole.PROTOCOL) == 20


# ============================================================
# SPLIT TESTS
# ============================================================

class TestSplit:
    """Tests for FeeDistributionCalculator.split."""

    def test_even_split(self):
        """Test a split with no residual."""
        amounts = split(10000, DistributionPercentages(VOODOO_PERCENTAGES))

        assert amounts == {
            "vmxFtmLp": 3000,
            "vlp": 3000,
            "esVmx": 1000,
            "team": 2000,
            "buyAndBurn": 500,
            "buyAndAddLiquidity": 500,
        }

    def test_residual_goes_to_primary(self):
        """Test that the floor residual is assigned to the largest share."""
        amounts = split(101, DistributionPercentages({"a": 30, "b": 30, "c": 40}))

        assert amounts == {"a": 30, "b": 30, "c": 41}

    def test_residual_tie_goes_to_first_declared(self):
        """Test residual assignment with tied largest shares."""
        amounts = split(7, DistributionPercentages({"a": 50, "b": 50}))

        assert amounts == {"a": 4, "b": 3}

    def test_zero_total(self):
        """Test splitting zero."""
        amounts = split(0, DistributionPercentages(VOODOO_PERCENTAGES))

        assert all(amount == 0 for amount in amounts.values())

    def test_negative_total_raises(self):
        """Test that a negative total cannot be split."""
        with pytest.raises(ValueError):
            split(-1, DistributionPercentages({"a": 100}))

    @pytest.mark.parametrize("total", [0, 1, 2, 3, 7, 99, 101, 997, 10_001, 123_456_789])
    def test_parts_sum_to_total(self, total):
        """Test that the parts always add back up to the total."""
        pct = DistributionPercentages(VOODOO_PERCENTAGES)

        amounts = split(total, pct)

        assert sum(amounts.values()) == total
        assert all(amount >= 0 for amount in amounts.values())

    def test_parts_sum_for_huge_fixed_point_total(self):
        """Test exactness far beyond float precision."""
        total = 123_456_789_123_456_789 * 10 ** 30 + 7
        pct = DistributionPercentages({"a": 33, "b": 33, "c": 34})

        amounts = split(total, pct)

        assert sum(amounts.values()) == total
        assert amounts["a"] == total * 33 // 100

    def test_split_is_deterministic(self):
        """Test that repeated splits are identical."""
        pct = DistributionPercentages(VOODOO_PERCENTAGES)

        assert split(12345, pct) == split(12345, pct)


class TestSplitByRole:
    """Tests for FeeDistributionCalculator.split_by_role."""

    def test_voodoo_roles_for_100_dollars(self):
        """Test the Voodoo Trade role split of 100.00 in cents."""
        by_role = FeeDistributionCalculator.split_by_role(10000, FEE_DISTRIBUTION)

        assert by_role[RevenueRole.SUPPLY_SIDE] == 3000
        assert by_role[RevenueRole.HOLDERS] == 5000
        assert by_role[RevenueRole.PROTOCOL] == 2000

    @pytest.mark.parametrize("total", [0, 1, 7, 13, 99, 10_007])
    def test_roles_sum_to_total(self, total):
        """Test that role amounts add up to the total."""
        by_role = FeeDistributionCalculator.split_by_role(total, FEE_DISTRIBUTION)

        assert sum(by_role.values()) == total

    def test_role_without_categories_is_zero(self):
        """Test that unused roles are reported as zero."""
        revenue_split = RevenueSplit(
            percentages=DistributionPercentages({"lp": 100}),
            roles={"lp": RevenueRole.SUPPLY_SIDE},
        )

        by_role = FeeDistributionCalculator.split_by_role(500, revenue_split)

        assert by_role == {
            RevenueRole.HOLDERS: 0,
            RevenueRole.SUPPLY_SIDE: 500,
            RevenueRole.PROTOCOL: 0,
        }
