"""
Fee Distribution Calculator - Exact integer split of a fee total.

Each category gets floor(total * pct / 100); the residual left by the
floors goes entirely to the primary category, so the parts always add
back up to the total.
"""

import logging

from fee_adapters.models import DistributionPercentages, RevenueRole, RevenueSplit


logger = logging.getLogger(__name__)


class FeeDistributionCalculator:
    """Stateless integer splitter for distribution percentages."""

    @staticmethod
    def split(total: int, percentages: DistributionPercentages) -> dict[str, int]:
        """
        Split `total` into categories.

        Args:
            total: Non-negative integer amount (raw units or cents)
            percentages: Validated category percentages

        Returns:
            Category -> amount, in declaration order, summing to `total`
        """
        if total < 0:
            raise ValueError(f"Cannot split a negative total ({total})")

        amounts = {
            category: total * pct // 100
            for category, pct in percentages.shares.items()
        }
        residual = total - sum(amounts.values())
        if residual:
            primary = percentages.primary_category
            amounts[primary] += residual
            logger.debug(f"Assigned split residual {residual} to '{primary}'")
        return amounts

    @classmethod
    def split_by_role(cls, total: int, revenue_split: RevenueSplit) -> dict[RevenueRole, int]:
        """Split `total` and aggregate the category amounts per revenue role."""
        by_role = {role: 0 for role in RevenueRole}
        for category, amount in cls.split(total, revenue_split.percentages).items():
            by_role[revenue_split.roles[category]] += amount
        return by_role


def split(total: int, percentages: DistributionPercentages) -> dict[str, int]:
    """Module-level shortcut for FeeDistributionCalculator.split."""
    return FeeDistributionCalculator.split(total, percentages)
