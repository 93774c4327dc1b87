"""
Result Normalizer - Fixed-point scaling and output assembly.

All arithmetic is integer: amounts are reduced to whole cents with
floor division before formatting, so magnitudes such as 10^30-scaled
accumulators never pass through a float.
"""

from typing import Optional

from fee_adapters.distribution import FeeDistributionCalculator
from fee_adapters.exceptions import MalformedRecordError
from fee_adapters.models import NormalizedFeeResult, RevenueRole, RevenueSplit


def to_cents(raw: int, exponent: int) -> int:
    """Convert a 10^exponent-scaled integer to whole cents (floored)."""
    if raw < 0:
        raise MalformedRecordError(f"Cannot scale negative amount {raw}", raw_value=raw)
    if exponent < 0:
        raise ValueError(f"exponent must be >= 0, got {exponent}")
    return raw * 100 // 10 ** exponent


def format_cents(cents: int) -> str:
    """Render whole cents as a decimal string with 2 fractional digits."""
    return f"{cents // 100}.{cents % 100:02d}"


def scale(raw: int, exponent: int) -> str:
    """Divide `raw` by 10^exponent and render at 2 fractional digits."""
    return format_cents(to_cents(raw, exponent))


class ResultNormalizer:
    """
    Builds NormalizedFeeResult records for one protocol.

    Args:
        exponent: Power of ten the raw amounts are scaled by
            (30 for fixed-point accumulators, token decimals for balances)
    """

    def __init__(self, exponent: int = 0) -> None:
        if exponent < 0:
            raise ValueError(f"exponent must be >= 0, got {exponent}")
        self.exponent = exponent

    def scale(self, raw: int) -> str:
        return scale(raw, self.exponent)

    def assemble(
        self,
        timestamp: int,
        daily_total: int,
        total_cumulative: Optional[int] = None,
        distribution: Optional[RevenueSplit] = None,
    ) -> NormalizedFeeResult:
        """
        Assemble the standard record.

        The split runs on the cent amount, so the rendered role figures
        add up to the rendered daily fees exactly. Without a split the
        whole amount is reported as user fees and the revenue fields
        stay unset.
        """
        daily_cents = to_cents(daily_total, self.exponent)
        daily_fees = format_cents(daily_cents)
        total_fees = (
            self.scale(total_cumulative) if total_cumulative is not None else None
        )

        if distribution is None:
            return NormalizedFeeResult(
                timestamp=timestamp,
                daily_fees=daily_fees,
                daily_user_fees=daily_fees,
                total_fees=total_fees,
            )

        by_role = FeeDistributionCalculator.split_by_role(daily_cents, distribution)
        holders = by_role[RevenueRole.HOLDERS]
        protocol = by_role[RevenueRole.PROTOCOL]

        return NormalizedFeeResult(
            timestamp=timestamp,
            daily_fees=daily_fees,
            daily_user_fees=daily_fees,
            daily_supply_side_revenue=format_cents(by_role[RevenueRole.SUPPLY_SIDE]),
            daily_holders_revenue=format_cents(holders),
            daily_protocol_revenue=format_cents(protocol),
            daily_revenue=format_cents(holders + protocol),
            total_fees=total_fees,
        )
