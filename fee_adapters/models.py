"""
Fee Adapter Data Models - Raw readings and the normalized daily fee schema.

Monetary amounts stay integers (raw token units or fixed-point
accumulators) until the normalizer renders them as 2-decimal strings.
"""

from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import TYPE_CHECKING, Any, Mapping, Optional

from fee_adapters.exceptions import InvalidDistributionError, MalformedRecordError

if TYPE_CHECKING:
    from fee_adapters.base import BaseFeeStrategy


SECONDS_PER_DAY = 86400


def _require_uint(value: Any, field_name: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise MalformedRecordError(
            f"'{field_name}' must be a non-negative integer, got {value!r}",
            field_name=field_name,
            raw_value=value,
        )


class Chain(Enum):
    """Supported blockchain networks."""
    ETHEREUM = "ethereum"
    BSC = "bsc"
    FANTOM = "fantom"


class FetchStrategyKind(Enum):
    """How a chain's fee figures are acquired."""
    BALANCE_DIFF = "balance_diff"
    SUBGRAPH_BUCKET = "subgraph_bucket"


class RevenueRole(Enum):
    """Who receives a distribution category."""
    HOLDERS = "holders"
    SUPPLY_SIDE = "supply_side"
    PROTOCOL = "protocol"


# ─────────────────────────────────────────────────────────────
# Raw readings
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class BalanceCall:
    """One read call of a batch: `target` contract, positional `params`."""
    target: str
    params: tuple[str, ...] = ()

    @property
    def key(self) -> tuple[str, str]:
        """(token, holder) pair identifying this balance."""
        holder = self.params[0] if self.params else ""
        return (self.target.lower(), holder.lower())


@dataclass(frozen=True)
class BalanceSnapshot:
    """Balances of (token, holder) pairs read at one marker."""
    balances: Mapping[tuple[str, str], int]
    marker: int

    def __post_init__(self) -> None:
        for (token, holder), balance in self.balances.items():
            _require_uint(balance, f"{token}:{holder}")
        object.__setattr__(self, "balances", MappingProxyType(dict(self.balances)))

    def total(self) -> int:
        """Sum of all balances in the snapshot."""
        return sum(self.balances.values())


@dataclass(frozen=True)
class FeeComponentRecord:
    """One day bucket of fee components in fixed-point units."""
    margin_and_liquidation: int
    swap: int
    mint: int
    burn: int

    # Wire name -> attribute name
    FIELDS = {
        "marginAndLiquidation": "margin_and_liquidation",
        "swap": "swap",
        "mint": "mint",
        "burn": "burn",
    }

    def __post_init__(self) -> None:
        for attr in self.FIELDS.values():
            _require_uint(getattr(self, attr), attr)

    def total(self) -> int:
        return self.margin_and_liquidation + self.swap + self.mint + self.burn


# ─────────────────────────────────────────────────────────────
# Distribution
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class DistributionPercentages:
    """
    Ordered category -> integer percentage mapping.

    Percentages must be non-negative integers summing to exactly 100;
    anything else raises InvalidDistributionError on construction.
    """
    shares: Mapping[str, int]

    def __post_init__(self) -> None:
        shares = dict(self.shares)
        if not shares:
            raise InvalidDistributionError("Distribution has no categories", percentages=shares)
        for category, pct in shares.items():
            if isinstance(pct, bool) or not isinstance(pct, int) or pct < 0:
                raise InvalidDistributionError(
                    f"Percentage for '{category}' must be a non-negative integer, got {pct!r}",
                    percentages=shares,
                )
        total = sum(shares.values())
        if total != 100:
            raise InvalidDistributionError(
                f"Percentages sum to {total}, expected 100",
                percentages=shares,
            )
        object.__setattr__(self, "shares", MappingProxyType(shares))

    @property
    def primary_category(self) -> str:
        """Largest share; the first declared wins a tie."""
        return max(self.shares, key=lambda category: self.shares[category])

    def categories(self) -> list[str]:
        return list(self.shares)


@dataclass(frozen=True)
class RevenueSplit:
    """Distribution percentages plus the revenue role of each category."""
    percentages: DistributionPercentages
    roles: Mapping[str, RevenueRole]

    def __post_init__(self) -> None:
        roles = dict(self.roles)
        missing = [c for c in self.percentages.categories() if c not in roles]
        unknown = [c for c in roles if c not in self.percentages.shares]
        if missing or unknown:
            raise InvalidDistributionError(
                f"Role mapping does not match categories "
                f"(missing={missing}, unknown={unknown})",
                percentages=dict(self.percentages.shares),
            )
        object.__setattr__(self, "roles", MappingProxyType(roles))

    def role_percentage(self, role: RevenueRole) -> int:
        return sum(
            pct for category, pct in self.percentages.shares.items()
            if self.roles[category] == role
        )


# ─────────────────────────────────────────────────────────────
# Output and registration
# ─────────────────────────────────────────────────────────────

@dataclass(frozen=True)
class NormalizedFeeResult:
    """
    Standard daily fee/revenue record - STRICT schema.

    Monetary fields are decimal strings with 2 fractional digits.
    Revenue fields are None when the protocol defines no split.
    """
    timestamp: int
    daily_fees: str
    daily_user_fees: str
    daily_supply_side_revenue: Optional[str] = None
    daily_holders_revenue: Optional[str] = None
    daily_protocol_revenue: Optional[str] = None
    daily_revenue: Optional[str] = None
    total_fees: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        """Serialize with the camelCase keys consumers expect; None fields are omitted."""
        data = {
            "timestamp": self.timestamp,
            "dailyFees": self.daily_fees,
            "dailyUserFees": self.daily_user_fees,
            "dailySupplySideRevenue": self.daily_supply_side_revenue,
            "dailyHoldersRevenue": self.daily_holders_revenue,
            "dailyProtocolRevenue": self.daily_protocol_revenue,
            "dailyRevenue": self.daily_revenue,
            "totalFees": self.total_fees,
        }
        return {key: value for key, value in data.items() if value is not None}


@dataclass(frozen=True)
class ChainAdapterConfig:
    """Registration entry for one chain of a protocol adapter."""
    chain: Chain
    strategy: "BaseFeeStrategy"
    start: int
    methodology: Mapping[str, str] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "methodology", MappingProxyType(dict(self.methodology)))

    @property
    def kind(self) -> FetchStrategyKind:
        return self.strategy.kind

    def to_dict(self) -> dict[str, Any]:
        return {
            "chain": self.chain.value,
            "strategy": self.kind.value,
            "start": self.start,
            "methodology": dict(self.methodology),
        }
