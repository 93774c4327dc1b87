"""
Fee Adapters Package - Daily fee/revenue normalization for on-chain protocols.

Turns two kinds of raw on-chain readings into one daily fee schema:
- Balance snapshots of fee collectors, diffed across a UTC day
- Pre-aggregated daily buckets from an indexing subgraph

Features:
- Integer-only arithmetic from raw units to 2-decimal strings
- Exact percentage revenue splits (no rounding leakage)
- Injected capabilities (batched calls, queries, block lookup)
- Explicit anomaly on decreasing balances

Quick Start:
    from fee_adapters import Chain, GraphQLClient, get_settings
    from fee_adapters.protocols import voodoo_trade

    async def daily_fees(timestamp: int):
        async with GraphQLClient.for_protocol("voodoo-trade", get_settings()) as client:
            registry = voodoo_trade.build_registry(client)
            result = await registry.fetch(Chain.FANTOM, timestamp)
            return result.to_dict()

Adding New Protocols:
    registry = AdapterRegistry("new-protocol")
    registry.register(ChainAdapterConfig(
        chain=Chain.ETHEREUM,
        strategy=BalanceDiffStrategy("new-protocol", multicall, calls, exponent=6),
        start=19000000,
        methodology={"Fees": "..."},
    ))
"""

from fee_adapters.base import (
    BaseFeeStrategy,
    BatchedCallCapability,
    BlockResolver,
    QueryCapability,
    RawFeeData,
)
from fee_adapters.config import (
    FeeAdapterSettings,
    configure_logging,
    get_settings,
    set_settings,
)
from fee_adapters.distribution import FeeDistributionCalculator, split
from fee_adapters.exceptions import (
    ChainNotSupportedError,
    ConfigurationError,
    FeeAdapterError,
    InvalidDistributionError,
    MalformedRecordError,
    NegativeDeltaError,
    RemoteQueryError,
)
from fee_adapters.models import (
    BalanceCall,
    BalanceSnapshot,
    Chain,
    ChainAdapterConfig,
    DistributionPercentages,
    FeeComponentRecord,
    FetchStrategyKind,
    NormalizedFeeResult,
    RevenueRole,
    RevenueSplit,
)
from fee_adapters.normalizer import ResultNormalizer, scale
from fee_adapters.providers import (
    BalanceDiffStrategy,
    BalanceSnapshotFetcher,
    SubgraphBucketStrategy,
    SubgraphFeeFetcher,
    bucket_id_for,
)
from fee_adapters.registry import AdapterRegistry
from fee_adapters.transport import GraphQLClient, JsonRpcMultiCall, LlamaBlockResolver


__version__ = "1.0.0"

__all__ = [
    # Base
    "BaseFeeStrategy",
    "BatchedCallCapability",
    "BlockResolver",
    "QueryCapability",
    "RawFeeData",

    # Models
    "BalanceCall",
    "BalanceSnapshot",
    "Chain",
    "ChainAdapterConfig",
    "DistributionPercentages",
    "FeeComponentRecord",
    "FetchStrategyKind",
    "NormalizedFeeResult",
    "RevenueRole",
    "RevenueSplit",

    # Exceptions
    "FeeAdapterError",
    "ChainNotSupportedError",
    "RemoteQueryError",
    "NegativeDeltaError",
    "MalformedRecordError",
    "InvalidDistributionError",
    "ConfigurationError",

    # Calculation
    "FeeDistributionCalculator",
    "split",
    "ResultNormalizer",
    "scale",

    # Providers
    "BalanceDiffStrategy",
    "BalanceSnapshotFetcher",
    "SubgraphBucketStrategy",
    "SubgraphFeeFetcher",
    "bucket_id_for",

    # Registry
    "AdapterRegistry",

    # Config
    "FeeAdapterSettings",
    "configure_logging",
    "get_settings",
    "set_settings",

    # Transport
    "GraphQLClient",
    "JsonRpcMultiCall",
    "LlamaBlockResolver",
]
