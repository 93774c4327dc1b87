"""
Providers package - Fee strategy implementations.
"""

from fee_adapters.providers.balance_diff import (
    BalanceDiffStrategy,
    BalanceSnapshotFetcher,
)
from fee_adapters.providers.subgraph_bucket import (
    SubgraphBucketStrategy,
    SubgraphFeeFetcher,
    bucket_id_for,
)


__all__ = [
    "BalanceDiffStrategy",
    "BalanceSnapshotFetcher",
    "SubgraphBucketStrategy",
    "SubgraphFeeFetcher",
    "bucket_id_for",
]
