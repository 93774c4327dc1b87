"""
Subgraph Bucket Strategy - Fees from pre-aggregated daily subgraph records.

The indexing service keeps one fee-stat entity per UTC day, keyed
"<day start epoch>:daily", whose fields are fixed-point accumulators.
A day with no entity had no activity and counts as zero fees.
"""

import logging
from typing import Any, Optional

from fee_adapters.base import BaseFeeStrategy, QueryCapability, RawFeeData
from fee_adapters.clock import start_of_day
from fee_adapters.exceptions import MalformedRecordError
from fee_adapters.models import FeeComponentRecord, FetchStrategyKind, RevenueSplit
from fee_adapters.providers.balance_diff import parse_uint


logger = logging.getLogger(__name__)


DAILY_PERIOD = "daily"

GET_FEE_BY_ID = """
query getFeeById($id: ID!) {
  feeStat(id: $id) {
    id
    marginAndLiquidation
    swap
    mint
    burn
  }
}
"""


def bucket_id_for(timestamp: int, period: str = DAILY_PERIOD) -> str:
    """Canonical bucket id of the UTC day containing `timestamp`."""
    return f"{start_of_day(timestamp)}:{period}"


class SubgraphFeeFetcher:
    """
    Reads day-bucketed fee components through a query capability.

    Args:
        capability: Query-protocol client
        query: Query taking an `$id` variable
        entity: Response field holding the record
        name: Identifier for logs and errors
    """

    def __init__(
        self,
        capability: QueryCapability,
        query: str = GET_FEE_BY_ID,
        entity: str = "feeStat",
        period: str = DAILY_PERIOD,
        name: str = "subgraph_bucket",
    ) -> None:
        self._capability = capability
        self._query = query
        self._entity = entity
        self._period = period
        self._name = name

    def bucket_id_for(self, timestamp: int) -> str:
        return bucket_id_for(timestamp, self._period)

    async def fetch_bucket(self, bucket_id: str) -> Optional[FeeComponentRecord]:
        """
        Fetch the record for `bucket_id`.

        Returns:
            FeeComponentRecord, or None when the day has no record
        """
        response = await self._capability.request(self._query, {"id": bucket_id})
        raw = (response or {}).get(self._entity)
        if raw is None:
            logger.debug(f"[{self._name}] No {self._entity} for bucket {bucket_id}")
            return None
        return self.parse_record(raw)

    def parse_record(self, raw: Any) -> FeeComponentRecord:
        """Parse a raw entity into a FeeComponentRecord."""
        if not isinstance(raw, dict):
            raise MalformedRecordError(
                f"{self._entity} is not an object",
                adapter_name=self._name,
                field_name=self._entity,
                raw_value=raw,
            )
        values: dict[str, int] = {}
        for wire_name, attr in FeeComponentRecord.FIELDS.items():
            if wire_name not in raw:
                raise MalformedRecordError(
                    f"{self._entity} is missing field '{wire_name}'",
                    adapter_name=self._name,
                    field_name=wire_name,
                    raw_value=raw,
                )
            values[attr] = parse_uint(raw[wire_name], wire_name, self._name)
        return FeeComponentRecord(**values)

    @staticmethod
    def sum_components(record: Optional[FeeComponentRecord]) -> int:
        """Total of the four fee components; zero for an absent record."""
        if record is None:
            return 0
        return record.total()


class SubgraphBucketStrategy(BaseFeeStrategy):
    """
    Daily fees from a subgraph's daily fee-stat bucket.

    Args:
        name: Identifier for logs and errors
        capability: Query-protocol client
        exponent: Fixed-point scale of the accumulators (e.g. 30)
        distribution: Optional revenue split
    """

    kind = FetchStrategyKind.SUBGRAPH_BUCKET

    def __init__(
        self,
        name: str,
        capability: QueryCapability,
        exponent: int = 0,
        distribution: Optional[RevenueSplit] = None,
        query: str = GET_FEE_BY_ID,
        entity: str = "feeStat",
    ) -> None:
        super().__init__(name, exponent, distribution)
        self._fetcher = SubgraphFeeFetcher(capability, query=query, entity=entity, name=name)

    @property
    def fetcher(self) -> SubgraphFeeFetcher:
        return self._fetcher

    async def fetch_raw(self, timestamp: int) -> RawFeeData:
        record = await self._fetcher.fetch_bucket(self._fetcher.bucket_id_for(timestamp))
        return RawFeeData(
            timestamp=start_of_day(timestamp),
            daily_total=self._fetcher.sum_components(record),
        )
