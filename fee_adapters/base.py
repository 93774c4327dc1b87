"""
Base Fee Strategy - Abstract interface for all fee acquisition strategies.

All strategies MUST:
- Acquire raw integers only through injected capabilities
- Keep no state between calls
- Surface every error to the caller (no retries, no partial results)
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Awaitable, Optional, Protocol, Sequence

from fee_adapters.clock import format_day
from fee_adapters.exceptions import FeeAdapterError
from fee_adapters.models import (
    BalanceCall,
    FetchStrategyKind,
    NormalizedFeeResult,
    RevenueSplit,
)
from fee_adapters.normalizer import ResultNormalizer


logger = logging.getLogger(__name__)


# ─────────────────────────────────────────────────────────────
# Capabilities
# ─────────────────────────────────────────────────────────────

class BatchedCallCapability(Protocol):
    """Executes a batch of read calls in one round trip."""

    async def call(
        self,
        abi: str,
        calls: Sequence[BalanceCall],
        block: Optional[int] = None,
    ) -> list[str]:
        """Return one decimal-string result per call, in call order."""
        ...


class QueryCapability(Protocol):
    """Runs a query against an indexing service."""

    async def request(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """Return the response data; a missing record is a None field."""
        ...


class BlockResolver(Protocol):
    """Maps a unix timestamp to the block height current at that time."""

    async def block_at(self, timestamp: int) -> int:
        ...


@dataclass(frozen=True)
class RawFeeData:
    """Integer fee figures for one day, before scaling."""
    timestamp: int
    daily_total: int
    total_cumulative: Optional[int] = None


async def gather_all(*aws: Awaitable[Any]) -> list[Any]:
    """
    Await all of `aws` concurrently; the first failure cancels the rest.

    No task is left running once the call has returned or raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    try:
        return list(await asyncio.gather(*tasks))
    except BaseException:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise


# ─────────────────────────────────────────────────────────────
# Strategy
# ─────────────────────────────────────────────────────────────

class BaseFeeStrategy(ABC):
    """
    Abstract base class for fee strategies.

    Each strategy must:
    1. Declare its `kind`
    2. Implement fetch_raw() - acquire integer figures for a day

    fetch() then scales and splits them into a NormalizedFeeResult.
    A strategy instance is itself awaitable-callable:
    `await strategy(timestamp)`.
    """

    kind: FetchStrategyKind

    def __init__(
        self,
        name: str,
        exponent: int = 0,
        distribution: Optional[RevenueSplit] = None,
    ) -> None:
        self._name = name
        self._normalizer = ResultNormalizer(exponent)
        self._distribution = distribution

    @property
    def name(self) -> str:
        """Identifier used in logs and errors."""
        return self._name

    @property
    def exponent(self) -> int:
        return self._normalizer.exponent

    @property
    def distribution(self) -> Optional[RevenueSplit]:
        return self._distribution

    @abstractmethod
    async def fetch_raw(self, timestamp: int) -> RawFeeData:
        """
        Acquire integer fee figures for the day containing `timestamp`.

        Raises:
            RemoteQueryError: Capability failure, propagated unmodified
            NegativeDeltaError / MalformedRecordError: Bad readings
        """
        pass

    async def fetch(self, timestamp: int) -> NormalizedFeeResult:
        """
        Fetch and normalize fees for the day containing `timestamp`.

        Args:
            timestamp: Reference unix timestamp (seconds)

        Returns:
            NormalizedFeeResult
        """
        logger.debug(f"[{self.name}] Fetching fees for timestamp {timestamp}")
        try:
            raw = await self.fetch_raw(timestamp)
        except FeeAdapterError as e:
            logger.warning(f"[{self.name}] Fee fetch failed: {e}")
            raise

        result = self._normalizer.assemble(
            timestamp=raw.timestamp,
            daily_total=raw.daily_total,
            total_cumulative=raw.total_cumulative,
            distribution=self._distribution,
        )
        logger.debug(
            f"[{self.name}] Day {format_day(raw.timestamp)}: "
            f"dailyFees={result.daily_fees} totalFees={result.total_fees}"
        )
        return result

    async def __call__(self, timestamp: int) -> NormalizedFeeResult:
        return await self.fetch(timestamp)

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__}(name={self.name}, kind={self.kind.value})>"
