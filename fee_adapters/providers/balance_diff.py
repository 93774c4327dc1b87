"""
Balance Diff Strategy - Fees as the growth of fee-collector balances.

Reads the balances of fee-receiving addresses at the start and end of
a UTC day through a batched read-call capability. Daily fees are the
summed per-address growth; cumulative fees are the end balances.

A balance that shrinks over the day is reported as NegativeDeltaError
rather than clamped, since it means funds left a collector between
reads and the figure cannot be trusted.
"""

import logging
from typing import Optional, Sequence

from fee_adapters.base import (
    BaseFeeStrategy,
    BatchedCallCapability,
    BlockResolver,
    RawFeeData,
    gather_all,
)
from fee_adapters.clock import day_window
from fee_adapters.exceptions import MalformedRecordError, NegativeDeltaError
from fee_adapters.models import (
    BalanceCall,
    BalanceSnapshot,
    FetchStrategyKind,
    RevenueSplit,
)


logger = logging.getLogger(__name__)


BALANCE_OF_ABI = "erc20:balanceOf"


def parse_uint(value: object, field_name: str, adapter_name: Optional[str] = None) -> int:
    """Parse a decimal-encoded unsigned integer, rejecting anything else."""
    if isinstance(value, bool):
        raise MalformedRecordError(
            f"Field '{field_name}' is not numeric",
            adapter_name=adapter_name,
            field_name=field_name,
            raw_value=value,
        )
    if isinstance(value, int):
        parsed = value
    else:
        text = str(value).strip() if value is not None else ""
        if not (text.isascii() and text.isdigit()):
            raise MalformedRecordError(
                f"Field '{field_name}' is not a non-negative integer: {value!r}",
                adapter_name=adapter_name,
                field_name=field_name,
                raw_value=value,
            )
        parsed = int(text)
    if parsed < 0:
        raise MalformedRecordError(
            f"Field '{field_name}' is negative: {parsed}",
            adapter_name=adapter_name,
            field_name=field_name,
            raw_value=value,
        )
    return parsed


class BalanceSnapshotFetcher:
    """
    Reads balance snapshots through a batched read-call capability.

    Args:
        capability: Batched read-call executor
        abi: ABI signature passed to every call batch
        name: Identifier for logs and errors
    """

    def __init__(
        self,
        capability: BatchedCallCapability,
        abi: str = BALANCE_OF_ABI,
        name: str = "balance_snapshot",
    ) -> None:
        self._capability = capability
        self._abi = abi
        self._name = name

    async def fetch_balances(
        self,
        calls: Sequence[BalanceCall],
        marker: Optional[int] = None,
    ) -> list[int]:
        """
        Read one balance per call at `marker`.

        Returns:
            Balances in the same order as `calls`
        """
        results = await self._capability.call(self._abi, list(calls), marker)
        if len(results) != len(calls):
            raise MalformedRecordError(
                f"Expected {len(calls)} results, got {len(results)}",
                adapter_name=self._name,
                field_name="results",
                raw_value=results,
            )
        return [
            parse_uint(value, f"{call.target}:{','.join(call.params)}", self._name)
            for call, value in zip(calls, results)
        ]

    async def snapshot(
        self,
        calls: Sequence[BalanceCall],
        marker: Optional[int] = None,
    ) -> BalanceSnapshot:
        """Read balances at `marker` keyed by (token, holder)."""
        balances = await self.fetch_balances(calls, marker)
        by_key: dict[tuple[str, str], int] = {}
        for call, balance in zip(calls, balances):
            by_key[call.key] = by_key.get(call.key, 0) + balance
        return BalanceSnapshot(balances=by_key, marker=marker if marker is not None else 0)

    def compute_delta(self, start: BalanceSnapshot, end: BalanceSnapshot) -> int:
        """
        Sum of per-entry balance growth from `start` to `end`.

        Raises:
            NegativeDeltaError: An entry's end balance is below its start
            MalformedRecordError: The snapshots cover different entries
        """
        if set(start.balances) != set(end.balances):
            raise MalformedRecordError(
                "Snapshots cover different (token, holder) entries",
                adapter_name=self._name,
                field_name="balances",
                raw_value=sorted(set(start.balances) ^ set(end.balances)),
            )

        total = 0
        for key, start_balance in start.balances.items():
            end_balance = end.balances[key]
            delta = end_balance - start_balance
            if delta < 0:
                logger.warning(
                    f"[{self._name}] Balance of {key[1]} in {key[0]} decreased "
                    f"from {start_balance} to {end_balance} "
                    f"between markers {start.marker} and {end.marker}"
                )
                raise NegativeDeltaError(
                    f"Balance decreased by {-delta} between markers "
                    f"{start.marker} and {end.marker}",
                    adapter_name=self._name,
                    entry=key,
                    start_balance=start_balance,
                    end_balance=end_balance,
                )
            total += delta
        return total


class BalanceDiffStrategy(BaseFeeStrategy):
    """
    Daily fees from start/end balance snapshots of fee collectors.

    Args:
        name: Identifier for logs and errors
        capability: Batched read-call executor
        calls: Balance reads (token contract + holder) to diff
        exponent: Token decimals of the balances
        block_resolver: Maps day boundaries to block heights; when None
            the boundary timestamps are passed to the capability as-is
        distribution: Optional revenue split
    """

    kind = FetchStrategyKind.BALANCE_DIFF

    def __init__(
        self,
        name: str,
        capability: BatchedCallCapability,
        calls: Sequence[BalanceCall],
        exponent: int = 0,
        block_resolver: Optional[BlockResolver] = None,
        distribution: Optional[RevenueSplit] = None,
        abi: str = BALANCE_OF_ABI,
    ) -> None:
        super().__init__(name, exponent, distribution)
        if not calls:
            raise ValueError("BalanceDiffStrategy needs at least one balance call")
        self._calls = tuple(calls)
        self._block_resolver = block_resolver
        self._fetcher = BalanceSnapshotFetcher(capability, abi=abi, name=name)

    @property
    def calls(self) -> tuple[BalanceCall, ...]:
        return self._calls

    @property
    def fetcher(self) -> BalanceSnapshotFetcher:
        return self._fetcher

    async def _markers(self, timestamp: int) -> tuple[int, int, int]:
        """(day start, start marker, end marker) for the day of `timestamp`."""
        day_start, day_end = day_window(timestamp)
        if self._block_resolver is None:
            return day_start, day_start, day_end
        start_block, end_block = await gather_all(
            self._block_resolver.block_at(day_start),
            self._block_resolver.block_at(day_end),
        )
        return day_start, start_block, end_block

    async def fetch_raw(self, timestamp: int) -> RawFeeData:
        day_start, start_marker, end_marker = await self._markers(timestamp)

        # Neither read depends on the other
        start, end = await gather_all(
            self._fetcher.snapshot(self._calls, start_marker),
            self._fetcher.snapshot(self._calls, end_marker),
        )

        return RawFeeData(
            timestamp=day_start,
            daily_total=self._fetcher.compute_delta(start, end),
            total_cumulative=end.total(),
        )
