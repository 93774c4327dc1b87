"""
Adapter Registry Tests.

============================================================
PURPOSE
============================================================
Tests for chain registration, resolution, metadata pass-through
and fetch dispatch through the registry.

============================================================
"""

import asyncio
import dataclasses

import pytest
from unittest.mock import AsyncMock, MagicMock

from fee_adapters import (
    AdapterRegistry,
    BalanceCall,
    BalanceDiffStrategy,
    Chain,
    ChainAdapterConfig,
    ChainNotSupportedError,
    ConfigurationError,
    FetchStrategyKind,
    RemoteQueryError,
    SubgraphBucketStrategy,
)


TIMESTAMP = 1700000000
DAY_START = 1699920000
DAY_END = 1700006400

METHODOLOGY = {"Fees": "All fees paid by users."}


# ============================================================
# FIXTURES
# ============================================================

@pytest.fixture
def subgraph_client():
    client = MagicMock()
    client.request = AsyncMock(return_value={"feeStat": {
        "marginAndLiquidation": "1000",
        "swap": "0",
        "mint": "0",
        "burn": "0",
    }})
    return client


@pytest.fixture
def multicall():
    capability = MagicMock()
    capability.call = AsyncMock(
        side_effect=lambda abi, calls, block=None: {DAY_START: ["10"], DAY_END: ["25"]}[block]
    )
    return capability


@pytest.fixture
def registry(subgraph_client, multicall):
    registry = AdapterRegistry("test-protocol")
    registry.register(ChainAdapterConfig(
        chain=Chain.FANTOM,
        strategy=SubgraphBucketStrategy("test-protocol", subgraph_client, exponent=1),
        start=1686971650,
        methodology=METHODOLOGY,
    ))
    registry.register(ChainAdapterConfig(
        chain=Chain.BSC,
        strategy=BalanceDiffStrategy(
            "test-protocol", multicall, [BalanceCall("0xtoken", ("0xholder",))],
        ),
        start=36724659,
    ))
    return registry


# ============================================================
# REGISTRATION TESTS
# ============================================================

class TestRegistration:
    """Tests for register() and resolve()."""

    def test_resolve_registered_chain(self, registry):
        """Test resolving by enum and by chain string."""
        config = registry.resolve(Chain.FANTOM)

        assert config.kind == FetchStrategyKind.SUBGRAPH_BUCKET
        assert registry.resolve("fantom") is config
        assert registry.resolve(Chain.BSC).kind == FetchStrategyKind.BALANCE_DIFF

    def test_resolve_unregistered_chain_raises(self, registry):
        """Test that an unregistered chain is not supported."""
        with pytest.raises(ChainNotSupportedError) as exc_info:
            registry.resolve(Chain.ETHEREUM)

        assert exc_info.value.chain == "ethereum"
        assert set(exc_info.value.supported_chains) == {"fantom", "bsc"}

    def test_resolve_unknown_chain_string_raises(self, registry):
        """Test that an unknown chain name is not supported."""
        with pytest.raises(ChainNotSupportedError):
            registry.resolve("not-a-chain")

    def test_duplicate_registration_raises(self, registry, subgraph_client):
        """Test that registration is append-only."""
        with pytest.raises(ConfigurationError):
            registry.register(ChainAdapterConfig(
                chain=Chain.FANTOM,
                strategy=SubgraphBucketStrategy("other", subgraph_client),
                start=0,
            ))

        assert registry.resolve(Chain.FANTOM).start == 1686971650

    def test_start_and_methodology_pass_through(self, registry):
        """Test that start and methodology are exposed unchanged."""
        config = registry.resolve(Chain.FANTOM)

        assert config.start == 1686971650
        assert dict(config.methodology) == METHODOLOGY

    def test_config_is_immutable(self, registry):
        """Test that configs cannot be changed after registration."""
        config = registry.resolve(Chain.FANTOM)

        with pytest.raises(dataclasses.FrozenInstanceError):
            config.start = 0
        with pytest.raises(TypeError):
            config.methodology["Fees"] = "changed"

    def test_supports_and_contains(self, registry):
        """Test membership helpers."""
        assert registry.supports(Chain.BSC)
        assert not registry.supports(Chain.ETHEREUM)
        assert "fantom" in registry
        assert 42 not in registry
        assert len(registry) == 2
        assert registry.list_chains() == [Chain.FANTOM, Chain.BSC]

    def test_metadata(self, registry):
        """Test metadata export for documentation."""
        meta = registry.get_metadata()

        assert meta["name"] == "test-protocol"
        assert meta["chains"]["fantom"] == {
            "chain": "fantom",
            "strategy": "subgraph_bucket",
            "start": 1686971650,
            "methodology": METHODOLOGY,
        }
        assert meta["chains"]["bsc"]["methodology"] == {}


# ============================================================
# FETCH TESTS
# ============================================================

class TestRegistryFetch:
    """Tests for fetch() and fetch_many()."""

    @pytest.mark.asyncio
    async def test_fetch_dispatches_to_strategy(self, registry):
        """Test fetch through the chain's strategy."""
        result = await registry.fetch(Chain.FANTOM, TIMESTAMP)

        assert result.daily_fees == "100.00"
        assert result.timestamp == DAY_START

    @pytest.mark.asyncio
    async def test_fetch_unsupported_chain_raises(self, registry):
        """Test that fetch fails fast on unsupported chains."""
        with pytest.raises(ChainNotSupportedError):
            await registry.fetch(Chain.ETHEREUM, TIMESTAMP)

    @pytest.mark.asyncio
    async def test_fetch_many(self, registry):
        """Test concurrent fetch across all chains."""
        results = await registry.fetch_many(None, TIMESTAMP)

        assert set(results) == {Chain.FANTOM, Chain.BSC}
        assert results[Chain.BSC].daily_fees == "15.00"
        assert results[Chain.BSC].total_fees == "25.00"

    @pytest.mark.asyncio
    async def test_fetch_many_fails_as_a_whole(self, registry, subgraph_client):
        """Test that one failing chain fails the whole call."""
        subgraph_client.request.side_effect = RemoteQueryError("down")

        with pytest.raises(RemoteQueryError):
            await registry.fetch_many([Chain.FANTOM, Chain.BSC], TIMESTAMP)

    @pytest.mark.asyncio
    async def test_fetch_many_cancels_remaining_chains(self, registry, subgraph_client, multicall):
        """Test that a failing chain stops the chains still in flight."""
        completed = []

        async def slow_call(abi, calls, block=None):
            await asyncio.sleep(0.05)
            completed.append(block)
            return ["10"]

        multicall.call = slow_call
        subgraph_client.request.side_effect = RemoteQueryError("down")

        with pytest.raises(RemoteQueryError):
            await registry.fetch_many(None, TIMESTAMP)
        await asyncio.sleep(0.1)

        assert completed == []
