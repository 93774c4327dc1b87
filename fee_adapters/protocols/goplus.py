"""
GoPlus - Security services paid for in BSC-USD.

Fees are the daily growth of the BSC-USD balances held by the GoPlus
foundation and the revenue pool. There is no revenue split.
"""

from typing import Optional

import aiohttp

from fee_adapters.base import BatchedCallCapability, BlockResolver
from fee_adapters.config import FeeAdapterSettings
from fee_adapters.models import BalanceCall, Chain, ChainAdapterConfig
from fee_adapters.providers.balance_diff import BALANCE_OF_ABI, BalanceDiffStrategy
from fee_adapters.registry import AdapterRegistry
from fee_adapters.transport import JsonRpcMultiCall, LlamaBlockResolver


NAME = "goplus"

USDT_MINT = "0x55d398326f99059ff775485246999027b3197955"
GOPLUS_FOUNDATION = "0x34ebddd30ccbd3f1e385b41bdadb30412323e34f"
GOPLUS_REVENUE_POOL = "0x648d7f4ad39186949e37e9223a152435ab97706c"

USDT_DECIMALS = 18

START_BLOCK = 36724659

CALLS = (
    BalanceCall(target=USDT_MINT, params=(GOPLUS_FOUNDATION,)),
    BalanceCall(target=USDT_MINT, params=(GOPLUS_REVENUE_POOL,)),
)

METHODOLOGY = {
    "Fees": "All fees comes from users for security service provided by GoPlus Network.",
}


def build_registry(
    multicall: BatchedCallCapability,
    block_resolver: Optional[BlockResolver] = None,
) -> AdapterRegistry:
    """Registry for GoPlus on BSC backed by `multicall` (and `block_resolver`)."""
    registry = AdapterRegistry(NAME, version=2)
    registry.register(ChainAdapterConfig(
        chain=Chain.BSC,
        strategy=BalanceDiffStrategy(
            NAME,
            multicall,
            CALLS,
            exponent=USDT_DECIMALS,
            block_resolver=block_resolver,
            abi=BALANCE_OF_ABI,
        ),
        start=START_BLOCK,
        methodology=METHODOLOGY,
    ))
    return registry


def build_default_registry(
    settings: FeeAdapterSettings,
    session: Optional[aiohttp.ClientSession] = None,
) -> AdapterRegistry:
    """Registry wired to the configured BSC RPC and block lookup service."""
    chain = Chain.BSC.value
    return build_registry(
        JsonRpcMultiCall.for_chain(chain, settings, session=session),
        block_resolver=LlamaBlockResolver.for_chain(chain, settings, session=session),
    )
