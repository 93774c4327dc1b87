"""
Voodoo Trade - FTM-focused perpetual DEX on Fantom.

Fees come from the voodoo-fantom-stats subgraph, whose daily feeStat
entity stores USD amounts padded by 10^30. Collected fees are split
between VMX holders, VLP liquidity providers and the treasury.
"""

from typing import Optional

import aiohttp

from fee_adapters.base import QueryCapability
from fee_adapters.config import FeeAdapterSettings
from fee_adapters.models import (
    Chain,
    ChainAdapterConfig,
    DistributionPercentages,
    RevenueRole,
    RevenueSplit,
)
from fee_adapters.providers.subgraph_bucket import GET_FEE_BY_ID, SubgraphBucketStrategy
from fee_adapters.registry import AdapterRegistry
from fee_adapters.transport import GraphQLClient


NAME = "voodoo-trade"

# 10 USD is stored as 10 * 10^30
DECIMALS = 30

START_TIMESTAMP = 1686971650

FEE_DISTRIBUTION = RevenueSplit(
    percentages=DistributionPercentages({
        "vmxFtmLp": 30,
        "vlp": 30,
        "esVmx": 10,
        "team": 20,
        "buyAndBurn": 5,
        "buyAndAddLiquidity": 5,
    }),
    roles={
        "vmxFtmLp": RevenueRole.HOLDERS,
        "vlp": RevenueRole.SUPPLY_SIDE,
        "esVmx": RevenueRole.HOLDERS,
        "team": RevenueRole.PROTOCOL,
        "buyAndBurn": RevenueRole.HOLDERS,
        "buyAndAddLiquidity": RevenueRole.HOLDERS,
    },
)

METHODOLOGY = {
    "Fees": "Fees from open/close position (0.1%), swap (0.18% to 0.8%), mint and burn (based on tokens balance in the pool) and hourly borrow fee ((assets borrowed)/(total assets in pool)*0.0045%)",
    "UserFees": "Fees from open/close position (0.1%), swap (0.18% to 0.8%) and borrow fee ((assets borrowed)/(total assets in pool)*0.0045%)",
    "HoldersRevenue": "50% of all collected fees goes to the VMX token- 30% to VMX-FTM LP token stakers, 10% to esVMX stakers, 5% to buy and burns and 5% to buyback and liquidity provisioning",
    "SupplySideRevenue": "30% of all collected fees goes to VLP holders",
    "Revenue": "Revenue is 70% of all collected fees, which goes to VMX stakers",
    "ProtocolRevenue": "20% of all collected fees goes to the treasury",
}


def build_registry(query_client: QueryCapability) -> AdapterRegistry:
    """Registry for Voodoo Trade backed by `query_client` (the stats subgraph)."""
    registry = AdapterRegistry(NAME)
    registry.register(ChainAdapterConfig(
        chain=Chain.FANTOM,
        strategy=SubgraphBucketStrategy(
            NAME,
            query_client,
            exponent=DECIMALS,
            distribution=FEE_DISTRIBUTION,
            query=GET_FEE_BY_ID,
        ),
        start=START_TIMESTAMP,
        methodology=METHODOLOGY,
    ))
    return registry


def build_default_registry(
    settings: FeeAdapterSettings,
    session: Optional[aiohttp.ClientSession] = None,
) -> AdapterRegistry:
    """Registry wired to the configured stats subgraph."""
    return build_registry(GraphQLClient.for_protocol(NAME, settings, session=session))
