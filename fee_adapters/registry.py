"""
Fee Adapter Registry - Chain -> fee strategy lookup for one protocol.

Features:
- Append-only registration at process start
- Strategy selection by chain
- Start marker and methodology passed through for documentation
- Concurrent fetch across chains
"""

import logging
from typing import Any, Iterable, Optional, Union

from fee_adapters.base import gather_all
from fee_adapters.exceptions import ChainNotSupportedError, ConfigurationError
from fee_adapters.models import Chain, ChainAdapterConfig, NormalizedFeeResult


logger = logging.getLogger(__name__)


ChainLike = Union[Chain, str]


class AdapterRegistry:
    """
    Registry of per-chain fee configs for a protocol.

    Entries cannot be replaced or removed once registered.

    Usage:
        registry = AdapterRegistry("voodoo-trade")
        registry.register(ChainAdapterConfig(
            chain=Chain.FANTOM,
            strategy=SubgraphBucketStrategy("voodoo-trade", client, exponent=30),
            start=1686971650,
            methodology={"Fees": "..."},
        ))

        result = await registry.fetch(Chain.FANTOM, 1700000000)
    """

    def __init__(self, name: str, version: int = 1) -> None:
        self._name = name
        self._version = version
        self._configs: dict[Chain, ChainAdapterConfig] = {}

    @property
    def name(self) -> str:
        return self._name

    @property
    def version(self) -> int:
        return self._version

    def register(self, config: ChainAdapterConfig) -> None:
        """
        Register a chain config.

        Raises:
            ConfigurationError: The chain is already registered
        """
        if config.chain in self._configs:
            raise ConfigurationError(
                f"Chain '{config.chain.value}' already registered",
                adapter_name=self._name,
                config_key=config.chain.value,
            )
        self._configs[config.chain] = config
        logger.info(
            f"[{self._name}] Registered chain '{config.chain.value}' "
            f"with {config.kind.value} strategy (start={config.start})"
        )

    def _coerce_chain(self, chain: ChainLike) -> Chain:
        if isinstance(chain, Chain):
            return chain
        try:
            return Chain(chain)
        except ValueError as e:
            raise ChainNotSupportedError(
                message=f"Unknown chain '{chain}'",
                adapter_name=self._name,
                chain=str(chain),
                supported_chains=[c.value for c in self._configs],
                original_error=e,
            )

    def resolve(self, chain: ChainLike) -> ChainAdapterConfig:
        """
        Look up the config backing `chain`.

        Raises:
            ChainNotSupportedError: No config registered for the chain
        """
        key = self._coerce_chain(chain)
        config = self._configs.get(key)
        if config is None:
            raise ChainNotSupportedError(
                message=f"Chain {key.value} not supported",
                adapter_name=self._name,
                chain=key.value,
                supported_chains=[c.value for c in self._configs],
            )
        return config

    def supports(self, chain: ChainLike) -> bool:
        try:
            self.resolve(chain)
        except ChainNotSupportedError:
            return False
        return True

    def list_chains(self) -> list[Chain]:
        """Registered chains in registration order."""
        return list(self._configs)

    async def fetch(self, chain: ChainLike, timestamp: int) -> NormalizedFeeResult:
        """Resolve `chain` and run its strategy for the day of `timestamp`."""
        config = self.resolve(chain)
        return await config.strategy(timestamp)

    async def fetch_many(
        self,
        chains: Optional[Iterable[ChainLike]],
        timestamp: int,
    ) -> dict[Chain, NormalizedFeeResult]:
        """
        Fetch several chains concurrently.

        Any failure cancels the remaining chains and fails the whole
        call; no partial mapping is returned.
        """
        configs = [
            self.resolve(chain)
            for chain in (chains if chains is not None else self.list_chains())
        ]
        results = await gather_all(
            *(config.strategy(timestamp) for config in configs)
        )
        return {config.chain: result for config, result in zip(configs, results)}

    def get_metadata(self) -> dict[str, Any]:
        """Per-chain start markers and methodology, for documentation export."""
        return {
            "name": self._name,
            "version": self._version,
            "chains": {
                config.chain.value: config.to_dict()
                for config in self._configs.values()
            },
        }

    def __len__(self) -> int:
        return len(self._configs)

    def __contains__(self, chain: object) -> bool:
        if not isinstance(chain, (Chain, str)):
            return False
        return self.supports(chain)

    def __repr__(self) -> str:
        chains = ", ".join(c.value for c in self._configs)
        return f"<{self.__class__.__name__}(name={self._name}, chains=[{chains}])>"
