"""
Fee Adapters - Configuration.

============================================================
ENDPOINTS AND TRANSPORT SETTINGS
============================================================

Configuration can be loaded from:
- Default values
- Environment variables (a .env file is honoured)
- YAML config file

Environment variables:
- FEE_ADAPTERS_RPC_<CHAIN>          e.g. FEE_ADAPTERS_RPC_BSC
- FEE_ADAPTERS_SUBGRAPH_<PROTOCOL>  e.g. FEE_ADAPTERS_SUBGRAPH_VOODOO_TRADE
- FEE_ADAPTERS_BLOCK_API_URL
- FEE_ADAPTERS_TIMEOUT
- FEE_ADAPTERS_LOG_LEVEL

============================================================
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional, Union

import yaml
from dotenv import load_dotenv

from fee_adapters.exceptions import ConfigurationError


logger = logging.getLogger(__name__)


ENV_PREFIX = "FEE_ADAPTERS_"

LOG_FORMAT = "%(asctime)s | %(levelname)-5s | %(name)s | %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"


def _env_key(name: str) -> str:
    return name.upper().replace("-", "_").replace(" ", "_")


@dataclass
class FeeAdapterSettings:
    """
    Endpoint and transport settings for the default capabilities.

    The adapters themselves only need capabilities; these settings are
    read when the default aiohttp-backed capabilities are built.
    """

    rpc_urls: dict[str, str] = field(default_factory=lambda: {
        "bsc": "https://bsc-dataseed.binance.org",
        "fantom": "https://rpc.ftm.tools",
        "ethereum": "https://ethereum.publicnode.com",
    })
    """Chain value -> JSON-RPC endpoint."""

    subgraph_urls: dict[str, str] = field(default_factory=lambda: {
        "voodoo-trade": "https://api.thegraph.com/subgraphs/name/chicken-juju/voodoo-fantom-stats",
    })
    """Protocol name -> subgraph endpoint."""

    block_api_url: str = "https://coins.llama.fi"
    """Base URL of the timestamp -> block lookup service."""

    request_timeout_seconds: float = 30.0
    user_agent: str = "fee-adapters/1.0"
    log_level: str = "INFO"

    def rpc_url(self, chain: str) -> str:
        """RPC endpoint for `chain`; ConfigurationError if none is set."""
        url = self.rpc_urls.get(chain)
        if not url:
            raise ConfigurationError(
                f"No RPC URL configured for chain '{chain}' "
                f"(set {ENV_PREFIX}RPC_{_env_key(chain)})",
                config_key=f"rpc_urls.{chain}",
            )
        return url

    def subgraph_url(self, protocol: str) -> str:
        """Subgraph endpoint for `protocol`; ConfigurationError if none is set."""
        url = self.subgraph_urls.get(protocol)
        if not url:
            raise ConfigurationError(
                f"No subgraph URL configured for '{protocol}' "
                f"(set {ENV_PREFIX}SUBGRAPH_{_env_key(protocol)})",
                config_key=f"subgraph_urls.{protocol}",
            )
        return url

    @classmethod
    def from_env(cls, dotenv_path: Optional[Union[str, Path]] = None) -> "FeeAdapterSettings":
        """Load settings from environment variables on top of the defaults."""
        load_dotenv(dotenv_path)
        settings = cls()

        for key, value in os.environ.items():
            if not value:
                continue
            if key.startswith(f"{ENV_PREFIX}RPC_"):
                chain = key[len(f"{ENV_PREFIX}RPC_"):].lower()
                settings.rpc_urls[chain] = value
            elif key.startswith(f"{ENV_PREFIX}SUBGRAPH_"):
                protocol = key[len(f"{ENV_PREFIX}SUBGRAPH_"):].lower().replace("_", "-")
                settings.subgraph_urls[protocol] = value

        if os.getenv(f"{ENV_PREFIX}BLOCK_API_URL"):
            settings.block_api_url = os.getenv(f"{ENV_PREFIX}BLOCK_API_URL")
        if os.getenv(f"{ENV_PREFIX}TIMEOUT"):
            try:
                settings.request_timeout_seconds = float(os.getenv(f"{ENV_PREFIX}TIMEOUT"))
            except ValueError as e:
                raise ConfigurationError(
                    f"{ENV_PREFIX}TIMEOUT must be a number",
                    config_key="request_timeout_seconds",
                    original_error=e,
                )
        if os.getenv(f"{ENV_PREFIX}LOG_LEVEL"):
            settings.log_level = os.getenv(f"{ENV_PREFIX}LOG_LEVEL").upper()

        return settings

    @classmethod
    def from_yaml(cls, path: Union[str, Path]) -> "FeeAdapterSettings":
        """Load settings from a YAML file on top of the defaults."""
        try:
            with open(path, "r") as f:
                data = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            raise ConfigurationError(
                f"Failed to load YAML config from {path}",
                config_key=str(path),
                original_error=e,
            )
        if not isinstance(data, dict):
            raise ConfigurationError(
                f"YAML config {path} must be a mapping",
                config_key=str(path),
            )

        settings = cls()
        settings.rpc_urls.update(data.get("rpc_urls") or {})
        settings.subgraph_urls.update(data.get("subgraph_urls") or {})
        if "block_api_url" in data:
            settings.block_api_url = data["block_api_url"]
        if "request_timeout_seconds" in data:
            settings.request_timeout_seconds = float(data["request_timeout_seconds"])
        if "user_agent" in data:
            settings.user_agent = data["user_agent"]
        if "log_level" in data:
            settings.log_level = str(data["log_level"]).upper()
        return settings

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "rpc_urls": dict(self.rpc_urls),
            "subgraph_urls": dict(self.subgraph_urls),
            "block_api_url": self.block_api_url,
            "request_timeout_seconds": self.request_timeout_seconds,
            "user_agent": self.user_agent,
            "log_level": self.log_level,
        }


def configure_logging(level: Optional[str] = None) -> None:
    """Configure root logging in the package's standard format."""
    logging.basicConfig(
        level=getattr(logging, (level or "INFO").upper(), logging.INFO),
        format=LOG_FORMAT,
        datefmt=LOG_DATEFMT,
    )


# =============================================================
# GLOBAL SETTINGS SINGLETON
# =============================================================


_default_settings: Optional[FeeAdapterSettings] = None


def get_settings() -> FeeAdapterSettings:
    """Get the global settings, loading them from the environment once."""
    global _default_settings
    if _default_settings is None:
        _default_settings = FeeAdapterSettings.from_env()
    return _default_settings


def set_settings(settings: Optional[FeeAdapterSettings]) -> None:
    """Replace (or with None, reset) the global settings."""
    global _default_settings
    _default_settings = settings
