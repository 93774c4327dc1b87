"""
Fee Adapter Exceptions - Custom exception hierarchy.

Nothing here is swallowed by the adapters: every error is surfaced to
the caller, and no partially computed result is ever returned.
"""

from datetime import datetime, timezone
from typing import Any, Optional


class FeeAdapterError(Exception):
    """
    Base exception for all fee adapter errors.

    `adapter_name` and `chain` locate the failing adapter; `context`
    carries any extra detail the raising site has.
    """

    def __init__(
        self,
        message: str,
        adapter_name: Optional[str] = None,
        chain: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.adapter_name = adapter_name
        self.chain = chain
        self.original_error = original_error
        self.context = context or {}
        # Not `timestamp`: that name always means the fee day here
        self.raised_at = datetime.now(timezone.utc)

    @property
    def source(self) -> Optional[str]:
        """"adapter/chain", or whichever of the two is known."""
        known = [part for part in (self.adapter_name, self.chain) if part]
        return "/".join(known) or None

    def _cause(self) -> Optional[str]:
        if self.original_error is None:
            return None
        return f"{type(self.original_error).__name__}: {self.original_error}"

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "adapter_name": self.adapter_name,
            "chain": self.chain,
            "original_error": self._cause(),
            "context": dict(self.context),
            "raised_at": self.raised_at.isoformat(),
        }

    def __str__(self) -> str:
        text = f"{self.__class__.__name__}: {self.message}"
        if self.source:
            text += f" [{self.source}]"
        cause = self._cause()
        if cause:
            text += f" (caused by {cause})"
        return text


class ChainNotSupportedError(FeeAdapterError):
    """Requested chain has no registered adapter config."""

    def __init__(
        self,
        message: str,
        adapter_name: Optional[str] = None,
        chain: Optional[str] = None,
        supported_chains: Optional[list[str]] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, adapter_name, chain, original_error, context)
        self.supported_chains = supported_chains or []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["supported_chains"] = self.supported_chains
        return data


class RemoteQueryError(FeeAdapterError):
    """A capability call (RPC, subgraph, block lookup) failed in transport."""

    def __init__(
        self,
        message: str,
        adapter_name: Optional[str] = None,
        chain: Optional[str] = None,
        status_code: Optional[int] = None,
        response_body: Optional[str] = None,
        request_url: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, adapter_name, chain, original_error, context)
        self.status_code = status_code
        self.response_body = response_body
        self.request_url = request_url

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "status_code": self.status_code,
            "response_body": self.response_body,
            "request_url": self.request_url,
        })
        return data


class NegativeDeltaError(FeeAdapterError):
    """End balance below start balance: cumulative fees appear to decrease."""

    def __init__(
        self,
        message: str,
        adapter_name: Optional[str] = None,
        chain: Optional[str] = None,
        entry: Optional[tuple[str, str]] = None,
        start_balance: Optional[int] = None,
        end_balance: Optional[int] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, adapter_name, chain, original_error, context)
        self.entry = entry
        self.start_balance = start_balance
        self.end_balance = end_balance

    @property
    def delta(self) -> Optional[int]:
        """Signed difference that triggered the anomaly."""
        if self.start_balance is None or self.end_balance is None:
            return None
        return self.end_balance - self.start_balance

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "entry": list(self.entry) if self.entry else None,
            # Balances can exceed JSON-safe integer range
            "start_balance": str(self.start_balance) if self.start_balance is not None else None,
            "end_balance": str(self.end_balance) if self.end_balance is not None else None,
        })
        return data


class MalformedRecordError(FeeAdapterError):
    """A raw value from a capability is missing, non-numeric or negative."""

    def __init__(
        self,
        message: str,
        adapter_name: Optional[str] = None,
        chain: Optional[str] = None,
        field_name: Optional[str] = None,
        raw_value: Optional[Any] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, adapter_name, chain, original_error, context)
        self.field_name = field_name
        self.raw_value = raw_value

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data.update({
            "field_name": self.field_name,
            "raw_value": str(self.raw_value)[:500] if self.raw_value is not None else None,
        })
        return data


class InvalidDistributionError(FeeAdapterError):
    """Configured distribution percentages are not a valid partition of 100."""

    def __init__(
        self,
        message: str,
        percentages: Optional[dict[str, Any]] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, None, None, original_error, context)
        self.percentages = dict(percentages) if percentages else {}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["percentages"] = {k: str(v) for k, v in self.percentages.items()}
        return data


class ConfigurationError(FeeAdapterError):
    """Invalid adapter registration or settings."""

    def __init__(
        self,
        message: str,
        adapter_name: Optional[str] = None,
        config_key: Optional[str] = None,
        original_error: Optional[Exception] = None,
        context: Optional[dict[str, Any]] = None,
    ) -> None:
        super().__init__(message, adapter_name, None, original_error, context)
        self.config_key = config_key

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        data = super().to_dict()
        data["config_key"] = self.config_key
        return data
