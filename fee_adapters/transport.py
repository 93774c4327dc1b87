"""
Default Capabilities - aiohttp-backed transports for the fee strategies.

Strategies never import this module; it provides ready-made
implementations of the capability protocols in fee_adapters.base:

- GraphQLClient       -> QueryCapability
- JsonRpcMultiCall    -> BatchedCallCapability
- LlamaBlockResolver  -> BlockResolver

Every transport failure is raised as RemoteQueryError. Nothing here
retries; retry policy belongs to the caller.
"""

import logging
import time
from typing import Any, Optional, Sequence

import aiohttp

from fee_adapters.config import FeeAdapterSettings
from fee_adapters.exceptions import ConfigurationError, RemoteQueryError
from fee_adapters.models import BalanceCall


logger = logging.getLogger(__name__)


# 4-byte selectors of the read calls the multicall can encode
ABI_SELECTORS = {
    "erc20:balanceOf": "0x70a08231",
}


def encode_address(addr: str) -> str:
    """Encode address as 32-byte padded hex (no 0x prefix)."""
    a = addr[2:] if addr.startswith("0x") else addr
    return a.lower().zfill(64)


def decode_uint256(hex_str: str) -> int:
    """Decode uint256 from hex."""
    h = hex_str[2:] if hex_str.startswith("0x") else hex_str
    return int(h, 16) if h else 0


def encode_call(abi: str, call: BalanceCall) -> str:
    """Calldata for `call` under the `abi` signature."""
    selector = ABI_SELECTORS.get(abi)
    if selector is None:
        raise ConfigurationError(
            f"Unsupported ABI signature '{abi}'",
            config_key="abi",
            context={"supported": sorted(ABI_SELECTORS)},
        )
    return selector + "".join(encode_address(param) for param in call.params)


def open_session(timeout: float, user_agent: str) -> aiohttp.ClientSession:
    """JSON session with a total request timeout, shared by every transport."""
    return aiohttp.ClientSession(
        timeout=aiohttp.ClientTimeout(total=timeout),
        headers={"Accept": "application/json", "User-Agent": user_agent},
    )


class HttpCapability:
    """
    Shared aiohttp session handling for the transports.

    Args:
        timeout: Total request timeout in seconds
        session: Externally owned session to reuse
        name: Identifier for logs and errors
    """

    def __init__(
        self,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = "fee-adapters/1.0",
        name: str = "http",
    ) -> None:
        self._timeout = timeout
        self._session = session
        self._owns_session = session is None
        self._user_agent = user_agent
        self._name = name

    async def _get_session(self) -> aiohttp.ClientSession:
        """Reuse the injected session, or open one this transport owns."""
        if self._session is None or self._session.closed:
            self._session = open_session(self._timeout, self._user_agent)
            self._owns_session = True
        return self._session

    async def _request_json(
        self,
        method: str,
        url: str,
        json_body: Optional[Any] = None,
    ) -> Any:
        """Make an HTTP request and decode the JSON body."""
        session = await self._get_session()

        start_time = time.time()
        try:
            async with session.request(method, url, json=json_body) as response:
                latency_ms = (time.time() - start_time) * 1000
                logger.debug(
                    f"[{self._name}] {method} {url} -> {response.status} "
                    f"in {latency_ms:.0f}ms"
                )

                if response.status >= 400:
                    body = await response.text()
                    raise RemoteQueryError(
                        message=f"HTTP {response.status}",
                        adapter_name=self._name,
                        status_code=response.status,
                        response_body=body[:500],
                        request_url=url,
                    )

                return await response.json(content_type=None)

        except aiohttp.ClientError as e:
            raise RemoteQueryError(
                message=f"Connection error: {e}",
                adapter_name=self._name,
                request_url=url,
                original_error=e,
            )
        except ValueError as e:
            raise RemoteQueryError(
                message=f"Invalid JSON response: {e}",
                adapter_name=self._name,
                request_url=url,
                original_error=e,
            )

    async def close(self) -> None:
        """Close the session if this transport opened it; injected sessions stay open."""
        if self._owns_session and self._session is not None and not self._session.closed:
            await self._session.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()


class GraphQLClient(HttpCapability):
    """Query capability for a GraphQL endpoint (e.g. a subgraph)."""

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = "fee-adapters/1.0",
    ) -> None:
        super().__init__(timeout, session, user_agent, name="graphql")
        self._url = url

    @property
    def url(self) -> str:
        return self._url

    async def request(self, query: str, variables: dict[str, Any]) -> dict[str, Any]:
        """
        Run `query` with `variables`.

        Returns:
            The response `data` object (missing records are None fields)
        """
        body = await self._request_json(
            "POST",
            self._url,
            json_body={"query": query, "variables": variables},
        )
        if not isinstance(body, dict):
            raise RemoteQueryError(
                message="GraphQL response is not an object",
                adapter_name=self._name,
                request_url=self._url,
                response_body=str(body)[:500],
            )
        if body.get("errors"):
            raise RemoteQueryError(
                message=f"GraphQL errors: {body['errors']}",
                adapter_name=self._name,
                request_url=self._url,
                response_body=str(body["errors"])[:500],
            )
        return body.get("data") or {}

    @classmethod
    def for_protocol(
        cls,
        protocol: str,
        settings: FeeAdapterSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "GraphQLClient":
        return cls(
            settings.subgraph_url(protocol),
            timeout=settings.request_timeout_seconds,
            session=session,
            user_agent=settings.user_agent,
        )


class JsonRpcMultiCall(HttpCapability):
    """
    Batched read-call capability over a JSON-RPC endpoint.

    All calls go out as one JSON-RPC batch of eth_call requests at the
    same block; results come back as decimal strings in call order.
    """

    def __init__(
        self,
        rpc_url: str,
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = "fee-adapters/1.0",
    ) -> None:
        super().__init__(timeout, session, user_agent, name="multicall")
        self._rpc_url = rpc_url

    async def call(
        self,
        abi: str,
        calls: Sequence[BalanceCall],
        block: Optional[int] = None,
    ) -> list[str]:
        if not calls:
            return []
        block_tag = hex(block) if block is not None else "latest"
        batch = [
            {
                "jsonrpc": "2.0",
                "id": index,
                "method": "eth_call",
                "params": [{"to": call.target, "data": encode_call(abi, call)}, block_tag],
            }
            for index, call in enumerate(calls)
        ]

        body = await self._request_json("POST", self._rpc_url, json_body=batch)
        if not isinstance(body, list) or len(body) != len(calls):
            raise RemoteQueryError(
                message="Malformed JSON-RPC batch response",
                adapter_name=self._name,
                request_url=self._rpc_url,
                response_body=str(body)[:500],
            )

        # Batch responses may arrive in any order
        by_id = {item.get("id"): item for item in body if isinstance(item, dict)}
        results: list[str] = []
        for index in range(len(calls)):
            item = by_id.get(index)
            if item is None or "error" in item:
                raise RemoteQueryError(
                    message=f"eth_call error: {item.get('error') if item else 'missing response'}",
                    adapter_name=self._name,
                    request_url=self._rpc_url,
                    context={"call_index": index, "block": block_tag},
                )
            results.append(str(decode_uint256(item.get("result") or "0x")))
        return results

    @classmethod
    def for_chain(
        cls,
        chain: str,
        settings: FeeAdapterSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "JsonRpcMultiCall":
        return cls(
            settings.rpc_url(chain),
            timeout=settings.request_timeout_seconds,
            session=session,
            user_agent=settings.user_agent,
        )


class LlamaBlockResolver(HttpCapability):
    """Block resolver backed by a `/block/{chain}/{timestamp}` lookup API."""

    def __init__(
        self,
        chain: str,
        base_url: str = "https://coins.llama.fi",
        timeout: float = 30.0,
        session: Optional[aiohttp.ClientSession] = None,
        user_agent: str = "fee-adapters/1.0",
    ) -> None:
        super().__init__(timeout, session, user_agent, name="block_resolver")
        self._chain = chain
        self._base_url = base_url.rstrip("/")

    async def block_at(self, timestamp: int) -> int:
        url = f"{self._base_url}/block/{self._chain}/{int(timestamp)}"
        body = await self._request_json("GET", url)
        height = body.get("height") if isinstance(body, dict) else None
        if not isinstance(height, int) or isinstance(height, bool) or height < 0:
            raise RemoteQueryError(
                message=f"No block height in response for {self._chain}@{timestamp}",
                adapter_name=self._name,
                chain=self._chain,
                request_url=url,
                response_body=str(body)[:500],
            )
        return height

    @classmethod
    def for_chain(
        cls,
        chain: str,
        settings: FeeAdapterSettings,
        session: Optional[aiohttp.ClientSession] = None,
    ) -> "LlamaBlockResolver":
        return cls(
            chain,
            base_url=settings.block_api_url,
            timeout=settings.request_timeout_seconds,
            session=session,
            user_agent=settings.user_agent,
        )
