"""Web3-backed RPC collaborator."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import requests
from web3 import HTTPProvider, IPCProvider, LegacyWebSocketProvider, Web3
from web3.providers import BaseProvider
from web3.types import RPCEndpoint

from .base import RPCBase
from .constants import DEFAULT_REQUEST_TIMEOUT, RPCMethod
from .exceptions import NetworkError, TransportUnreachable
from .types import Connection, TransportConfig

logger = logging.getLogger(__name__)


@dataclass
class Nodes:
    """HTTP nodes configured for the current attempt."""

    local: str | None = None
    hosted: list[str] = field(default_factory=list)


class Web3RPC(RPCBase):
    """Issue handshake requests through a web3.py provider.

    ``connect`` tries IPC first, then WebSocket, then the local HTTP node and
    finally each hosted node. The first provider that answers becomes active
    and the returned ``Connection`` describes the configured endpoints.
    """

    def __init__(
        self,
        *,
        request_timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.request_timeout = request_timeout
        self._http_session = session or requests.Session()
        self.nodes = Nodes()
        self.ws_url: str | None = None
        self.ipc_path: str | None = None
        self.rpc_status: dict[str, int] = {"ws": 0, "ipc": 0}
        self.gas_price: int | None = None
        self._web3: Web3 | None = None
        self._endpoint: str | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def configure(self, transport: TransportConfig) -> None:
        self.nodes = Nodes(local=transport.local, hosted=list(transport.hosted))
        self.ws_url = transport.ws
        self.ipc_path = transport.ipc
        self.rpc_status = {"ws": 0, "ipc": 0}
        if transport.request_timeout is not None:
            self.request_timeout = transport.request_timeout

    def connect(self, transport: TransportConfig) -> Connection:
        self.configure(transport)
        self.disconnect()

        # Ordered by try-attempt
        candidates: list[tuple[str, str, Callable[[], BaseProvider]]] = []
        if ipc_path := transport.ipc:
            candidates.append(
                ("ipc", ipc_path, lambda: IPCProvider(ipc_path, timeout=self.request_timeout))
            )
        if ws_url := transport.ws:
            candidates.append(
                (
                    "ws",
                    ws_url,
                    lambda: LegacyWebSocketProvider(
                        ws_url, websocket_timeout=int(self.request_timeout)
                    ),
                )
            )
        for endpoint in transport.http_endpoints():
            candidates.append(
                ("http", endpoint, lambda endpoint=endpoint: self._http_provider(endpoint))
            )

        for kind, endpoint, build in candidates:
            if not self._activate(build(), endpoint):
                continue

            if kind in self.rpc_status:
                self.rpc_status[kind] = 1
            # Fallback passes report the whole hosted pool they drew from
            http = tuple(transport.hosted) if transport.is_fallback else transport.local
            return Connection(http=http, ws=transport.ws, ipc=transport.ipc)

        raise TransportUnreachable(
            "[connect] connect: no node reachable",
            details={
                "http": transport.http_endpoints(),
                "ws": transport.ws,
                "ipc": transport.ipc,
            },
        )

    def disconnect(self) -> None:
        self._web3 = None
        self._endpoint = None

    @property
    def web3(self) -> Web3:
        if self._web3 is None:
            raise NetworkError("RPC provider not connected; call connect() first")
        return self._web3

    # ------------------------------------------------------------------
    # Requests
    # ------------------------------------------------------------------
    def version(self) -> str | None:
        return self._request(RPCMethod.NET_VERSION)

    def coinbase(self) -> str | None:
        return self._request(RPCMethod.COINBASE)

    def get_gas_price(self) -> str:
        return self._request(RPCMethod.GAS_PRICE)

    def block_number(self) -> str:
        try:
            return self._request(RPCMethod.BLOCK_NUMBER)
        except NetworkError as exc:
            raise TransportUnreachable(
                "[connect] blockNumber: liveness probe failed",
                endpoint=self._endpoint,
                details=exc.details,
            ) from exc

    # ------------------------------------------------------------------
    # Internal wiring
    # ------------------------------------------------------------------
    def _http_provider(self, endpoint: str) -> HTTPProvider:
        return HTTPProvider(
            endpoint,
            request_kwargs={"timeout": self.request_timeout},
            session=self._http_session,
        )

    def _activate(self, provider: BaseProvider, endpoint: str) -> bool:
        web3 = Web3(provider)
        try:
            connected = web3.is_connected()
        except Exception as exc:  # pragma: no cover - defensive
            logger.debug("Provider check failed for %s: %s", endpoint, exc)
            connected = False

        if not connected:
            logger.info("Node unreachable at %s", endpoint)
            return False

        self._web3 = web3
        self._endpoint = endpoint
        logger.info("Connected to node at %s", endpoint)
        return True

    def _request(self, method: RPCMethod) -> Any:
        provider = self.web3.provider
        try:
            response = provider.make_request(RPCEndpoint(method.value), [])
        except Exception as exc:
            raise NetworkError(
                f"[rpc] {method.value}: request failed",
                endpoint=self._endpoint,
                details={"error": str(exc)},
            ) from exc

        if "error" in response:
            raise NetworkError(
                f"[rpc] {method.value}: node returned an error",
                endpoint=self._endpoint,
                details={"error": response["error"]},
            )
        return response.get("result")
