from __future__ import annotations

from collections.abc import Callable
from typing import Any

import pytest

from eth_connect.base import RPCBase
from eth_connect.dispatch import Dispatcher
from eth_connect.exceptions import ConnectError, TransportUnreachable
from eth_connect.orchestrator import ConnectionOrchestrator
from eth_connect.state import StateStore
from eth_connect.types import Api, Connection, Session, TransportConfig


class DummyRPC(RPCBase):
    """In-memory node that records every request it receives."""

    def __init__(
        self,
        *,
        network_id: str | None = "3",
        coinbase: str | None = "0xb0b",
        gas_price: str = "0x4a817c801",
        block_number: str = "0x2328",
        reachable: Callable[[TransportConfig], bool] | None = None,
    ) -> None:
        self.network_id = network_id
        self.coinbase_value = coinbase
        self.gas_price_value = gas_price
        self.block_number_value = block_number
        self.reachable = reachable or (lambda transport: True)
        self.gas_price: int | None = None
        self.calls: list[str] = []
        self.configured: list[TransportConfig] = []
        self.transports: list[TransportConfig] = []

    def version(self) -> str | None:
        self.calls.append("version")
        return self.network_id

    def coinbase(self) -> str | None:
        self.calls.append("coinbase")
        return self.coinbase_value

    def get_gas_price(self) -> str:
        self.calls.append("get_gas_price")
        return self.gas_price_value

    def block_number(self) -> str:
        self.calls.append("block_number")
        return self.block_number_value

    def configure(self, transport: TransportConfig) -> None:
        self.configured.append(transport)

    def connect(self, transport: TransportConfig) -> Connection:
        self.calls.append("connect")
        self.transports.append(transport)
        if not self.reachable(transport):
            raise TransportUnreachable("[connect] connect: no node reachable")
        http: str | tuple[str, ...] | None = transport.local
        if http is None and transport.hosted:
            http = tuple(transport.hosted)
        return Connection(http=http, ws=transport.ws, ipc=transport.ipc)

    def disconnect(self) -> None:
        self.calls.append("disconnect")


def make_session(**overrides: Any) -> Session:
    """Build a populated session on network 3 with two contracts."""

    values: dict[str, Any] = {
        "from_address": "0xb0b",
        "coinbase": "0xb0b",
        "network_id": "3",
        "contract_registry": {"3": {"contract1": "0xc1", "contract2": "0xc2"}},
        "active_contracts": {"contract1": "0xc1", "contract2": "0xc2"},
        "api": Api(functions=None, events=None),
        "connection": Connection(http="http://127.0.0.1:8545", ws="ws://127.0.0.1:8546"),
    }
    values.update(overrides)
    return Session(**values)


@pytest.fixture
def dispatcher():
    dispatcher = Dispatcher()
    yield dispatcher
    dispatcher.shutdown()


@pytest.fixture
def rpc() -> DummyRPC:
    return DummyRPC()


@pytest.fixture
def orchestrator(rpc: DummyRPC, dispatcher: Dispatcher) -> ConnectionOrchestrator:
    return ConnectionOrchestrator(rpc, StateStore(), dispatcher=dispatcher)


@pytest.fixture(params=["sync", "async"])
def mode(request: pytest.FixtureRequest) -> str:
    return request.param


@pytest.fixture
def invoke(mode: str) -> Callable[..., Any]:
    """Call a dual-mode operation and return what its caller observes.

    In sync mode that is the raised ``ConnectError`` or ``None``; in async
    mode it is the single value handed to the callback.
    """

    def call(operation: Callable[..., Any], *args: Any) -> Any:
        if mode == "sync":
            try:
                operation(*args)
            except ConnectError as exc:
                return exc
            return None

        received: list[Any] = []
        future = operation(*args, callback=received.append)
        try:
            future.result(timeout=5)
        except ConnectError:
            pass
        assert len(received) == 1
        return received[0]

    return call
