"""Tests for eth_connect.sync in both calling conventions."""

from __future__ import annotations

from typing import Any

import pytest
from conftest import DummyRPC, make_session

from eth_connect.binder import AddressBinder
from eth_connect.dispatch import Dispatcher
from eth_connect.exceptions import CoinbaseNotFound, ValidationError
from eth_connect.state import StateStore
from eth_connect.sync import FieldSynchronizer
from eth_connect.types import Api


def _synchronizer(
    rpc: DummyRPC, dispatcher: Dispatcher, **overrides: Any
) -> tuple[FieldSynchronizer, StateStore]:
    state = StateStore(make_session(**overrides))
    binder = AddressBinder(state)
    return FieldSynchronizer(state, rpc, binder, dispatcher), state


# ----------------------------------------------------------------------
# sync_gas_price
# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    ("raw", "expected"),
    [("0x4a817c801", 20000000001), ("0x4a817c800", 20000000000)],
)
def test_sync_gas_price_stores_integer_on_rpc(invoke, dispatcher, raw: str, expected: int) -> None:
    rpc = DummyRPC(gas_price=raw)
    synchronizer, state = _synchronizer(rpc, dispatcher)
    before = state.snapshot()

    error = invoke(synchronizer.sync_gas_price)

    assert error is None
    assert rpc.gas_price == expected
    assert state.session == before
    assert rpc.calls == ["get_gas_price"]


def test_sync_gas_price_rejects_garbage(invoke, dispatcher) -> None:
    rpc = DummyRPC(gas_price="not-hex")
    synchronizer, _ = _synchronizer(rpc, dispatcher)

    error = invoke(synchronizer.sync_gas_price)

    assert isinstance(error, ValidationError)
    assert error.value == "not-hex"
    assert rpc.gas_price is None


# ----------------------------------------------------------------------
# sync_network_id
# ----------------------------------------------------------------------
@pytest.mark.parametrize("current", ["3", "1"])
def test_sync_network_id_writes_remote_value(invoke, dispatcher, current: str) -> None:
    rpc = DummyRPC(network_id="3")
    synchronizer, state = _synchronizer(rpc, dispatcher, network_id=current)

    error = invoke(synchronizer.sync_network_id)

    assert error is None
    assert state.session.network_id == "3"
    assert rpc.calls == ["version"]


# ----------------------------------------------------------------------
# sync_coinbase
# ----------------------------------------------------------------------
@pytest.mark.parametrize(
    ("from_address", "coinbase", "expected_from"),
    [
        ("0xd00d", None, "0xd00d"),
        (None, None, "0xb0b"),
        (None, "0xb0b", "0xb0b"),
        ("0xd00d", "0xb0b", "0xd00d"),
    ],
)
def test_sync_coinbase_sets_coinbase_and_derives_sender(
    invoke, dispatcher, from_address: str | None, coinbase: str | None, expected_from: str
) -> None:
    rpc = DummyRPC(coinbase="0xb0b")
    synchronizer, state = _synchronizer(
        rpc, dispatcher, from_address=from_address, coinbase=coinbase
    )

    error = invoke(synchronizer.sync_coinbase)

    assert error is None
    assert state.session.coinbase == "0xb0b"
    assert state.session.from_address == expected_from


@pytest.mark.parametrize("remote", ["0x", None])
def test_sync_coinbase_missing_leaves_session_unchanged(invoke, dispatcher, remote) -> None:
    rpc = DummyRPC(coinbase=remote)
    synchronizer, state = _synchronizer(rpc, dispatcher, from_address="0xd00d", coinbase="0xb0b")

    error = invoke(synchronizer.sync_coinbase)

    assert isinstance(error, CoinbaseNotFound)
    assert str(error) == "[connect] setCoinbase: coinbase not found"
    assert state.session.coinbase == "0xb0b"
    assert state.session.from_address == "0xd00d"


def test_sync_coinbase_stamps_sender_on_functions(invoke, dispatcher) -> None:
    rpc = DummyRPC(coinbase="0xb0b")
    synchronizer, state = _synchronizer(
        rpc,
        dispatcher,
        from_address=None,
        coinbase=None,
        api=Api(functions={"contract1": {"method1": {"to": "0xc1"}}}),
    )

    invoke(synchronizer.sync_coinbase)

    assert state.session.api.functions == {
        "contract1": {"method1": {"to": "0xc1", "from": "0xb0b"}}
    }


# ----------------------------------------------------------------------
# sync_from
# ----------------------------------------------------------------------
def test_sync_from_overrides_descriptor_sender(invoke, dispatcher, rpc) -> None:
    synchronizer, state = _synchronizer(
        rpc,
        dispatcher,
        from_address="0xb0b",
        api=Api(functions={"contract1": {"method1": {"to": "0xc1"}}}),
    )

    error = invoke(synchronizer.sync_from, "0xd00d")

    assert error is None
    assert state.session.from_address == "0xb0b"
    assert state.session.api.functions == {
        "contract1": {"method1": {"to": "0xc1", "from": "0xd00d"}}
    }
    assert rpc.calls == []


# ----------------------------------------------------------------------
# Mode equivalence
# ----------------------------------------------------------------------
def test_blocking_and_callback_modes_leave_identical_state(dispatcher) -> None:
    def run(use_callback: bool) -> tuple[StateStore, DummyRPC]:
        rpc = DummyRPC(network_id="1", coinbase="0xb0b", gas_price="0x4a817c801")
        synchronizer, state = _synchronizer(
            rpc,
            dispatcher,
            from_address=None,
            coinbase=None,
            network_id=None,
            api=Api(functions={"contract1": {"method1": {}}}),
        )
        for operation in (
            synchronizer.sync_network_id,
            synchronizer.sync_coinbase,
            synchronizer.sync_gas_price,
        ):
            if use_callback:
                operation(callback=lambda error: None).result(timeout=5)
            else:
                operation()
        return state, rpc

    blocking_state, blocking_rpc = run(use_callback=False)
    callback_state, callback_rpc = run(use_callback=True)

    assert blocking_state.session == callback_state.session
    assert blocking_rpc.gas_price == callback_rpc.gas_price == 20000000001
    assert blocking_rpc.calls == callback_rpc.calls
