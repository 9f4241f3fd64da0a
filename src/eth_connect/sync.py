"""Pull remote chain values into the session."""

from __future__ import annotations

import logging
from concurrent.futures import Future

from eth_typing import HexStr
from web3 import Web3

from .base import RPCBase
from .binder import AddressBinder
from .constants import EMPTY_ADDRESS
from .dispatch import Callback, Dispatcher, Outcome
from .exceptions import CoinbaseNotFound, ConnectError, ValidationError
from .state import StateStore
from .types import Address

logger = logging.getLogger(__name__)


class FieldSynchronizer:
    """Synchronize network id, coinbase, gas price and sender with the node.

    Every public method blocks and raises on error when called without a
    callback. With a callback it returns a ``Future`` straight away and the
    callback receives the error, or ``None`` on success.
    """

    def __init__(
        self,
        state: StateStore,
        rpc: RPCBase,
        binder: AddressBinder,
        dispatcher: Dispatcher,
    ) -> None:
        self._state = state
        self._rpc = rpc
        self._binder = binder
        self._dispatcher = dispatcher

    # ------------------------------------------------------------------
    # Public entry points
    # ------------------------------------------------------------------
    def sync_network_id(self, callback: Callback | None = None) -> Future | None:
        return self._dispatcher.run(self.network_id_routine, callback)

    def sync_coinbase(self, callback: Callback | None = None) -> Future | None:
        return self._dispatcher.run(self.coinbase_routine, callback)

    def sync_gas_price(self, callback: Callback | None = None) -> Future | None:
        return self._dispatcher.run(self.gas_price_routine, callback)

    def sync_from(
        self, account: Address | None = None, callback: Callback | None = None
    ) -> Future | None:
        return self._dispatcher.run(lambda: self.from_routine(account), callback)

    # ------------------------------------------------------------------
    # Core routines
    # ------------------------------------------------------------------
    def network_id_routine(self) -> Outcome:
        try:
            network_id = self._rpc.version()
        except ConnectError as exc:
            return Outcome(error=exc)

        self._state.session.network_id = None if network_id is None else str(network_id)
        logger.debug("Network id set to %s", network_id)
        return Outcome()

    def coinbase_routine(self) -> Outcome:
        try:
            coinbase = self._rpc.coinbase()
        except ConnectError as exc:
            return Outcome(error=exc)

        if not coinbase or coinbase == EMPTY_ADDRESS:
            logger.warning("Node returned no coinbase: %r", coinbase)
            return Outcome(error=CoinbaseNotFound(coinbase))

        session = self._state.session
        session.coinbase = coinbase
        if not session.from_address:
            self._binder.bind_sender()
        logger.debug("Coinbase set to %s", coinbase)
        return Outcome()

    def gas_price_routine(self) -> Outcome:
        try:
            raw = self._rpc.get_gas_price()
        except ConnectError as exc:
            return Outcome(error=exc)

        try:
            gas_price = raw if isinstance(raw, int) else Web3.to_int(hexstr=HexStr(raw))
        except (TypeError, ValueError) as exc:
            return Outcome(
                error=ValidationError(
                    "[connect] setGasPrice: invalid gas price",
                    field="gas_price",
                    value=raw,
                    details={"error": str(exc)},
                )
            )

        self._rpc.gas_price = gas_price
        logger.debug("Gas price set to %d", gas_price)
        return Outcome()

    def from_routine(self, account: Address | None = None) -> Outcome:
        self._binder.bind_sender(account)
        return Outcome()
