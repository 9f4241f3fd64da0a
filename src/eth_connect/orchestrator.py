"""Connection orchestration: configure, handshake and single fallback retry."""

from __future__ import annotations

import copy
import logging
from collections.abc import Mapping
from concurrent.futures import Future
from typing import Any

from .base import RPCBase
from .binder import AddressBinder
from .config import ConnectOptions, configure_transport
from .constants import ConnectionStatus
from .dispatch import Callback, Dispatcher, Outcome
from .exceptions import (
    CoinbaseNotFound,
    ConnectError,
    FallbackExhausted,
    TransportUnreachable,
)
from .state import StateStore
from .sync import FieldSynchronizer
from .types import Api, Connection, TransportConfig

logger = logging.getLogger(__name__)

OptionsLike = ConnectOptions | Mapping[str, Any] | None


class ConnectionOrchestrator:
    """Select a working transport, run the handshake and bind the API tables."""

    def __init__(
        self,
        rpc: RPCBase,
        state: StateStore | None = None,
        *,
        dispatcher: Dispatcher | None = None,
    ) -> None:
        self.rpc = rpc
        self.state = state if state is not None else StateStore()
        self._dispatcher = dispatcher if dispatcher is not None else Dispatcher()
        self.binder = AddressBinder(self.state)
        self.synchronizer = FieldSynchronizer(self.state, rpc, self.binder, self._dispatcher)
        self.status = ConnectionStatus.IDLE
        self.transport: TransportConfig | None = None
        self.last_error: Exception | None = None

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def configure(self, options: OptionsLike) -> TransportConfig:
        """Apply endpoints and contract descriptions without touching the network.

        On a session that already knows its network id the new registry and
        API tables are bound straight away.
        """

        options = _coerce_options(options)
        if self.state.session.connection is None:
            self.status = ConnectionStatus.CONFIGURING

        transport = configure_transport(options)
        self.rpc.configure(transport)
        self.transport = transport

        session = self.state.session
        session.contract_registry = options.contract_registry()
        api = options.api or {}
        session.api = Api(
            functions=copy.deepcopy(api.get("functions")),
            events=copy.deepcopy(api.get("events")),
        )
        if session.network_id is not None:
            self._bind_api()
            if session.from_address:
                self.binder.bind_sender()
        else:
            session.active_contracts = None
        logger.debug(
            "Configured attempt %d: local=%s hosted=%s ws=%s ipc=%s",
            transport.attempt,
            transport.local,
            list(transport.hosted),
            transport.ws,
            transport.ipc,
        )
        return transport

    def connect(
        self, options: OptionsLike = None, callback: Callback | None = None
    ) -> Connection | Future | None:
        """Connect in blocking mode, or in callback mode when ``callback`` is given.

        Blocking mode returns the resolved ``Connection`` or ``None`` once the
        fallback attempt is spent. Callback mode returns a ``Future`` and hands
        the same value to ``callback``.
        """

        if callback is not None:
            return self.async_connect(options, callback)
        return self.sync_connect(options)

    def sync_connect(self, options: OptionsLike = None) -> Connection | None:
        options = _coerce_options(options)
        return self._dispatcher.run(lambda: self._connect_routine(options))

    def async_connect(self, options: OptionsLike, callback: Callback) -> Future:
        options = _coerce_options(options)
        return self._dispatcher.run(
            lambda: self._connect_routine(options), callback, deliver_value=True
        )

    def retry_connect(
        self,
        error: Exception | None,
        options: OptionsLike,
        callback: Callback | None = None,
    ) -> Connection | Future | None:
        """Retry once against the fallback endpoints, or report failure."""

        options = _coerce_options(options)
        return self._dispatcher.run(
            lambda: self._retry_routine(error, options), callback, deliver_value=True
        )

    def sync_from(
        self, account: str | None = None, callback: Callback | None = None
    ) -> Future | None:
        return self.synchronizer.sync_from(account, callback)

    def disconnect(self) -> None:
        self.rpc.disconnect()
        self.state.reset()
        self.transport = None
        self.status = ConnectionStatus.IDLE

    def is_connected(self) -> bool:
        return self.status is ConnectionStatus.BOUND and self.state.session.connection is not None

    def close(self) -> None:
        self._dispatcher.shutdown()

    def __enter__(self) -> ConnectionOrchestrator:
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Core routines
    # ------------------------------------------------------------------
    def _connect_routine(self, options: ConnectOptions) -> Outcome:
        self.state.reset()
        self.last_error = None
        transport = self.configure(options)

        self.status = ConnectionStatus.PROBING
        try:
            connection = self.rpc.connect(transport)
            self.rpc.block_number()
        except TransportUnreachable as exc:
            return self._retry_routine(exc, options)
        except ConnectError as exc:
            unreachable = TransportUnreachable(
                f"[connect] connect: {exc.message}",
                endpoint=getattr(exc, "endpoint", None),
                details={"error": str(exc)},
            )
            return self._retry_routine(unreachable, options)

        self.status = ConnectionStatus.HANDSHAKING
        outcome = self._handshake_routine(connection)
        if not outcome.ok:
            if not isinstance(outcome.error, CoinbaseNotFound):
                # Node answered the probe but not the handshake requests
                unreachable = TransportUnreachable(
                    f"[connect] handshake: {outcome.error}",
                    endpoint=getattr(outcome.error, "endpoint", None),
                    details={"error": str(outcome.error)},
                )
                return self._retry_routine(unreachable, options)

            self.last_error = outcome.error
            self.state.reset()
            self.status = ConnectionStatus.FAILED
            return outcome

        self.status = ConnectionStatus.BOUND
        logger.info("Connected to network %s via %s", self.state.session.network_id, connection)
        return Outcome(value=connection)

    def _handshake_routine(self, connection: Connection) -> Outcome:
        for routine in (
            self.synchronizer.network_id_routine,
            self.synchronizer.coinbase_routine,
            self.synchronizer.gas_price_routine,
        ):
            outcome = routine()
            if not outcome.ok:
                return outcome

        self._bind_api()
        self.binder.bind_sender()

        self.state.session.connection = connection
        return Outcome()

    def _bind_api(self) -> None:
        self.binder.select_active_contracts()
        api = self.state.session.api
        if api.functions is not None:
            self.binder.bind_functions()
        if api.events is not None:
            self.binder.bind_events()

    def _retry_routine(self, error: Exception | None, options: ConnectOptions) -> Outcome:
        if not options.attempts and options.fallback_allowed:
            self.status = ConnectionStatus.FALLING_BACK
            logger.warning(
                "Connection failed (%s); retrying with fallback nodes %s",
                error,
                list(options.fallback_http),
            )
            return self._connect_routine(options.with_attempt(options.attempts + 1))

        self.state.reset()
        self.status = ConnectionStatus.FAILED
        exhausted = FallbackExhausted(
            "[connect] retryConnect: could not connect to any node",
            attempts=options.attempts,
            details={"error": str(error) if error is not None else None},
        )
        self.last_error = exhausted
        logger.error("%s (attempts=%d)", exhausted.message, options.attempts)
        return Outcome(value=None)


def _coerce_options(options: OptionsLike) -> ConnectOptions:
    if isinstance(options, ConnectOptions):
        return options
    return ConnectOptions.from_mapping(options)
