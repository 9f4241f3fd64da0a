"""Bind network-agnostic function and event tables to concrete addresses."""

from __future__ import annotations

import logging

from .state import StateStore
from .types import Address

logger = logging.getLogger(__name__)


class AddressBinder:
    """Keep active contracts and the bound API tables in step with the network id."""

    def __init__(self, state: StateStore) -> None:
        self._state = state

    def select_active_contracts(self) -> None:
        """Point ``active_contracts`` at the registry entry for the current network."""

        session = self._state.session
        registry = session.contract_registry
        if registry is None or session.network_id is None:
            session.active_contracts = None
            return

        session.active_contracts = registry.get(str(session.network_id))
        if session.active_contracts is None:
            logger.warning("No contracts registered for network %s", session.network_id)

    def bind_functions(self) -> None:
        """Rewrite each method descriptor's ``to`` with the active contract address."""

        session = self._state.session
        functions = session.api.functions
        contracts = session.active_contracts
        if functions is None or not contracts:
            return

        for contract_name, methods in functions.items():
            address = contracts.get(contract_name)
            if address is None:
                continue
            bound = address.lower()
            for descriptor in methods.values():
                descriptor["to"] = bound

        logger.debug("Bound functions API for network %s", session.network_id)

    def bind_events(self) -> None:
        """Set each event's ``address`` from the contract it belongs to."""

        session = self._state.session
        events = session.api.events
        contracts = session.active_contracts
        if events is None or not contracts:
            return

        for descriptor in events.values():
            address = contracts.get(descriptor.get("contract"))
            if address is not None:
                descriptor["address"] = address.lower()

        logger.debug("Bound events API for network %s", session.network_id)

    def bind_sender(self, account: Address | None = None) -> None:
        """Resolve the session sender and stamp it on every function descriptor.

        An already-resolved ``from_address`` is never replaced. When ``account``
        is given it is used for the descriptors even if the session sender
        stays unchanged.
        """

        session = self._state.session
        if not session.from_address:
            session.from_address = account or session.coinbase

        sender = account or session.from_address
        functions = session.api.functions
        if functions is None:
            return

        for methods in functions.values():
            for descriptor in methods.values():
                descriptor["from"] = sender
