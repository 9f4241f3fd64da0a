"""Session state container."""

from __future__ import annotations

import copy
import logging

from .types import Api, Session

logger = logging.getLogger(__name__)


class StateStore:
    """Own the mutable session record for a connection attempt."""

    def __init__(self, session: Session | None = None) -> None:
        self._session = session if session is not None else Session()

    @property
    def session(self) -> Session:
        return self._session

    def reset(self) -> None:
        """Return every session field to the empty baseline."""

        session = self._session
        session.from_address = None
        session.coinbase = None
        session.network_id = None
        session.contract_registry = None
        session.active_contracts = None
        session.api = Api(functions=None, events=None)
        session.connection = None
        logger.debug("Session state reset")

    def snapshot(self) -> Session:
        return copy.deepcopy(self._session)
