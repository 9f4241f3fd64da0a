"""eth-connect - Ethereum node connection and contract address binding.

This library selects a working transport to an Ethereum node, synchronizes
the session with the remote chain and binds network-agnostic contract
function and event tables to the addresses of the connected network.
"""

from .base import RPCBase
from .binder import AddressBinder
from .config import ConnectOptions, configure_transport
from .constants import ConnectionStatus
from .dispatch import Dispatcher, Outcome
from .exceptions import (
    CoinbaseNotFound,
    ConnectError,
    FallbackExhausted,
    NetworkError,
    TransportUnreachable,
    ValidationError,
)
from .orchestrator import ConnectionOrchestrator
from .rpc import Web3RPC
from .state import StateStore
from .sync import FieldSynchronizer
from .types import Api, Connection, Session, TransportConfig

__version__ = "0.1.0"

__all__ = [
    # Engine
    "ConnectionOrchestrator",
    "FieldSynchronizer",
    "AddressBinder",
    "StateStore",
    "Dispatcher",
    "Outcome",
    # RPC collaborators
    "RPCBase",
    "Web3RPC",
    # Configuration
    "ConnectOptions",
    "configure_transport",
    "ConnectionStatus",
    # Types
    "Api",
    "Connection",
    "Session",
    "TransportConfig",
    # Exceptions
    "ConnectError",
    "NetworkError",
    "TransportUnreachable",
    "FallbackExhausted",
    "CoinbaseNotFound",
    "ValidationError",
]
