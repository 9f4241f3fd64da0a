"""Constants shared across the connection engine."""

from enum import Enum

# Sentinel some nodes return from eth_coinbase when no account is unlocked
EMPTY_ADDRESS = "0x"

DEFAULT_FALLBACK_HTTP = ("https://eth9000.example",)
DEFAULT_FALLBACK_WS = "wss://ws9000.example"

DEFAULT_REQUEST_TIMEOUT = 10.0


class RPCMethod(str, Enum):
    """JSON-RPC methods issued during the handshake."""

    NET_VERSION = "net_version"
    COINBASE = "eth_coinbase"
    GAS_PRICE = "eth_gasPrice"
    BLOCK_NUMBER = "eth_blockNumber"


class ConnectionStatus(str, Enum):
    """Lifecycle states of a single connection attempt."""

    IDLE = "idle"
    CONFIGURING = "configuring"
    PROBING = "probing"
    HANDSHAKING = "handshaking"
    FALLING_BACK = "falling_back"
    BOUND = "bound"
    FAILED = "failed"
