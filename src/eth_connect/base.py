"""RPC collaborator interface consumed by the connection engine."""

from abc import ABC, abstractmethod

from .types import Connection, TransportConfig


class RPCBase(ABC):
    """Node RPC interface.

    Implementations issue one JSON-RPC request per call and block until the
    node answers. ``gas_price`` is written by the field synchronizer.
    """

    gas_price: int | None = None

    @abstractmethod
    def version(self) -> str | None:
        pass

    @abstractmethod
    def coinbase(self) -> str | None:
        pass

    @abstractmethod
    def get_gas_price(self) -> str:
        pass

    @abstractmethod
    def block_number(self) -> str:
        pass

    @abstractmethod
    def configure(self, transport: TransportConfig) -> None:
        pass

    @abstractmethod
    def connect(self, transport: TransportConfig) -> Connection:
        pass

    @abstractmethod
    def disconnect(self) -> None:
        pass
