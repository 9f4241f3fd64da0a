"""Type definitions and data models for eth-connect."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

Address = str  # Hex account or contract address
NetworkID = str  # Value returned by net_version

# method name -> call descriptor ({"to": ..., "from": ..., ...})
MethodTable = dict[str, dict[str, Any]]
# contract name -> method table
FunctionsAPI = dict[str, MethodTable]
# event name -> event descriptor ({"contract": ..., "address": ..., ...})
EventsAPI = dict[str, dict[str, Any]]
# network id -> (contract name -> address)
ContractRegistry = dict[NetworkID, dict[str, Address]]


@dataclass
class Api:
    """Function and event descriptor tables bound to the active network."""

    functions: FunctionsAPI | None = None
    events: EventsAPI | None = None


@dataclass(frozen=True)
class Connection:
    """Resolved transport descriptor for an established connection."""

    http: str | tuple[str, ...] | None = None
    ws: str | None = None
    ipc: str | None = None

    def as_dict(self) -> dict[str, Any]:
        http = list(self.http) if isinstance(self.http, tuple) else self.http
        return {"http": http, "ws": self.ws, "ipc": self.ipc}


@dataclass(frozen=True)
class TransportConfig:
    """Endpoints to use for one connection attempt."""

    local: str | None = None
    hosted: tuple[str, ...] = field(default_factory=tuple)
    ws: str | None = None
    ipc: str | None = None
    no_fallback: bool = False
    attempt: int = 0
    request_timeout: float | None = None

    @property
    def is_fallback(self) -> bool:
        return self.local is None and bool(self.hosted)

    def http_endpoints(self) -> list[str]:
        """Return HTTP endpoints in the order they should be tried."""

        endpoints = [self.local] if self.local else []
        endpoints.extend(self.hosted)
        return endpoints


@dataclass
class Session:
    """Mutable session record shared by the binder, synchronizer and orchestrator."""

    from_address: Address | None = None
    coinbase: Address | None = None
    network_id: NetworkID | None = None
    contract_registry: ContractRegistry | None = None
    active_contracts: dict[str, Address] | None = None
    api: Api = field(default_factory=Api)
    connection: Connection | None = None
