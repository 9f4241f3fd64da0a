"""Configuration containers for the connection orchestrator."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field, replace
from typing import Any

from .constants import DEFAULT_FALLBACK_HTTP, DEFAULT_FALLBACK_WS
from .exceptions import ValidationError
from .types import ContractRegistry, TransportConfig


@dataclass(frozen=True)
class ConnectOptions:
    """Caller-supplied options for a connection attempt."""

    http: str | None = None
    ws: str | None = None
    ipc: str | None = None
    contracts: Mapping[Any, Mapping[str, str]] = field(default_factory=dict)
    api: Mapping[str, Any] | None = None
    no_fallback: bool = False
    attempts: int = 0
    fallback_http: tuple[str, ...] = DEFAULT_FALLBACK_HTTP
    fallback_ws: str | None = DEFAULT_FALLBACK_WS
    request_timeout: float | None = None

    def __post_init__(self) -> None:
        for name in ("http", "ws", "ipc", "fallback_ws"):
            value = getattr(self, name)
            if value is not None and not isinstance(value, str):
                raise ValidationError(f"{name} must be a string", field=name, value=value)

        if isinstance(self.attempts, bool) or not isinstance(self.attempts, int):
            raise ValidationError(
                "attempts must be an integer", field="attempts", value=self.attempts
            )
        if self.attempts < 0:
            raise ValidationError(
                "attempts cannot be negative", field="attempts", value=self.attempts
            )

        if isinstance(self.fallback_http, str):
            object.__setattr__(self, "fallback_http", (self.fallback_http,))
        else:
            object.__setattr__(self, "fallback_http", tuple(self.fallback_http))

        if not isinstance(self.contracts, Mapping):
            raise ValidationError(
                "contracts must map network ids to contract tables",
                field="contracts",
                value=self.contracts,
            )

        if self.request_timeout is not None and self.request_timeout <= 0:
            raise ValidationError(
                "request_timeout must be positive",
                field="request_timeout",
                value=self.request_timeout,
            )

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any] | None) -> ConnectOptions:
        """Construct options from a JSON-like mapping.

        Accepts both the camelCase keys used by JSON configuration files
        (``noFallback``, ``fallbackHttp``) and their snake_case spellings.
        """

        if data is None:
            return cls()

        def pick(*keys: str, default: Any = None) -> Any:
            for key in keys:
                if key in data:
                    return data[key]
            return default

        kwargs: dict[str, Any] = {
            "http": pick("http"),
            "ws": pick("ws"),
            "ipc": pick("ipc"),
            "contracts": pick("contracts", default=None) or {},
            "api": pick("api"),
            "no_fallback": bool(pick("noFallback", "no_fallback", default=False)),
            "attempts": pick("attempts", default=None) or 0,
        }

        fallback_http = pick("fallbackHttp", "fallback_http")
        if fallback_http is not None:
            kwargs["fallback_http"] = fallback_http
        if "fallbackWs" in data or "fallback_ws" in data:
            kwargs["fallback_ws"] = pick("fallbackWs", "fallback_ws")
        timeout = pick("requestTimeout", "request_timeout")
        if timeout is not None:
            kwargs["request_timeout"] = float(timeout)

        return cls(**kwargs)

    @property
    def fallback_allowed(self) -> bool:
        return not self.no_fallback and bool(self.fallback_http)

    def with_attempt(self, attempts: int) -> ConnectOptions:
        """Return a copy of the options for the given attempt index."""

        return replace(self, attempts=attempts)

    def contract_registry(self) -> ContractRegistry:
        """Return the contract registry keyed by string network id."""

        return {str(network): dict(table) for network, table in self.contracts.items()}


def configure_transport(options: ConnectOptions, attempt: int | None = None) -> TransportConfig:
    """Derive the transport configuration for a connection attempt.

    The first attempt (and every attempt when fallback is disabled) uses the
    caller's preferred endpoints. Later attempts swap in the hosted fallback
    nodes and drop the local HTTP node and IPC path.
    """

    if attempt is None:
        attempt = options.attempts

    if attempt and not options.no_fallback:
        return TransportConfig(
            local=None,
            hosted=tuple(options.fallback_http),
            ws=options.fallback_ws,
            ipc=None,
            no_fallback=False,
            attempt=attempt,
            request_timeout=options.request_timeout,
        )

    return TransportConfig(
        local=options.http,
        hosted=(),
        ws=options.ws,
        ipc=options.ipc,
        no_fallback=options.no_fallback,
        attempt=attempt,
        request_timeout=options.request_timeout,
    )
