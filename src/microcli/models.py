"""Canonical data shapes shared across all microcli modules.

**Composition models** describe what gets assembled into the application:
    :class:`FlagKind`, :class:`FlagDefinition` and :class:`Command`.

**Runtime models** live for a single invocation or for the process:
    :class:`InvocationContext` and :class:`SharedConfiguration` with its
    per-collaborator sections.

**Authorization models** describe the rules loaded into an authorization
backend: :class:`Access`, :class:`AuthResource` and :class:`AuthRule`.

Pydantic v2 is used for everything that is pure data. :class:`Command` and
:class:`InvocationContext` carry callables and live references, so they are
plain dataclasses.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# --- Flags ---


class FlagKind(str, enum.Enum):
    """The value kind of a global or per-command flag."""

    BOOL = "bool"
    STRING = "string"


class FlagDefinition(BaseModel):
    """A single command-line flag with its environment bindings and default.

    Example::

        FlagDefinition(
            name="api_address",
            usage="Set the api address e.g 0.0.0.0:8080",
            env_vars=["MICRO_API_ADDRESS"],
        )
    """

    model_config = ConfigDict(frozen=True)

    name: str = Field(description="Flag name, used as --<name> on the command line")
    kind: FlagKind = FlagKind.STRING
    usage: str = ""
    env_vars: list[str] = Field(
        default_factory=list,
        description="Environment variables consulted when the flag is not given",
    )
    aliases: list[str] = Field(
        default_factory=list,
        description="Alternative names; single letters become short options",
    )
    default: Optional[Union[bool, str]] = None


# --- Commands ---


@dataclass
class Command:
    """A named command contributed by the platform or by a plugin.

    Attributes:
        name: Unique command name across the whole application.
        usage: One-line help text.
        action: Called with the :class:`InvocationContext` of the command
            when it runs. Groups with subcommands may leave it unset.
        flags: Flags owned by this command only.
        subcommands: Nested commands; turns the command into a group.
        aliases: Alternative names shown in help.
    """

    name: str
    usage: str = ""
    action: Optional[Callable[["InvocationContext"], Any]] = None
    flags: list[FlagDefinition] = field(default_factory=list)
    subcommands: list["Command"] = field(default_factory=list)
    aliases: list[str] = field(default_factory=list)


# --- Shared configuration ---


class ApiConfig(BaseModel):
    """Settings forwarded to the API gateway."""

    address: str = ":8080"
    namespace: str = "go.micro.api"
    handler: str = "meta"


class ProxyConfig(BaseModel):
    """Settings forwarded to the proxy."""

    address: str = ":8081"


class WebConfig(BaseModel):
    """Settings forwarded to the web dashboard."""

    address: str = ":8082"
    namespace: str = "go.micro.web"
    host: str = ""


class NetworkConfig(BaseModel):
    """Settings forwarded to the network service."""

    address: str = ":8085"


class TunnelConfig(BaseModel):
    """Settings forwarded to the tunnel."""

    address: str = ":8083"


class StoreConfig(BaseModel):
    """Database and table the store was initialised with, once known."""

    database: Optional[str] = None
    table: Optional[str] = None


class SharedConfiguration(BaseModel):
    """Process-wide configuration consumed by the external collaborators.

    Written once by the hook chain (flag binding and store defaulting) and
    treated as read-only afterwards.
    """

    api: ApiConfig = Field(default_factory=ApiConfig)
    proxy: ProxyConfig = Field(default_factory=ProxyConfig)
    web: WebConfig = Field(default_factory=WebConfig)
    network: NetworkConfig = Field(default_factory=NetworkConfig)
    tunnel: TunnelConfig = Field(default_factory=TunnelConfig)
    store: StoreConfig = Field(default_factory=StoreConfig)


# --- Invocation ---


@dataclass
class InvocationContext:
    """Per-run view of the parsed command line.

    Attributes:
        app_name: Name of the composed application (e.g. ``"micro"``).
        values: Parsed flag values keyed by flag name.
        args: Raw positional arguments, starting with the command name.
        config: The shared configuration of this process.
    """

    app_name: str
    values: dict[str, Any] = field(default_factory=dict)
    args: list[str] = field(default_factory=list)
    config: SharedConfiguration = field(default_factory=SharedConfiguration)

    def string(self, name: str) -> str:
        """Return the string value of *name*, or ``""`` when unset."""
        value = self.values.get(name)
        return "" if value is None else str(value)

    def boolean(self, name: str) -> bool:
        """Return the boolean value of *name*, ``False`` when unset."""
        return bool(self.values.get(name))

    def is_set(self, name: str) -> bool:
        """Return ``True`` if *name* carries a non-empty string value."""
        return len(self.string(name)) > 0

    def first(self) -> str:
        """Return the first positional argument, or ``""`` if there is none."""
        return self.args[0] if self.args else ""


# --- Authorization ---


class Access(str, enum.Enum):
    """Whether a matching rule grants or denies access."""

    GRANTED = "granted"
    DENIED = "denied"


SCOPE_PUBLIC = ""
"""Rule scope matching every caller, authenticated or not."""

SCOPE_ACCOUNT = "*"
"""Rule scope matching any authenticated account."""


class AuthResource(BaseModel):
    """A resource an authorization rule applies to. ``*`` matches anything."""

    model_config = ConfigDict(frozen=True)

    type: str
    name: str
    endpoint: str = "*"


class AuthRule(BaseModel):
    """An authorization rule as stored by an authorization backend."""

    model_config = ConfigDict(frozen=True)

    id: str
    scope: str = SCOPE_PUBLIC
    resource: AuthResource
    access: Access = Access.GRANTED
    priority: int = 0
