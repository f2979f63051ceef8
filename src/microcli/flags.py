"""Global flag definitions and the registry that assembles them.

:data:`BASE_FLAGS` lists the flags every ``micro`` invocation accepts. Each
one reads a ``MICRO_*`` environment variable when it is not given on the
command line, so the precedence at parse time is explicit flag, then
environment variable, then default.

:class:`FlagRegistry` appends the base set and then every plugin's
contribution in plugin order, refusing duplicate names so a plugin can never
silently shadow a platform flag (or another plugin's).
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

import click

from microcli.exceptions import ConfigurationConflictError
from microcli.models import FlagDefinition, FlagKind
from microcli.plugins.base import Plugin

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_URL = "https://go.micro.mu/update"
"""Where the platform looks for system updates unless ``--update_url`` says otherwise."""

BASE_OWNER = "base flags"


def _bool(name: str, usage: str, env: str, default: bool = False) -> FlagDefinition:
    return FlagDefinition(
        name=name,
        kind=FlagKind.BOOL,
        usage=usage,
        env_vars=[env],
        default=default,
    )


def _string(
    name: str,
    usage: str,
    env: str,
    default: str | None = None,
    aliases: Sequence[str] = (),
) -> FlagDefinition:
    return FlagDefinition(
        name=name,
        usage=usage,
        env_vars=[env],
        default=default,
        aliases=list(aliases),
    )


BASE_FLAGS: tuple[FlagDefinition, ...] = (
    _bool("local", "Enable local only development: Defaults to true.", "MICRO_LOCAL"),
    _bool(
        "enable_acme",
        "Enables ACME support via Let's Encrypt. ACME hosts should also be specified.",
        "MICRO_ENABLE_ACME",
    ),
    _string(
        "acme_hosts",
        "Comma separated list of hostnames to manage ACME certs for",
        "MICRO_ACME_HOSTS",
    ),
    _string(
        "acme_provider",
        "The provider that will be used to communicate with Let's Encrypt. "
        "Valid options: autocert, certmagic",
        "MICRO_ACME_PROVIDER",
    ),
    _bool(
        "enable_tls",
        "Enable TLS support. Expects cert and key file to be specified",
        "MICRO_ENABLE_TLS",
    ),
    _string("tls_cert_file", "Path to the TLS Certificate file", "MICRO_TLS_CERT_FILE"),
    _string("tls_key_file", "Path to the TLS Key file", "MICRO_TLS_KEY_FILE"),
    _string(
        "tls_client_ca_file",
        "Path to the TLS CA file to verify clients against",
        "MICRO_TLS_CLIENT_CA_FILE",
    ),
    _string("api_address", "Set the api address e.g 0.0.0.0:8080", "MICRO_API_ADDRESS"),
    _string("namespace", "Set the micro service namespace", "MICRO_NAMESPACE", default="micro"),
    _string(
        "proxy_address",
        "Proxy requests via the HTTP address specified",
        "MICRO_PROXY_ADDRESS",
    ),
    _string("web_address", "Set the web UI address e.g 0.0.0.0:8082", "MICRO_WEB_ADDRESS"),
    _string("network", "Set the micro network name: local, go.micro", "MICRO_NETWORK"),
    _string(
        "network_address",
        "Set the micro network address e.g. :9093",
        "MICRO_NETWORK_ADDRESS",
    ),
    _string(
        "gateway_address",
        "Set the micro default gateway address e.g. :9094",
        "MICRO_GATEWAY_ADDRESS",
    ),
    _string(
        "tunnel_address",
        "Set the micro tunnel address e.g. :8083",
        "MICRO_TUNNEL_ADDRESS",
    ),
    _string(
        "api_handler",
        "Specify the request handler to be used for mapping HTTP requests to "
        "services; {api, proxy, rpc}",
        "MICRO_API_HANDLER",
    ),
    _string(
        "api_namespace",
        "Set the namespace used by the API e.g. com.example.api",
        "MICRO_API_NAMESPACE",
    ),
    _string(
        "web_namespace",
        "Set the namespace used by the Web proxy e.g. com.example.web",
        "MICRO_WEB_NAMESPACE",
    ),
    _string(
        "web_url",
        "Set the host used for the web dashboard e.g web.example.com",
        "MICRO_WEB_HOST",
    ),
    _bool("enable_stats", "Enable stats", "MICRO_ENABLE_STATS"),
    _bool("auto_update", "Enable automatic updates", "MICRO_AUTO_UPDATE"),
    _string(
        "update_url",
        "Set the url to retrieve system updates from",
        "MICRO_UPDATE_URL",
        default=DEFAULT_UPDATE_URL,
    ),
    _bool("report_usage", "Report usage statistics", "MICRO_REPORT_USAGE", default=True),
    _string("env", "Override environment", "MICRO_ENV", aliases=("e",)),
    _string("store_database", "Database option for the underlying store", "MICRO_STORE_DATABASE"),
    _string("store_table", "Table option for the underlying store", "MICRO_STORE_TABLE"),
)


class FlagRegistry:
    """Ordered, duplicate-free collection of global flags.

    Both flag names and their aliases share one namespace: ``--env`` and a
    plugin flag aliased ``env`` conflict just like two flags named ``env``.
    """

    def __init__(self) -> None:
        self._flags: list[FlagDefinition] = []
        self._owners: dict[str, str] = {}

    def add(self, flag: FlagDefinition, owner: str) -> None:
        """Append *flag*, contributed by *owner*.

        Raises:
            ConfigurationConflictError: If the name or an alias is taken.
        """
        for name in (flag.name, *flag.aliases):
            if name in self._owners:
                raise ConfigurationConflictError("flag", name, owner, self._owners[name])
        for name in (flag.name, *flag.aliases):
            self._owners[name] = owner
        self._flags.append(flag)

    def register(
        self,
        base_flags: Iterable[FlagDefinition],
        plugins: Iterable[Plugin] = (),
    ) -> tuple[FlagDefinition, ...]:
        """Append *base_flags*, then each plugin's flags in plugin order.

        Returns:
            Every registered flag, in registration order.

        Raises:
            ConfigurationConflictError: On the first duplicate name.
        """
        for flag in base_flags:
            self.add(flag, BASE_OWNER)
        for plugin in plugins:
            contributed = plugin.flags()
            if not contributed:
                continue
            owner = f"plugin '{plugin.name}'"
            for flag in contributed:
                self.add(flag, owner)
            logger.debug("Plugin '%s' contributed %d flag(s)", plugin.name, len(contributed))
        return self.flags

    @property
    def flags(self) -> tuple[FlagDefinition, ...]:
        """The registered flags, in registration order."""
        return tuple(self._flags)

    def owner_of(self, name: str) -> str | None:
        """Return who registered the flag (or alias) *name*, if anyone."""
        return self._owners.get(name)

    def to_click_options(self) -> list[click.Option]:
        """Convert every registered flag into a :class:`click.Option`."""
        return [to_click_option(flag) for flag in self._flags]


def to_click_option(flag: FlagDefinition) -> click.Option:
    """Convert a :class:`~microcli.models.FlagDefinition` into a click option.

    Boolean flags defaulting to ``True`` get a ``--no-<name>`` counterpart so
    they can still be switched off on the command line.
    """
    extra = [f"-{alias}" if len(alias) == 1 else f"--{alias}" for alias in flag.aliases]
    envvar = list(flag.env_vars) or None

    if flag.kind == FlagKind.BOOL:
        default = bool(flag.default)
        if default:
            decls = [f"--{flag.name}/--no-{flag.name}", *extra, flag.name]
            return click.Option(
                decls, default=True, envvar=envvar, show_envvar=True, help=flag.usage
            )
        decls = [f"--{flag.name}", *extra, flag.name]
        return click.Option(
            decls,
            is_flag=True,
            default=False,
            envvar=envvar,
            show_envvar=True,
            help=flag.usage,
        )

    return click.Option(
        [f"--{flag.name}", *extra, flag.name],
        type=str,
        default=flag.default,
        envvar=envvar,
        show_envvar=True,
        show_default=flag.default is not None,
        help=flag.usage,
    )
