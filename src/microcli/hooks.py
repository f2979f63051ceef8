"""The startup hook chain run before any matched command.

Five steps run strictly in order, single-threaded, each as a :class:`Hook`
object so the sequence can be inspected and tested on its own:

1. :class:`BindFlagsHook` -- explicitly supplied flags into the shared config.
2. :class:`PluginInitHook` -- each plugin's ``init`` in plugin order.
3. :class:`WrappedHook` -- the previously installed hook, if any.
4. :class:`StoreDefaultsHook` -- per-service store database/table defaults.
5. :class:`AuthBootstrapHook` -- system rules for the embedded auth backend.

The chain stops at the first failure. Failures in steps 2 and 5 are
ordinary command errors (:class:`~microcli.exceptions.PluginInitError`,
:class:`~microcli.exceptions.AuthorizationBootstrapError`); a failure in
step 3 is a :class:`~microcli.exceptions.ChainFatalError`, which the entry
point prints bare before terminating.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from enum import Enum
from typing import Callable, Iterable, Optional, Sequence

from microcli.auth import SYSTEM_RULES, AuthBackend
from microcli.auth.embedded import EMBEDDED_AUTH_IDENTITY
from microcli.config import ConfigBinder
from microcli.exceptions import (
    AuthorizationBootstrapError,
    ChainFatalError,
    MicroError,
    PluginInitError,
)
from microcli.models import AuthRule, InvocationContext, SharedConfiguration
from microcli.plugins.base import Plugin
from microcli.store import Store

logger = logging.getLogger(__name__)

PriorHook = Callable[[InvocationContext], None]
"""A hook installed before this chain; called with the invocation context."""


class ChainState(str, Enum):
    """Where a :class:`HookChain` run currently is, or where it stopped."""

    IDLE = "idle"
    FLAG_BINDING = "flag_binding"
    PLUGIN_INIT = "plugin_init"
    PRIOR_WRAPPED = "prior_wrapped"
    STORE_DEFAULTING = "store_defaulting"
    AUTH_BOOTSTRAP = "auth_bootstrap"
    READY = "ready"
    COMMAND_ERROR = "command_error"
    PROCESS_FATAL = "process_fatal"


class Hook(ABC):
    """One step of the startup chain."""

    name: str = "hook"
    state: ChainState = ChainState.IDLE

    @abstractmethod
    def run(self, ctx: InvocationContext) -> None:
        """Run the step. Raise a :class:`~microcli.exceptions.MicroError` to stop the chain."""
        ...


class BindFlagsHook(Hook):
    """Copies explicitly supplied address/namespace flags into *config*."""

    name = "bind-flags"
    state = ChainState.FLAG_BINDING

    def __init__(self, config: SharedConfiguration, binder: Optional[ConfigBinder] = None) -> None:
        self._config = config
        self._binder = binder or ConfigBinder()

    def run(self, ctx: InvocationContext) -> None:
        self._binder.bind(ctx, self._config)


class PluginInitHook(Hook):
    """Runs every plugin's ``init`` in order, stopping at the first failure."""

    name = "plugin-init"
    state = ChainState.PLUGIN_INIT

    def __init__(self, plugins: Sequence[Plugin]) -> None:
        self._plugins = tuple(plugins)

    def run(self, ctx: InvocationContext) -> None:
        for plugin in self._plugins:
            try:
                plugin.init(ctx)
            except Exception as exc:
                raise PluginInitError(plugin.name, exc) from exc
            logger.debug("Plugin '%s' initialised", plugin.name)


class WrappedHook(Hook):
    """Calls the hook that was installed before this chain.

    Any failure becomes a :class:`~microcli.exceptions.ChainFatalError`.
    """

    name = "prior"
    state = ChainState.PRIOR_WRAPPED

    def __init__(self, prior: Optional[PriorHook]) -> None:
        self._prior = prior

    def run(self, ctx: InvocationContext) -> None:
        if self._prior is None:
            return
        try:
            self._prior(ctx)
        except ChainFatalError:
            raise
        except Exception as exc:
            raise ChainFatalError(str(exc)) from exc


class StoreDefaultsHook(Hook):
    """Gives each invoked service its own store partition by default.

    The database defaults to the application name and the table to the
    first positional argument (or the application name without one). Flags
    ``store_database`` / ``store_table`` suppress the respective default.
    """

    name = "store-defaults"
    state = ChainState.STORE_DEFAULTING

    def __init__(self, store: Store, config: SharedConfiguration) -> None:
        self._store = store
        self._config = config

    def run(self, ctx: InvocationContext) -> None:
        options: dict[str, str] = {}

        if ctx.is_set("store_database"):
            self._config.store.database = ctx.string("store_database")
        else:
            options["database"] = ctx.app_name

        if ctx.is_set("store_table"):
            self._config.store.table = ctx.string("store_table")
        else:
            options["table"] = ctx.first() or ctx.app_name

        if not options:
            return

        self._store.init(**options)
        if "database" in options:
            self._config.store.database = options["database"]
        if "table" in options:
            self._config.store.table = options["table"]
        logger.debug("Store defaults applied: %s", options)


class AuthBootstrapHook(Hook):
    """Loads the system rules when the backend is the embedded implementation."""

    name = "auth-bootstrap"
    state = ChainState.AUTH_BOOTSTRAP

    def __init__(self, auth: AuthBackend, rules: Iterable[AuthRule] = SYSTEM_RULES) -> None:
        self._auth = auth
        self._rules = tuple(rules)

    def run(self, ctx: InvocationContext) -> None:
        identity = self._auth.identity()
        if identity != EMBEDDED_AUTH_IDENTITY:
            logger.debug("Auth backend '%s' manages its own rules", identity)
            return
        for rule in self._rules:
            try:
                self._auth.grant(rule)
            except Exception as exc:
                raise AuthorizationBootstrapError(rule.id, exc) from exc
        logger.debug("Loaded %d system rule(s)", len(self._rules))


class HookChain:
    """An ordered, inspectable sequence of :class:`Hook` steps.

    A chain is callable with an :class:`~microcli.models.InvocationContext`,
    so it can itself be installed as the prior hook of another chain.

    Attributes:
        state: The state the last run reached: ``READY`` on success,
            ``COMMAND_ERROR`` or ``PROCESS_FATAL`` on failure.
    """

    def __init__(self, hooks: Iterable[Hook]) -> None:
        self._hooks = tuple(hooks)
        self.state = ChainState.IDLE

    @classmethod
    def standard(
        cls,
        *,
        config: SharedConfiguration,
        plugins: Sequence[Plugin],
        store: Store,
        auth: AuthBackend,
        prior: Optional[PriorHook] = None,
        binder: Optional[ConfigBinder] = None,
    ) -> "HookChain":
        """Build the five-step chain in its fixed order."""
        return cls(
            [
                BindFlagsHook(config, binder),
                PluginInitHook(plugins),
                WrappedHook(prior),
                StoreDefaultsHook(store, config),
                AuthBootstrapHook(auth),
            ]
        )

    @property
    def hooks(self) -> tuple[Hook, ...]:
        """The steps, in execution order."""
        return self._hooks

    def run(self, ctx: InvocationContext) -> None:
        """Run every step in order.

        Raises:
            ChainFatalError: If the wrapped prior hook failed.
            MicroError: The first ordinary step failure.
        """
        for hook in self._hooks:
            self.state = hook.state
            logger.debug("Running startup hook '%s'", hook.name)
            try:
                hook.run(ctx)
            except ChainFatalError:
                self.state = ChainState.PROCESS_FATAL
                raise
            except MicroError:
                self.state = ChainState.COMMAND_ERROR
                raise
        self.state = ChainState.READY

    def __call__(self, ctx: InvocationContext) -> None:
        self.run(ctx)


def apply_store_flags(store: Store) -> PriorHook:
    """Return the platform's own startup hook for *store*.

    It initialises the store with explicitly supplied ``store_database`` /
    ``store_table`` values, leaving anything unset to
    :class:`StoreDefaultsHook`.
    """

    def _apply(ctx: InvocationContext) -> None:
        options: dict[str, str] = {}
        if ctx.is_set("store_database"):
            options["database"] = ctx.string("store_database")
        if ctx.is_set("store_table"):
            options["table"] = ctx.string("store_table")
        if options:
            store.init(**options)

    return _apply
