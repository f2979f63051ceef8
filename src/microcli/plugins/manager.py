"""Plugin manager -- entry-point discovery and ordered registration.

Third-party packages register plugins by declaring an entry point in the
``microcli.plugins`` group::

    [project.entry-points."microcli.plugins"]
    metrics = "micro_metrics.plugin:MetricsPlugin"

Plugin order matters (flags, commands and init hooks all follow it), so it
is never left to installation order: explicitly added plugins keep the
order they were added in, and discovered entry points are taken sorted by
name.
"""

from __future__ import annotations

import importlib.metadata
import logging
import os
from typing import Iterable, Optional

from microcli.exceptions import PluginError
from microcli.plugins.base import Plugin

logger = logging.getLogger(__name__)

ENTRY_POINT_GROUP = "microcli.plugins"
"""The entry-point group name used for plugin discovery."""

ENABLED_ENV = "MICRO_PLUGINS_ENABLED"
DISABLED_ENV = "MICRO_PLUGINS_DISABLED"


def _split_env(name: str) -> set[str]:
    return {item.strip() for item in os.environ.get(name, "").split(",") if item.strip()}


class PluginManager:
    """Collects plugins into the ordered list handed to the builder.

    The *enabled* and *disabled* sets act as an allowlist/blocklist during
    :meth:`discover`. When *enabled* is non-empty only those plugins are
    loaded; otherwise every discovered plugin not in *disabled* is. Both
    default to the comma-separated ``MICRO_PLUGINS_ENABLED`` and
    ``MICRO_PLUGINS_DISABLED`` environment variables.

    Example::

        manager = PluginManager()
        manager.discover()
        builder = Builder(plugins=manager.plugins)
    """

    def __init__(
        self,
        enabled: Optional[Iterable[str]] = None,
        disabled: Optional[Iterable[str]] = None,
    ) -> None:
        self._plugins: dict[str, Plugin] = {}
        self._enabled = set(enabled) if enabled is not None else _split_env(ENABLED_ENV)
        self._disabled = set(disabled) if disabled is not None else _split_env(DISABLED_ENV)

    def discover(self) -> list[str]:
        """Load the plugins registered in the ``microcli.plugins`` group.

        Entry points are visited sorted by name. A plugin that fails to
        import or instantiate is logged and skipped so that the built-in
        commands keep working.

        Returns:
            The names of the plugins that were loaded.
        """
        loaded: list[str] = []
        eps = importlib.metadata.entry_points().select(group=ENTRY_POINT_GROUP)

        for ep in sorted(eps, key=lambda e: e.name):
            if self._enabled and ep.name not in self._enabled:
                logger.debug("Plugin '%s' not in enabled list, skipping", ep.name)
                continue
            if ep.name in self._disabled:
                logger.debug("Plugin '%s' is disabled, skipping", ep.name)
                continue
            try:
                plugin: Plugin = ep.load()()
            except Exception as exc:
                logger.warning("Failed to load plugin '%s': %s", ep.name, exc)
                continue
            self.add(plugin)
            loaded.append(plugin.name)

        return loaded

    def add(self, plugin: Plugin) -> None:
        """Append *plugin* after every plugin added so far.

        Raises:
            PluginError: If a plugin with the same name is already present.
        """
        if plugin.name in self._plugins:
            raise PluginError(f"Plugin '{plugin.name}' is already loaded")
        self._plugins[plugin.name] = plugin
        logger.info("Loaded plugin '%s'", plugin.name)

    def get_plugin(self, name: str) -> Plugin:
        """Return the plugin registered as *name*.

        Raises:
            PluginError: If no plugin with that name is loaded.
        """
        try:
            return self._plugins[name]
        except KeyError:
            raise PluginError(f"Plugin '{name}' is not loaded") from None

    @property
    def plugins(self) -> list[Plugin]:
        """The loaded plugins, in order."""
        return list(self._plugins.values())
