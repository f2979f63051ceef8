"""Abstract base class for microcli plugins.

Every plugin must subclass :class:`Plugin` and implement the :attr:`name`
property. The three capabilities the composition layer calls -- ``flags``,
``commands`` and ``init`` -- have defaults (nothing contributed, no-op
init) so a plugin only overrides what it provides.

Plugins are handed to :class:`~microcli.app.Builder` as an ordered list, or
discovered through the ``microcli.plugins`` entry-point group by
:class:`~microcli.plugins.manager.PluginManager`.

Example:
    A plugin contributing a flag and a command::

        class MetricsPlugin(Plugin):
            @property
            def name(self) -> str:
                return "metrics"

            def flags(self) -> list[FlagDefinition]:
                return [FlagDefinition(name="metrics_address",
                                       env_vars=["MICRO_METRICS_ADDRESS"])]

            def commands(self) -> list[Command]:
                return [Command(name="metrics", usage="Run the metrics exporter",
                                action=run_exporter)]
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from microcli.models import Command, FlagDefinition, InvocationContext


class Plugin(ABC):
    """Base class for all microcli plugins.

    The plugin lifecycle is:

    1. Instantiation -- by the caller, or by the manager with no arguments.
    2. :meth:`flags` and :meth:`commands` -- called once while the
       application is composed, before any command line is parsed.
    3. :meth:`init` -- called once per invocation from the startup hook
       chain, after the global flags have been bound.
    """

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the unique plugin name used in conflict reports and logs."""
        ...

    def flags(self) -> list[FlagDefinition]:
        """Return the global flags this plugin adds. Defaults to none."""
        return []

    def commands(self) -> list[Command]:
        """Return the top-level commands this plugin adds. Defaults to none."""
        return []

    def init(self, ctx: InvocationContext) -> None:
        """Initialise the plugin for this invocation.

        Raise to abort startup; the failure is reported as an ordinary
        command error and neither later hooks nor the command run.

        Args:
            ctx: The parsed flag values and positional arguments.
        """
