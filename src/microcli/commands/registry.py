"""Command table and display ordering.

:class:`CommandRegistry` merges built-in, synthetic and plugin commands into
one duplicate-free table. :func:`order_commands` then ranks them by
:data:`COMMAND_ORDER` for help output and completion. The order is purely
presentational: dispatch always goes straight to the matched command.
"""

from __future__ import annotations

import logging
from typing import Iterable, Sequence

from microcli.exceptions import ConfigurationConflictError
from microcli.models import Command

logger = logging.getLogger(__name__)

COMMAND_ORDER: tuple[str, ...] = (
    "server",
    "new",
    "env",
    "login",
    "run",
    "logs",
    "call",
    "update",
    "kill",
    "store",
    "config",
    "auth",
    "status",
    "stream",
    "file",
)
"""Order in which commands are displayed; unlisted commands follow."""


def order_commands(commands: Iterable[Command], priority: Sequence[str] = COMMAND_ORDER) -> list[Command]:
    """Sort *commands* by their position in *priority*.

    Names missing from *priority* rank after every listed name. The sort is
    stable, so unlisted commands keep their registration order.
    """
    rank = {name: index for index, name in enumerate(priority)}
    unlisted = len(rank)
    return sorted(commands, key=lambda command: rank.get(command.name, unlisted))


class CommandRegistry:
    """Ordered table of top-level commands keyed by name.

    Command names and aliases share one namespace.
    """

    def __init__(self) -> None:
        self._commands: dict[str, Command] = {}
        self._owners: dict[str, str] = {}

    def register(self, command: Command, owner: str = "built-in commands") -> None:
        """Add *command*, contributed by *owner*.

        Raises:
            ConfigurationConflictError: If the name or an alias is taken.
        """
        for name in (command.name, *command.aliases):
            if name in self._owners:
                raise ConfigurationConflictError("command", name, owner, self._owners[name])
        for name in (command.name, *command.aliases):
            self._owners[name] = owner
        self._commands[command.name] = command
        logger.debug("Registered command '%s' from %s", command.name, owner)

    def __contains__(self, name: object) -> bool:
        return name in self._owners

    def __len__(self) -> int:
        return len(self._commands)

    def get(self, name: str) -> Command | None:
        return self._commands.get(name)

    def commands(self) -> list[Command]:
        """Return the registered commands in registration order."""
        return list(self._commands.values())

    def ordered(self, priority: Sequence[str] = COMMAND_ORDER) -> list[Command]:
        """Return the registered commands in display order."""
        return order_commands(self._commands.values(), priority)
