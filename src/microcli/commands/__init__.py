"""Built-in commands and the command table.

* :class:`CommandRegistry` / :func:`order_commands` -- the duplicate-free
  table and its display order.
* :func:`init_command` -- ``micro init``, runs the operator.
* :func:`help_command` -- ``micro help [command]``, prints usage.
* :func:`config_command` -- ``micro config``, shows the shared configuration.
"""

from microcli.commands.config import config_command
from microcli.commands.help import help_command
from microcli.commands.init import init_command
from microcli.commands.registry import COMMAND_ORDER, CommandRegistry, order_commands

__all__ = [
    "COMMAND_ORDER",
    "CommandRegistry",
    "config_command",
    "help_command",
    "init_command",
    "order_commands",
]
