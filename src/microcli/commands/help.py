"""Help command -- ``micro help [command]``.

Error messages point users at ``micro help``, so every composed application
carries this command. Without a topic it prints the root help (flags and
the ordered command list); with one it prints that command's help.
"""

from __future__ import annotations

import click

from microcli.exceptions import HelpTopicError
from microcli.models import Command, InvocationContext
from microcli.output import print_data


def _show(ctx: InvocationContext) -> None:
    root = click.get_current_context().find_root()
    topic = ctx.args[1] if len(ctx.args) > 1 else ""
    if not topic:
        print_data(root.get_help())
        return

    command = root.command.get_command(root, topic)  # type: ignore[attr-defined]
    if command is None or command.hidden:
        raise HelpTopicError(topic)
    with click.Context(command, info_name=topic, parent=root) as sub:
        print_data(command.get_help(sub))


def help_command() -> Command:
    """Build the ``help`` command.

    Example::

        micro help
        micro help config
    """
    return Command(
        name="help",
        usage="Shows a list of commands or help for one command",
        action=_show,
        aliases=["h"],
    )
