"""Config command -- show the effective shared configuration.

``micro config`` prints the addresses, namespaces and store partition the
collaborators will use for this invocation, after the startup hooks have
bound the flags and applied the store defaults.
"""

from __future__ import annotations

from microcli.models import Command, FlagDefinition, FlagKind, InvocationContext
from microcli.output import OutputFormat, OutputManager, format_response, set_output


def _show(ctx: InvocationContext) -> None:
    """Print ``ctx.config`` as JSON (``--json``) or in the automatic format.

    Example::

        micro --api_address :9090 config
        micro config --json
    """
    if ctx.boolean("json"):
        set_output(OutputManager(format=OutputFormat.JSON))
    format_response(ctx.config.model_dump(mode="json"))


def config_command() -> Command:
    """Build the ``config`` command."""
    return Command(
        name="config",
        usage="Show the effective configuration",
        action=_show,
        flags=[FlagDefinition(name="json", kind=FlagKind.BOOL, usage="JSON output format.")],
    )
