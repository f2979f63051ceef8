"""Init command -- run the platform operator.

``micro init`` is added to every composed application. It takes no flags of
its own and hands the invocation to the operator bootstrap collaborator.
"""

from __future__ import annotations

from microcli.models import Command, InvocationContext
from microcli.platform import Operator


def init_command(operator: Operator) -> Command:
    """Build the ``init`` command bound to *operator*.

    Example::

        micro init
    """

    def _run(ctx: InvocationContext) -> None:
        operator.init(ctx)

    return Command(name="init", usage="Run the micro operator", action=_run)
