"""Operator bootstrap collaborator behind the ``micro init`` command."""

from __future__ import annotations

import logging
from typing import Protocol

from microcli.models import InvocationContext
from microcli.output import info

logger = logging.getLogger(__name__)


class Operator(Protocol):
    """Starts the platform operator for the current invocation."""

    def init(self, ctx: InvocationContext) -> None:
        ...


class LocalOperator:
    """Reports the operator bootstrap for a local, single-process platform."""

    def __init__(self) -> None:
        self.started = False

    def init(self, ctx: InvocationContext) -> None:
        self.started = True
        logger.info("Operator started (namespace=%s)", ctx.string("namespace") or "micro")
        info(f"Running the {ctx.app_name} operator")
