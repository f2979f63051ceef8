"""Fallback dispatch to external programs.

When the first positional argument names no registered command, it is
treated as an executable on ``PATH``: ``micro foo a b`` runs ``foo a b``
with the parent's stdout and stderr attached directly, waits for it, and
exits with its status. Any installed program can therefore act as a
subcommand without being registered.
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from typing import Optional, Sequence

from microcli.exceptions import (
    DelegatedProcessError,
    DispatchResolutionError,
    EmptyInvocationError,
)

logger = logging.getLogger(__name__)


class Dispatcher:
    """Resolves and runs the fallback command.

    Args:
        app_name: Application name used in user-facing messages.
        search_path: ``PATH``-style lookup override; ``None`` uses the
            process environment.
    """

    def __init__(self, app_name: str = "micro", search_path: Optional[str] = None) -> None:
        self._app_name = app_name
        self._search_path = search_path

    def resolve(self, command: str) -> str:
        """Return the absolute path of *command* on the search path.

        Raises:
            DispatchResolutionError: If it cannot be found.
        """
        path = shutil.which(command, path=self._search_path)
        if path is None:
            raise DispatchResolutionError(command, self._app_name)
        return path

    def dispatch(self, args: Sequence[str]) -> int:
        """Run ``args[0]`` with ``args[1:]`` and block until it exits.

        The child inherits stdin, stdout and stderr; nothing is captured.

        Returns:
            ``0`` when the child succeeded.

        Raises:
            EmptyInvocationError: If *args* is empty.
            DispatchResolutionError: If ``args[0]`` is not on the search path.
            DelegatedProcessError: If the child exited non-zero; carries its
                exact status.
        """
        if not args:
            raise EmptyInvocationError(self._app_name)

        command, *rest = args
        executable = self.resolve(command)
        logger.debug("Delegating to %s %s", executable, rest)

        returncode = subprocess.run([executable, *rest], check=False).returncode
        if returncode < 0:
            # Killed by a signal; report it the way a shell does.
            returncode = 128 - returncode
        if returncode != 0:
            raise DelegatedProcessError(command, returncode)
        return 0
