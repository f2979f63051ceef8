"""Numeric process exit codes used by the ``micro`` command line.

The composed application only distinguishes success from failure; anything
more specific comes from a delegated child process, whose status is passed
through untouched (see :class:`~microcli.exceptions.DelegatedProcessError`).

Example::

    $ micro does-not-exist-xyz
    $ echo $?
    1   # EXIT_GENERIC_FAILURE -- the fallback command could not be resolved
"""

EXIT_SUCCESS = 0
"""The command completed successfully."""

EXIT_GENERIC_FAILURE = 1
"""Missing or unresolvable command, a failed startup hook, or any command error."""

EXIT_INTERRUPTED = 130
"""The process was interrupted with Ctrl-C (128 + SIGINT)."""
