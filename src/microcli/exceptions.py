"""Exception hierarchy for microcli.

All exceptions inherit from :class:`MicroError`, which carries an
``exit_code`` attribute. Internal components only ever raise these; the
single place that turns them into process exit codes and messages is
:meth:`microcli.app.Application.run`.

Subclass hierarchy::

    MicroError                      (exit 1)
    +-- ConfigurationConflictError  duplicate flag or command at composition time
    +-- PluginError                 plugin discovery or lookup failure
    +-- PluginInitError             a plugin's init hook failed
    +-- ChainFatalError             the wrapped prior hook failed
    +-- AuthorizationBootstrapError a system rule could not be granted
    +-- DispatchResolutionError     fallback command not on the search path
    +-- EmptyInvocationError        no command given at all
    +-- HelpTopicError              `help` asked about an unknown command
    +-- DelegatedProcessError       fallback child exited non-zero (its status)

The split between :class:`PluginInitError` / :class:`AuthorizationBootstrapError`
(reported as ordinary command errors) and :class:`ChainFatalError` (printed
bare, process ends) is observable behaviour and must not be merged.
"""

from __future__ import annotations

from microcli.exit_codes import EXIT_GENERIC_FAILURE


class MicroError(Exception):
    """Base exception for all microcli errors.

    Args:
        message: Human-readable error description printed to stderr.
        exit_code: Optional override for the class-level exit code.
    """

    exit_code: int = EXIT_GENERIC_FAILURE

    def __init__(self, message: str, exit_code: int | None = None):
        super().__init__(message)
        if exit_code is not None:
            self.exit_code = exit_code


class ConfigurationConflictError(MicroError):
    """Raised when two flags or two commands share a name during composition."""

    def __init__(self, kind: str, name: str, owner: str, previous_owner: str):
        super().__init__(
            f"Duplicate {kind} '{name}' registered by {owner} "
            f"(already registered by {previous_owner})"
        )
        self.kind = kind
        self.name = name
        self.owner = owner
        self.previous_owner = previous_owner


class PluginError(MicroError):
    """Raised when a plugin cannot be discovered, loaded or looked up."""


class PluginInitError(MicroError):
    """Raised when a plugin's ``init`` hook fails.

    Surfaced as a normal command error.
    """

    def __init__(self, plugin: str, cause: Exception):
        super().__init__(f"Plugin '{plugin}' failed to initialise: {cause}")
        self.plugin = plugin


class ChainFatalError(MicroError):
    """Raised when the wrapped prior hook fails.

    The entry point prints the message undecorated and terminates, without
    the usage hint attached to ordinary command errors.
    """


class AuthorizationBootstrapError(MicroError):
    """Raised when a system rule cannot be granted to the embedded backend."""

    def __init__(self, rule_id: str, cause: Exception):
        super().__init__(f"Failed to grant system rule '{rule_id}': {cause}")
        self.rule_id = rule_id


class DispatchResolutionError(MicroError):
    """Raised when the fallback command is not found on the search path."""

    def __init__(self, command: str, app_name: str = "micro"):
        super().__init__(
            f"Unrecognized {app_name} command: {command}. "
            f"Please refer to '{app_name} help'"
        )
        self.command = command


class EmptyInvocationError(MicroError):
    """Raised when the application is invoked without any command."""

    def __init__(self, app_name: str = "micro"):
        super().__init__(
            f"No command provided to {app_name}. Please refer to '{app_name} help'"
        )



class HelpTopicError(MicroError):
    """Raised when ``help <topic>`` names no registered command."""

    def __init__(self, topic: str):
        super().__init__(f"No help topic for '{topic}'")
        self.topic = topic


class DelegatedProcessError(MicroError):
    """Raised when the fallback child process exits with a non-zero status.

    ``exit_code`` is the child's status, unchanged.
    """

    def __init__(self, command: str, exit_code: int):
        super().__init__(f"'{command}' exited with status {exit_code}", exit_code)
        self.command = command
