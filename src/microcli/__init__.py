"""microcli -- the composition and dispatch layer of the ``micro`` command line.

This package assembles one command-line application out of built-in
commands, plugin-contributed commands and flags, and a chain of startup
hooks. It then either runs the matched command or, when the first argument
names no command, executes the external program of that name found on
``PATH``.

Typical usage::

    micro --api_address :9090 config   # built-in command, after the hooks
    micro init                         # run the operator
    micro my-tool --verbose            # runs `my-tool --verbose` from PATH

Modules:
    app: Builder, Application and the ``micro`` console-script entry point.
    flags: Global flag definitions and the flag registry.
    commands: Command table, display ordering and built-in commands.
    hooks: The startup hook chain.
    dispatch: Fallback execution of external programs.
    config: Flag-to-configuration binding and data directories.
    models: Pydantic models and dataclasses shared across the package.
    exceptions: Exception hierarchy with exit-code mapping.
    output: stdout/stderr formatting with Rich.
"""

__version__ = "2.9.3"

GIT_COMMIT = ""
"""Short commit hash, filled in by release builds."""

BUILD_DATE = ""
"""Build timestamp, filled in by release builds."""
