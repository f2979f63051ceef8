"""Application builder and CLI entry point for micro.

:class:`Builder` composes the command line once per process: global flags
(base set plus plugin contributions), built-in commands, the synthetic
``init`` and ``help`` commands, plugin commands, and the startup
:class:`~microcli.hooks.HookChain`.
:meth:`Builder.build` returns an :class:`Application` whose command table
is read-only.

At run time the root group runs the hook chain before the matched command.
A first argument that names no command is handed to the
:class:`~microcli.dispatch.Dispatcher`, which runs the external program of
that name.

The :func:`main` function is the console-script entry point declared in
``pyproject.toml``.

See Also:
    :mod:`microcli.hooks`: The startup steps and their error semantics.
    :mod:`microcli.exceptions`: How each failure is reported.
"""

from __future__ import annotations

import logging
import signal
import sys
import traceback
from datetime import datetime
from types import MappingProxyType
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence

import click
import typer
from typer.core import TyperCommand, TyperGroup

from microcli import BUILD_DATE, GIT_COMMIT, __version__
from microcli.auth import AuthBackend, EmbeddedAuth
from microcli.commands import (
    COMMAND_ORDER,
    CommandRegistry,
    config_command,
    help_command,
    init_command,
)
from microcli.dispatch import Dispatcher
from microcli.exceptions import (
    ChainFatalError,
    DelegatedProcessError,
    DispatchResolutionError,
    EmptyInvocationError,
    MicroError,
)
from microcli.exit_codes import EXIT_GENERIC_FAILURE, EXIT_INTERRUPTED, EXIT_SUCCESS
from microcli.flags import BASE_FLAGS, FlagRegistry, to_click_option
from microcli.hooks import HookChain, PriorHook, apply_store_flags
from microcli.models import Command, FlagDefinition, InvocationContext, SharedConfiguration
from microcli.output import error, reset_output, suggest
from microcli.platform import LocalOperator, Operator
from microcli.plugins import Plugin, PluginManager
from microcli.store import MemoryStore, Store

logger = logging.getLogger(__name__)

APP_NAME = "micro"
DESCRIPTION = (
    "A microservice runtime\n\n"
    "Use `micro [command] --help` to see command specific help."
)

_ARGS_KEY = "microcli.args"


def build_version(version: str, commit: str = "", date: str = "") -> str:
    """Compose the reported version: ``<version>[-<commit>][-<date>]``."""
    result = version
    if commit:
        result += f"-{commit}"
    if date:
        result += f"-{date}"
    return result


# ------------------------------------------------------------------ #
# Click glue
# ------------------------------------------------------------------ #


class FallbackCommand(click.Command):
    """Pass-through command: receives every remaining token untouched."""

    def parse_args(self, ctx: click.Context, args: list[str]) -> list[str]:
        ctx.args = list(args)
        return ctx.args


class MicroGroup(TyperGroup):
    """Root group of the composed application.

    Lists commands in the order they were added and routes an unknown
    first argument to *fallback* instead of failing with "No such command".
    """

    def __init__(
        self,
        *,
        fallback: click.Command,
        aliases: Optional[Mapping[str, str]] = None,
        **attrs: Any,
    ) -> None:
        attrs.setdefault("rich_markup_mode", None)
        super().__init__(**attrs)
        self._fallback = fallback
        self._aliases = dict(aliases or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        return list(self.commands)

    def get_command(self, ctx: click.Context, cmd_name: str) -> Optional[click.Command]:
        return super().get_command(ctx, self._aliases.get(cmd_name, cmd_name))

    def resolve_command(
        self, ctx: click.Context, args: list[str]
    ) -> tuple[Optional[str], Optional[click.Command], list[str]]:
        # Called before the group callback, so the hook chain can see them.
        ctx.meta[_ARGS_KEY] = list(args)
        cmd_name = click.utils.make_str(args[0])
        if (
            self.get_command(ctx, cmd_name) is None
            and not ctx.resilient_parsing
            and not cmd_name.startswith("-")
        ):
            return cmd_name, self._fallback, list(args)
        return super().resolve_command(ctx, args)


def _version_option(name: str, version: str) -> click.Option:
    def _callback(ctx: click.Context, param: click.Parameter, value: bool) -> None:
        if value and not ctx.resilient_parsing:
            typer.echo(f"{name} {version}")
            raise typer.Exit()

    return click.Option(
        ["--version"],
        is_flag=True,
        expose_value=False,
        is_eager=True,
        callback=_callback,
        help="Show version and exit.",
    )


def _command_callback(command: Command) -> Callable[..., None]:
    """Wrap a :class:`~microcli.models.Command` action as a click callback.

    The command sees the global flag values merged with its own.
    """

    def _callback(**values: Any) -> None:
        click_ctx = click.get_current_context()
        parent = click_ctx.find_object(InvocationContext)
        if parent is None:
            raise click.UsageError(
                f"'{command.name}' must be run through the {APP_NAME} command line",
                ctx=click_ctx,
            )
        ctx = InvocationContext(
            app_name=parent.app_name,
            values={**parent.values, **values},
            args=parent.args,
            config=parent.config,
        )
        click_ctx.obj = ctx
        if command.action is not None and click_ctx.invoked_subcommand is None:
            command.action(ctx)

    return _callback


def to_click_command(command: Command) -> click.Command:
    """Convert a :class:`~microcli.models.Command` tree into Typer's click classes."""
    params: list[click.Parameter] = [to_click_option(flag) for flag in command.flags]
    callback = _command_callback(command)

    if command.subcommands:
        group = TyperGroup(
            name=command.name,
            help=command.usage,
            params=params,
            callback=callback,
            invoke_without_command=command.action is not None,
            no_args_is_help=command.action is None,
            rich_markup_mode=None,
        )
        for sub in command.subcommands:
            group.add_command(to_click_command(sub))
        return group

    return TyperCommand(
        name=command.name,
        help=command.usage,
        params=params,
        callback=callback,
        context_settings={"allow_extra_args": True},
        rich_markup_mode=None,
    )


# ------------------------------------------------------------------ #
# Application
# ------------------------------------------------------------------ #


class Application:
    """A composed command line, ready to run.

    Created by :meth:`Builder.build`; never mutated afterwards except for
    the shared configuration written by the hook chain.
    """

    def __init__(
        self,
        name: str,
        version: str,
        command: MicroGroup,
        commands: Mapping[str, Command],
        flags: Sequence[FlagDefinition],
        chain: HookChain,
        config: SharedConfiguration,
    ) -> None:
        self.name = name
        self.version = version
        self._command = command
        self._commands = MappingProxyType(dict(commands))
        self._flags = tuple(flags)
        self._chain = chain
        self._config = config

    @property
    def command(self) -> MicroGroup:
        """The root click group, e.g. for :class:`click.testing.CliRunner`."""
        return self._command

    @property
    def commands(self) -> Mapping[str, Command]:
        """Read-only command table, in display order."""
        return self._commands

    @property
    def command_names(self) -> list[str]:
        return list(self._commands)

    @property
    def flags(self) -> tuple[FlagDefinition, ...]:
        return self._flags

    @property
    def chain(self) -> HookChain:
        return self._chain

    @property
    def config(self) -> SharedConfiguration:
        return self._config

    def run(self, argv: Optional[Sequence[str]] = None) -> int:
        """Parse *argv* (default ``sys.argv[1:]``), run it and return the exit code.

        This is the only place errors become exit codes and messages:

        * click usage errors are shown by click;
        * :class:`~microcli.exceptions.ChainFatalError` is written to stderr
          as-is, with no decoration or usage hint;
        * :class:`~microcli.exceptions.DelegatedProcessError` is silent and
          returns the child's status;
        * every other :class:`~microcli.exceptions.MicroError` is reported
          through :func:`~microcli.output.error`.
        """
        reset_output()
        args = list(sys.argv[1:] if argv is None else argv)
        try:
            rv = self._command.main(args=args, prog_name=self.name, standalone_mode=False)
        except click.ClickException as exc:
            exc.show()
            return exc.exit_code
        except click.Abort:
            click.echo("Aborted!", err=True)
            return EXIT_GENERIC_FAILURE
        except ChainFatalError as exc:
            sys.stderr.write(f"{exc}\n")
            sys.stderr.flush()
            return exc.exit_code
        except DelegatedProcessError as exc:
            logger.debug("Delegated command failed: %s", exc)
            return exc.exit_code
        except (EmptyInvocationError, DispatchResolutionError) as exc:
            error(str(exc))
            return exc.exit_code
        except MicroError as exc:
            error(str(exc))
            suggest(f"Run '{self.name} --help' for usage.")
            return exc.exit_code
        return rv if isinstance(rv, int) else EXIT_SUCCESS


class Builder:
    """Composes an :class:`Application` from flags, commands and plugins.

    Plugin order is an explicit input: flags, commands and init hooks all
    follow the order of *plugins*.

    Args:
        name: Application name; also the default store database and table.
        description: Help text of the root command.
        version: Version string printed by ``--version``.
        plugins: Ordered plugins.
        commands: Built-in commands, registered before ``init`` and plugins.
        base_flags: Global flags registered before any plugin flags.
        priority: Display order of commands; see
            :func:`~microcli.commands.order_commands`.
        prior_hook: Hook run as step 3 of the chain. Defaults to
            :func:`~microcli.hooks.apply_store_flags` for *store*.
        store: Store collaborator. Defaults to a :class:`~microcli.store.MemoryStore`.
        auth: Authorization backend. Defaults to :class:`~microcli.auth.EmbeddedAuth`.
        operator: Operator run by ``init``. Defaults to :class:`~microcli.platform.LocalOperator`.
        search_path: ``PATH`` override for the fallback dispatcher.

    Example::

        application = Builder(plugins=[MetricsPlugin()]).build()
        sys.exit(application.run())
    """

    def __init__(
        self,
        name: str = APP_NAME,
        *,
        description: str = DESCRIPTION,
        version: str = __version__,
        plugins: Iterable[Plugin] = (),
        commands: Iterable[Command] = (),
        base_flags: Iterable[FlagDefinition] = BASE_FLAGS,
        priority: Sequence[str] = COMMAND_ORDER,
        prior_hook: Optional[PriorHook] = None,
        store: Optional[Store] = None,
        auth: Optional[AuthBackend] = None,
        operator: Optional[Operator] = None,
        search_path: Optional[str] = None,
    ) -> None:
        self._name = name
        self._description = description
        self._version = version
        self._plugins = list(plugins)
        self._commands = list(commands)
        self._base_flags = list(base_flags)
        self._priority = tuple(priority)
        self._store = store if store is not None else MemoryStore()
        self._auth = auth if auth is not None else EmbeddedAuth()
        self._operator = operator if operator is not None else LocalOperator()
        self._prior_hook = prior_hook if prior_hook is not None else apply_store_flags(self._store)
        self._search_path = search_path

    def build(self) -> Application:
        """Compose the application.

        Raises:
            ConfigurationConflictError: If two flags or two commands share a
                name. Nothing has run at that point.
        """
        config = SharedConfiguration()

        flag_registry = FlagRegistry()
        flags = flag_registry.register(self._base_flags, self._plugins)

        registry = CommandRegistry()
        for command in self._commands:
            registry.register(command)
        registry.register(init_command(self._operator), owner="the init command")
        registry.register(help_command(), owner="the help command")
        for plugin in self._plugins:
            for command in plugin.commands():
                registry.register(command, owner=f"plugin '{plugin.name}'")

        ordered = registry.ordered(self._priority)
        chain = HookChain.standard(
            config=config,
            plugins=self._plugins,
            store=self._store,
            auth=self._auth,
            prior=self._prior_hook,
        )
        dispatcher = Dispatcher(self._name, self._search_path)

        def _before(**values: Any) -> None:
            click_ctx = click.get_current_context()
            ctx = InvocationContext(
                app_name=self._name,
                values=values,
                args=list(click_ctx.meta.get(_ARGS_KEY, [])),
                config=config,
            )
            click_ctx.obj = ctx
            chain.run(ctx)
            if click_ctx.invoked_subcommand is None:
                raise EmptyInvocationError(self._name)

        def _fallback() -> int:
            return dispatcher.dispatch(click.get_current_context().args)

        fallback = FallbackCommand(
            name="fallback",
            callback=_fallback,
            add_help_option=False,
            hidden=True,
        )
        aliases = {alias: command.name for command in ordered for alias in command.aliases}
        root = MicroGroup(
            name=self._name,
            help=self._description,
            params=[_version_option(self._name, self._version), *flag_registry.to_click_options()],
            callback=_before,
            invoke_without_command=True,
            no_args_is_help=False,
            fallback=fallback,
            aliases=aliases,
        )
        for command in ordered:
            root.add_command(to_click_command(command))

        logger.debug(
            "Built %s with %d flag(s), %d command(s), %d plugin(s)",
            self._name,
            len(flags),
            len(ordered),
            len(self._plugins),
        )
        return Application(
            name=self._name,
            version=self._version,
            command=root,
            commands={command.name: command for command in ordered},
            flags=flags,
            chain=chain,
            config=config,
        )


def default_commands() -> list[Command]:
    """Built-in commands shipped with every ``micro`` binary."""
    return [config_command()]


def create_application(plugins: Optional[Iterable[Plugin]] = None) -> Application:
    """Build the standard ``micro`` application.

    Without explicit *plugins*, entry-point plugins are discovered via
    :class:`~microcli.plugins.PluginManager`.
    """
    if plugins is None:
        manager = PluginManager()
        manager.discover()
        plugins = manager.plugins
    return Builder(
        plugins=plugins,
        commands=default_commands(),
        version=build_version(__version__, GIT_COMMIT, BUILD_DATE),
    ).build()


# ------------------------------------------------------------------ #
# Entry point
# ------------------------------------------------------------------ #


def _setup_signal_handlers() -> None:
    """Install a SIGINT handler so Ctrl-C exits cleanly."""

    def _handler(signum: int, frame: Any) -> None:  # noqa: ANN401
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)

    signal.signal(signal.SIGINT, _handler)


def _write_crash_log(exc: Exception) -> str:
    """Write a crash traceback to disk and return the log file path."""
    from microcli.config import get_data_dir

    logs_dir = get_data_dir() / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y%m%d-%H%M%S")
    log_path = logs_dir / f"crash-{timestamp}.log"
    log_path.write_text("".join(traceback.format_exception(exc)))
    return str(log_path)


def main() -> None:
    """CLI entry point invoked by the ``micro`` console script.

    1. Install signal handlers for clean Ctrl-C behaviour.
    2. Discover plugins and compose the application; a configuration
       conflict stops here, before any command runs.
    3. Run the command line and exit with its code.

    Unexpected exceptions produce a crash log and a generic failure exit.

    Raises:
        SystemExit: Always.
    """
    _setup_signal_handlers()
    try:
        application = create_application()
        code = application.run()
    except KeyboardInterrupt:
        sys.stderr.write("\nCancelled.\n")
        sys.exit(EXIT_INTERRUPTED)
    except MicroError as exc:
        error(str(exc))
        sys.exit(exc.exit_code)
    except Exception as exc:
        log_path = _write_crash_log(exc)
        error(f"Unexpected error. Debug log: {log_path}")
        sys.exit(EXIT_GENERIC_FAILURE)
    sys.exit(code)
