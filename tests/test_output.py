"""Tests for the output formatting system.

Covers:
- OutputFormat resolution (auto -> rich/plain based on TTY)
- NO_COLOR / TERM=dumb color disabling
- stdout vs stderr discipline
- Quiet and verbose modes
- JSON and plain data formats
- Error and suggestion decoration
- Global instance management
"""

from __future__ import annotations

import json

import pytest

from microcli import output as output_module
from microcli.output import (
    OutputFormat,
    OutputManager,
    _should_disable_color,
    get_output,
    reset_output,
    set_output,
)


# ------------------------------------------------------------------ #
# Fixtures
# ------------------------------------------------------------------ #


@pytest.fixture()
def non_tty(monkeypatch):
    """Patch stdout.isatty() to return False."""
    monkeypatch.setattr("microcli.output._is_tty", lambda: False)


@pytest.fixture()
def tty(monkeypatch):
    """Patch stdout.isatty() to return True."""
    monkeypatch.setattr("microcli.output._is_tty", lambda: True)


# ------------------------------------------------------------------ #
# OutputFormat resolution
# ------------------------------------------------------------------ #


class TestOutputFormatResolution:
    """Test that AUTO format resolves correctly based on environment."""

    def test_auto_resolves_to_plain_when_not_tty(self, non_tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_auto_resolves_to_rich_when_tty(self, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.RICH

    def test_auto_resolves_to_plain_when_tty_but_no_color(self, tty):
        mgr = OutputManager(format=OutputFormat.AUTO)
        assert mgr.format == OutputFormat.PLAIN

    def test_explicit_json_stays_json(self, tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        assert mgr.format == OutputFormat.JSON


class TestColorDisabling:
    """Test that NO_COLOR and TERM=dumb are respected."""

    def test_no_color_env_any_value(self, monkeypatch):
        monkeypatch.setenv("NO_COLOR", "")
        assert _should_disable_color() is True

    def test_term_dumb_disables_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "dumb")
        assert _should_disable_color() is True

    def test_normal_term_keeps_color(self, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.setenv("TERM", "xterm-256color")
        assert _should_disable_color() is False


# ------------------------------------------------------------------ #
# stdout vs stderr discipline
# ------------------------------------------------------------------ #


class TestStdoutStderrDiscipline:
    """Data goes to stdout, diagnostics go to stderr."""

    def test_print_data_goes_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.print_data("hello world")
        captured = capfd.readouterr()
        assert captured.out == "hello world\n"
        assert captured.err == ""

    @pytest.mark.parametrize("method", ["info", "success", "warning", "error", "suggest"])
    def test_diagnostics_go_to_stderr(self, capfd, non_tty, method):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        getattr(mgr, method)("a diagnostic")
        captured = capfd.readouterr()
        assert captured.out == ""
        assert "a diagnostic" in captured.err

    def test_error_prefix(self, capfd, non_tty):
        OutputManager(no_color=True).error("No command provided to micro")
        assert capfd.readouterr().err == "Error: No command provided to micro\n"

    def test_suggest_arrow(self, capfd, non_tty):
        OutputManager(no_color=True).suggest("Run 'micro --help' for usage.")
        assert capfd.readouterr().err == "→ Run 'micro --help' for usage.\n"

    def test_colored_error_not_wrapped_or_marked_up(self, capfd, non_tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        command = "x" * 200 + "[bold]"
        OutputManager().error(f"Unrecognized micro command: {command}")
        err = capfd.readouterr().err
        assert f"Unrecognized micro command: {command}" in err


class TestQuietAndVerbose:
    def test_quiet_suppresses_info_and_suggest(self, capfd, non_tty):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.info("hidden")
        mgr.success("hidden")
        mgr.suggest("hidden")
        assert capfd.readouterr().err == ""

    def test_quiet_keeps_errors_and_data(self, capfd, non_tty):
        mgr = OutputManager(no_color=True, quiet=True)
        mgr.error("critical")
        mgr.warning("careful")
        mgr.print_data("data")
        captured = capfd.readouterr()
        assert "critical" in captured.err
        assert "Warning: careful" in captured.err
        assert captured.out == "data\n"

    def test_debug_only_when_verbose(self, capfd, non_tty):
        OutputManager(no_color=True).debug("trace")
        assert capfd.readouterr().err == ""
        OutputManager(no_color=True, verbose=True).debug("trace")
        assert capfd.readouterr().err == "[debug] trace\n"

    def test_quiet_output_fixture(self, quiet_output, capfd):
        output_module.info("hidden")
        assert capfd.readouterr().err == ""
        assert get_output() is quiet_output


# ------------------------------------------------------------------ #
# Data formats
# ------------------------------------------------------------------ #


class TestJsonFormat:
    def test_nested_dict(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        data = {"api": {"address": ":8080"}, "store": {"table": None}}
        mgr.format_response(data)
        captured = capfd.readouterr()
        assert json.loads(captured.out) == data
        assert "\n  " in captured.out

    def test_no_diagnostics_leak_to_stdout(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON, no_color=True)
        mgr.info("loading...")
        mgr.format_response({"result": "ok"})
        captured = capfd.readouterr()
        assert json.loads(captured.out) == {"result": "ok"}
        assert "loading..." in captured.err


class TestPlainFormat:
    def test_nested_dict_flattened(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"api": {"address": ":8080", "handler": "meta"}, "name": "micro"})
        assert capfd.readouterr().out == "api.address\t:8080\napi.handler\tmeta\nname\tmicro\n"

    def test_none_rendered_empty(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response({"store": {"table": None}})
        assert capfd.readouterr().out == "store.table\t\n"

    def test_list_and_scalar(self, capfd, non_tty):
        mgr = OutputManager(format=OutputFormat.PLAIN, no_color=True)
        mgr.format_response(["a", "b"])
        mgr.format_response(42)
        assert capfd.readouterr().out == "a\nb\n42\n"


class TestRichFormat:
    def test_rich_renders_json_text(self, capfd, tty, monkeypatch):
        monkeypatch.delenv("NO_COLOR", raising=False)
        monkeypatch.delenv("TERM", raising=False)
        mgr = OutputManager(format=OutputFormat.RICH)
        mgr.format_response({"key": "value"})
        out = capfd.readouterr().out
        assert "key" in out
        assert "value" in out


# ------------------------------------------------------------------ #
# Global instance management
# ------------------------------------------------------------------ #


class TestGlobalInstance:
    def test_lazily_created_and_cached(self, non_tty):
        first = get_output()
        assert get_output() is first

    def test_set_and_reset(self, non_tty):
        mgr = OutputManager(format=OutputFormat.JSON)
        set_output(mgr)
        assert get_output() is mgr
        reset_output()
        assert get_output() is not mgr

    def test_convenience_functions_use_global(self, capfd, non_tty):
        set_output(OutputManager(format=OutputFormat.PLAIN, no_color=True))
        output_module.print_data("data")
        output_module.error("oops")
        output_module.warning("careful")
        captured = capfd.readouterr()
        assert captured.out == "data\n"
        assert captured.err == "Error: oops\nWarning: careful\n"
