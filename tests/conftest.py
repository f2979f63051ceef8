"""Shared test fixtures for microcli.

Provides output isolation, an isolated XDG environment, a click CLI runner,
and recording fakes for the store, authorization backend and operator so
tests can observe exactly what the startup hooks did.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

import pytest

from microcli.app import Builder
from microcli.auth.base import AuthBackend
from microcli.models import AuthResource, AuthRule, InvocationContext
from microcli.output import OutputFormat, OutputManager, reset_output, set_output


# ---------------------------------------------------------------------------
# Auto-reset global output state between tests
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _reset_output_between_tests() -> None:
    """Reset the global OutputManager after every test.

    The OutputManager binds sys.stdout/sys.stderr when it is created. Once
    pytest's capture or click's runner swaps the streams back, a cached
    manager would write to closed files.
    """
    yield
    reset_output()


@pytest.fixture(autouse=True)
def _clean_micro_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep MICRO_* variables from the developer's shell out of the tests."""
    import os

    for var in list(os.environ):
        if var.startswith("MICRO_"):
            monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("NO_COLOR", "1")


# ---------------------------------------------------------------------------
# Config isolation fixture
# ---------------------------------------------------------------------------


@pytest.fixture
def isolated_config(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point XDG_DATA_HOME at tmp_path and chdir there.

    Returns:
        The tmp_path root directory.
    """
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "data"))
    monkeypatch.chdir(tmp_path)
    return tmp_path


# ---------------------------------------------------------------------------
# Output fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def quiet_output() -> OutputManager:
    """Install a PLAIN-format, quiet OutputManager for the test."""
    output = OutputManager(format=OutputFormat.PLAIN, quiet=True)
    set_output(output)
    yield output
    reset_output()


@pytest.fixture
def cli_runner():
    """Click CLI test runner for invoking ``Application.command``."""
    from click.testing import CliRunner

    return CliRunner()


# ---------------------------------------------------------------------------
# Recording collaborators
# ---------------------------------------------------------------------------


class RecordingStore:
    """Store fake that records every ``init`` call."""

    def __init__(self) -> None:
        self.calls: list[dict[str, Optional[str]]] = []

    def init(self, *, database: Optional[str] = None, table: Optional[str] = None) -> None:
        options: dict[str, Optional[str]] = {}
        if database is not None:
            options["database"] = database
        if table is not None:
            options["table"] = table
        self.calls.append(options)


class RecordingAuth(AuthBackend):
    """Auth backend fake with a configurable identity and failure point."""

    def __init__(self, identity: str = "service", fail_on: Optional[str] = None) -> None:
        self._identity = identity
        self._fail_on = fail_on
        self.granted: list[AuthRule] = []

    def identity(self) -> str:
        return self._identity

    def grant(self, rule: AuthRule) -> None:
        if rule.id == self._fail_on:
            raise RuntimeError("rules service unavailable")
        self.granted.append(rule)

    def rules(self) -> list[AuthRule]:
        return list(self.granted)

    def verify(self, resource: AuthResource, scopes: Optional[Sequence[str]] = None) -> bool:
        return any(rule.resource == resource for rule in self.granted)


class RecordingOperator:
    """Operator fake recording the contexts it was started with."""

    def __init__(self) -> None:
        self.contexts: list[InvocationContext] = []

    def init(self, ctx: InvocationContext) -> None:
        self.contexts.append(ctx)


@pytest.fixture
def store() -> RecordingStore:
    return RecordingStore()


@pytest.fixture
def service_auth() -> RecordingAuth:
    """An auth backend that is not the embedded implementation."""
    return RecordingAuth(identity="service")


@pytest.fixture
def operator() -> RecordingOperator:
    return RecordingOperator()


@pytest.fixture
def empty_path(tmp_path: Path) -> str:
    """A search path containing no executables."""
    path = tmp_path / "empty-bin"
    path.mkdir()
    return str(path)


@pytest.fixture
def make_builder(store: RecordingStore, operator: RecordingOperator, empty_path: str):
    """Factory for a Builder wired to the recording collaborators.

    Keyword arguments override the defaults.
    """

    def _make(**kwargs) -> Builder:
        kwargs.setdefault("store", store)
        kwargs.setdefault("operator", operator)
        kwargs.setdefault("search_path", empty_path)
        return Builder(**kwargs)

    return _make


@pytest.fixture
def make_auth():
    """Factory for :class:`RecordingAuth` backends."""
    return RecordingAuth


@pytest.fixture
def make_stub(tmp_path: Path):
    """Write an executable shell script into ``tmp_path/bin`` and return the directory.

    Usage::

        bin_dir = make_stub("stub", 'echo "stub out $*"', exit_code=7)
    """

    def _make(name: str, body: str, exit_code: int = 0) -> str:
        bin_dir = tmp_path / "bin"
        bin_dir.mkdir(exist_ok=True)
        script = bin_dir / name
        script.write_text(f"#!/bin/sh\n{body}\nexit {exit_code}\n")
        script.chmod(0o755)
        return str(bin_dir)

    return _make
