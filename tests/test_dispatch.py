"""Tests for fallback dispatch to external programs."""

from __future__ import annotations

import os

import pytest

from microcli.dispatch import Dispatcher
from microcli.exceptions import (
    DelegatedProcessError,
    DispatchResolutionError,
    EmptyInvocationError,
)


class TestResolve:
    def test_finds_executable(self, make_stub) -> None:
        bin_dir = make_stub("hello", "true")
        dispatcher = Dispatcher(search_path=bin_dir)
        assert dispatcher.resolve("hello") == os.path.join(bin_dir, "hello")

    def test_missing_executable(self, empty_path) -> None:
        dispatcher = Dispatcher(search_path=empty_path)
        with pytest.raises(DispatchResolutionError) as exc_info:
            dispatcher.resolve("orders")
        assert exc_info.value.command == "orders"
        assert str(exc_info.value) == (
            "Unrecognized micro command: orders. Please refer to 'micro help'"
        )

    def test_app_name_in_message(self, empty_path) -> None:
        dispatcher = Dispatcher("mu", search_path=empty_path)
        with pytest.raises(DispatchResolutionError, match="Unrecognized mu command: x"):
            dispatcher.resolve("x")

    def test_non_executable_file_is_not_a_command(self, tmp_path) -> None:
        (tmp_path / "notes").write_text("not a program")
        dispatcher = Dispatcher(search_path=str(tmp_path))
        with pytest.raises(DispatchResolutionError):
            dispatcher.resolve("notes")


class TestDispatch:
    def test_empty_arguments(self) -> None:
        with pytest.raises(EmptyInvocationError, match="No command provided to micro"):
            Dispatcher().dispatch([])

    def test_success_returns_zero(self, make_stub, capfd) -> None:
        bin_dir = make_stub("hello", 'echo "hello $1"')
        assert Dispatcher(search_path=bin_dir).dispatch(["hello", "world"]) == 0
        assert capfd.readouterr().out == "hello world\n"

    def test_failure_carries_exact_status(self, make_stub) -> None:
        bin_dir = make_stub("fails", "true", exit_code=42)
        with pytest.raises(DelegatedProcessError) as exc_info:
            Dispatcher(search_path=bin_dir).dispatch(["fails"])
        assert exc_info.value.exit_code == 42
        assert exc_info.value.command == "fails"

    def test_killed_by_signal(self, make_stub) -> None:
        bin_dir = make_stub("killed", "kill -TERM $$")
        with pytest.raises(DelegatedProcessError) as exc_info:
            Dispatcher(search_path=bin_dir).dispatch(["killed"])
        assert exc_info.value.exit_code == 128 + 15

