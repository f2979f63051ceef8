"""Tests for the shared models."""

from __future__ import annotations

import pydantic
import pytest

from microcli.exceptions import (
    AuthorizationBootstrapError,
    ChainFatalError,
    ConfigurationConflictError,
    DelegatedProcessError,
    EmptyInvocationError,
    HelpTopicError,
    MicroError,
    PluginInitError,
)
from microcli.models import FlagDefinition, FlagKind, InvocationContext, SharedConfiguration


class TestInvocationContext:
    def test_string(self) -> None:
        ctx = InvocationContext(app_name="micro", values={"namespace": "prod", "missing": None})
        assert ctx.string("namespace") == "prod"
        assert ctx.string("missing") == ""
        assert ctx.string("absent") == ""

    def test_boolean(self) -> None:
        ctx = InvocationContext(app_name="micro", values={"local": True, "enable_tls": False})
        assert ctx.boolean("local") is True
        assert ctx.boolean("enable_tls") is False
        assert ctx.boolean("absent") is False

    @pytest.mark.parametrize(
        ("value", "expected"),
        [("x", True), ("", False), (None, False), (True, True)],
    )
    def test_is_set(self, value, expected: bool) -> None:
        ctx = InvocationContext(app_name="micro", values={"flag": value})
        assert ctx.is_set("flag") is expected

    def test_first(self) -> None:
        assert InvocationContext(app_name="micro", args=["orders", "list"]).first() == "orders"
        assert InvocationContext(app_name="micro").first() == ""


class TestModels:
    def test_flag_definition_frozen(self) -> None:
        flag = FlagDefinition(name="api_address")
        assert flag.kind == FlagKind.STRING
        with pytest.raises(pydantic.ValidationError):
            flag.name = "other"  # type: ignore[misc]

    def test_shared_configuration_defaults(self) -> None:
        config = SharedConfiguration()
        assert config.api.address == ":8080"
        assert config.api.namespace == "go.micro.api"
        assert config.proxy.address == ":8081"
        assert config.web.address == ":8082"
        assert config.network.address == ":8085"
        assert config.tunnel.address == ":8083"
        assert config.store.database is None


class TestExceptions:
    def test_all_exit_one_by_default(self) -> None:
        errors = [
            ConfigurationConflictError("flag", "x", "a", "b"),
            PluginInitError("p", RuntimeError("boom")),
            ChainFatalError("fatal"),
            AuthorizationBootstrapError("default", RuntimeError("down")),
            EmptyInvocationError(),
            HelpTopicError("nope"),
        ]
        for exc in errors:
            assert isinstance(exc, MicroError)
            assert exc.exit_code == 1

    def test_delegated_status(self) -> None:
        exc = DelegatedProcessError("stub", 7)
        assert exc.exit_code == 7
        assert str(exc) == "'stub' exited with status 7"

    def test_exit_code_override(self) -> None:
        assert MicroError("x", exit_code=3).exit_code == 3
