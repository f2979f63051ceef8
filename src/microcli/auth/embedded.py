"""Embedded authorization backend.

:class:`EmbeddedAuth` keeps its rules in memory and answers access checks
itself. It reports the identity :data:`EMBEDDED_AUTH_IDENTITY`, which is what
the startup hook chain looks for before loading the system rules.
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

from microcli.auth.base import AuthBackend
from microcli.models import SCOPE_ACCOUNT, SCOPE_PUBLIC, Access, AuthResource, AuthRule

logger = logging.getLogger(__name__)

EMBEDDED_AUTH_IDENTITY = "jwt"


def _matches(pattern: str, value: str) -> bool:
    return pattern == "*" or pattern == value


class EmbeddedAuth(AuthBackend):
    """Self-contained backend with no central rules service.

    Rules are evaluated highest priority first; among equal priorities the
    earliest granted rule wins. Access is denied when no rule matches.

    Example::

        auth = EmbeddedAuth()
        auth.grant(rule)
        auth.verify(AuthResource(type="service", name="go.micro.auth"))
    """

    def __init__(self) -> None:
        self._rules: dict[str, AuthRule] = {}

    def identity(self) -> str:
        return EMBEDDED_AUTH_IDENTITY

    def grant(self, rule: AuthRule) -> None:
        """Store *rule*, replacing any rule with the same id."""
        self._rules[rule.id] = rule
        logger.debug("Granted rule '%s' on %s", rule.id, rule.resource)

    def rules(self) -> list[AuthRule]:
        return list(self._rules.values())

    def verify(self, resource: AuthResource, scopes: Optional[Sequence[str]] = None) -> bool:
        candidates = sorted(self._rules.values(), key=lambda r: -r.priority)
        for rule in candidates:
            target = rule.resource
            if not (
                _matches(target.type, resource.type)
                and _matches(target.name, resource.name)
                and _matches(target.endpoint, resource.endpoint)
            ):
                continue
            if not self._scope_allows(rule.scope, scopes):
                continue
            return rule.access == Access.GRANTED
        return False

    @staticmethod
    def _scope_allows(scope: str, scopes: Optional[Sequence[str]]) -> bool:
        if scope == SCOPE_PUBLIC:
            return True
        if scopes is None:
            return False
        return scope == SCOPE_ACCOUNT or scope in scopes
