"""Abstract base class for authorization backends.

To add a backend, subclass :class:`AuthBackend`, return a stable
:meth:`~AuthBackend.identity`, and implement :meth:`~AuthBackend.grant`.
Override :meth:`~AuthBackend.verify` when the backend can answer access
questions locally.

See Also:
    :class:`~microcli.hooks.AuthBootstrapHook` -- decides from the identity
    whether system rules are loaded.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional, Sequence

from microcli.models import AuthResource, AuthRule


class AuthBackend(ABC):
    """Base class for authorization backends."""

    @abstractmethod
    def identity(self) -> str:
        """Return the implementation identifier (e.g. ``"jwt"``, ``"service"``)."""
        ...

    @abstractmethod
    def grant(self, rule: AuthRule) -> None:
        """Store *rule*. Raise if it cannot be granted."""
        ...

    def rules(self) -> list[AuthRule]:
        """Return the rules known to this backend. Defaults to none."""
        return []

    def verify(self, resource: AuthResource, scopes: Optional[Sequence[str]] = None) -> bool:
        """Return ``True`` if a caller with *scopes* may access *resource*.

        ``scopes=None`` stands for an unauthenticated caller. The default
        implementation denies everything.
        """
        return False
