"""Authorization collaborator for microcli.

The command line only needs two things from an authorization backend: its
identity, and the ability to grant rules. When the backend is the embedded
implementation (no central rules service reachable), the startup hook chain
loads :data:`SYSTEM_RULES` into it so the runtime services stay reachable.

- :class:`AuthBackend` -- abstract base class for authorization backends.
- :class:`EmbeddedAuth` -- self-contained backend holding rules in memory.
- :data:`SYSTEM_RULES` -- the fixed rules pre-loaded into :class:`EmbeddedAuth`.
"""

from microcli.auth.base import AuthBackend
from microcli.auth.embedded import EMBEDDED_AUTH_IDENTITY, EmbeddedAuth
from microcli.auth.rules import SYSTEM_RULES

__all__ = ["AuthBackend", "EmbeddedAuth", "EMBEDDED_AUTH_IDENTITY", "SYSTEM_RULES"]
