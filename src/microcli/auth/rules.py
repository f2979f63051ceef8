"""System authorization rules.

Loaded into the embedded backend at startup because it cannot fetch rules
from the central auth service. Without them nothing could log in or look
up services.
"""

from __future__ import annotations

from microcli.models import SCOPE_ACCOUNT, SCOPE_PUBLIC, AuthResource, AuthRule

SYSTEM_RULES: tuple[AuthRule, ...] = (
    AuthRule(
        id="default",
        scope=SCOPE_ACCOUNT,
        resource=AuthResource(type="*", name="*", endpoint="*"),
    ),
    AuthRule(
        id="auth-public",
        scope=SCOPE_PUBLIC,
        resource=AuthResource(type="service", name="go.micro.auth", endpoint="*"),
    ),
    AuthRule(
        id="registry-get",
        scope=SCOPE_PUBLIC,
        resource=AuthResource(
            type="service", name="go.micro.registry", endpoint="Registry.GetService"
        ),
    ),
    AuthRule(
        id="registry-list",
        scope=SCOPE_PUBLIC,
        resource=AuthResource(
            type="service", name="go.micro.registry", endpoint="Registry.ListServices"
        ),
    ),
)
