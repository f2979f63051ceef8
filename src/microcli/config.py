"""Flag-to-configuration binding and on-disk locations.

* **Binding** -- :class:`ConfigBinder` copies explicitly supplied global flag
  values into the :class:`~microcli.models.SharedConfiguration` read by the
  API gateway, proxy, web dashboard, network and tunnel. Flags that were not
  supplied (empty string) leave the existing defaults untouched.
* **Directory layout** -- :func:`get_data_dir` is XDG compliant on Linux/BSD
  and falls back to ``~/.micro/`` elsewhere. It holds crash logs.
"""

from __future__ import annotations

import logging
import os
import platform
from pathlib import Path
from typing import Mapping

from microcli.models import InvocationContext, SharedConfiguration

logger = logging.getLogger(__name__)

_APP_NAME = "micro"

FLAG_BINDINGS: Mapping[str, tuple[str, str]] = {
    "api_handler": ("api", "handler"),
    "api_address": ("api", "address"),
    "api_namespace": ("api", "namespace"),
    "proxy_address": ("proxy", "address"),
    "web_address": ("web", "address"),
    "web_namespace": ("web", "namespace"),
    "web_url": ("web", "host"),
    "network_address": ("network", "address"),
    "tunnel_address": ("tunnel", "address"),
}
"""Flag name -> (configuration section, field) for every bound flag."""


class ConfigBinder:
    """Writes explicitly supplied flag values into a shared configuration.

    Args:
        bindings: Flag name to ``(section, field)`` mapping. Defaults to
            :data:`FLAG_BINDINGS`.
    """

    def __init__(self, bindings: Mapping[str, tuple[str, str]] = FLAG_BINDINGS) -> None:
        self._bindings = dict(bindings)

    def bind(self, ctx: InvocationContext, config: SharedConfiguration) -> list[str]:
        """Apply every non-empty bound flag of *ctx* to *config*.

        Returns:
            The names of the flags that were applied, in binding order.
        """
        applied: list[str] = []
        for flag_name, (section, field_name) in self._bindings.items():
            if not ctx.is_set(flag_name):
                continue
            setattr(getattr(config, section), field_name, ctx.string(flag_name))
            applied.append(flag_name)
            logger.debug("Bound --%s to %s.%s", flag_name, section, field_name)
        return applied


# --- XDG path resolution ---


def _is_xdg_platform() -> bool:
    """Return True if the platform follows the XDG Base Directory spec."""
    return platform.system() == "Linux" or platform.system().endswith("BSD")


def get_data_dir() -> Path:
    """Return the data directory (crash logs), creating it if necessary.

    On Linux/BSD: ``$XDG_DATA_HOME/micro/`` (default ``~/.local/share/micro/``).
    On macOS/Windows: ``~/.micro/logs/``.
    """
    if _is_xdg_platform():
        env_value = os.environ.get("XDG_DATA_HOME", "")
        base = Path(env_value) if env_value else Path.home() / ".local" / "share"
        path = base / _APP_NAME
    else:
        path = Path.home() / f".{_APP_NAME}" / "logs"
    path.mkdir(parents=True, exist_ok=True)
    return path
