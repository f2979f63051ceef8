"""Plugin system for microcli -- capability interface and discovery.

A plugin contributes any of three capabilities to the composed application:
global flags, top-level commands, and an initialisation hook run once per
invocation before the matched command. The composition layer iterates a
homogeneous, ordered list of :class:`Plugin` objects and never looks at a
concrete plugin type.

Key classes:

* :class:`Plugin` -- Abstract base class that all plugins extend.
* :class:`PluginManager` -- Discovers entry-point plugins and keeps them
  in a deterministic order.
"""

from microcli.plugins.base import Plugin
from microcli.plugins.manager import PluginManager

__all__ = ["Plugin", "PluginManager"]
