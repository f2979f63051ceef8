"""Persistent store collaborator.

The command line never talks to a store backend itself; it only tells the
configured store which database and table the invoked service should use
(see :class:`~microcli.hooks.StoreDefaultsHook`). :class:`Store` is that
narrow seam, and :class:`MemoryStore` the in-process default.
"""

from __future__ import annotations

import logging
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Store(Protocol):
    """Anything that can be (re)initialised with store options."""

    def init(self, *, database: Optional[str] = None, table: Optional[str] = None) -> None:
        ...


class MemoryStore:
    """In-process store that remembers the partition it was initialised with."""

    def __init__(self, database: str = "", table: str = "") -> None:
        self.database = database
        self.table = table

    def init(self, *, database: Optional[str] = None, table: Optional[str] = None) -> None:
        """Switch the default database and/or table. ``None`` keeps the current one."""
        if database is not None:
            self.database = database
        if table is not None:
            self.table = table
        logger.debug("Store initialised: database=%s table=%s", self.database, self.table)

