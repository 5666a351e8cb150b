"""Exclusive local working copies."""

from __future__ import annotations

import asyncio
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass, field
from pathlib import Path

from relman.git.vcs import WorkingCopy
from relman.repo.target import RepositoryTarget

__all__ = ["RepositoryHandle"]


@dataclass(eq=False)
class RepositoryHandle:
    """A cloned, checked-out working copy owned by one target.

    Only created once clone and checkout both succeeded. The directory is
    scratch storage removed at interpreter exit. Reads are unrestricted;
    mutations go through ``transaction()``, which admits one commit/push
    transaction at a time.

    Attributes:
        target: The target this working copy belongs to
        working_copy: Location of the clone
        branch_created: True when the branch did not exist remotely and was
            created locally from the default branch
    """

    target: RepositoryTarget
    working_copy: WorkingCopy
    branch_created: bool = False
    _lock: asyncio.Lock = field(default_factory=asyncio.Lock, init=False, repr=False)

    @property
    def root(self) -> Path:
        return self.working_copy.root

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[WorkingCopy]:
        async with self._lock:
            yield self.working_copy
