"""Change-set computation.

Of the files a transaction's mutations touched, only those the working-copy
status reports as modified or untracked need staging. A mutation that wrote
content identical to the committed version therefore produces no change, and
an empty change set means the transaction is a no-op.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path

from relman.git.status import WorkingCopyStatus

__all__ = ["ChangeSet", "compute_change_set", "relative_to_root"]


@dataclass(frozen=True, slots=True)
class ChangeSet:
    """Root-relative POSIX paths to stage, in candidate order."""

    paths: tuple[str, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.paths


def relative_to_root(root: Path, candidate: Path) -> str | None:
    """Express candidate relative to root, or None when it lies outside."""
    path = candidate if candidate.is_absolute() else root / candidate
    try:
        return path.resolve().relative_to(root.resolve()).as_posix()
    except ValueError:
        return None


def compute_change_set(
    root: Path,
    candidates: Iterable[Path],
    status: WorkingCopyStatus,
) -> ChangeSet:
    """Keep the candidates present in the status, de-duplicated."""
    seen: set[str] = set()
    paths: list[str] = []
    for candidate in candidates:
        relative = relative_to_root(root, candidate)
        if relative is None or relative in seen:
            continue
        if relative in status:
            seen.add(relative)
            paths.append(relative)
    return ChangeSet(paths=tuple(paths))
