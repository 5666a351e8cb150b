"""Working-copy status as seen by the change-set computation.

``git status --porcelain=v1 -z --untracked-files=all`` is parsed into two
disjoint sets of root-relative POSIX paths: tracked paths with any change
(staged or not) and untracked files. Ignored files are never reported.
"""

from __future__ import annotations

from dataclasses import dataclass, field

__all__ = ["StatusEntry", "WorkingCopyStatus", "parse_porcelain_z"]


@dataclass(frozen=True, slots=True)
class StatusEntry:
    """A single entry in git status.

    Attributes:
        xy: Two-character status code (e.g., "M ", " M", "??")
        path: Path relative to the working-copy root
    """

    xy: str
    path: str

    @property
    def is_untracked(self) -> bool:
        return self.xy == "??"

    @property
    def is_ignored(self) -> bool:
        return self.xy == "!!"


@dataclass(frozen=True, slots=True)
class WorkingCopyStatus:
    """Modified (tracked) and untracked paths of a working copy."""

    modified: frozenset[str] = field(default_factory=frozenset)
    untracked: frozenset[str] = field(default_factory=frozenset)

    def __contains__(self, path: object) -> bool:
        return path in self.modified or path in self.untracked

    @classmethod
    def from_entries(cls, entries: list[StatusEntry]) -> WorkingCopyStatus:
        modified: set[str] = set()
        untracked: set[str] = set()
        for entry in entries:
            if entry.is_ignored:
                continue
            if entry.is_untracked:
                untracked.add(entry.path)
            else:
                modified.add(entry.path)
        return cls(modified=frozenset(modified), untracked=frozenset(untracked))


def parse_porcelain_z(output: str) -> list[StatusEntry]:
    """Parse NUL-separated porcelain v1 output.

    Renames and copies carry the original path as an extra field, which is
    skipped: only the destination path is reported.
    """
    tokens = output.split("\0")
    entries: list[StatusEntry] = []
    i = 0
    while i < len(tokens):
        token = tokens[i]
        i += 1
        if len(token) < 4:
            continue
        xy = token[:2]
        entries.append(StatusEntry(xy=xy, path=token[3:]))
        if xy[0] in ("R", "C"):
            i += 1
    return entries
