"""Remote branch existence probe.

The release branch may not exist yet on the remote. The probe lists the
remote heads once per target; initialization then clones either the branch
itself or the provider's default branch, creating the release branch
locally in the latter case.

Matching is by substring of the full ref name unless ``exact_match`` is set:
``release-1`` is considered present when only ``refs/heads/release-10``
exists. Exact matching compares against ``refs/heads/<branch>``.
"""

from __future__ import annotations

import asyncio
from dataclasses import dataclass

from relman.core.result import Err, Ok, Result
from relman.git.vcs import HEADS_PREFIX, VersionControl
from relman.repo.errors import RepositoryAccessError
from relman.repo.target import RepositoryTarget

__all__ = ["BranchExistence", "BranchResolver", "branch_listed"]

type ProbeResult = Result[BranchExistence, RepositoryAccessError]


@dataclass(frozen=True, slots=True)
class BranchExistence:
    """Outcome of the remote probe for one target."""

    exists: bool

    @property
    def missing(self) -> bool:
        return not self.exists


def branch_listed(branch: str, refs: frozenset[str], *, exact: bool) -> bool:
    if exact:
        return HEADS_PREFIX + branch in refs
    return any(branch in ref for ref in refs)


class BranchResolver:
    """Per-target cached remote branch probe.

    Concurrent and repeated probes of equal targets share one remote query;
    a failed query is cached as well and is not retried.
    """

    def __init__(self, vcs: VersionControl, *, exact_match: bool = False) -> None:
        self._vcs = vcs
        self.exact_match = exact_match
        self._probes: dict[RepositoryTarget, asyncio.Task[ProbeResult]] = {}

    async def probe_branch(self, target: RepositoryTarget) -> ProbeResult:
        task = self._probes.get(target)
        if task is None:
            task = asyncio.create_task(self._probe(target), name=f"probe {target}")
            self._probes[target] = task
        # Shielded: a cancelled waiter must not cancel the probe others share.
        return await asyncio.shield(task)

    async def resolve_initial_ref(self, target: RepositoryTarget) -> Result[str, RepositoryAccessError]:
        """Ref to clone: the branch when it exists, else the default branch."""
        probe = await self.probe_branch(target)
        if isinstance(probe, Err):
            return probe
        return Ok(target.branch_ref if probe.value.exists else target.default_ref)

    async def _probe(self, target: RepositoryTarget) -> ProbeResult:
        listed = await self._vcs.list_remote_branches(target.remote_url, target.credentials)
        if isinstance(listed, Err):
            return Err(
                RepositoryAccessError(
                    target=str(target),
                    operation="probe",
                    message=listed.error.message,
                )
            )
        exists = branch_listed(target.branch, listed.value, exact=self.exact_match)
        return Ok(BranchExistence(exists=exists))
