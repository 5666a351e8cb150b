"""Shared helpers for CLI commands."""

from __future__ import annotations

from typing import TYPE_CHECKING, NoReturn, TypeVar

import typer

from relman.core.result import Err, Result
from relman.output.errors import print_repo_error, repo_error_exit_code
from relman.repo.errors import MalformedReferenceError, RepoError
from relman.repo.target import RepositoryTarget, parse_github_reference, parse_gitlab_reference

if TYPE_CHECKING:
    from relman.cli.context import CLIContext


T = TypeVar("T")


def unwrap_or_exit[T](result: Result[T, RepoError], ctx: CLIContext) -> T:
    """Return the value, or print the error and exit with its code."""
    if isinstance(result, Err):
        print_repo_error(result.error, ctx.console)
        exit_with_code(repo_error_exit_code(result.error))
    return result.value


def exit_with_code(code: int) -> NoReturn:
    raise typer.Exit(code=code)


def parse_target(
    ctx: CLIContext,
    reference: str,
    *,
    gitlab: bool,
    release: str | None,
    user: str | None,
    token: str | None,
) -> Result[RepositoryTarget, MalformedReferenceError]:
    """Build a target for either provider from CLI options."""
    if gitlab:
        return parse_gitlab_reference(
            reference,
            release=release or "",
            user=user or "",
            token=token or "",
            config=ctx.config,
        )
    return parse_github_reference(reference, token=token or "", config=ctx.config)
