from __future__ import annotations

import asyncio
from pathlib import Path, PurePosixPath

import typer

from relman.cli.commands._helpers import exit_with_code, parse_target, unwrap_or_exit
from relman.cli.context import CLIContext, build_context
from relman.core.errors import ErrorCode
from relman.core.result import Err, Result
from relman.output.console import Style
from relman.repo.errors import TransactionError
from relman.repo.raw import UrllibHttpClient, read_raw_file
from relman.repo.registry import RepositoryRegistry
from relman.repo.resolver import BranchResolver
from relman.repo.target import RepositoryTarget
from relman.repo.transaction import CommitPushOrchestrator, TransactionOutcome, copy_file

repo_app = typer.Typer(add_completion=False, no_args_is_help=True)

_GITLAB_HELP = "Reference is <org>/<repo> on the GitLab-like host (requires --release)"


def _target(
    ctx: CLIContext,
    reference: str,
    *,
    gitlab: bool,
    release: str | None,
    user: str | None,
    token: str | None,
) -> RepositoryTarget:
    if gitlab and not release:
        ctx.console.error("--release is required with --gitlab")
        exit_with_code(int(ErrorCode.USER_ERROR))
    return unwrap_or_exit(
        parse_target(ctx, reference, gitlab=gitlab, release=release, user=user, token=token),
        ctx,
    )


def _token(gitlab: bool, github_token: str | None, gitlab_token: str | None) -> str | None:
    return gitlab_token if gitlab else github_token


@repo_app.command("url")
def url_cmd(
    reference: str = typer.Argument(..., help="<org>/<repo>/<branch> (or <org>/<repo> with --gitlab)"),
    path: str | None = typer.Option(None, "--path", help="Also print the raw URL of this file"),
    gitlab: bool = typer.Option(False, "--gitlab", help=_GITLAB_HELP),
    release: str | None = typer.Option(None, "--release", help="Release identifier (GitLab)"),
) -> None:
    """Print the clone URL (and optionally a raw-content URL)."""
    ctx = build_context()
    target = _target(ctx, reference, gitlab=gitlab, release=release, user=None, token=None)

    ctx.console.print(f"branch: {target.branch}", Style.DIM)
    ctx.console.print(target.remote_url)
    if path:
        ctx.console.print(target.raw_url(path))


@repo_app.command("probe")
def probe_cmd(
    reference: str = typer.Argument(..., help="<org>/<repo>/<branch> (or <org>/<repo> with --gitlab)"),
    gitlab: bool = typer.Option(False, "--gitlab", help=_GITLAB_HELP),
    release: str | None = typer.Option(None, "--release", help="Release identifier (GitLab)"),
    github_token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token"),
    gitlab_user: str | None = typer.Option(None, "--user", envvar="GITLAB_USER", help="GitLab user"),
    gitlab_token: str | None = typer.Option(None, "--gitlab-token", envvar="GITLAB_TOKEN", help="GitLab token"),
) -> None:
    """Report whether the target branch exists on the remote."""
    ctx = build_context()
    target = _target(
        ctx,
        reference,
        gitlab=gitlab,
        release=release,
        user=gitlab_user,
        token=_token(gitlab, github_token, gitlab_token),
    )

    resolver = BranchResolver(ctx.git(), exact_match=ctx.config.git.exact_branch_match)
    existence = unwrap_or_exit(asyncio.run(resolver.probe_branch(target)), ctx)
    if existence.exists:
        ctx.console.success(f"{target.branch} exists on {target.slug}")
    else:
        ctx.console.info(f"{target.branch} not found; would be created from {target.default_branch}")


@repo_app.command("cat")
def cat_cmd(
    reference: str = typer.Argument(..., help="<org>/<repo>/<branch> (or <org>/<repo> with --gitlab)"),
    path: str = typer.Argument(..., help="File path relative to the repository root"),
    gitlab: bool = typer.Option(False, "--gitlab", help=_GITLAB_HELP),
    release: str | None = typer.Option(None, "--release", help="Release identifier (GitLab)"),
    github_token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token"),
    gitlab_user: str | None = typer.Option(None, "--user", envvar="GITLAB_USER", help="GitLab user"),
    gitlab_token: str | None = typer.Option(None, "--gitlab-token", envvar="GITLAB_TOKEN", help="GitLab token"),
) -> None:
    """Print one file of the branch without cloning."""
    ctx = build_context()
    target = _target(
        ctx,
        reference,
        gitlab=gitlab,
        release=release,
        user=gitlab_user,
        token=_token(gitlab, github_token, gitlab_token),
    )

    content = unwrap_or_exit(asyncio.run(read_raw_file(target, path, client=UrllibHttpClient())), ctx)
    typer.echo(content, nl=False)


@repo_app.command("publish")
def publish_cmd(
    reference: str = typer.Argument(..., help="<org>/<repo>/<branch> (or <org>/<repo> with --gitlab)"),
    sources: list[Path] = typer.Argument(..., help="Local files to publish", exists=True, dir_okay=False),
    message: str = typer.Option(..., "--message", "-m", help="Commit message"),
    dest: str = typer.Option("", "--dest", help="Destination directory inside the repository"),
    gitlab: bool = typer.Option(False, "--gitlab", help=_GITLAB_HELP),
    release: str | None = typer.Option(None, "--release", help="Release identifier (GitLab)"),
    github_token: str | None = typer.Option(None, "--token", envvar="GITHUB_TOKEN", help="GitHub token"),
    gitlab_user: str | None = typer.Option(None, "--user", envvar="GITLAB_USER", help="GitLab user"),
    gitlab_token: str | None = typer.Option(None, "--gitlab-token", envvar="GITLAB_TOKEN", help="GitLab token"),
) -> None:
    """Copy files into the branch and commit/push them if they changed."""
    ctx = build_context()
    if PurePosixPath(dest).is_absolute() or ".." in PurePosixPath(dest).parts:
        ctx.console.error(f"--dest must stay inside the repository: {dest}")
        exit_with_code(int(ErrorCode.USER_ERROR))

    target = _target(
        ctx,
        reference,
        gitlab=gitlab,
        release=release,
        user=gitlab_user,
        token=_token(gitlab, github_token, gitlab_token),
    )

    outcome = unwrap_or_exit(asyncio.run(_publish(ctx, target, sources, dest=dest, message=message)), ctx)
    if outcome.committed:
        ctx.console.success(f"published {len(outcome.paths)} file(s) to {target}")
    else:
        ctx.console.info(f"{target} already up to date")


async def _publish(
    ctx: CLIContext,
    target: RepositoryTarget,
    sources: list[Path],
    *,
    dest: str,
    message: str,
) -> Result[TransactionOutcome, TransactionError]:
    vcs = ctx.git()
    resolver = BranchResolver(vcs, exact_match=ctx.config.git.exact_branch_match)
    registry = RepositoryRegistry(vcs, console=ctx.console, resolver=resolver)
    orchestrator = CommitPushOrchestrator(registry, vcs, console=ctx.console, author=ctx.config.git.author)

    initialized = await registry.ensure_initialized(target)
    if isinstance(initialized, Err):
        return initialized

    prefix = dest.strip("/")
    mutations = [copy_file(src, f"{prefix}/{src.name}" if prefix else src.name) for src in sources]
    return await orchestrator.commit_and_push(target, message, mutations)
