"""Typed configuration loading and access.

This module provides dataclasses for the relman.toml structure. Every key is
optional; a missing file yields the defaults. Credentials are never read from
the file, only from CLI options or the environment.

Example relman.toml:

    [github]
    host = "github.com"
    raw_host = "raw.githubusercontent.com"

    [gitlab]
    host = "gitlab.example.com"
    default_branch = "master"

    [git]
    network_timeout = 300
    exact_branch_match = true
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_float, get_str, get_table

__all__ = [
    "CONFIG_ENV_VAR",
    "CONFIG_FILE_NAME",
    "Config",
    "ConfigError",
    "GitConfig",
    "GitHubConfig",
    "GitLabConfig",
    "load_config",
    "resolve_config_path",
]

CONFIG_FILE_NAME = "relman.toml"
CONFIG_ENV_VAR = "RELMAN_CONFIG"

DEFAULT_BRANCH = "main"
GITHUB_HOST = "github.com"
GITHUB_RAW_HOST = "raw.githubusercontent.com"
GITLAB_HOST = "gitlab.cee.redhat.com"

# Local git operations (status, branch, checkout, add, commit)
GIT_TIMEOUT_SECONDS = 30.0

# Network-bound git operations (ls-remote, clone, push)
GIT_NETWORK_TIMEOUT_SECONDS = 3 * 60.0


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be loaded or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class GitHubConfig:
    """Hosting provider A: token auth, public raw-content host."""

    host: str = GITHUB_HOST
    raw_host: str = GITHUB_RAW_HOST
    default_branch: str = DEFAULT_BRANCH


@dataclass(frozen=True, slots=True)
class GitLabConfig:
    """Hosting provider B: user+token auth, raw content served by the host."""

    host: str = GITLAB_HOST
    default_branch: str = DEFAULT_BRANCH


@dataclass(frozen=True, slots=True)
class GitConfig:
    """Behaviour of the git adapter and the branch probe.

    Attributes:
        timeout: Seconds allowed for local operations.
        network_timeout: Seconds allowed for ls-remote, clone and push.
        exact_branch_match: Compare remote head names exactly instead of by
            substring when probing for the release branch.
        author_name: Optional commit author name.
        author_email: Optional commit author email.
    """

    timeout: float = GIT_TIMEOUT_SECONDS
    network_timeout: float = GIT_NETWORK_TIMEOUT_SECONDS
    exact_branch_match: bool = False
    author_name: str | None = None
    author_email: str | None = None

    @property
    def author(self) -> tuple[str, str] | None:
        if self.author_name and self.author_email:
            return (self.author_name, self.author_email)
        return None


@dataclass(frozen=True, slots=True)
class Config:
    """Main configuration container."""

    github: GitHubConfig = field(default_factory=GitHubConfig)
    gitlab: GitLabConfig = field(default_factory=GitLabConfig)
    git: GitConfig = field(default_factory=GitConfig)

    @classmethod
    def from_dict(cls, data: Mapping[str, object]) -> Config:
        """Create Config from a mapping (parsed TOML)."""
        github: StrDict = get_table(data, "github") or {}
        gitlab: StrDict = get_table(data, "gitlab") or {}
        git: StrDict = get_table(data, "git") or {}

        exact = get_bool(git, "exact_branch_match")

        return cls(
            github=GitHubConfig(
                host=get_str(github, "host") or GITHUB_HOST,
                raw_host=get_str(github, "raw_host") or GITHUB_RAW_HOST,
                default_branch=get_str(github, "default_branch") or DEFAULT_BRANCH,
            ),
            gitlab=GitLabConfig(
                host=get_str(gitlab, "host") or GITLAB_HOST,
                default_branch=get_str(gitlab, "default_branch") or DEFAULT_BRANCH,
            ),
            git=GitConfig(
                timeout=get_float(git, "timeout") or GIT_TIMEOUT_SECONDS,
                network_timeout=get_float(git, "network_timeout") or GIT_NETWORK_TIMEOUT_SECONDS,
                exact_branch_match=exact if exact is not None else False,
                author_name=get_str(git, "author_name"),
                author_email=get_str(git, "author_email"),
            ),
        )


def _parse_toml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a TOML file, handling read and parse errors."""
    import tomllib

    try:
        content = path.read_bytes()
        data_obj: object = tomllib.loads(content.decode("utf-8"))
        data = as_str_dict(data_obj)
        if data is None:
            return Err(ConfigError("Config root must be a TOML table", path=path))
        return Ok(data)
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except tomllib.TOMLDecodeError as e:
        return Err(ConfigError(f"Invalid TOML syntax: {e}", path=path))
    except UnicodeDecodeError as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))


def load_config(path: Path) -> Result[Config, ConfigError]:
    """Load and parse configuration from a TOML file.

    Args:
        path: Path to relman.toml

    Returns:
        Ok(Config) on success, Err(ConfigError) on failure
    """
    result = _parse_toml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(Config.from_dict(result.value))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def resolve_config_path(explicit: Path | None, *, cwd: Path | None = None) -> Path | None:
    """Pick the config file: explicit option, then $RELMAN_CONFIG, then ./relman.toml."""
    if explicit is not None:
        return explicit.expanduser()

    env = os.environ.get(CONFIG_ENV_VAR)
    if env:
        return Path(env).expanduser()

    candidate = (cwd or Path.cwd()) / CONFIG_FILE_NAME
    if candidate.is_file():
        return candidate
    return None
