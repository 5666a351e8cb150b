from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

import typer

from relman.core.config import Config, load_config, resolve_config_path
from relman.core.errors import ErrorCode
from relman.core.result import Err
from relman.git.vcs import GitCli
from relman.output.console import ConsoleProtocol, RichConsole


@dataclass(frozen=True, slots=True)
class CLIContext:
    config: Config
    config_path: Path | None
    console: ConsoleProtocol

    def git(self) -> GitCli:
        return GitCli(timeout=self.config.git.timeout, network_timeout=self.config.git.network_timeout)


def build_context() -> CLIContext:
    config_path = resolve_config_path(None)
    config = Config()
    if config_path is not None:
        result = load_config(config_path)
        if isinstance(result, Err):
            typer.echo(f"error: {result.error.message}", err=True)
            raise typer.Exit(code=int(ErrorCode.ENV_ERROR))
        config = result.value

    return CLIContext(config=config, config_path=config_path, console=RichConsole())
