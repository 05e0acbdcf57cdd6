"""CLI interface for codectx."""

from __future__ import annotations

import asyncio
import logging
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import Annotated

import structlog
import typer

from codectx import __version__
from codectx.config import CodebaseConfig, build_registry
from codectx.context.assembler import ContextAssembler
from codectx.exceptions import CodectxError, UnknownResourceError
from codectx.infra.filesystem import LocalFileSystem
from codectx.resources.base import ResourceKind
from codectx.resources.registry import ResourceRegistry
from codectx.state import CodebaseSession, SessionStore
from codectx.tools import retrieve_content

logger = structlog.get_logger()

app = typer.Typer(
    name="codectx",
    help="Assemble codebase context (file trees, repo maps, whole files) for agents",
    no_args_is_help=True,
)


def configure_logging(verbose: bool) -> None:
    """Configure structlog for CLI output on stderr."""
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="%Y-%m-%d %H:%M:%S"),
            structlog.dev.ConsoleRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.DEBUG if verbose else logging.WARNING
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


@dataclass
class CliContext:
    """Loaded configuration shared by every command."""

    config: CodebaseConfig
    registry: ResourceRegistry
    store: SessionStore

    def session(self) -> CodebaseSession:
        """Restore the saved session, or attach a new one from defaults."""
        session = self.store.load(self.registry)
        if session is None:
            session = CodebaseSession.attach(self.registry, self.config.default.resources)
        return session

    def assembler(self) -> ContextAssembler:
        """Create an assembler reading from the config root."""
        return ContextAssembler(self.registry, LocalFileSystem(self.config.root))


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"codectx version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Path,
        typer.Option(
            "--config",
            "-c",
            help="Path to codectx.yaml config file",
            resolve_path=True,
        ),
    ] = Path("codectx.yaml"),
    state: Annotated[
        Path,
        typer.Option(
            "--state",
            "-s",
            help="Path to the saved session file",
            resolve_path=True,
        ),
    ] = Path(".codectx/session.json"),
    verbose: Annotated[
        bool,
        typer.Option("--verbose", help="Enable debug logging"),
    ] = False,
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-v",
            help="Show version and exit.",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """codectx - codebase context assembly."""
    configure_logging(verbose)
    try:
        loaded = CodebaseConfig.load(config)
    except CodectxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    ctx.obj = CliContext(config=loaded, registry=build_registry(loaded), store=SessionStore(state))


def _echo_enabled(enabled: set[str]) -> None:
    names = ", ".join(sorted(enabled)) or "None"
    typer.echo(f"Currently enabled codebase resources: {names}")


def _mutate(ctx: typer.Context, action: str, names: list[str]) -> None:
    cli: CliContext = ctx.obj
    try:
        session = cli.session()
        mutator = {
            "enable": cli.registry.enable,
            "disable": cli.registry.disable,
            "set": cli.registry.set_enabled,
        }[action]
        enabled = mutator(names, session)
    except UnknownResourceError as e:
        typer.echo(f"Error: {e}", err=True)
        available = ", ".join(cli.registry.list_available()) or "None"
        typer.echo(f"Available resources: {available}", err=True)
        raise typer.Exit(1) from e
    except CodectxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    cli.store.save(session)
    _echo_enabled(enabled)


@app.command("list")
def list_command(ctx: typer.Context) -> None:
    """List available and enabled resources."""
    cli: CliContext = ctx.obj
    try:
        session = cli.session()
    except CodectxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    enabled = cli.registry.get_enabled(session)
    typer.echo("Available codebase resources:")
    for name in cli.registry.list_available():
        marker = "*" if name in enabled else " "
        kind = cli.registry.get(name).kind.value
        typer.echo(f" {marker} {name} ({kind})")
    typer.echo("")
    for line in session.show():
        typer.echo(line)


@app.command()
def enable(
    ctx: typer.Context,
    names: Annotated[list[str], typer.Argument(help="Resource names or prefix/* patterns")],
) -> None:
    """Enable resources for the session."""
    _mutate(ctx, "enable", names)


@app.command()
def disable(
    ctx: typer.Context,
    names: Annotated[list[str], typer.Argument(help="Resource names or prefix/* patterns")],
) -> None:
    """Disable resources for the session."""
    _mutate(ctx, "disable", names)


@app.command("set")
def set_command(
    ctx: typer.Context,
    names: Annotated[list[str], typer.Argument(help="Resource names or prefix/* patterns")],
) -> None:
    """Replace the enabled resources with exactly NAMES."""
    _mutate(ctx, "set", names)


@app.command("show-repo-map")
def show_repo_map(ctx: typer.Context) -> None:
    """Show the repository map of enabled RepoMap resources."""
    cli: CliContext = ctx.obj
    try:
        session = cli.session()
        if not cli.registry.get_enabled_by_kind(session, ResourceKind.REPO_MAP):
            typer.echo(
                "No RepoMap resources are currently enabled. Enable a RepoMap resource first."
            )
            return
        repo_map = asyncio.run(cli.assembler().build_repo_map(session))
    except CodectxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e

    if repo_map is None:
        typer.echo("No repository map found. The enabled RepoMap resources matched no symbols.")
        return
    typer.echo(repo_map)


@app.command()
def assemble(ctx: typer.Context) -> None:
    """Print every context item for the session."""
    cli: CliContext = ctx.obj
    log = logger.bind(command="assemble")

    async def _print_items() -> int:
        count = 0
        async for item in cli.assembler().assemble(session):
            typer.echo(item.content)
            typer.echo("")
            count += 1
        return count

    try:
        session = cli.session()
        count = asyncio.run(_print_items())
    except CodectxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    log.debug("Printed context items", count=count)


@app.command()
def retrieve(
    ctx: typer.Context,
    names: Annotated[list[str], typer.Argument(help="Exact resource names")],
) -> None:
    """Print the content of specific resources, enabled or not."""
    cli: CliContext = ctx.obj
    try:
        session = cli.session()
        result = asyncio.run(
            retrieve_content(names, cli.registry, session, LocalFileSystem(cli.config.root))
        )
    except CodectxError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(1) from e
    if not result["ok"]:
        typer.echo(f"Error: {result['error']}", err=True)
        raise typer.Exit(1)
    typer.echo(result["content"])


if __name__ == "__main__":
    app()
