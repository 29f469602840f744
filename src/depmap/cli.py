"""CLI entry point - click command group `dep`."""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Callable
from collections.abc import Iterator
from pathlib import Path

import click

from . import __version__
from .config import DepSettings
from .exceptions import DependencyError
from .exceptions import DependencyNotFoundError
from .filestore import LocalFileStore
from .installer import install_dependency
from .installer import uninstall_dependency
from .mapping import mapping_to_json
from .registry import DependencyRegistry
from .vcs import GitClient

logger = logging.getLogger(__name__)

_BOX_COLOR = (255, 180, 220)
_RULE = "─" * 45


@contextlib.contextmanager
def _box() -> Iterator[Callable[[str], None]]:
    """Frame command output; yields a function that prints one framed line."""
    click.echo(click.style(f"╭{_RULE}", fg=_BOX_COLOR))

    def _line(text: str = "") -> None:
        for part in text.splitlines() or [""]:
            click.echo(click.style("│ ", fg=_BOX_COLOR) + part)

    try:
        yield _line
    finally:
        click.echo(click.style(f"╰{_RULE}", fg=_BOX_COLOR))


def _fail(error: DependencyError) -> click.ClickException:
    return click.ClickException(error.message)


def _registry(settings: DepSettings) -> DependencyRegistry:
    return DependencyRegistry(registry_path=settings.registry_path)


def _select(registry: DependencyRegistry, names: tuple[str, ...], action: str):
    selected = registry.select(names)
    if not selected:
        message = "Specified dependencies not found." if names else f"No dependencies to {action}."
        raise DependencyNotFoundError(message, context={"identifiers": list(names)})
    for name in names:
        if not any(record.matches(name) for record in selected):
            logger.warning(f'Dependency "{name}" not found, skipping')
    return selected


@click.group()
@click.version_option(__version__, prog_name="dep")
@click.option("--file", "registry_file", default=None, help="Registry file, relative to the project root.")
@click.option(
    "--root", "project_root", default=None,
    type=click.Path(file_okay=False, path_type=Path),
    help="Project root directory.",
)
@click.option("-v", "--verbose", count=True, help="Log progress (-vv for debug output).")
@click.pass_context
def cli(ctx: click.Context, registry_file: str | None, project_root: Path | None, verbose: int) -> None:
    """dep - fetch source dependencies and copy their files into the project."""
    overrides: dict[str, object] = {}
    if registry_file:
        overrides["registry_file"] = registry_file
    if project_root:
        overrides["project_root"] = project_root
    settings = DepSettings(**overrides)

    level = {0: settings.log_level, 1: "INFO"}.get(verbose, "DEBUG")
    logging.basicConfig(level=level, format="%(levelname)s %(name)s: %(message)s")
    ctx.obj = settings


@cli.command("list")
@click.pass_obj
def list_(settings: DepSettings) -> None:
    """List all configured dependencies."""
    try:
        records = _registry(settings).records
    except DependencyError as e:
        raise _fail(e) from e

    if not records:
        click.echo("No dependencies found.")
        return

    with _box() as line:
        line(click.style("Dependencies:", bold=True))
        for record in records:
            branch = f" ({record.branch})" if record.branch else ""
            line(f"  - {click.style(record.name, fg='cyan')}: {click.style(record.repo, fg='green')}{branch}")
            if record.out is not None:
                line(f"      out: {mapping_to_json(record.out)}")


@cli.command()
@click.argument("names", nargs=-1)
@click.option("--force", is_flag=True, help="Delete existing clones and clone again.")
@click.pass_obj
def install(settings: DepSettings, names: tuple[str, ...], force: bool) -> None:
    """Install all or specific dependencies (by name or repo URL)."""
    vcs = GitClient(cwd=settings.project_root)
    files = LocalFileStore(root=settings.project_root)

    async def _run(line: Callable[[str], None]) -> None:
        selected = _select(_registry(settings), names, "install")
        for index, record in enumerate(selected):
            if index:
                line()
            line(click.style(f"Installing dependency: {record.name}", fg="yellow"))
            result = await install_dependency(
                record, vcs=vcs, files=files, workspace_dir=settings.workspace_dir, force=force
            )
            line("\n".join(result))
            line(click.style(f"Installed dependency: {record.name}", fg="yellow"))

    with _box() as line:
        try:
            asyncio.run(_run(line))
        except DependencyError as e:
            line(click.style(str(e), fg="red"))
            raise _fail(e) from e


@cli.command()
@click.argument("names", nargs=-1)
@click.pass_obj
def uninstall(settings: DepSettings, names: tuple[str, ...]) -> None:
    """Uninstall all or specific dependencies, keeping them in the registry."""
    files = LocalFileStore(root=settings.project_root)

    async def _run(line: Callable[[str], None]) -> None:
        selected = _select(_registry(settings), names, "uninstall")
        for index, record in enumerate(selected):
            if index:
                line()
            line(click.style(f"Uninstalling dependency: {record.name}", fg="yellow"))
            result = await uninstall_dependency(record, files=files, workspace_dir=settings.workspace_dir)
            line("\n".join(result) or "Nothing to remove")

    with _box() as line:
        try:
            asyncio.run(_run(line))
        except DependencyError as e:
            line(click.style(str(e), fg="red"))
            raise _fail(e) from e


@cli.command()
@click.argument("repo")
@click.argument("name", required=False)
@click.pass_obj
def add(settings: DepSettings, repo: str, name: str | None) -> None:
    """Add a new dependency from a GitHub repository URL."""
    with _box() as line:
        try:
            record = _registry(settings).add(repo, name)
        except DependencyError as e:
            line(click.style(str(e), fg="red"))
            raise _fail(e) from e
        line(f'Added dependency "{record.name}".')


@cli.command()
@click.argument("identifier")
@click.option("--purge", is_flag=True, help="Also delete the local clone and every output destination.")
@click.pass_obj
def remove(settings: DepSettings, identifier: str, purge: bool) -> None:
    """Remove a dependency (by name or repo URL) from the registry."""
    files = LocalFileStore(root=settings.project_root)

    with _box() as line:
        try:
            registry = _registry(settings)
            if purge:
                for record in registry.select([identifier]):
                    line("\n".join(asyncio.run(uninstall_dependency(record, files, settings.workspace_dir))))
            registry.remove(identifier)
        except DependencyError as e:
            line(click.style(str(e), fg="red"))
            raise _fail(e) from e
        line(f'Removed dependency "{identifier}".')


@cli.command()
@click.argument("identifier")
@click.argument("destination")
@click.argument("source", required=False)
@click.pass_obj
def output(settings: DepSettings, identifier: str, destination: str, source: str | None) -> None:
    """Copy a dependency (or its SOURCE sub-path) to DESTINATION on install."""
    with _box() as line:
        try:
            record = _registry(settings).set_output(identifier, destination, source)
        except DependencyError as e:
            line(click.style(str(e), fg="red"))
            raise _fail(e) from e
        line(f"Updated dependency output for {click.style(record.name, fg='cyan')}")
        line(f"  out: {mapping_to_json(record.out)}")


main = cli
