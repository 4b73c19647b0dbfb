"""Command line interface for standup-git."""

import logging
from pathlib import Path
from typing import Optional

import click
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape

from standup_git.core.config import DEFAULT_OUTPUT, StandupConfig
from standup_git.core.errors import ConfigError, StandupError
from standup_git.core.extractor import resolve_default_author
from standup_git.core.pipeline import StandupRun

console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)


def configure_logging(verbose: bool) -> None:
    """Set up root logging for a CLI run."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s:%(name)s:%(message)s",
    )
    # GitPython logs every command it runs at DEBUG
    logging.getLogger("git").setLevel(logging.INFO if verbose else logging.WARNING)


def build_config(
    user: Optional[str],
    directory: Optional[str],
    after: Optional[str],
    output: str,
    verbose: bool,
    skip_errors: bool,
) -> StandupConfig:
    """Resolve command line values into a StandupConfig.

    Falls back to the global git ``user.name`` when no user is given.

    Raises:
        ConfigError: no author could be resolved or a value is invalid
    """
    if not user or not user.strip():
        user = resolve_default_author()

    values = {
        "user": user,
        "output": Path(output),
        "verbose": verbose,
        "on_walk_error": "skip" if skip_errors else "abort",
    }
    if directory:
        values["directory"] = Path(directory).expanduser().resolve()
    if after:
        values["after"] = after

    try:
        return StandupConfig(**values)
    except ValidationError as e:
        raise ConfigError(f"Invalid configuration: {e}") from e


@click.command(name="standup-git")
@click.version_option(package_name="standup-git")
@click.option("--user", "-u", default="", help="git user name")
@click.option(
    "--dir",
    "-d",
    "directory",
    type=click.Path(file_okay=False),
    default=None,
    help="Parent directory to recursively search for .git directories "
    "(default: home directory)",
)
@click.option(
    "--after",
    "-a",
    default=None,
    help="When to start looking at commit history "
    "(default: 24 hours ago, YYYY-MM-DDTHH:MM:SS)",
)
@click.option(
    "--output",
    "-o",
    type=click.Path(dir_okay=False),
    default=DEFAULT_OUTPUT,
    show_default=True,
    help="Report file to write",
)
@click.option(
    "--skip-errors",
    is_flag=True,
    help="Skip unreadable directories instead of aborting the scan",
)
@click.option("--verbose", "-v", is_flag=True, help="Show diagnostic output")
def main(
    user: str,
    directory: Optional[str],
    after: Optional[str],
    output: str,
    skip_errors: bool,
    verbose: bool,
):
    """Daily Standup Helper: reports your recent git history.

    Scans every git repository below --dir for commits by --user made after
    --after and writes them to a JSON report.
    """
    configure_logging(verbose)

    try:
        config = build_config(user, directory, after, output, verbose, skip_errors)
        if verbose:
            console.print(
                f"[bold]Scanning[/bold] {escape(str(config.directory))} for commits by "
                f"{escape(config.user)} after {escape(config.after)}"
            )
        run = StandupRun(config)
        path = run.run()
    except StandupError as e:
        logger.debug("Run failed", exc_info=True)
        err_console.print(f"[red]Error: {escape(str(e))}[/red]")
        raise click.Abort() from e

    if verbose:
        console.print(f"Searched {len(run.repositories)} repositories")
    console.print(
        f"[green]completed...[/green] {len(run.records)} commit(s) "
        f"written to {escape(str(path))}"
    )


if __name__ == "__main__":
    main()

