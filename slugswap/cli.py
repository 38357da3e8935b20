from __future__ import annotations

import logging
from pathlib import Path
from typing import NoReturn, Optional

import typer

from slugswap.errors import SlugSwapError
from slugswap.models import ReplaceJob
from slugswap.replace import validate_job
from slugswap.report import ReportWriter
from slugswap.runner import ReplaceRunner
from slugswap.scanner import DirectoryWalker, ScanPolicy, available_profiles
from slugswap.utils import display_path, to_json

logger = logging.getLogger("slugswap")

app = typer.Typer(no_args_is_help=True)

DIRECTORY_HELP = "The directory to scan. Default is the current directory."
PROFILE_HELP = (
    "Extension profile from the packaged policy ("
    + "|".join(available_profiles())
    + ")."
)


@app.callback()
def _main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
) -> None:
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(level=level, format="%(levelname)s: %(message)s")


def _fail(message: str) -> NoReturn:
    typer.echo(f"Error: {message}", err=True)
    raise typer.Exit(code=1)


def _runner(profile: Optional[str]) -> ReplaceRunner:
    try:
        return ReplaceRunner(ScanPolicy.load_default(profile))
    except SlugSwapError as exc:
        _fail(str(exc))


def _directory(directory: Optional[Path]) -> Path:
    return directory if directory is not None else Path.cwd()


@app.command()
def replace(
    search: str = typer.Argument(..., help="The string to search for."),
    replace: str = typer.Argument(..., help="The string to replace with."),
    directory: Optional[Path] = typer.Option(
        None, "--directory", "-d", envvar="SLUGSWAP_DIRECTORY", help=DIRECTORY_HELP
    ),
    dry_run: bool = typer.Option(
        False, "--dry-run", help="Show what would be replaced without making changes."
    ),
    profile: Optional[str] = typer.Option(None, help=PROFILE_HELP),
    format: str = typer.Option("text", "--format", help="text|md|json"),
    output: Optional[Path] = typer.Option(
        None, "--output", "-o", help="Also write the report to this file."
    ),
) -> None:
    """Replace a literal string in every eligible file under a directory."""
    writer = ReportWriter()
    if format not in writer.FORMATS:
        _fail(f"format must be one of: {', '.join(writer.FORMATS)}")

    job = ReplaceJob(search=search, replace=replace, dry_run=dry_run)
    runner = _runner(profile)
    root = _directory(directory)
    # Progress goes to stderr when stdout carries a machine-readable report
    progress_err = format != "text"

    try:
        validate_job(job)
        DirectoryWalker.check_root(root)
        typer.echo(f"Scanning directory: {root}", err=progress_err)
        typer.echo(
            "Ignored directories: " + ", ".join(sorted(runner.policy.ignored_dirs)),
            err=progress_err,
        )
        result = runner.prepare(root, job)
    except SlugSwapError as exc:
        _fail(str(exc))

    if not result.files:
        typer.echo(
            f"Warning: No valid files found in the directory '{root}'.", err=True
        )
    else:
        typer.echo(f"Found {len(result.files)} files to process.", err=progress_err)

    report = runner.apply(result, job)
    rendered = writer.render(report, format)
    typer.echo(rendered)
    if output is not None:
        writer.write(output, rendered)
        logger.info("Report written to %s", output)


@app.command()
def scan(
    directory: Optional[Path] = typer.Option(
        None, "--directory", "-d", envvar="SLUGSWAP_DIRECTORY", help=DIRECTORY_HELP
    ),
    profile: Optional[str] = typer.Option(None, help=PROFILE_HELP),
) -> None:
    """List the files a replace run would consider."""
    runner = _runner(profile)
    root = _directory(directory)
    try:
        result = runner.scan(root)
    except SlugSwapError as exc:
        _fail(str(exc))

    for path in result.files:
        typer.echo(display_path(path, result.root))
    for warning in result.warnings:
        typer.echo(
            f"Warning: {display_path(warning.path, result.root)}: {warning.message}",
            err=True,
        )
    typer.echo(f"Total: {len(result.files)} files")


@app.command()
def policy(
    profile: Optional[str] = typer.Option(None, help=PROFILE_HELP),
) -> None:
    """Show the directory and extension policy in effect."""
    active = _runner(profile).policy
    typer.echo(
        to_json(
            {
                "profile": active.profile,
                "ignored_directories": sorted(active.ignored_dirs),
                "allowed_extensions": sorted(active.allowed_extensions),
            }
        )
    )


def main() -> None:
    app()
