"""Command-line interface for the mdbx-sourcery build stage.

Subcommands:
------------
- generate: Check the API version, then write the descriptor module/manifest
- check: Run only the API version check
- show: Print the descriptor of the installed package
- scan: Find sourcery anchors in built artifacts

Exit codes: 0 success, 1 error, 2 API version mismatch.
"""

from enum import Enum
import json
from pathlib import Path
from typing import NoReturn, Optional

try:
    import tomllib  # Python >= 3.11
except ImportError:
    import tomli as tomllib  # Python < 3.11

from pydantic import ValidationError
import typer

from mdbx_sourcery.config import Settings, load_settings
from mdbx_sourcery.domain import Descriptor, SourceryError, VersionMismatch
from mdbx_sourcery.emit import generate as generate_descriptor
from mdbx_sourcery.emit import render_manifest
from mdbx_sourcery.provenance import descriptor_from_settings
from mdbx_sourcery.scan import scan_path
from mdbx_sourcery.utils import configure_logger

app = typer.Typer(
    name="mdbx-sourcery",
    help="Embed and inspect build provenance (version record and sourcery anchor).",
    no_args_is_help=True,
)

EXIT_ERROR = 1
EXIT_VERSION_MISMATCH = 2


class OutputFormat(str, Enum):
    py = "py"
    json = "json"


def _load(config: Optional[Path], unstable: Optional[bool], from_git: bool) -> Settings:
    """Load settings, apply command-line overrides and configure logging."""
    try:
        settings = load_settings(config)
    except (FileNotFoundError, tomllib.TOMLDecodeError, ValidationError) as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    configure_logger("mdbx_sourcery", level=settings.logging.level, structured=settings.logging.structured)

    if unstable is not None:
        settings.build = settings.build.model_copy(update={"unstable": unstable})

    if not from_git:
        missing = [key for key, value in settings.git.model_dump().items() if value is None]
        if missing:
            typer.echo(f"Error: git values not configured and --no-from-git given: {', '.join(missing)}", err=True)
            raise typer.Exit(code=EXIT_ERROR)

    return settings


def _fail(error: SourceryError) -> NoReturn:
    typer.echo(f"Error: {error}", err=True)
    code = EXIT_VERSION_MISMATCH if isinstance(error, VersionMismatch) else EXIT_ERROR
    raise typer.Exit(code=code)


@app.command()
def generate(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Build settings TOML file"),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Target file (default: build.output)"),
    fmt: Optional[OutputFormat] = typer.Option(None, "--format", "-f", help="Output format (default: build.format)"),
    unstable: Optional[bool] = typer.Option(None, "--unstable/--stable", help="Override build.unstable"),
    from_git: bool = typer.Option(True, "--from-git/--no-from-git", help="Read unset identity values from git"),
    repo: Optional[Path] = typer.Option(None, "--repo", help="Repository to read git identity from"),
):
    """Write the descriptor; refuses a stable build with a drifted API version."""
    settings = _load(config, unstable, from_git)

    try:
        written = generate_descriptor(settings, output=output, fmt=fmt.value if fmt else None, repo=repo)
    except SourceryError as e:
        _fail(e)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    typer.echo(f"Wrote {written}")


@app.command()
def check(
    config: Optional[Path] = typer.Option(None, "--config", "-c", help="Build settings TOML file"),
    unstable: Optional[bool] = typer.Option(None, "--unstable/--stable", help="Override build.unstable"),
    from_git: bool = typer.Option(True, "--from-git/--no-from-git", help="Read unset identity values from git"),
    repo: Optional[Path] = typer.Option(None, "--repo", help="Repository to read git identity from"),
):
    """Run the API version check without writing anything."""
    settings = _load(config, unstable, from_git)

    try:
        descriptor = descriptor_from_settings(settings, repo=repo)
    except SourceryError as e:
        _fail(e)
    except ValueError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    typer.echo(f"OK {descriptor.version_info.semver} {descriptor.sourcery_anchor}")


@app.command()
def show(
    as_json: bool = typer.Option(False, "--json", help="Print as JSON"),
):
    """Print the descriptor of the installed package."""
    import mdbx_sourcery

    info = mdbx_sourcery.mdbx_version
    if as_json:
        descriptor = Descriptor(version_info=info, sourcery_anchor=mdbx_sourcery.mdbx_sourcery_anchor, unstable=info.unstable)
        typer.echo(json.dumps(render_manifest(descriptor), indent=2))
        return

    typer.echo(f"version:   {info.semver}")
    typer.echo(f"api:       {mdbx_sourcery.MDBX_VERSION_MAJOR}.{mdbx_sourcery.MDBX_VERSION_MINOR}")
    typer.echo(f"timestamp: {info.git_info.timestamp}")
    typer.echo(f"commit:    {info.git_info.commit_hash}")
    typer.echo(f"tree:      {info.git_info.tree_hash}")
    typer.echo(f"describe:  {info.git_info.describe}")
    typer.echo(f"sourcery:  {mdbx_sourcery.mdbx_sourcery_anchor}")


@app.command()
def scan(
    path: Path = typer.Argument(..., help="File, directory, wheel or zip to scan"),
):
    """Find sourcery anchors by raw-byte search."""
    try:
        results = scan_path(path)
    except FileNotFoundError as e:
        typer.echo(f"Error: {e}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    if not results:
        typer.echo(f"No sourcery anchor found in {path}", err=True)
        raise typer.Exit(code=EXIT_ERROR)

    for location, match in results:
        typer.echo(f"{location}:{match.offset}: {match.anchor}")


def main() -> None:
    app()


if __name__ == "__main__":
    main()
