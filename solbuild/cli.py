from __future__ import annotations

import logging
import shlex
from pathlib import Path
from typing import Optional

import typer

from .artifacts import copy_fixture_versions, copy_prebuilt_abis, rename_outputs, reset_out_dir
from .config import CONFIG_FILENAME, Config, load_config, write_default_config
from .discovery import find_files
from .errors import BuildError
from .models import BuildFiles
from .runner import compile_all

logger = logging.getLogger(__name__)

app = typer.Typer(no_args_is_help=True)


def setup_logging(debug: bool) -> None:
    level = logging.DEBUG if debug else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s %(message)s",
        datefmt="%H:%M:%S",
    )


@app.callback()
def main(debug: bool = typer.Option(False, "--debug", help="Enable debug logging")):
    setup_logging(debug)


def bold(text: str) -> str:
    return typer.style(text, bold=True)


def run_pipeline(config: Config, dry_run: bool = False) -> BuildFiles:
    files = find_files(config)

    if dry_run:
        for command in compile_all(config.command_template, files, dry_run=True):
            typer.echo(shlex.join(command))
        return files

    typer.echo(bold(f"Cleaning up {files.out_dir}"))
    reset_out_dir(files.out_dir)

    typer.echo(bold("Generating ABIs"))
    compile_all(config.command_template, files)

    typer.echo(bold("Renaming ABIs"))
    rename_outputs(files, config.max_probes, config.group_by_source)

    typer.echo(bold("Copying fixture contracts"))
    copy_fixture_versions(files, config.fixture_versions, config.fixture_dir)

    typer.echo(bold("Copying prebuilt ABIs"))
    copy_prebuilt_abis(files, config.prebuilt_extension)
    return files


@app.command()
def build(
    config_path: Optional[Path] = typer.Option(None, "--config", help=f"Config file (default ./{CONFIG_FILENAME})"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Print compiler commands without running anything"),
):
    try:
        config = load_config(config_path)
        run_pipeline(config, dry_run=dry_run)
    except (BuildError, OSError, ValueError) as exc:
        logger.debug("Build failed", exc_info=True)
        typer.echo(f"ERROR {exc}", err=True)
        raise typer.Exit(code=1)


@app.command("files")
def list_files(
    config_path: Optional[Path] = typer.Option(None, "--config", help=f"Config file (default ./{CONFIG_FILENAME})"),
):
    try:
        found = find_files(load_config(config_path))
    except (BuildError, ValueError) as exc:
        raise typer.BadParameter(str(exc))

    if not found.groups:
        typer.echo(f"No version directories in {found.contracts_dir}")
    for group in found.groups:
        typer.echo(f"{group.version} ({group.semver}): {len(group.sources)} sources")
        for source in group.sources:
            typer.echo(f"  {source}")
    for ref in found.prebuilt:
        typer.echo(f"prebuilt: {ref.rel_path}")


@app.command()
def init(force: bool = typer.Option(False, "--force", help="Overwrite existing files")):
    cfg_path = Path.cwd() / CONFIG_FILENAME
    if cfg_path.exists() and not force:
        typer.echo(f"{CONFIG_FILENAME} already exists, use --force to overwrite")
        return
    write_default_config(cfg_path)
    typer.echo(f"Wrote {cfg_path}")
