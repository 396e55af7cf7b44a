from __future__ import annotations

import logging
import os
import posixpath
import shlex
import subprocess
from pathlib import Path
from typing import Any, Dict, Iterable

import psutil

from .errors import CompilerError
from .models import BuildFiles, VersionGroup
from .utils import relative_or_absolute

logger = logging.getLogger(__name__)

SOURCES_PLACEHOLDER = "{sources}"


def split_command(command: str) -> list[str]:
    return shlex.split(command, posix=os.name != "nt")


def render_command(template: str, variables: Dict[str, Any], sources: Iterable[str]) -> list[str]:
    """Split ``template`` first, then fill each token.

    A token that is exactly ``{sources}`` expands to one argument per source,
    so paths never go through the shell splitter.
    """
    command: list[str] = []
    for token in split_command(template):
        if token == SOURCES_PLACEHOLDER:
            command.extend(sources)
        else:
            try:
                command.append(token.format(**variables))
            except (KeyError, IndexError) as exc:
                raise ValueError(f"Unknown placeholder {exc} in compiler template: {template}") from exc
    return command


def contracts_prefix(files: BuildFiles) -> str:
    return relative_or_absolute(files.base_dir, files.contracts_dir)


def source_arguments(files: BuildFiles, group: VersionGroup) -> list[str]:
    prefix = contracts_prefix(files)
    return [posixpath.join(prefix, group.version, rel) for rel in group.sources]


def build_command(template: str, files: BuildFiles, group: VersionGroup) -> list[str]:
    out_dir = relative_or_absolute(files.base_dir, files.out_dir / group.version)
    variables = {
        "semver": group.semver,
        "version": group.version,
        "out_dir": out_dir,
    }
    return render_command(template, variables, source_arguments(files, group))


def kill_process_tree(proc: subprocess.Popen) -> None:
    try:
        parent = psutil.Process(proc.pid)
    except psutil.NoSuchProcess:
        return
    for child in parent.children(recursive=True):
        try:
            child.kill()
        except psutil.NoSuchProcess:
            pass
    try:
        parent.kill()
    except psutil.NoSuchProcess:
        pass


def run_compiler(command: list[str], cwd: Path, version: str) -> None:
    logger.debug("Running %s", " ".join(command))
    try:
        proc = subprocess.Popen(
            command,
            cwd=cwd,
            stdin=subprocess.DEVNULL,
            stdout=subprocess.DEVNULL,
        )
    except OSError as exc:
        raise CompilerError(version, command, None, reason=str(exc)) from exc

    try:
        exit_code = proc.wait()
    except KeyboardInterrupt:
        kill_process_tree(proc)
        proc.wait()
        raise

    if exit_code != 0:
        raise CompilerError(version, command, exit_code)


def compile_group(template: str, files: BuildFiles, group: VersionGroup, dry_run: bool = False) -> list[str]:
    command = build_command(template, files, group)
    if dry_run:
        return command
    if not group.sources:
        logger.warning("No sources in %s, skipping compiler", group.version)
        return command

    logger.info("Compiling %d contracts with solc@%s", len(group.sources), group.semver)
    run_compiler(command, files.base_dir, group.version)
    return command


def compile_all(template: str, files: BuildFiles, dry_run: bool = False) -> list[list[str]]:
    # Sequential: renaming expects each version's output to be complete.
    return [compile_group(template, files, group, dry_run=dry_run) for group in files.groups]
