from __future__ import annotations

import logging
import shutil
from pathlib import Path
from typing import Dict

from .errors import ArtifactNameError, DiscoveryError
from .models import BuildFiles
from .parsers import DEFAULT_MAX_PROBES, directory_probe, output_prefixes, parse_flattened_name
from .runner import contracts_prefix
from .utils import copy_file, move_file, remove_tree

logger = logging.getLogger(__name__)


def reset_out_dir(out_dir: Path) -> None:
    logger.debug("Removing %s", out_dir)
    if not remove_tree(out_dir):
        logger.debug("%s did not exist", out_dir)


def _format_names(names: list[str]) -> str:
    # two per line, .abi next to its .bin
    lines = [" ".join(names[i:i + 2]) for i in range(0, len(names), 2)]
    return "".join("\n  " + line for line in lines)


def rename_version_outputs(
    files: BuildFiles,
    version: str,
    max_probes: int = DEFAULT_MAX_PROBES,
    group_by_source: bool = False,
) -> list[str]:
    directory = files.out_dir / version
    prefixes = output_prefixes(contracts_prefix(files), version)
    is_dir = directory_probe(files.contracts_dir / version)

    outputs = sorted(p for p in directory.iterdir() if p.is_file())
    planned: Dict[str, Path] = {}
    for output in outputs:
        recovered = parse_flattened_name(output.name, prefixes, is_dir, max_probes)
        new_name = recovered.target(group_by_source)
        if new_name in planned:
            raise ArtifactNameError(
                f"{output.name} and {planned[new_name].name} both map to {version}/{new_name}"
            )
        planned[new_name] = output

    for new_name, output in planned.items():
        move_file(output, directory / new_name)

    new_names = list(planned)
    logger.info("Renamed %d files in %s:%s", len(new_names), version, _format_names(new_names))
    return new_names


def rename_outputs(
    files: BuildFiles,
    max_probes: int = DEFAULT_MAX_PROBES,
    group_by_source: bool = False,
) -> Dict[str, list[str]]:
    renamed: Dict[str, list[str]] = {}
    for group in files.groups:
        if not group.sources:
            renamed[group.version] = []
            continue
        renamed[group.version] = rename_version_outputs(files, group.version, max_probes, group_by_source)
    return renamed


def copy_fixture_versions(files: BuildFiles, versions: list[str], fixture_dir: Path) -> list[Path]:
    logger.info("Copying %s to %s", ", ".join(versions) or "nothing", fixture_dir)
    copied = []
    for version in versions:
        source = files.contracts_dir / version
        if not source.is_dir():
            raise DiscoveryError(f"Fixture version dir not found: {source}")
        target = fixture_dir / version
        shutil.copytree(source, target, dirs_exist_ok=True)
        copied.append(target)
    return copied


def copy_prebuilt_abis(files: BuildFiles, extension: str = ".abi") -> list[Path]:
    copied = []
    for ref in files.prebuilt:
        source = files.contracts_dir / ref.rel_path
        target = (files.out_dir / ref.rel_path).with_suffix(extension)
        copy_file(source, target)
        copied.append(target)
    logger.info("Copied %d prebuilt ABIs", len(copied))
    return copied
