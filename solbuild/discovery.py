from __future__ import annotations

import logging
from pathlib import Path

from .config import Config
from .errors import DiscoveryError
from .models import BuildFiles, PrebuiltArtifactRef, VersionGroup
from .utils import is_within, normalize_rel_path

logger = logging.getLogger(__name__)

SOURCE_GLOB = "*.sol"


def find_version_dirs(contracts_dir: Path, prefix: str = "v") -> list[Path]:
    return sorted(
        (p for p in contracts_dir.iterdir() if p.is_dir() and p.name.startswith(prefix)),
        key=lambda p: p.name,
    )


def find_sources(version_dir: Path) -> tuple[str, ...]:
    paths = [normalize_rel_path(version_dir, p) for p in version_dir.rglob(SOURCE_GLOB) if p.is_file()]
    return tuple(sorted(paths))


def find_prebuilt(contracts_dir: Path, pattern: str, exclude: Path | None = None) -> list[PrebuiltArtifactRef]:
    refs = []
    for path in contracts_dir.rglob(pattern):
        if not path.is_file():
            continue
        if exclude is not None and is_within(path, exclude):
            continue
        refs.append(PrebuiltArtifactRef(rel_path=normalize_rel_path(contracts_dir, path)))
    return sorted(refs, key=lambda ref: ref.rel_path)


def find_files(config: Config) -> BuildFiles:
    contracts_dir = config.contracts_dir
    if not contracts_dir.is_dir():
        raise DiscoveryError(f"Contracts dir not found: {contracts_dir}")

    groups = [
        VersionGroup(version=d.name, sources=find_sources(d))
        for d in find_version_dirs(contracts_dir, config.version_prefix)
        if d.resolve() != config.out_dir
    ]
    prebuilt = find_prebuilt(contracts_dir, config.prebuilt_pattern, exclude=config.out_dir)

    for group in groups:
        logger.debug("Found %d sources in %s", len(group.sources), group.version)
    logger.debug("Found %d prebuilt ABIs", len(prebuilt))

    return BuildFiles(
        base_dir=config.base_dir,
        contracts_dir=contracts_dir,
        out_dir=config.out_dir,
        groups=groups,
        prebuilt=prebuilt,
    )
