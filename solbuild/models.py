from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path


@dataclass(frozen=True)
class VersionGroup:
    version: str
    sources: tuple[str, ...]

    @property
    def semver(self) -> str:
        # v0.8.9 -> ^0.8.9
        return "^" + self.version[1:] if self.version.startswith("v") else self.version


@dataclass(frozen=True)
class PrebuiltArtifactRef:
    rel_path: str


@dataclass(frozen=True)
class RecoveredPath:
    directory: str
    source_name: str
    contract_name: str
    extension: str

    @property
    def source_path(self) -> str:
        if self.directory:
            return f"{self.directory}/{self.source_name}"
        return self.source_name

    def target(self, group_by_source: bool = False) -> str:
        parent = self.source_path if group_by_source else self.directory
        name = f"{self.contract_name}.{self.extension}"
        return f"{parent}/{name}" if parent else name


@dataclass
class BuildFiles:
    base_dir: Path
    contracts_dir: Path
    out_dir: Path
    groups: list[VersionGroup] = field(default_factory=list)
    prebuilt: list[PrebuiltArtifactRef] = field(default_factory=list)

    def versions(self) -> list[str]:
        return [group.version for group in self.groups]
