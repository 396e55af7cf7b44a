from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict

import yaml

CONFIG_FILENAME = "solbuild.yaml"


@dataclass
class Config:
    base_dir: Path
    contracts_dir: Path
    out_dir: Path
    fixture_dir: Path
    command_template: str
    version_prefix: str
    max_probes: int
    group_by_source: bool
    fixture_versions: list[str]
    prebuilt_pattern: str
    prebuilt_extension: str
    version: str


DEFAULT_CONFIG = {
    "version": "0.1.0",
    "paths": {
        "contracts_dir": "./contracts",
        "out_dir": "./contracts/compiled",
        "fixture_dir": "./packages/target-truffle-v5-test/contracts",
    },
    "compiler": {
        "command_template": "pnpm --package solc@{semver} dlx solcjs --abi {sources} --bin -o {out_dir}",
        "version_prefix": "v",
    },
    "rename": {
        "max_probes": 5,
        "group_by_source": False,
    },
    "fixtures": {
        # Truffle config only supports a single compiler version.
        "versions": ["v0.6.4"],
    },
    "prebuilt": {
        "pattern": "*.json",
        "extension": ".abi",
    },
}


def load_config(config_path: Path | None = None, base_dir: Path | None = None) -> Config:
    if base_dir is None:
        base_dir = Path.cwd()
    if config_path is None:
        config_path = base_dir / CONFIG_FILENAME

    if config_path.exists():
        data = yaml.safe_load(config_path.read_text(encoding="utf-8")) or {}
    else:
        data = DEFAULT_CONFIG

    defaults = DEFAULT_CONFIG
    paths: Dict[str, Any] = data.get("paths", {})
    compiler: Dict[str, Any] = data.get("compiler", {})
    rename: Dict[str, Any] = data.get("rename", {})
    fixtures: Dict[str, Any] = data.get("fixtures", {})
    prebuilt: Dict[str, Any] = data.get("prebuilt", {})

    def _p(key: str) -> Path:
        return (base_dir / paths.get(key, defaults["paths"][key])).resolve()

    max_probes = int(rename.get("max_probes", defaults["rename"]["max_probes"]))
    if max_probes < 1:
        raise ValueError(f"rename.max_probes must be positive, got {max_probes}")

    extension = str(prebuilt.get("extension", defaults["prebuilt"]["extension"]))
    if not extension.startswith("."):
        extension = "." + extension

    versions = fixtures.get("versions", defaults["fixtures"]["versions"]) or []
    if isinstance(versions, str):
        versions = [versions]

    return Config(
        base_dir=base_dir.resolve(),
        contracts_dir=_p("contracts_dir"),
        out_dir=_p("out_dir"),
        fixture_dir=_p("fixture_dir"),
        command_template=str(compiler.get("command_template", defaults["compiler"]["command_template"])),
        version_prefix=str(compiler.get("version_prefix", defaults["compiler"]["version_prefix"])),
        max_probes=max_probes,
        group_by_source=bool(rename.get("group_by_source", defaults["rename"]["group_by_source"])),
        fixture_versions=[str(v) for v in versions],
        prebuilt_pattern=str(prebuilt.get("pattern", defaults["prebuilt"]["pattern"])),
        prebuilt_extension=extension,
        version=str(data.get("version", "0.1.0")),
    )


def write_default_config(path: Path) -> None:
    path.write_text(yaml.safe_dump(DEFAULT_CONFIG, sort_keys=False), encoding="utf-8")
