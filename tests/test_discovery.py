from pathlib import Path

import pytest

from solbuild.config import load_config
from solbuild.discovery import find_files
from solbuild.errors import DiscoveryError
from solbuild.models import PrebuiltArtifactRef

from conftest import write_source


def test_groups_only_version_directories(tmp_path: Path):
    contracts = tmp_path / "contracts"
    write_source(contracts, "v0.8.9/b/Z.sol", "Z")
    write_source(contracts, "v0.8.9/A.sol", "A")
    write_source(contracts, "v0.8.9/b/A.sol", "BA")
    write_source(contracts, "v0.6.4/Old.sol", "Old")
    write_source(contracts, "vendor.sol", "Vendor")
    write_source(contracts, "other/X.sol", "X")
    (contracts / "v0.8.9" / "notes.txt").write_text("x", encoding="utf-8")
    (contracts / "v1.0.0").write_text("not a directory", encoding="utf-8")

    files = find_files(load_config(base_dir=tmp_path))

    assert files.versions() == ["v0.6.4", "v0.8.9"]
    assert files.groups[0].sources == ("Old.sol",)
    assert files.groups[1].sources == ("A.sol", "b/A.sol", "b/Z.sol")
    assert files.groups[1].semver == "^0.8.9"


def test_prebuilt_found_anywhere_except_output(tmp_path: Path):
    contracts = tmp_path / "contracts"
    for rel in ("legacy/Old.json", "v0.8.9/Iface.json", "compiled/stale.json"):
        path = contracts / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text("[]", encoding="utf-8")

    files = find_files(load_config(base_dir=tmp_path))

    assert files.prebuilt == [
        PrebuiltArtifactRef("legacy/Old.json"),
        PrebuiltArtifactRef("v0.8.9/Iface.json"),
    ]


def test_no_version_directories_is_valid(tmp_path: Path):
    (tmp_path / "contracts").mkdir()
    files = find_files(load_config(base_dir=tmp_path))
    assert files.groups == []
    assert files.prebuilt == []


def test_missing_contracts_root(tmp_path: Path):
    with pytest.raises(DiscoveryError):
        find_files(load_config(base_dir=tmp_path))
