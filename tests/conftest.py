from __future__ import annotations

import os
import shlex
import sys
from pathlib import Path

import pytest
import yaml

# Mimics solcjs: one flattened <path>:<contract>.abi/.bin pair per declaration.
FAKE_SOLC = r'''
import os
import re
import sys

args = sys.argv[1:]
out_dir = args[args.index("-o") + 1]
sources = [a for a in args if a.endswith(".sol")]

log = os.environ.get("FAKE_SOLC_LOG")
if log:
    with open(log, "a", encoding="utf-8") as f:
        f.write(out_dir + "\n")

if os.environ.get("FAKE_SOLC_FAIL") and out_dir.endswith(os.environ["FAKE_SOLC_FAIL"]):
    sys.stderr.write("ParserError: boom\n")
    sys.exit(2)

decl = re.compile(r"^\s*(?:abstract\s+)?(?:contract|interface|library)\s+(\w+)", re.M)
os.makedirs(out_dir, exist_ok=True)
for source in sources:
    with open(source, encoding="utf-8") as f:
        text = f.read()
    for name in decl.findall(text):
        flat = re.sub(r"[:./\\]", "_", source + ":" + name)
        with open(os.path.join(out_dir, flat + ".abi"), "w", encoding="utf-8") as f:
            f.write('[{"name": "%s"}]' % name)
        with open(os.path.join(out_dir, flat + ".bin"), "w", encoding="utf-8") as f:
            f.write("6080" + name.encode().hex())
print("compiled", len(sources), "files")
'''


def _quote_cmd_arg(value: str) -> str:
    if os.name == "nt":
        return f"\"{value}\"" if any(ch.isspace() for ch in value) else value
    return shlex.quote(value)


def write_source(root: Path, rel_path: str, *names: str) -> Path:
    path = root / rel_path
    path.parent.mkdir(parents=True, exist_ok=True)
    body = "pragma solidity ^0.8.0;\n" + "".join(f"contract {name} {{}}\n" for name in names)
    path.write_text(body, encoding="utf-8")
    return path


@pytest.fixture
def fake_solc(tmp_path: Path) -> str:
    script = tmp_path / "fake_solcjs.py"
    script.write_text(FAKE_SOLC, encoding="utf-8")
    return (
        f"{_quote_cmd_arg(sys.executable)} {_quote_cmd_arg(str(script))} "
        "--abi {sources} --bin -o {out_dir}"
    )


@pytest.fixture
def project(tmp_path: Path, fake_solc: str) -> Path:
    base = tmp_path / "repo"
    (base / "contracts").mkdir(parents=True)
    config = {
        "compiler": {"command_template": fake_solc},
        "fixtures": {"versions": []},
    }
    (base / "solbuild.yaml").write_text(yaml.safe_dump(config), encoding="utf-8")
    return base
