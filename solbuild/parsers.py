from __future__ import annotations

import re
from pathlib import Path
from typing import Callable, Iterable

from .errors import ArtifactNameError, UnsupportedPathError
from .models import RecoveredPath

# solcjs names each output "<source path>:<contract>" with these characters
# replaced by underscores, e.g.
#   contracts/v0.8.9/utils/Math.sol:MathLib -> contracts_v0_8_9_utils_Math_sol_MathLib.abi
FLATTEN_RE = re.compile(r"[:./\\]")
SOURCE_MARKER = "_sol_"
DEFAULT_MAX_PROBES = 5

DirProbe = Callable[[str], bool]


def flatten_path(path: str) -> str:
    return FLATTEN_RE.sub("_", path)


def output_prefixes(contracts_prefix: str, version: str) -> tuple[str, ...]:
    """Prefixes an output name for ``version`` may start with.

    ``contracts_prefix`` is the contracts root as passed to the compiler
    (``contracts`` by default). The literal form keeps the dots of the
    version; the flattened form is what solcjs actually writes.
    """
    literal = f"{contracts_prefix.replace('/', '_')}_{version}_"
    flattened = flatten_path(f"{contracts_prefix}/{version}/")
    return tuple(dict.fromkeys([flattened, literal]))


def directory_probe(root: Path) -> DirProbe:
    def _probe(rel_path: str) -> bool:
        return (root / rel_path).is_dir()

    return _probe


def recover_source_path(flat: str, is_dir: DirProbe, max_probes: int = DEFAULT_MAX_PROBES) -> str:
    """Rebuild ``dir/.../stem`` from an underscore-joined source path.

    Tokens are consumed left to right. A token naming an existing directory
    below the directories found so far becomes a path segment; otherwise it
    is glued onto the next token. Once no tokens remain, the leftover text is
    the file stem. Each token costs one probe.
    """
    directories: list[str] = []
    segments = flat.split("_")
    probes = 0

    while segments and probes < max_probes:
        probes += 1
        segment, segments = segments[0], segments[1:]

        candidate = "/".join(directories + [segment])
        if segment and is_dir(candidate):
            directories.append(segment)
        elif segments:
            segments[0] = f"{segment}_{segments[0]}"
        else:
            return "/".join(directories + [segment])

    if not segments:
        raise ArtifactNameError(
            f"Ambiguous name {flat!r}: last segment {'/'.join(directories)!r} is a directory"
        )
    raise UnsupportedPathError(
        f"Cannot recover source path from {flat!r} within {max_probes} probes"
    )


def _strip_prefix(name: str, prefixes: Iterable[str]) -> str:
    for prefix in prefixes:
        if name.startswith(prefix):
            return name[len(prefix):]
    raise ArtifactNameError(f"Unexpected compiler output name: {name}")


def parse_flattened_name(
    name: str,
    prefixes: Iterable[str],
    is_dir: DirProbe,
    max_probes: int = DEFAULT_MAX_PROBES,
) -> RecoveredPath:
    # contracts_v0_8_9_Issue552_Reproduction_sol_Issue552_Observer.abi
    # |---------------| |------------------|     |--------------|
    #      prefix            source path            contract name
    remainder = _strip_prefix(name, prefixes)

    parts = remainder.split(SOURCE_MARKER)
    if len(parts) != 2 or not parts[0]:
        raise ArtifactNameError(f"Expected exactly one {SOURCE_MARKER!r} marker in {name}")
    flat_source, tail = parts

    contract_name, sep, extension = tail.partition(".")
    if not sep or not contract_name or not extension:
        raise ArtifactNameError(f"Missing contract name or extension in {name}")

    source_path = recover_source_path(flat_source, is_dir, max_probes)
    directory, _, source_name = source_path.rpartition("/")
    return RecoveredPath(
        directory=directory,
        source_name=source_name,
        contract_name=contract_name,
        extension=extension,
    )
