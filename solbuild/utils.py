from __future__ import annotations

import os
import shutil
from pathlib import Path


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def normalize_rel_path(base: Path, path: Path) -> str:
    rel = path.relative_to(base)
    return rel.as_posix()


def relative_or_absolute(base: Path, path: Path) -> str:
    """POSIX path of ``path`` relative to ``base``, or absolute when outside it."""
    try:
        return normalize_rel_path(base, path)
    except ValueError:
        return path.as_posix()


def is_within(path: Path, root: Path) -> bool:
    try:
        path.resolve().relative_to(root.resolve())
    except ValueError:
        return False
    return True


def remove_tree(path: Path) -> bool:
    """Remove ``path`` recursively. Returns False if it did not exist."""
    try:
        shutil.rmtree(path)
    except FileNotFoundError:
        return False
    return True


def move_file(src: Path, dst: Path) -> None:
    ensure_dir(dst.parent)
    os.replace(src, dst)


def copy_file(src: Path, dst: Path) -> None:
    ensure_dir(dst.parent)
    shutil.copy2(src, dst)
