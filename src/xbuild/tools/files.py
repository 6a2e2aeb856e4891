# tools/files.py
from __future__ import annotations

from pathlib import Path
from typing import Iterable, List


def find_files(root: str | Path, *patterns: str) -> List[Path]:
    """All files under `root` matching any of the glob patterns, sorted by path."""
    root = Path(root)
    found = set()
    for pattern in patterns:
        found.update(p for p in root.rglob(pattern) if p.is_file())
    return sorted(found)


def relative_paths(root: str | Path, paths: Iterable[Path]) -> List[str]:
    """Paths as strings relative to `root` (as passed to tools run from `root`)."""
    root = Path(root)
    return [str(Path(p).relative_to(root)) for p in paths]


def patch_file(path: str | Path, old: str, new: str) -> bool:
    """
    Replace every occurrence of `old` with `new` in a text file.

    The file is only rewritten when its content actually changes.
    Returns True if the file was written.
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")
    patched = text.replace(old, new)
    if patched == text:
        return False
    path.write_text(patched, encoding="utf-8")
    return True


def has_files(folder: str | Path) -> bool:
    folder = Path(folder)
    return folder.is_dir() and any(p.is_file() for p in folder.iterdir())
