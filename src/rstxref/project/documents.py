"""Filesystem enumeration of documentation sources."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

SOURCE_DIR = "source"
_SUPPORTED_SUFFIXES = {".txt", ".rst"}


@dataclass(frozen=True, slots=True)
class SourceDocument:
    """Raw document payload addressed by its posix path relative to the project root."""

    path: str
    raw: bytes


def _is_supported(path: Path, root: Path) -> bool:
    if path.suffix.lower() not in _SUPPORTED_SUFFIXES:
        return False
    relative = path.relative_to(root)
    return not any(part.startswith(".") for part in relative.parts[:-1])


def _collect_inputs(root: Path) -> list[Path]:
    source_root = root / SOURCE_DIR
    target = source_root if source_root.is_dir() else root
    return sorted(path for path in target.rglob("*") if path.is_file() and _is_supported(path, root))


def gather_documents(root: str | Path) -> list[SourceDocument]:
    """Read every ``.txt``/``.rst`` document under ``<root>/source`` (or *root*)."""

    base = Path(root)
    return [
        SourceDocument(path=path.relative_to(base).as_posix(), raw=path.read_bytes())
        for path in _collect_inputs(base)
    ]
