"""Corpus-wide construct -> document path indices."""

from __future__ import annotations

from dataclasses import dataclass
import posixpath
import re
from typing import Generic, Hashable, Iterable, Iterator, Mapping, TypeVar

from rstxref.extraction.models import HTTPLink, RefTarget, Role


K = TypeVar("K", bound=Hashable)

_PLACEHOLDER_RE = re.compile(r"\{\+([A-Za-z0-9_.\-]+)\+\}")
_DOCUMENT_SUFFIXES = (".txt", ".rst")


@dataclass(frozen=True, slots=True)
class UnresolvedPlaceholder:
    """A construct whose ``{+name+}`` placeholders name undefined constants."""

    construct: str
    path: str
    names: tuple[str, ...]


def substitute_placeholders(text: str, constants: Mapping[str, str]) -> tuple[str, list[str]]:
    """Replace every ``{+name+}`` in *text*.

    Returns the substituted text and the undefined names.  When any name is
    undefined the text is returned untouched.
    """

    missing: list[str] = []
    for name in _PLACEHOLDER_RE.findall(text):
        if name not in constants and name not in missing:
            missing.append(name)
    if missing:
        return text, missing
    return _PLACEHOLDER_RE.sub(lambda m: str(constants[m.group(1)]), text), []


class PathIndex(Generic[K]):
    """Maps each distinct construct to one document path that contains it."""

    def __init__(self, entries: Mapping[K, str] | None = None) -> None:
        self._entries: dict[K, str] = dict(entries or {})

    def add(self, key: K, path: str) -> None:
        self._entries[key] = path

    def union(self, other: "PathIndex[K]", *, prefer_other: bool = False) -> None:
        """Merge *other* into this index; present keys keep their path unless *prefer_other*."""

        for key, path in other.items():
            if prefer_other or key not in self._entries:
                self._entries[key] = path

    def get(self, key: K) -> str | None:
        return self._entries.get(key)

    def items(self) -> Iterable[tuple[K, str]]:
        return self._entries.items()

    def keys(self) -> Iterable[K]:
        return self._entries.keys()

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __iter__(self) -> Iterator[K]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self._entries!r})"


class RoleIndex(PathIndex[Role]):
    def substitute_constants(
        self, constants: Mapping[str, str]
    ) -> tuple["RoleIndex", list[UnresolvedPlaceholder]]:
        resolved = RoleIndex()
        unresolved: list[UnresolvedPlaceholder] = []
        for role, path in self.items():
            target, missing = substitute_placeholders(role.target, constants)
            if missing:
                unresolved.append(UnresolvedPlaceholder(construct=str(role), path=path, names=tuple(missing)))
                continue
            resolved.add(role.with_target(target), path)
        return resolved, unresolved


class AnchorIndex(PathIndex[RefTarget]):
    def has_label(self, name: str) -> bool:
        return RefTarget(name=name) in self

    def substitute_constants(
        self, constants: Mapping[str, str]
    ) -> tuple["AnchorIndex", list[UnresolvedPlaceholder]]:
        resolved = AnchorIndex()
        unresolved: list[UnresolvedPlaceholder] = []
        for anchor, path in self.items():
            name, missing = substitute_placeholders(anchor.name, constants)
            if missing:
                unresolved.append(UnresolvedPlaceholder(construct=str(anchor), path=path, names=tuple(missing)))
                continue
            resolved.add(RefTarget(name=name), path)
        return resolved, unresolved


class LinkIndex(PathIndex[HTTPLink]):
    def substitute_constants(
        self, constants: Mapping[str, str]
    ) -> tuple["LinkIndex", list[UnresolvedPlaceholder]]:
        resolved = LinkIndex()
        unresolved: list[UnresolvedPlaceholder] = []
        for link, path in self.items():
            url, missing = substitute_placeholders(link.url, constants)
            if missing:
                unresolved.append(UnresolvedPlaceholder(construct=str(link), path=path, names=tuple(missing)))
                continue
            if HTTPLink(url=url) not in resolved:
                resolved.add(HTTPLink(url=url), path)
        return resolved, unresolved

    def upgraded_to_https(self) -> "LinkIndex":
        """Rewrite ``http://`` links to ``https://`` so scheme-only variants collapse."""

        upgraded = LinkIndex()
        for link, path in self.items():
            url = link.url
            if url.startswith("http://"):
                url = "https://" + url[len("http://"):]
            key = HTTPLink(url=url)
            if key not in upgraded:
                upgraded.add(key, path)
        return upgraded


class DocumentSet:
    """Known corpus documents, addressable the way ``:doc:`` targets name them."""

    def __init__(self, paths: Iterable[str], *, source_dir: str = "source") -> None:
        self._source_prefix = source_dir.strip("/") + "/"
        self._paths = sorted(set(paths))
        self._names = {self.doc_name(path) for path in self._paths}

    @property
    def paths(self) -> list[str]:
        return list(self._paths)

    def __len__(self) -> int:
        return len(self._paths)

    def doc_name(self, path: str) -> str:
        name = path.lstrip("/")
        if name.startswith(self._source_prefix):
            name = name[len(self._source_prefix):]
        return "/" + _strip_suffix(name)

    def resolve(self, target: str, from_path: str) -> bool:
        """Return True when *target*, as written in *from_path*, names a known document."""

        candidate = target.strip()
        if not candidate:
            return False
        if not candidate.startswith("/"):
            base = posixpath.dirname(self.doc_name(from_path))
            candidate = posixpath.join(base, candidate)
        candidate = posixpath.normpath(_strip_suffix(candidate.rstrip("/") or "/index"))
        return candidate in self._names or posixpath.join(candidate, "index") in self._names


def _strip_suffix(name: str) -> str:
    for suffix in _DOCUMENT_SUFFIXES:
        if name.endswith(suffix):
            return name[: -len(suffix)]
    return name
