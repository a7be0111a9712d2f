"""Corpus-wide reference indices."""

from .collectors import CorpusIndex, SharedFragments, build_corpus_index, load_shared_includes
from .maps import (
    AnchorIndex,
    DocumentSet,
    LinkIndex,
    PathIndex,
    RoleIndex,
    UnresolvedPlaceholder,
    substitute_placeholders,
)

__all__ = [
    "AnchorIndex",
    "CorpusIndex",
    "DocumentSet",
    "LinkIndex",
    "PathIndex",
    "RoleIndex",
    "SharedFragments",
    "UnresolvedPlaceholder",
    "build_corpus_index",
    "load_shared_includes",
    "substitute_placeholders",
]
