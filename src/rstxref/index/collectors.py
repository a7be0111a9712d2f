"""Build corpus indices from documents and shared-include fragments."""

from __future__ import annotations

from dataclasses import dataclass, field
import logging
from typing import Callable, Sequence

from rstxref.extraction.decoding import decode_document
from rstxref.extraction.models import Constant, SharedInclude
from rstxref.extraction.patterns import (
    find_constants,
    find_http_links,
    find_local_refs,
    find_roles,
    find_shared_includes,
)
from rstxref.index.maps import AnchorIndex, DocumentSet, LinkIndex, PathIndex, RoleIndex
from rstxref.project.documents import SourceDocument


LOGGER = logging.getLogger(__name__)


@dataclass(slots=True)
class CorpusIndex:
    """Every construct found in the corpus, each mapped to one owning document."""

    documents: DocumentSet
    roles: RoleIndex = field(default_factory=RoleIndex)
    anchors: AnchorIndex = field(default_factory=AnchorIndex)
    constants: PathIndex[Constant] = field(default_factory=PathIndex)
    links: LinkIndex = field(default_factory=LinkIndex)
    shared_includes: PathIndex[SharedInclude] = field(default_factory=PathIndex)


@dataclass(slots=True)
class SharedFragments:
    """Roles and anchors pulled from remote shared-include fragments."""

    roles: RoleIndex = field(default_factory=RoleIndex)
    anchors: AnchorIndex = field(default_factory=AnchorIndex)
    diagnostics: list[str] = field(default_factory=list)


def build_corpus_index(documents: Sequence[SourceDocument]) -> CorpusIndex:
    corpus = CorpusIndex(documents=DocumentSet(document.path for document in documents))

    for document in documents:
        text = decode_document(document.raw)
        for role in find_roles(text):
            corpus.roles.add(role, document.path)
        for anchor in find_local_refs(text):
            corpus.anchors.add(anchor, document.path)
        for constant in find_constants(text):
            corpus.constants.add(constant, document.path)
        for link in find_http_links(text):
            corpus.links.add(link, document.path)
        for include in find_shared_includes(text):
            corpus.shared_includes.add(include, document.path)

    LOGGER.info(
        "Indexed %d documents: %d roles, %d anchors, %d links, %d constants, %d shared includes",
        len(documents),
        len(corpus.roles),
        len(corpus.anchors),
        len(corpus.links),
        len(corpus.constants),
        len(corpus.shared_includes),
    )
    return corpus


def load_shared_includes(
    shared: PathIndex[SharedInclude],
    base_url: str,
    fetch: Callable[[str], bytes],
) -> SharedFragments:
    """Fetch each shared include once and index its roles and anchors under the including document."""

    fragments = SharedFragments()
    for include, path in shared.items():
        if not base_url:
            fragments.diagnostics.append(
                f"in {path}: shared include {include.path} used but sharedinclude_root is not configured"
            )
            continue

        url = base_url + include.path
        try:
            payload = fetch(url)
        except Exception as exc:
            LOGGER.warning("Could not fetch shared include %s: %s", url, exc)
            fragments.diagnostics.append(f"in {path}: shared include {url} could not be fetched: {exc}")
            continue

        text = decode_document(payload)
        for role in find_roles(text):
            fragments.roles.add(role, path)
        for anchor in find_local_refs(text):
            fragments.anchors.add(anchor, path)

    return fragments
