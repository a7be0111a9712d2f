from __future__ import annotations

from rstxref.extraction.models import Constant, HTTPLink, RefTarget, Role, SharedInclude
from rstxref.index.collectors import build_corpus_index, load_shared_includes
from rstxref.index.maps import PathIndex
from rstxref.project.documents import SourceDocument


def _doc(path: str, text: str) -> SourceDocument:
    return SourceDocument(path=path, raw=text.encode("utf-8"))


def test_build_corpus_index_collects_every_construct() -> None:
    documents = [
        _doc(
            "source/index.txt",
            ".. _landing:\n\n"
            "See :ref:`install <install-guide>` and :manual:`/reference/method`.\n"
            "Read `the API <{+api+}/Cursor.html>`__ or https://www.mongodb.com/docs.\n",
        ),
        _doc(
            "source/install.txt",
            ".. _install-guide:\n\n.. sharedinclude:: dbx/compatibility.rst\n",
        ),
    ]

    corpus = build_corpus_index(documents)

    assert corpus.documents.paths == ["source/index.txt", "source/install.txt"]
    assert dict(corpus.roles.items()) == {
        Role.of("ref", "install-guide"): "source/index.txt",
        Role.of("manual", "/reference/method"): "source/index.txt",
    }
    assert dict(corpus.anchors.items()) == {
        RefTarget("landing"): "source/index.txt",
        RefTarget("install-guide"): "source/install.txt",
    }
    assert dict(corpus.constants.items()) == {Constant("api", "/Cursor.html"): "source/index.txt"}
    assert dict(corpus.links.items()) == {HTTPLink("https://www.mongodb.com/docs"): "source/index.txt"}
    assert dict(corpus.shared_includes.items()) == {SharedInclude("dbx/compatibility.rst"): "source/install.txt"}


def test_shared_include_fragments_are_indexed_under_including_document() -> None:
    shared = PathIndex({SharedInclude("dbx/compatibility.rst"): "source/compat.txt"})
    fetched: list[str] = []

    def fetch(url: str) -> bytes:
        fetched.append(url)
        return b".. _compatibility-table-about-{+driver+}:\n\nSee :ref:`drivers-overview`.\n"

    fragments = load_shared_includes(shared, "https://raw.example.com/shared/", fetch)

    assert fetched == ["https://raw.example.com/shared/dbx/compatibility.rst"]
    assert fragments.diagnostics == []
    assert dict(fragments.anchors.items()) == {
        RefTarget("compatibility-table-about-{+driver+}"): "source/compat.txt"
    }
    assert dict(fragments.roles.items()) == {Role.of("ref", "drivers-overview"): "source/compat.txt"}


def test_shared_include_failures_become_diagnostics() -> None:
    shared = PathIndex({SharedInclude("dbx/missing.rst"): "source/compat.txt"})

    def fetch(url: str) -> bytes:
        raise RuntimeError("404 Not Found")

    fragments = load_shared_includes(shared, "https://raw.example.com/shared/", fetch)

    assert len(fragments.roles) == 0
    assert fragments.diagnostics == [
        "in source/compat.txt: shared include https://raw.example.com/shared/dbx/missing.rst "
        "could not be fetched: 404 Not Found"
    ]


def test_shared_include_without_root_is_reported() -> None:
    shared = PathIndex({SharedInclude("dbx/compatibility.rst"): "source/compat.txt"})

    def fetch(url: str) -> bytes:
        raise AssertionError("fetch must not be called")

    fragments = load_shared_includes(shared, "", fetch)

    assert len(fragments.diagnostics) == 1
    assert "sharedinclude_root is not configured" in fragments.diagnostics[0]
