from __future__ import annotations

import pytest

from rstxref.extraction.models import HTTPLink, RefTarget, Role
from rstxref.index.maps import (
    AnchorIndex,
    DocumentSet,
    LinkIndex,
    PathIndex,
    RoleIndex,
    UnresolvedPlaceholder,
    substitute_placeholders,
)


def test_union_keeps_present_paths_by_default() -> None:
    local = AnchorIndex({RefTarget("install"): "source/install.txt"})
    shared = AnchorIndex(
        {
            RefTarget("install"): "source/shared.txt",
            RefTarget("compatibility"): "source/shared.txt",
        }
    )

    local.union(shared)

    assert local.get(RefTarget("install")) == "source/install.txt"
    assert local.get(RefTarget("compatibility")) == "source/shared.txt"
    assert len(local) == 2


def test_union_prefers_authoritative_side() -> None:
    local = PathIndex({"a": "one.txt", "b": "one.txt"})
    local.union(PathIndex({"a": "two.txt"}), prefer_other=True)

    assert dict(local.items()) == {"a": "two.txt", "b": "one.txt"}


def test_add_overwrites_with_last_path() -> None:
    index = PathIndex[str]()
    index.add("x", "first.txt")
    index.add("x", "second.txt")

    assert index.get("x") == "second.txt"
    assert list(index) == ["x"]
    assert "x" in index
    assert index.get("missing") is None


@pytest.mark.parametrize(
    ("text", "expected", "missing"),
    [
        ("plain", "plain", []),
        ("/{+version+}/reference", "/v7.0/reference", []),
        ("{+driver+}-{+version+}", "go-v7.0", []),
        ("{+driver+}-{+nope+}-{+gone+}", "{+driver+}-{+nope+}-{+gone+}", ["nope", "gone"]),
    ],
)
def test_substitute_placeholders(text: str, expected: str, missing: list[str]) -> None:
    constants = {"version": "v7.0", "driver": "go"}

    assert substitute_placeholders(text, constants) == (expected, missing)


def test_role_substitution_reports_undefined_constants() -> None:
    roles = RoleIndex(
        {
            Role.of("manual", "/reference/{+version+}/"): "source/a.txt",
            Role.of("ref", "about-{+missing+}"): "source/b.txt",
            Role.of("doc", "/install"): "source/c.txt",
        }
    )

    resolved, unresolved = roles.substitute_constants({"version": "7.0"})

    assert dict(resolved.items()) == {
        Role.of("manual", "/reference/7.0/"): "source/a.txt",
        Role.of("doc", "/install"): "source/c.txt",
    }
    assert unresolved == [
        UnresolvedPlaceholder(construct=":ref:`about-{+missing+}`", path="source/b.txt", names=("missing",))
    ]


def test_anchor_substitution_makes_labels_resolvable() -> None:
    anchors = AnchorIndex({RefTarget("compatibility-table-about-{+driver+}"): "source/compat.txt"})

    resolved, unresolved = anchors.substitute_constants({"driver": "node"})

    assert unresolved == []
    assert resolved.has_label("compatibility-table-about-node")
    assert not resolved.has_label("compatibility-table-about-{+driver+}")


def test_link_substitution_fills_placeholders() -> None:
    links = LinkIndex(
        {
            HTTPLink("https://github.com/mongodb/{+driver+}/releases"): "source/install.txt",
            HTTPLink("https://example.com/{+nope+}/x"): "source/index.txt",
        }
    )

    resolved, unresolved = links.substitute_constants({"driver": "mongo-go-driver"})

    assert dict(resolved.items()) == {
        HTTPLink("https://github.com/mongodb/mongo-go-driver/releases"): "source/install.txt"
    }
    assert unresolved == [
        UnresolvedPlaceholder(construct="https://example.com/{+nope+}/x", path="source/index.txt", names=("nope",))
    ]


def test_links_upgrade_to_https_and_collapse() -> None:
    links = LinkIndex(
        {
            HTTPLink("http://example.com/a"): "one.txt",
            HTTPLink("https://example.com/a"): "two.txt",
            HTTPLink("https://example.com/b"): "two.txt",
        }
    )

    upgraded = links.upgraded_to_https()

    assert dict(upgraded.items()) == {
        HTTPLink("https://example.com/a"): "one.txt",
        HTTPLink("https://example.com/b"): "two.txt",
    }


def test_document_names_strip_source_dir_and_suffix() -> None:
    documents = DocumentSet(["source/index.txt", "source/tutorial/install.rst", "other.txt"])

    assert len(documents) == 3
    assert documents.paths == ["other.txt", "source/index.txt", "source/tutorial/install.rst"]
    assert documents.doc_name("source/tutorial/install.rst") == "/tutorial/install"
    assert documents.doc_name("other.txt") == "/other"


@pytest.mark.parametrize(
    ("target", "from_path", "expected"),
    [
        ("/tutorial/install", "source/index.txt", True),
        ("/tutorial/install/", "source/index.txt", True),
        ("/tutorial/install.txt", "source/index.txt", True),
        ("install", "source/tutorial/crud.txt", True),
        ("../index", "source/tutorial/crud.txt", True),
        ("/tutorial", "source/index.txt", True),
        ("/", "source/tutorial/crud.txt", True),
        ("/tutorial/missing", "source/index.txt", False),
        ("", "source/index.txt", False),
    ],
)
def test_document_resolution(target: str, from_path: str, expected: bool) -> None:
    documents = DocumentSet(
        [
            "source/index.txt",
            "source/tutorial/index.txt",
            "source/tutorial/install.txt",
            "source/tutorial/crud.txt",
        ]
    )

    assert documents.resolve(target, from_path) is expected
