from __future__ import annotations

from pathlib import Path

from rstxref.project.documents import gather_documents


def test_gather_documents_reads_source_tree(tmp_path: Path) -> None:
    source = tmp_path / "source"
    (source / "tutorial").mkdir(parents=True)
    (source / ".drafts").mkdir()
    (source / "index.txt").write_bytes(b".. _landing:\n")
    (source / "tutorial" / "install.rst").write_bytes(b"Install\n")
    (source / "tutorial" / "diagram.png").write_bytes(b"\x89PNG")
    (source / ".drafts" / "wip.txt").write_bytes(b"draft\n")
    (tmp_path / "README.txt").write_bytes(b"outside the source tree\n")

    documents = gather_documents(tmp_path)

    assert [document.path for document in documents] == ["source/index.txt", "source/tutorial/install.rst"]
    assert documents[0].raw == b".. _landing:\n"


def test_gather_documents_without_source_dir(tmp_path: Path) -> None:
    (tmp_path / "page.rst").write_bytes(b"Page\n")
    (tmp_path / "notes.md").write_bytes(b"# Notes\n")

    documents = gather_documents(tmp_path)

    assert [document.path for document in documents] == ["page.rst"]


def test_gather_documents_empty_project(tmp_path: Path) -> None:
    assert gather_documents(tmp_path) == []
