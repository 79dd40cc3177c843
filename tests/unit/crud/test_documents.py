"""Unit tests for crud/documents.py"""

import random
from datetime import datetime, timedelta

import pytest
from sqlmodel import select

from mdsite.core.models import StagedBlock
from mdsite.crud.documents import (
    commit_doc, get_blocks, get_by_path, get_document, list_documents,
)
from mdsite.crud.models import BlockEnum, DocumentBlock
from mdsite.errors import NotFound



# --- get_document ---

def test_get_document_found(session, make_staged):
    doc, _ = commit_doc(session, make_staged(path="about.md"))
    assert get_document(session, "about.md").id == doc.id


@pytest.mark.parametrize("path", ["missing.md", "", "posts/", "ABOUT.md"])
def test_get_document_unknown_path_raises(session, make_staged, path):
    commit_doc(session, make_staged(path="about.md"))
    with pytest.raises(NotFound) as exc:
        get_document(session, path)
    assert exc.value.path == path


def test_get_by_path_missing(session):
    assert get_by_path(session, "no/such/path.md") is None


# --- list_documents ---

def test_list_documents_excludes_drafts(session, make_staged):
    commit_doc(session, make_staged(path="a.md"))
    commit_doc(session, make_staged(path="b.md", draft=True))
    assert [d.path for d in list_documents(session)] == ["a.md"]
    assert {d.path for d in list_documents(session, include_drafts=True)} == {"a.md", "b.md"}


def test_list_documents_sorted_newest_first(session, make_staged):
    base = datetime(2020, 1, 1)
    offsets = list(range(20))
    random.Random(7).shuffle(offsets)
    for i in offsets:
        commit_doc(session, make_staged(path=f"p{i:02d}.md", when=base + timedelta(days=i), draft=i % 3 == 0))

    for include_drafts in (True, False):
        docs = list_documents(session, include_drafts=include_drafts)
        dates = [d.date for d in docs]
        assert dates == sorted(dates, reverse=True)
        if not include_drafts:
            assert not any(d.draft for d in docs)


def test_list_documents_ties_ordered_by_path(session, make_staged):
    when = datetime(2024, 1, 1)
    for p in ["c.md", "a.md", "b.md"]:
        commit_doc(session, make_staged(path=p, when=when))
    assert [d.path for d in list_documents(session)] == ["a.md", "b.md", "c.md"]


def test_list_documents_empty(session):
    assert list_documents(session, include_drafts=True) == []


# --- commit_doc ---

def test_commit_doc_creates_with_blocks(session, make_staged):
    doc, status = commit_doc(session, make_staged())
    assert status == "created"
    blocks = get_blocks(session, doc)
    assert [b.type for b in blocks] == [BlockEnum.heading, BlockEnum.paragraph]
    assert [b.position for b in blocks] == [0, 1]
    assert blocks[0].level == 1


def test_commit_doc_unchanged(session, make_staged):
    """Same hash on re-commit returns 'unchanged' and leaves updated_at alone."""
    doc, _ = commit_doc(session, make_staged())
    original = doc.updated_at
    _, status = commit_doc(session, make_staged())
    assert status == "unchanged"
    assert get_by_path(session, "posts/hello.md").updated_at == original


def test_commit_doc_updates_and_replaces_blocks(session, make_staged):
    doc, _ = commit_doc(session, make_staged(title="v1"))
    staged = make_staged(title="v2", draft=True)
    staged.blocks = [StagedBlock(type=BlockEnum.paragraph, content="only")]

    doc2, status = commit_doc(session, staged)
    assert status == "updated"
    assert doc2.id == doc.id
    assert doc2.title == "v2"
    assert doc2.draft is True
    rows = session.exec(select(DocumentBlock).where(DocumentBlock.document_id == doc.id)).all()
    assert [r.content for r in rows] == ["only"]


def test_commit_doc_path_is_identity(session, make_staged):
    """Two files with the same slug under different directories are separate documents."""
    a, _ = commit_doc(session, make_staged(path="posts/intro.md"))
    b, _ = commit_doc(session, make_staged(path="pages/intro.md"))
    assert a.id != b.id
    assert a.slug == b.slug == "intro"
