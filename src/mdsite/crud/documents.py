"""Document persistence: upsert, block replacement, listing and path lookup"""

from datetime import datetime

from sqlmodel import Session, select

from mdsite.core.models import StagedDoc
from mdsite.crud.models import Document, DocumentBlock
from mdsite.errors import NotFound


def get_by_path(session: Session, path: str) -> Document | None:
    """Return the Document with the given content path, or None if not found."""
    return session.exec(select(Document).where(Document.path == path)).one_or_none()


def get_document(session: Session, path: str) -> Document:
    """Return the Document with the given content path. Raises NotFound if absent."""
    doc = get_by_path(session, path)
    if doc is None:
        raise NotFound(path)
    return doc


def list_documents(session: Session, include_drafts: bool = False) -> list[Document]:
    """Return documents newest first (ties by path); drafts only when include_drafts is set."""
    stmt = select(Document)
    if not include_drafts:
        stmt = stmt.where(Document.draft == False)  # noqa: E712
    stmt = stmt.order_by(Document.date.desc(), Document.path.asc())
    return list(session.exec(stmt).all())


def get_blocks(session: Session, doc: Document) -> list[DocumentBlock]:
    """Return the document's body blocks in position order."""
    return list(session.exec(
        select(DocumentBlock)
        .where(DocumentBlock.document_id == doc.id)
        .order_by(DocumentBlock.position.asc())
    ).all())


def _replace_blocks(session: Session, doc_id, staged: StagedDoc) -> None:
    """Delete all existing blocks for a document and insert the staged ones."""
    for row in session.exec(select(DocumentBlock).where(DocumentBlock.document_id == doc_id)).all():
        session.delete(row)
    session.flush()

    for position, blk in enumerate(staged.blocks):
        session.add(DocumentBlock(
            document_id=doc_id,
            content=blk.content,
            type=blk.type,
            position=position,
            level=blk.level,
        ))
    session.flush()


def commit_doc(session: Session, staged: StagedDoc) -> tuple[Document, str]:
    """Upsert a StagedDoc by path.

    Returns (doc, status) where status is 'created', 'updated', or 'unchanged'.
    Flushes but does not commit; caller controls the transaction.
    """
    doc = get_by_path(session, staged.path)

    if doc:
        if doc.hash == staged.hash:
            return doc, 'unchanged'
        doc.slug = staged.slug
        doc.title = staged.title
        doc.date = staged.date
        doc.draft = staged.draft
        doc.markdown = staged.markdown
        doc.hash = staged.hash
        doc.frontmatter = staged.frontmatter or None
        doc.updated_at = datetime.now()
        session.add(doc)
        session.flush()
        _replace_blocks(session, doc.id, staged)
        return doc, 'updated'

    doc = Document(
        path=staged.path,
        slug=staged.slug,
        title=staged.title,
        date=staged.date,
        draft=staged.draft,
        markdown=staged.markdown,
        hash=staged.hash,
        frontmatter=staged.frontmatter or None,
    )
    session.add(doc)
    session.flush()
    _replace_blocks(session, doc.id, staged)
    return doc, 'created'
