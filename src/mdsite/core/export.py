"""Export: normalized page markdown and the published index"""

import json
from pathlib import Path

import yaml
from sqlmodel import Session

from mdsite.crud.documents import get_blocks
from mdsite.crud.models import Document, DocumentBlock


def build_body(blocks: list[DocumentBlock]) -> str:
    """Reconstruct the markdown body from ordered blocks."""
    return "\n\n".join(b.content for b in sorted(blocks, key=lambda b: b.position))


def build_page(doc: Document, body: str) -> str:
    """Return body with a normalized YAML frontmatter block prepended."""
    fm = {
        'title': doc.title,
        'date': doc.date.isoformat(),
        'draft': doc.draft,
        'slug': doc.slug,
    }
    fm.update(doc.frontmatter or {})
    header = yaml.safe_dump(fm, default_flow_style=False, allow_unicode=True, sort_keys=False)
    return f"---\n{header}---\n\n{body.lstrip()}\n"


def index_entry(doc: Document) -> dict:
    return {
        "path": doc.path,
        "slug": doc.slug,
        "title": doc.title,
        "date": doc.date.isoformat(),
    }


def write_doc(doc: Document, session: Session, output_dir: Path) -> Path:
    """Write one document; the output path mirrors its content path."""
    dest = output_dir / Path(doc.path)
    dest.parent.mkdir(parents=True, exist_ok=True)
    dest.write_text(build_page(doc, build_body(get_blocks(session, doc))), encoding='utf-8')
    return dest


def write_index(docs: list[Document], output_dir: Path) -> Path:
    """Write index.json listing docs in the given order."""
    output_dir.mkdir(parents=True, exist_ok=True)
    dest = output_dir / "index.json"
    dest.write_text(json.dumps([index_entry(d) for d in docs], indent=2), encoding='utf-8')
    return dest
