"""Pipeline step functions: load and export orchestration"""

import logging
from pathlib import Path

from sqlmodel import Session

from mdsite.core.export import write_doc, write_index
from mdsite.core.extract.extract import extract_doc
from mdsite.core.models import StagedDoc
from mdsite.core.parse import discover_files, parse_file
from mdsite.crud.documents import commit_doc

logger = logging.getLogger(__name__)


def run_extract(content_dir: Path, parser_config: str) -> list[StagedDoc]:
    """Parse and validate every markdown file under content_dir."""
    staged = []
    for p in discover_files(content_dir):
        try:
            staged.append(extract_doc(parse_file(p, content_dir, parser_config)))
        except Exception as e:
            raise RuntimeError(f"Failed to extract {p}: {e}") from e
    return staged


def run_load(
    engine,
    content_dir: Path,
    parser_config: str = 'gfm-like',
    ) -> tuple[dict[str, int], list[tuple[str, str]]]:
    """Extract content_dir and upsert every document in a single transaction.

    Returns (counts, changes) where changes is a list of (status, path) for
    created/updated docs. A failure in any file commits nothing.
    """
    staged = run_extract(content_dir, parser_config)
    counts = {"created": 0, "updated": 0, "unchanged": 0}
    changes = []
    with Session(engine) as session:
        for s in staged:
            doc, status = commit_doc(session, s)
            counts[status] += 1
            if status != 'unchanged':
                changes.append((status, doc.path))
        session.commit()
    logger.info(f"Loaded {len(staged)} document(s) from {content_dir}: {counts}")
    return counts, changes


def run_export(session: Session, docs: list, output_dir: Path) -> list[tuple[str, Path]]:
    """Write docs and index.json to output_dir. Returns (path, output_file) pairs."""
    results = [(doc.path, write_doc(doc, session, output_dir)) for doc in docs]
    write_index(docs, output_dir)
    return results
