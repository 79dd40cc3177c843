"""Convert a ParsedDoc into a StagedDoc"""

from datetime import date, datetime, timezone
from typing import Any

from mdsite.core.extract.blocks import tokens_to_blocks
from mdsite.core.models import ParsedDoc, StagedDoc
from mdsite.core.utils.hashing import sha256
from mdsite.core.utils.slug import slugify


RESERVED_KEYS = {'title', 'date', 'draft', 'slug'}
TRUE_STRINGS = {'true', 'yes', 'on', '1'}
FALSE_STRINGS = {'false', 'no', 'off', '0', ''}


def _to_datetime(value: Any) -> datetime:
    """Coerce a frontmatter date (date, datetime or ISO string) to a naive UTC datetime."""
    if isinstance(value, datetime):
        dt = value
    elif isinstance(value, date):
        dt = datetime(value.year, value.month, value.day)
    elif isinstance(value, str):
        try:
            dt = datetime.fromisoformat(value.strip())
        except ValueError as e:
            raise ValueError(f"Invalid date in frontmatter: {value!r}") from e
    else:
        raise ValueError(f"Invalid date in frontmatter: {value!r}")
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt


def _to_bool(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, bool):
        return value
    if isinstance(value, str) and value.strip().lower() in TRUE_STRINGS | FALSE_STRINGS:
        return value.strip().lower() in TRUE_STRINGS
    raise ValueError(f"Invalid draft flag in frontmatter: {value!r}")


def _jsonable(value: Any) -> Any:
    """Recursively convert YAML scalars (dates) into JSON-safe values."""
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(k): _jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_jsonable(v) for v in value]
    return value


def extract_doc(parsed: ParsedDoc) -> StagedDoc:
    """Validate frontmatter and convert the token stream into typed body blocks.

    Raises ValueError when the title is missing or a reserved key has the wrong type.
    Without a frontmatter date, the file's modification time (as naive UTC) is used.
    """
    fm = parsed.frontmatter
    title = fm.get('title')
    if not isinstance(title, str) or not title.strip():
        raise ValueError("Missing 'title' in frontmatter")

    if fm.get('date') is not None:
        doc_date = _to_datetime(fm['date'])
    else:
        doc_date = datetime.fromtimestamp(parsed.path.stat().st_mtime, timezone.utc).replace(tzinfo=None)

    source_lines = parsed.markdown.splitlines(keepends=True)
    return StagedDoc(
        path=parsed.rel_path,
        slug=slugify(str(fm.get('slug') or parsed.path.stem)),
        title=title.strip(),
        date=doc_date,
        draft=_to_bool(fm.get('draft', False)),
        markdown=parsed.markdown,
        hash=sha256(parsed.raw_markdown),
        frontmatter=_jsonable({k: v for k, v in fm.items() if k not in RESERVED_KEYS}),
        blocks=tokens_to_blocks(parsed.tokens, source_lines),
    )
