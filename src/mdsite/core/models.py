"""Intermediate data models for the parse and load pipeline"""

from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel

from mdsite.crud.models import BlockEnum


class StagedBlock(BaseModel):
    """A single typed body block from a markdown document."""
    type: BlockEnum
    content: str
    level: Optional[int] = None     # heading level (1-6); None for non-headings


class StagedDoc(BaseModel):
    """Source-faithful page content produced by extract, read by commit."""
    path: str                       # relative to the content root, posix separators
    slug: str
    title: str
    date: datetime
    draft: bool = False
    markdown: str                   # body without frontmatter
    hash: str                       # hash of the raw file
    frontmatter: dict[str, Any] = {}   # keys other than title/date/draft/slug
    blocks: list[StagedBlock]


@dataclass
class ParsedDoc:
    """Internal parse result carrying markdown-it tokens; not persisted."""
    path:         Path
    rel_path:     str
    raw_markdown: str          # full file content (includes frontmatter)
    markdown:     str          # body only (frontmatter stripped)
    frontmatter:  dict[str, Any]
    tokens:       list         # markdown-it Token objects
