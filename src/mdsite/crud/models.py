"""Database table definitions for documents, body blocks, datasets and partitions"""

from datetime import datetime
from enum import Enum
from typing import Optional, List, Dict, Any
from uuid import UUID, uuid4

from sqlmodel import SQLModel, Field
from sqlalchemy import Column, DateTime, JSON, Text, String, UniqueConstraint


class Document(SQLModel, table=True):
    """A page or post loaded from the content directory"""
    __tablename__ = "documents"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    path: str = Field(..., sa_column=Column(Text, nullable=False, unique=True))
    slug: str = Field(..., index=True, nullable=False)
    title: str = Field(..., sa_column=Column(Text, nullable=False))
    date: datetime = Field(..., sa_column=Column(DateTime(timezone=False), nullable=False, index=True))
    draft: bool = Field(default=False, nullable=False, description="Excluded from published listings when true")
    markdown: str = Field(..., sa_column=Column(Text, nullable=False))
    hash: str = Field(..., sa_column=Column(String(64), nullable=False))
    frontmatter: Optional[Dict[str, Any]] = Field(default=None, sa_column=Column(JSON, nullable=True))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
    updated_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class BlockEnum(str, Enum):
    """Restrict the types of body blocks to a predefined set of elements"""
    heading = "heading"
    paragraph = "paragraph"
    list = "list"
    code = "code"
    table = "table"
    html = "html"
    quote = "quote"
    figure = "figure"


class DocumentBlock(SQLModel, table=True):
    """The fundamental unit of ordered content within a document body"""
    __tablename__ = "document_blocks"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    document_id: UUID = Field(..., foreign_key="documents.id", index=True, nullable=False)
    content: str = Field(..., sa_column=Column(Text, nullable=False))
    type: BlockEnum = Field(..., nullable=False, description="Type of content block (e.g. heading, etc.)")
    position: int = Field(..., nullable=False, description="Position of the block within the body")
    level: Optional[int] = Field(default=None, description="Heading level")


class Dataset(SQLModel, table=True):
    """A named, append-only, partitioned table of records"""
    __tablename__ = "datasets"
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    name: str = Field(..., sa_column=Column(String(128), nullable=False, unique=True))
    columns: Optional[List[Dict[str, str]]] = Field(
        default=None, sa_column=Column(JSON, nullable=True),
        description="Ordered [{name, type}] column list; None until the first append",
    )
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))


class Partition(SQLModel, table=True):
    """One appended batch of a dataset, stored as a single Parquet file"""
    __tablename__ = "dataset_partitions"
    __table_args__ = (UniqueConstraint("dataset_id", "seq", name="uq_partition_dataset_seq"),)
    id: UUID = Field(default_factory=uuid4, primary_key=True)
    dataset_id: UUID = Field(..., foreign_key="datasets.id", index=True, nullable=False)
    seq: int = Field(..., nullable=False, description="Monotonically increasing per-dataset partition number")
    file: str = Field(..., sa_column=Column(Text, nullable=False))
    row_count: int = Field(..., ge=0, nullable=False)
    checksum: str = Field(..., sa_column=Column(String(64), nullable=False))
    created_at: datetime = Field(default_factory=datetime.now, sa_column=Column(DateTime(timezone=False), nullable=False))
