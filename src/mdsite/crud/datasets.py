"""Dataset catalog and append-only Parquet partitions"""

import logging
import os
from pathlib import Path
from typing import Any, Mapping, Sequence
from uuid import uuid4

import pyarrow as pa
import pyarrow.parquet as pq
from pydantic import BaseModel
from sqlalchemy import func
from sqlmodel import Session, select

from mdsite.core.utils.hashing import file_sha256
from mdsite.crud.models import Dataset, Partition
from mdsite.errors import CorruptPartition, SchemaMismatch

logger = logging.getLogger(__name__)


def records_to_table(records: Sequence[BaseModel | Mapping[str, Any]]) -> pa.Table:
    """Convert records (pydantic models or mappings) to a PyArrow table."""
    rows = [r.model_dump() if isinstance(r, BaseModel) else dict(r) for r in records]
    return pa.Table.from_pylist(rows)


def table_columns(table: pa.Table) -> list[dict[str, str]]:
    """Ordered [{name, type}] description of a table's schema."""
    return [{"name": f.name, "type": str(f.type)} for f in table.schema]


class DatasetStore:
    """Catalog rows in the database, partition files under root/<dataset name>/.

    Each store wraps one session and one root directory; nothing is module
    level, so separate stores never share state.
    """

    def __init__(self, session: Session, root: Path):
        self.session = session
        self.root = Path(root)

    def dataset_dir(self, dataset: Dataset) -> Path:
        return self.root / dataset.name

    def get_dataset(self, name: str) -> Dataset | None:
        return self.session.exec(select(Dataset).where(Dataset.name == name)).one_or_none()

    def ensure_dataset(self, name: str) -> Dataset:
        """Return the named dataset, creating an empty one (no schema) if absent. Idempotent."""
        dataset = self.get_dataset(name)
        if dataset is not None:
            return dataset
        dataset = Dataset(name=name)
        self.session.add(dataset)
        self.session.commit()
        self.session.refresh(dataset)
        logger.info(f"Created dataset {name}")
        return dataset

    def list_datasets(self) -> list[Dataset]:
        return list(self.session.exec(select(Dataset).order_by(Dataset.name)).all())

    def partitions(self, dataset: Dataset) -> list[Partition]:
        return list(self.session.exec(
            select(Partition)
            .where(Partition.dataset_id == dataset.id)
            .order_by(Partition.seq.asc())
        ).all())

    def partition_count(self, dataset: Dataset) -> int:
        return self.session.exec(
            select(func.count(Partition.id)).where(Partition.dataset_id == dataset.id)
        ).one()

    def row_count(self, dataset: Dataset) -> int:
        total = self.session.exec(
            select(func.sum(Partition.row_count)).where(Partition.dataset_id == dataset.id)
        ).one()
        return total or 0

    def append_records(self, dataset: Dataset, records: Sequence[BaseModel | Mapping[str, Any]]) -> Partition:
        """Append records as one new partition and commit.

        The first append sets the dataset schema; later appends must match it
        exactly (names, order, types) or SchemaMismatch is raised. Either the
        partition file and its catalog row both exist afterwards, or neither does.
        """
        if not records:
            raise ValueError(f"Refusing to append an empty batch to dataset '{dataset.name}'")

        table = records_to_table(records)
        columns = table_columns(table)
        nulls = [c.name for c in table.schema if table.column(c.name).null_count]
        if nulls:
            raise ValueError(f"Null values in column(s) {', '.join(nulls)} for dataset '{dataset.name}'")
        if dataset.columns is not None and dataset.columns != columns:
            raise SchemaMismatch(dataset.name, dataset.columns, columns)

        last = self.session.exec(
            select(func.max(Partition.seq)).where(Partition.dataset_id == dataset.id)
        ).one()
        seq = (last or 0) + 1

        dest_dir = self.dataset_dir(dataset)
        dest_dir.mkdir(parents=True, exist_ok=True)
        dest = dest_dir / f"part-{seq:05d}-{uuid4().hex[:8]}.parquet"
        tmp = dest.with_suffix(".parquet.tmp")

        try:
            pq.write_table(table, str(tmp))
            os.replace(tmp, dest)
            partition = Partition(
                dataset_id=dataset.id,
                seq=seq,
                file=dest.name,
                row_count=table.num_rows,
                checksum=file_sha256(dest),
            )
            if dataset.columns is None:
                dataset.columns = columns
                self.session.add(dataset)
            self.session.add(partition)
            self.session.commit()
        except Exception:
            self.session.rollback()
            tmp.unlink(missing_ok=True)
            dest.unlink(missing_ok=True)
            raise

        self.session.refresh(partition)
        logger.info(f"Appended partition {seq} ({table.num_rows} rows) to dataset {dataset.name}")
        return partition

    def scan(self, dataset: Dataset) -> pa.Table:
        """Read every partition of a dataset, in append order, as one table.

        Raises CorruptPartition if a file no longer matches its recorded checksum.
        """
        tables = []
        for p in self.partitions(dataset):
            path = self.dataset_dir(dataset) / p.file
            if file_sha256(path) != p.checksum:
                raise CorruptPartition(dataset.name, p.file)
            tables.append(pq.read_table(str(path)))
        if not tables:
            return pa.Table.from_pylist([])
        return pa.concat_tables(tables)
