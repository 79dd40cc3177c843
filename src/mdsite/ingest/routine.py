"""Ingestion routine: fetch -> ensure dataset -> append, once per trigger"""

import logging
from contextlib import nullcontext
from pathlib import Path

from mdsite.crud.datasets import DatasetStore
from mdsite.ingest.lock import run_lock
from mdsite.ingest.source import Source, fetch_source

logger = logging.getLogger(__name__)


def run_once(store: DatasetStore, source: Source, dataset_name: str, lock_path: Path | None = None) -> int:
    """Fetch one batch and append it to dataset_name as a new partition.

    Returns the number of rows appended. Errors from any stage propagate
    (SourceUnavailable, SchemaMismatch, RunInProgress) and leave the dataset's
    partitions untouched. Retrying is the trigger's job, not this function's.
    """
    with run_lock(lock_path) if lock_path else nullcontext():
        records = fetch_source(source)
        dataset = store.ensure_dataset(dataset_name)
        partition = store.append_records(dataset, records)

    logger.info(f"Run complete: {partition.row_count} rows appended to {dataset_name} (partition {partition.seq})")
    return partition.row_count
