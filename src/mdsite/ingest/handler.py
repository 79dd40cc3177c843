"""Scheduler entrypoint for the ingestion routine.

A cron-like trigger calls handler(event, context) with no meaningful payload.
Success returns a small summary; failure raises so the trigger records it.
"""

import logging
from pathlib import Path

from sqlmodel import Session

from mdsite.config import Settings, load_config
from mdsite.crud.database import init_db, make_engine
from mdsite.crud.datasets import DatasetStore
from mdsite.ingest.routine import run_once
from mdsite.ingest.source import QuoteSource

logger = logging.getLogger(__name__)


def build_source(settings: Settings) -> QuoteSource:
    return QuoteSource(
        url=settings.source_url,
        symbols=settings.symbol_list,
        api_key=settings.api_key,
        timeout=settings.request_timeout,
    )


def run_from_settings(settings: Settings, source=None) -> int:
    """Wire engine, store, source and lock from settings and run the routine once."""
    engine = make_engine(settings.db_url)
    data_dir = Path(settings.data_dir)
    try:
        init_db(engine)
        with Session(engine) as session:
            store = DatasetStore(session, data_dir)
            return run_once(
                store,
                source or build_source(settings),
                settings.dataset_name,
                lock_path=data_dir / f"{settings.dataset_name}.lock",
            )
    finally:
        engine.dispose()


def handler(event=None, context=None) -> dict:
    settings = load_config()
    rows = run_from_settings(settings)
    return {"dataset": settings.dataset_name, "rows": rows}
