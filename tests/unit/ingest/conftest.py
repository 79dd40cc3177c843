"""Shared fixtures for ingest unit tests"""

from datetime import date

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdsite.crud import models  # noqa: F401
from mdsite.crud.datasets import DatasetStore
from mdsite.ingest.models import Record


class StaticSource:
    """In-memory source returning a fixed batch, counting calls."""

    def __init__(self, records):
        self.records = records
        self.calls = 0

    def fetch(self):
        self.calls += 1
        return list(self.records)


@pytest.fixture(name="engine")
def engine_fixture():
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="store")
def store_fixture(engine, tmp_path):
    with Session(engine) as session:
        yield DatasetStore(session, tmp_path / "data")


@pytest.fixture(name="market_source")
def market_source_fixture():
    day = date(2024, 3, 1)
    return StaticSource([
        Record(date=day, key="AAPL", value=179.66, volume=73488000),
        Record(date=day, key="MSFT", value=415.5, volume=17823400),
        Record(date=day, key="TSLA", value=202.64, volume=82099200),
    ])


@pytest.fixture(name="static_source")
def static_source_fixture():
    return StaticSource
