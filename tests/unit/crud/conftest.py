"""Shared fixtures for crud unit tests"""

from datetime import date, datetime

import pytest
from sqlalchemy import create_engine
from sqlmodel import SQLModel, Session

from mdsite.core.models import StagedBlock, StagedDoc
from mdsite.core.utils.hashing import sha256
from mdsite.crud import models  # noqa: F401
from mdsite.crud.datasets import DatasetStore
from mdsite.crud.models import BlockEnum
from mdsite.ingest.models import Record


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture(name="session")
def session_fixture(engine):
    """Fresh session per test."""
    with Session(engine) as s:
        yield s


@pytest.fixture(name="store")
def store_fixture(session, tmp_path):
    """An isolated dataset store per test."""
    return DatasetStore(session, tmp_path / "data")


@pytest.fixture(name="records")
def records_fixture():
    return [
        Record(date=date(2024, 3, 1), key="AAPL", value=179.66, volume=73488000),
        Record(date=date(2024, 3, 1), key="MSFT", value=415.5, volume=17823400),
        Record(date=date(2024, 3, 1), key="TSLA", value=202.64, volume=82099200),
    ]


def _make_staged(
    path: str = "posts/hello.md",
    title: str = "Hello",
    when: datetime = datetime(2024, 1, 1),
    draft: bool = False,
    markdown: str = "# Hello\n\nWorld",
    ) -> StagedDoc:
    """Build a minimal StagedDoc."""
    return StagedDoc(
        path=path,
        slug=path.rsplit("/", 1)[-1].removesuffix(".md"),
        title=title,
        date=when,
        draft=draft,
        markdown=markdown,
        hash=sha256(f"{title}|{when}|{draft}|{markdown}"),
        blocks=[
            StagedBlock(type=BlockEnum.heading, content="# Hello", level=1),
            StagedBlock(type=BlockEnum.paragraph, content="World"),
        ],
    )


@pytest.fixture(name="make_staged")
def make_staged_fixture():
    return _make_staged
