"""Shared fixtures for core unit tests"""

import pytest
from markdown_it import MarkdownIt
from sqlalchemy import create_engine
from sqlmodel import SQLModel

from mdsite.crud import models  # noqa: F401


ABOUT_MD = """\
---
title: About me
date: 2023-05-01
---

# Hi, I'm the author

I write about data engineering.

![portrait](images/me.png)
"""

POST_MD = """\
---
title: Building a small data pipeline with Lambda and Glue
date: 2024-02-10T09:30:00
tags: [aws, python]
---

## Setup

- create a layer
- attach it to the function

```python
wr.s3.to_parquet(df, path, dataset=True, mode="append")
```

| key  | value |
|------|-------|
| AAPL | 1.0   |
"""

DRAFT_MD = """\
---
title: Half-written
date: 2024-06-01
draft: true
---

Not ready yet.
"""


@pytest.fixture(name="parser")
def parser_fixture():
    return MarkdownIt("gfm-like", options_update={"linkify": False})


@pytest.fixture(name="content_dir")
def content_dir_fixture(tmp_path):
    """A small site: one page, one post, one draft post."""
    root = tmp_path / "content"
    (root / "posts").mkdir(parents=True)
    (root / "about.md").write_text(ABOUT_MD)
    (root / "posts" / "lambda-glue.md").write_text(POST_MD)
    (root / "posts" / "draft.md").write_text(DRAFT_MD)
    return root


@pytest.fixture(name="engine")
def engine_fixture():
    """In-memory SQLite engine with all tables created."""
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False})
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)
