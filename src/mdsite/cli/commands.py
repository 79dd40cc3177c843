"""CLI command implementations"""

from pathlib import Path
from typing import Annotated, Optional

import typer
from sqlmodel import Session, SQLModel

from mdsite.config import Settings, load_config
from mdsite.core.export import build_body
from mdsite.core.pipeline import run_export, run_load
from mdsite.crud.database import init_db, make_engine
from mdsite.crud.datasets import DatasetStore
from mdsite.crud.documents import get_blocks, get_document, list_documents
from mdsite.errors import MdsiteError, NotFound
from mdsite.ingest.handler import run_from_settings


def _fail(msg: str, cause: Exception = None) -> None:
    """Print a user-friendly error to stderr and exit 1."""
    typer.echo(f"Error: {msg}", err=True)
    if cause:
        typer.echo(f"  {cause}", err=True)
    raise typer.Exit(1)


def _settings(overrides: dict = None) -> Settings:
    """Load config with standard CLI error handling."""
    try:
        return load_config(overrides=overrides)
    except ValueError as e:
        _fail(str(e))


def _engine(settings: Settings):
    engine = make_engine(settings.db_url)
    init_db(engine)
    return engine


def init_cmd(
    reset: Annotated[bool, typer.Option("--reset", help="Drop and recreate all tables")] = False,
    ):
    """Initialize database schema. Use --reset to clear existing data."""
    settings = _settings()
    engine = make_engine(settings.db_url)
    if reset:
        SQLModel.metadata.drop_all(engine)
        typer.echo("Existing data cleared.")
    init_db(engine)
    typer.echo(f"Database initialized at: {settings.db_url}")


def load_cmd(
    path: Annotated[Optional[str], typer.Argument(help="Content directory (defaults to content_dir)")] = None,
    parser: Annotated[Optional[str], typer.Option("--parser-config", help="MarkdownIt preset name")] = None,
    ):
    """Parse pages and posts and upsert them into the document store."""
    settings = _settings(overrides={"content_dir": path, "parser_config": parser})
    content_dir = Path(settings.content_dir)
    if not content_dir.exists():
        _fail(f"Content path does not exist: {content_dir}")
    engine = _engine(settings)
    try:
        counts, changes = run_load(engine, content_dir, settings.parser_config)
    except RuntimeError as e:
        _fail(str(e))
    for status, doc_path in changes:
        typer.echo(f"  {status}: {doc_path}")
    typer.echo(
        f"Load complete - "
        f"{counts['created']} created, "
        f"{counts['updated']} updated, "
        f"{counts['unchanged']} unchanged"
    )


def list_cmd(
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft documents")] = False,
    ):
    """List documents newest first."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        docs = list_documents(session, include_drafts=drafts)
        if not docs:
            typer.echo("No documents found in database.")
            raise typer.Exit(1)
        for d in docs:
            marker = " [draft]" if d.draft else ""
            typer.echo(f"{d.date:%Y-%m-%d}  {d.path}  {d.title}{marker}")


def show_cmd(
    path: Annotated[str, typer.Argument(help="Content path of the document, e.g. posts/hello.md")],
    ):
    """Print one document's metadata and body."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        try:
            doc = get_document(session, path)
        except NotFound as e:
            _fail(str(e))
        typer.echo(f"title: {doc.title}")
        typer.echo(f"date:  {doc.date.isoformat()}")
        typer.echo(f"draft: {str(doc.draft).lower()}")
        typer.echo("")
        typer.echo(build_body(get_blocks(session, doc)))


def export_cmd(
    out: Annotated[Optional[str], typer.Option("--out-dir", help="Output directory")] = None,
    drafts: Annotated[bool, typer.Option("--drafts", help="Include draft documents")] = False,
    ):
    """Write normalized pages and index.json for the published documents."""
    settings = _settings(overrides={"output_dir": out})
    output_dir = Path(settings.output_dir)
    try:
        with Session(_engine(settings)) as session:
            docs = list_documents(session, include_drafts=drafts)
            if not docs:
                typer.echo("No documents to export.")
                raise typer.Exit(1)
            results = run_export(session, docs, output_dir)
    except typer.Exit:
        raise
    except Exception as e:
        _fail("Export failed", e)
    for doc_path, out_file in results:
        typer.echo(f"  {doc_path} -> {out_file}")
    typer.echo(f"Exported {len(results)} document(s) to {output_dir}/")


def run_cmd(
    dataset: Annotated[Optional[str], typer.Option("--dataset", help="Target dataset name")] = None,
    symbols: Annotated[Optional[str], typer.Option("--symbols", help="Comma-separated keys to fetch")] = None,
    data_dir: Annotated[Optional[str], typer.Option("--data-dir", help="Dataset root directory")] = None,
    ):
    """Run the ingestion routine once (fetch -> ensure dataset -> append)."""
    settings = _settings(overrides={"dataset_name": dataset, "symbols": symbols, "data_dir": data_dir})
    try:
        rows = run_from_settings(settings)
    except (MdsiteError, ValueError) as e:
        _fail(f"Run failed ({type(e).__name__})", e)
    typer.echo(f"Appended {rows} row(s) to {settings.dataset_name}")


def datasets_cmd():
    """List datasets with partition and row counts."""
    settings = _settings()
    with Session(_engine(settings)) as session:
        store = DatasetStore(session, Path(settings.data_dir))
        datasets = store.list_datasets()
        if not datasets:
            typer.echo("No datasets found.")
            raise typer.Exit(1)
        for ds in datasets:
            cols = ", ".join(f"{c['name']}:{c['type']}" for c in ds.columns or []) or "-"
            typer.echo(
                f"{ds.name}  partitions={store.partition_count(ds)}  "
                f"rows={store.row_count(ds)}  schema={{{cols}}}"
            )
