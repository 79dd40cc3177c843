"""CLI entrypoint: Typer app definition and command registration"""

import logging
from typing import Annotated

import typer

from mdsite.cli.commands import (
    datasets_cmd, export_cmd, init_cmd, list_cmd, load_cmd, run_cmd, show_cmd,
)


app = typer.Typer(name="mdsite", no_args_is_help=True, help="Blog content store and market data ingestion")


@app.callback()
def main(
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Debug logging")] = False,
    ):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
    )


app.command(name="init")(init_cmd)
app.command(name="load")(load_cmd)
app.command(name="list")(list_cmd)
app.command(name="show")(show_cmd)
app.command(name="export")(export_cmd)
app.command(name="run")(run_cmd)
app.command(name="datasets")(datasets_cmd)
