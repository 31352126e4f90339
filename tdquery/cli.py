import json
import logging
from typing import Annotated
from pathlib import Path

import typer

from .config import TdQueryConfig
from .io.job import JOB, PREVIEW_JOB
from .io.results import DOWNLOAD, PREVIEW, RESULT
from .query import insert_command_statement

from rich.logging import RichHandler


app = typer.Typer(help="tdquery CLI")

config_path_type = Annotated[
    Path, typer.Argument(help="Task config file (YAML/JSON)")
]

STAGES = [JOB, f"{JOB}_poll", DOWNLOAD, PREVIEW_JOB, f"{PREVIEW_JOB}_poll", PREVIEW, RESULT]


# --- Global callback (runs before every command) ---
@app.callback()
def main(
    ctx: typer.Context,
    log_level: str = typer.Option(
        "INFO",
        "--log-level",
        "-l",
        help="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)",
        case_sensitive=False,
    ),
):
    """Global options for all tdquery commands."""
    level = getattr(logging, log_level.upper(), None)
    if not isinstance(level, int):
        raise typer.BadParameter(f"Invalid log level: {log_level}")

    logging.basicConfig(
        handlers=[RichHandler(rich_tracebacks=True, markup=False)],
    )
    logging.getLogger("tdquery").setLevel(level)

    ctx.obj = {"log_level": level}


@app.command(help="Run the query job of a task, resuming a previous attempt")
def run(
    config_path: config_path_type,
):
    result = TdQueryConfig.from_yaml(config_path).build_job().run()
    typer.echo(f"job id: {result.job_id}")
    if result.store_params:
        typer.echo(json.dumps(result.store_params, indent=2))


@app.command(help="Insert a control statement into a query and print the result")
def rewrite(
    query_file: Annotated[Path, typer.Argument(help="File with the query")],
    command: Annotated[str, typer.Argument(help="Statement to insert")],
):
    typer.echo(insert_command_statement(command, query_file.read_text()))


@app.command(help="Show the recorded progress of a task")
def status(
    config_path: config_path_type,
):
    cfg = TdQueryConfig.from_yaml(config_path)
    backend = cfg.backend
    for stage in STAGES:
        task = cfg.task.task_id(stage)
        if not backend.meta_exists(task) and not backend.is_done(task):
            continue
        meta = backend.load_meta(task)
        if stage.endswith("_poll") and meta is not None:
            # poll records have no done marker, their state is the job status
            state = meta["status"]
        else:
            state = "done" if backend.is_done(task) else "pending"
        typer.echo(f"{stage}: {state} {json.dumps(meta)}")
