import io
from itertools import islice
import logging
from pathlib import Path
from typing import Any, Iterator, Optional

from ..backend import Backend
from ..types import TaskID
from ..util.csv_utils import add_csv_header, add_csv_row
from .client import JobClient, ResultRow
from .retry import PollingRetryExecutor, RetryPolicy


logger = logging.getLogger(__name__)

PREVIEW = "preview"
DOWNLOAD = "download"
RESULT = "result"

PREVIEW_ROWS = 20

STORE_PARAMS_KEY = "td"
LAST_RESULTS_KEY = "last_results"


def _executor(
    backend: Backend, task: TaskID, policy: RetryPolicy, job_id: str
) -> PollingRetryExecutor:
    return PollingRetryExecutor(
        backend, task, policy, "Failed to download result of job '%s'", job_id
    )


def download_job_result(
    client: JobClient,
    job_id: str,
    download_path: Optional[Path],
    backend: Backend,
    task: TaskID,
    policy: RetryPolicy,
) -> None:
    """
    Stream all result rows of the job into a CSV file. The file is written
    next to its destination and moved into place once complete.
    """
    if download_path is None:
        return

    def write_rows(rows: Iterator[ResultRow]) -> bool:
        tmp = download_path.with_name(download_path.name + ".tmp")
        tmp.parent.mkdir(parents=True, exist_ok=True)
        n_rows = 0
        try:
            with tmp.open("w", encoding="utf-8", newline="") as out:
                add_csv_header(out, client.result_column_names(job_id))
                for row in rows:
                    add_csv_row(out, row)
                    n_rows += 1
            tmp.replace(download_path)
        except BaseException:
            tmp.unlink(missing_ok=True)
            raise
        logger.info(f"downloaded {n_rows} rows of job {job_id} to {download_path}")
        return True

    _executor(backend, task, policy, job_id).run_once(
        lambda: client.result_rows(job_id, write_rows)
    )


def download_first_results(
    client: JobClient,
    job_id: str,
    max_rows: int,
    backend: Backend,
    task: TaskID,
    policy: RetryPolicy,
) -> list[ResultRow]:
    def first_rows(rows: Iterator[ResultRow]) -> list[ResultRow]:
        return [list(row) for row in islice(rows, max_rows)]

    # a missing result (INSERT or CREATE TABLE query) comes back as []
    return _executor(backend, task, policy, job_id).run(
        lambda: client.result_rows(job_id, first_rows)
    )


def download_preview_rows(
    client: JobClient,
    job_id: str,
    description: str,
    backend: Backend,
    task: TaskID,
    policy: RetryPolicy,
) -> None:
    """Log the first rows of a job as CSV. Never raises."""
    out = io.StringIO()
    try:
        add_csv_header(out, client.result_column_names(job_id))

        rows = download_first_results(
            client, job_id, PREVIEW_ROWS, backend, task, policy
        )
        if not rows:
            logger.info(f"preview of {description}: (no results)")
            return
        for row in rows:
            add_csv_row(out, row)
    except Exception:
        logger.warning(
            "Getting rows for preview failed. Ignoring this error.", exc_info=True
        )
        return

    logger.info(f"preview of {description}:\r\n{out.getvalue()}")


def build_store_params(
    client: JobClient,
    job_id: str,
    store_last_results: bool,
    backend: Backend,
    task: TaskID,
    policy: RetryPolicy,
) -> dict[str, Any]:
    if not store_last_results:
        return {}

    results = download_first_results(client, job_id, 1, backend, task, policy)
    last_results = {}
    if results:
        row = results[0]
        column_names = client.result_column_names(job_id)
        last_results = dict(zip(column_names, row))

    return {STORE_PARAMS_KEY: {LAST_RESULTS_KEY: last_results}}


def build_reset_store_params(store_last_results: bool) -> list[list[str]]:
    if store_last_results:
        return [[STORE_PARAMS_KEY, LAST_RESULTS_KEY]]
    return []
