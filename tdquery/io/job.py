import logging
import time
from typing import Any, Callable

from pydantic import BaseModel

from ..backend import Backend
from ..exceptions import JobFailedError, TaskExecutionError
from ..query import PrestoEngine, TableParam, ensure_table_created, insert_command_statement
from ..types import JobMeta, TaskIdentity
from .client import JobClient, JobRequest, JobStatus, submit_new_job
from .config import JobConfig
from .results import (
    DOWNLOAD,
    PREVIEW,
    PREVIEW_ROWS,
    RESULT,
    build_reset_store_params,
    build_store_params,
    download_job_result,
    download_preview_rows,
)
from .retry import PollingRetryExecutor, with_retry


logger = logging.getLogger(__name__)

JOB = "job"
PREVIEW_JOB = "previewJob"

# (job service, domain key) -> job id
JobStarter = Callable[[JobClient, str], str]


class JobResult(BaseModel):
    job_id: str
    store_params: dict[str, Any] = {}
    reset_store_params: list[list[str]] = []


class TdJob:
    """
    Runs one query job to completion and processes its results.

    Every step with a remote side effect is recorded in ``backend`` under the
    namespace of ``identity``. Calling ``run`` again after a crash resumes
    from the last recorded step. Submissions carry a domain key derived from
    ``identity``, so the job service never creates a second job for a
    submission that got through before the crash.
    """

    def __init__(
        self,
        cfg: JobConfig,
        client: JobClient,
        backend: Backend,
        identity: TaskIdentity,
    ):
        self.cfg = cfg
        self.client = client
        self.backend = backend
        self.identity = identity

    # ----------------------------
    # statement
    # ----------------------------
    def build_statement(self) -> str:
        cfg = self.cfg
        query = cfg.load_query()

        if cfg.insert_into is not None:
            mode, table = "insert_into", cfg.insert_into
        elif cfg.create_table is not None:
            mode, table = "create_table", cfg.create_table
        else:
            return query

        if cfg.engine.needs_precreated_table(mode):
            ensure_table_created(self.client, table, cfg.database)
        return insert_command_statement(cfg.engine.write_command(mode, table), query)

    def start_job(self, client: JobClient, domain_key: str) -> str:
        cfg = self.cfg
        stmt = self.build_statement()

        req = JobRequest(
            engine=cfg.engine.name,
            database=cfg.database,
            query=stmt,
            result_url=cfg.result_url,
            priority=cfg.priority,
            retry_limit=cfg.job_retry,
            scheduled_time=int(self.identity.session_time.timestamp()),
            domain_key=domain_key,
        )

        job_id = submit_new_job(client, req)
        logger.info(f"Started {cfg.engine.name} job id={job_id}:\n{stmt}")
        return job_id

    # ----------------------------
    # submission and polling
    # ----------------------------
    def run_job(self, stage: str, starter: JobStarter) -> str:
        domain_key = self.identity.domain_key(stage)
        job_id = PollingRetryExecutor(
            self.backend,
            self.identity.task_id(stage),
            self.cfg.retry,
            "Failed to submit job of stage '%s'",
            stage,
            not_found_result=None,
        ).run_once(lambda: starter(self.client, domain_key))

        self.wait_for_job(stage, job_id, domain_key)
        return job_id

    def wait_for_job(self, stage: str, job_id: str, domain_key: str) -> None:
        backend = self.backend
        task = self.identity.task_id(f"{stage}_poll")

        meta = backend.load_meta(task)
        if meta is None or meta["job_id"] != job_id:
            now = time.time()
            meta = JobMeta(
                job_id=job_id,
                domain_key=domain_key,
                status=JobStatus.QUEUED.value,
                submitted=now,
                last_checked=now,
                completed_at=0,
            )
            backend.save_meta(task, meta)

        status = JobStatus(meta["status"])
        get_status = with_retry(lambda: self.client.job_status(job_id), self.cfg.retry)
        while not status.is_finished:
            try:
                status = get_status()
            except Exception as e:
                message = f"Failed to check status of job '{job_id}'"
                logger.error(f"{task}: {message}: {e!r}")
                raise TaskExecutionError(message, cause=e) from e
            meta["status"] = status.value
            meta["last_checked"] = time.time()
            if status.is_finished:
                meta["completed_at"] = meta["last_checked"]
            backend.save_meta(task, meta)

            if not status.is_finished:
                logger.debug(f"job {job_id} is {status.value}")
                time.sleep(self.cfg.poll_interval)

        if status is not JobStatus.SUCCESS:
            raise JobFailedError(job_id, status.value)
        logger.info(f"job {job_id} finished")

    # ----------------------------
    # results
    # ----------------------------
    def process_job_result(self, job_id: str) -> JobResult:
        cfg = self.cfg
        client = self.client
        backend = self.backend
        task_id = self.identity.task_id

        download_job_result(
            client, job_id, cfg.download_path, backend, task_id(DOWNLOAD), cfg.retry
        )

        if cfg.preview:
            self.preview(job_id)

        return JobResult(
            job_id=job_id,
            store_params=build_store_params(
                client, job_id, cfg.store_last_results, backend, task_id(RESULT), cfg.retry
            ),
            reset_store_params=build_reset_store_params(cfg.store_last_results),
        )

    def preview(self, job_id: str) -> None:
        cfg = self.cfg
        preview_task = self.identity.task_id(PREVIEW)
        dest_table = cfg.destination_table

        if dest_table is None:
            download_preview_rows(
                self.client, job_id, f"job id {job_id}", self.backend, preview_task, cfg.retry
            )
            return

        # the job itself has no result set, select from its table instead
        try:
            preview_job_id = self.run_job(
                PREVIEW_JOB,
                lambda c, domain_key: start_select_preview_job(
                    c, cfg.database, f"job id {job_id}", dest_table, domain_key
                ),
            )
        except Exception:
            logger.warning(
                f"Running preview job for table {dest_table} failed. Ignoring this error.",
                exc_info=True,
            )
            return

        download_preview_rows(
            self.client, preview_job_id, f"table {dest_table}", self.backend, preview_task, cfg.retry
        )

    def run(self) -> JobResult:
        job_id = self.run_job(JOB, self.start_job)
        return self.process_job_result(job_id)


def start_select_preview_job(
    client: JobClient,
    database: str,
    description: str,
    dest_table: TableParam,
    domain_key: str,
) -> str:
    comment = f"-- preview results of {description}"
    req = JobRequest(
        engine="presto",
        database=database,
        query=f"{comment}\nSELECT * FROM {PrestoEngine().escape_table_name(dest_table)} LIMIT {PREVIEW_ROWS}",
        priority=0,
        domain_key=domain_key,
    )
    return submit_new_job(client, req)
