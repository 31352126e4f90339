import logging
from typing import Any, Callable, Iterator

import requests

from tdquery.exceptions import DomainKeyConflictError, JobNotFoundError
from tdquery.io.client import JobClient, JobRequest, JobStatus, ResultRow


logger = logging.getLogger(__name__)


class DummyJobClient(JobClient):
    """
    In-memory drop-in replacement for a job service client.

    Jobs are deduplicated by domain key like the real service does. Jobs
    whose query writes into a table have no result set. The ``fail_*``
    counters make the next n calls fail with a connection error. With
    ``fail_stream`` the row stream breaks after its first row instead.
    """

    def __init__(
        self,
        *,
        columns: list[str] | None = None,
        rows: list[ResultRow] | None = None,
        final_status: str = "success",
        polls_until_done: int = 1,
        fail_submit: int = 0,
        lose_submit_response: int = 0,
        fail_results: int = 0,
        fail_status: int = 0,
        fail_stream: int = 0,
    ):
        self.columns = columns if columns is not None else ["a", "b"]
        self.rows = rows if rows is not None else [[1, "x"], [2, "y"]]
        self.final_status = JobStatus(final_status)
        self.polls_until_done = polls_until_done
        self.fail_submit = fail_submit
        self.lose_submit_response = lose_submit_response
        self.fail_results = fail_results
        self.fail_status = fail_status
        self.fail_stream = fail_stream

        self.jobs: dict[str, JobRequest] = {}
        self.domain_keys: dict[str, str] = {}
        self.submit_calls = 0
        self.status_calls: dict[str, int] = {}
        self.result_calls = 0
        self.ensured_tables: list[tuple[str, str]] = []
        self.deleted_tables: list[tuple[str, str]] = []

    @property
    def requests(self) -> list[JobRequest]:
        return list(self.jobs.values())

    def submit_job(self, request: JobRequest) -> str:
        self.submit_calls += 1
        if self.fail_submit > 0:
            self.fail_submit -= 1
            raise requests.ConnectionError("failed submit")

        if request.domain_key in self.domain_keys:
            raise DomainKeyConflictError(
                "domain key already used", job_id=self.domain_keys[request.domain_key]
            )

        job_id = str(len(self.jobs) + 1)
        self.jobs[job_id] = request
        self.domain_keys[request.domain_key] = job_id
        logger.debug(f"created job {job_id}")

        if self.lose_submit_response > 0:
            self.lose_submit_response -= 1
            raise requests.ConnectionError("connection lost after submit")
        return job_id

    def job_status(self, job_id: str) -> JobStatus:
        n = self.status_calls.get(job_id, 0) + 1
        self.status_calls[job_id] = n
        if self.fail_status > 0:
            self.fail_status -= 1
            raise requests.ConnectionError("status down")
        if n < self.polls_until_done:
            return JobStatus.RUNNING
        return self.final_status

    def _check_job(self, job_id: str) -> JobRequest:
        if job_id not in self.jobs:
            raise JobNotFoundError(f"no job {job_id}")
        return self.jobs[job_id]

    def result_rows(self, job_id: str, visitor: Callable[[Iterator[ResultRow]], Any]) -> Any:
        self.result_calls += 1
        if self.fail_results > 0:
            self.fail_results -= 1
            raise requests.ConnectionError("failed fetch")

        query = self._check_job(job_id).query
        if "INSERT " in query or "CREATE TABLE" in query:
            raise JobNotFoundError(f"job {job_id} has no result")
        rows = [list(r) for r in self.rows]
        if self.fail_stream > 0:
            self.fail_stream -= 1
            return visitor(self._broken_stream(rows))
        return visitor(iter(rows))

    @staticmethod
    def _broken_stream(rows: list[ResultRow]) -> Iterator[ResultRow]:
        yield from rows[:1]
        raise requests.ConnectionError("stream interrupted")

    def result_column_names(self, job_id: str) -> list[str]:
        self._check_job(job_id)
        return list(self.columns)

    def ensure_table_exists(self, database: str, table: str) -> None:
        self.ensured_tables.append((database, table))

    def delete_table(self, database: str, table: str) -> None:
        self.deleted_tables.append((database, table))


def make_client(**options) -> DummyJobClient:
    return DummyJobClient(**options)
