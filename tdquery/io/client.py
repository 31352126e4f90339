import abc
import logging
from enum import Enum
from typing import Any, Callable, Iterator, Literal, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from ..exceptions import DomainKeyConflictError


logger = logging.getLogger(__name__)

T = TypeVar("T")
ResultRow = list[Any]


class JobStatus(str, Enum):
    QUEUED = "queued"
    RUNNING = "running"
    SUCCESS = "success"
    ERROR = "error"
    KILLED = "killed"

    @property
    def is_finished(self) -> bool:
        return self in (JobStatus.SUCCESS, JobStatus.ERROR, JobStatus.KILLED)


class JobRequest(BaseModel):
    """One job submission. The service creates at most one job per domain key."""

    model_config = ConfigDict(frozen=True)

    engine: Literal["presto", "hive"]
    database: str
    query: str
    result_url: Optional[str] = None
    priority: int = Field(default=0, ge=-2, le=2)
    retry_limit: int = Field(default=0, ge=0)
    scheduled_time: Optional[int] = None
    domain_key: str


class JobClient(abc.ABC):
    """
    Client of the remote job service. Wire format, authentication and
    pagination are up to the implementation.

    Implementations signal a missing resource with JobNotFoundError (or a
    requests.HTTPError with status 404) and a reused domain key with
    DomainKeyConflictError carrying the existing job id.
    """

    @abc.abstractmethod
    def submit_job(self, request: JobRequest) -> str: ...

    @abc.abstractmethod
    def job_status(self, job_id: str) -> JobStatus: ...

    @abc.abstractmethod
    def result_rows(
        self, job_id: str, visitor: Callable[[Iterator[ResultRow]], T]
    ) -> T:
        """Call ``visitor`` with an iterator over the decoded result rows and return its result."""

    @abc.abstractmethod
    def result_column_names(self, job_id: str) -> list[str]: ...

    @abc.abstractmethod
    def ensure_table_exists(self, database: str, table: str) -> None: ...

    @abc.abstractmethod
    def delete_table(self, database: str, table: str) -> None: ...


def submit_new_job(client: JobClient, request: JobRequest) -> str:
    try:
        return client.submit_job(request)
    except DomainKeyConflictError as e:
        if e.job_id is None:
            raise
        # an earlier attempt got through before the process died
        logger.info(
            f"job with domain key {request.domain_key} already exists: {e.job_id}"
        )
        return e.job_id
