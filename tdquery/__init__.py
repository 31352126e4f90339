from .exceptions import (
    ConfigurationError,
    DeterministicClientError,
    DomainKeyConflictError,
    JobFailedError,
    JobNotFoundError,
    TaskExecutionError,
    TdQueryError,
)
from .io import JobConfig, JobResult, TdJob
