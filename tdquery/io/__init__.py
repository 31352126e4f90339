from .client import JobClient, JobRequest, JobStatus
from .config import JobConfig
from .job import JobResult, TdJob
from .retry import FailureClass, PollingRetryExecutor, RetryPolicy, classify_failure
