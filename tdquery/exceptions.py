class TdQueryError(Exception):
    """Base class of all errors raised by tdquery."""


class ConfigurationError(TdQueryError, ValueError):
    """
    Invalid or contradicting options. Raised before anything is sent to the
    job service. Subclasses ValueError so pydantic validators report it.
    Validating a model directly therefore raises a pydantic ValidationError,
    ``TdQueryConfig.from_yaml`` re-raises that as ConfigurationError.
    """


class DeterministicClientError(TdQueryError):
    """The job service rejected a request and will do so again on retry."""


class JobNotFoundError(DeterministicClientError):
    """
    The requested resource does not exist. For result downloads this means the
    job produced no result set, e.g. an INSERT or CREATE TABLE query.
    """


class DomainKeyConflictError(DeterministicClientError):
    """A job with the same domain key was already accepted by the service."""

    def __init__(self, message: str, job_id: str | None = None):
        super().__init__(message)
        self.job_id = job_id


class JobFailedError(TdQueryError):
    def __init__(self, job_id: str, status: str):
        super().__init__(f"Job {job_id} finished with status '{status}'")
        self.job_id = job_id
        self.status = status


class TaskExecutionError(TdQueryError):
    """Retries are exhausted or the failure is fatal. Wraps the last cause."""

    def __init__(self, message: str, cause: BaseException | None = None):
        super().__init__(message)
        self.cause = cause
