import logging
import time
from enum import Enum
from typing import Any, Callable, Optional, TypeVar

import backoff
import requests
from pydantic import BaseModel, model_validator

from ..backend import Backend
from ..exceptions import (
    ConfigurationError,
    DeterministicClientError,
    JobFailedError,
    JobNotFoundError,
    TaskExecutionError,
)
from ..types import TaskID
from ..util.backoff import backoff_hndlr


logger = logging.getLogger(__name__)

T = TypeVar("T")


class FailureClass(str, Enum):
    RETRYABLE = "retryable"
    FATAL = "fatal"
    # the resource is missing, e.g. the result of an INSERT query
    NOT_FOUND = "not_found"


def classify_failure(e: BaseException) -> FailureClass:
    if isinstance(e, JobNotFoundError):
        return FailureClass.NOT_FOUND
    if isinstance(e, (DeterministicClientError, ConfigurationError, JobFailedError)):
        return FailureClass.FATAL
    if isinstance(e, requests.HTTPError) and e.response is not None:
        code = e.response.status_code
        if code == 404:
            return FailureClass.NOT_FOUND
        if 400 <= code < 500 and code not in (408, 429):
            return FailureClass.FATAL
    return FailureClass.RETRYABLE


class RetryPolicy(BaseModel):
    min_interval: float = 1.0
    max_interval: float = 30.0
    max_tries: int = 7
    classifier: Callable[[BaseException], FailureClass] = classify_failure

    @model_validator(mode="after")
    def check_intervals(self) -> "RetryPolicy":
        if self.min_interval < 0:
            raise ValueError("min_interval must not be negative")
        if self.max_interval < self.min_interval:
            raise ValueError("max_interval must not be smaller than min_interval")
        if self.max_tries < 1:
            raise ValueError("max_tries must be at least 1")
        return self


def with_retry(func: Callable[[], T], policy: RetryPolicy) -> Callable[[], T]:
    """
    Wrap ``func`` so that retryable failures are retried with exponential
    backoff, starting at ``policy.min_interval`` and capped at
    ``policy.max_interval``. Other failures are raised right away.
    """
    return backoff.on_exception(
        backoff.expo,
        Exception,
        max_tries=policy.max_tries,
        giveup=lambda e: policy.classifier(e) is not FailureClass.RETRYABLE,
        on_backoff=backoff_hndlr,
        jitter=None,
        factor=policy.min_interval,
        max_value=policy.max_interval,
    )(func)


class PollingRetryExecutor:
    """
    Runs an operation under a progress record so that a restarted process
    resumes instead of repeating it.

    The record lives in ``backend`` under ``task``. Once its marker is
    written the operation is never called again for that task, the recorded
    outcome is returned instead. Nothing is recorded if the operation fails.

    ``run_once`` records the return value of the operation as metadata and
    suits small outcomes like a job id. ``run`` stores the return value as
    data and suits downloaded rows.

    If the operation fails with a NOT_FOUND failure the result of
    ``not_found_result`` is used as outcome. Pass ``None`` to treat such
    failures as fatal.
    """

    def __init__(
        self,
        backend: Backend,
        task: TaskID,
        policy: RetryPolicy,
        error_message: str,
        *error_args: Any,
        not_found_result: Optional[Callable[[], Any]] = list,
    ):
        self.backend = backend
        self.task = task
        self.policy = policy
        self.error_message = error_message
        self.error_args = error_args
        self.not_found_result = not_found_result

    def run_once(self, op: Callable[[], T]) -> T:
        backend = self.backend
        if backend.is_done(self.task):
            logger.debug(f"{self.task} is already done")
            meta = backend.load_meta(self.task) or {}
            return meta.get("outcome")

        outcome = self._call(op)
        backend.save_meta(self.task, {"outcome": outcome, "completed_at": time.time()})
        backend.mark_done(self.task)
        return outcome

    def run(self, op: Callable[[], T]) -> T:
        backend = self.backend
        if backend.is_done(self.task) and backend.data_exists(self.task):
            logger.debug(f"loading recorded result of {self.task}")
            return backend.load_data(self.task)

        result = self._call(op)
        backend.save_data(self.task, result)
        backend.mark_done(self.task)
        return result

    def _call(self, op: Callable[[], T]) -> T:
        def attempt():
            try:
                return op()
            except Exception as e:
                if (
                    self.not_found_result is not None
                    and self.policy.classifier(e) is FailureClass.NOT_FOUND
                ):
                    logger.debug(f"{self.task}: {e!r}, using empty result")
                    return self.not_found_result()
                raise

        try:
            return with_retry(attempt, self.policy)()
        except Exception as e:
            message = self.error_message % self.error_args
            logger.error(f"{self.task}: {message}: {e!r}")
            raise TaskExecutionError(message, cause=e) from e
