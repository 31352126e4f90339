import re
from datetime import datetime
from hashlib import sha256
from typing import NamedTuple, TypedDict

from pydantic import BaseModel


class JobMeta(TypedDict):
    job_id: str
    domain_key: str
    status: str
    submitted: float
    last_checked: float
    completed_at: float


class TaskID(NamedTuple):
    """
    Address of one progress record.
    """

    namespace: str  # the task execution, see TaskIdentity.namespace
    key: str  # the stage, e.g. "job", "download" or "preview"

    def __str__(self):
        return f"{self.namespace}_{self.key}"


class TaskIdentity(BaseModel):
    """
    Identity of one execution attempt of a task. Everything persisted for
    the attempt, and every domain key sent to the job service, derives from it.
    """

    session_id: str
    attempt_id: int = 1
    task_name: str
    session_time: datetime

    @property
    def namespace(self) -> str:
        name = re.sub(r"[^\w.+-]", "_", self.task_name)
        return f"{self.session_id}_a{self.attempt_id}_{name}"

    def task_id(self, key: str) -> TaskID:
        return TaskID(namespace=self.namespace, key=key)

    def domain_key(self, stage: str) -> str:
        token = f"{self.session_id}:{self.attempt_id}:{self.task_name}:{stage}"
        return sha256(token.encode()).hexdigest()
