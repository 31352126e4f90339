import abc
from typing import Any
from pydantic import BaseModel
from ..types import TaskID


class Backend(abc.ABC, BaseModel):
    type: str
    base_path: Any = None
    """
    Abstract durable store for progress records.
    A record is addressed by a TaskID and consists of metadata, an optional
    JSON payload and a completion marker. It has to survive process restarts,
    resuming an interrupted task depends on it.
    """

    # --- metadata ---
    @abc.abstractmethod
    def meta_exists(self, task: TaskID) -> bool: ...
    @abc.abstractmethod
    def save_meta(self, task: TaskID, meta: dict[str, Any]) -> None: ...
    @abc.abstractmethod
    def load_meta(self, task: TaskID) -> dict[str, Any] | None: ...

    # --- Markers ---
    @abc.abstractmethod
    def mark_done(self, task: TaskID) -> None: ...
    @abc.abstractmethod
    def is_done(self, task: TaskID) -> bool: ...

    # --- Data ---
    @abc.abstractmethod
    def save_data(self, task: TaskID, content: Any) -> None: ...
    @abc.abstractmethod
    def load_data(self, task: TaskID) -> Any: ...
    @abc.abstractmethod
    def data_exists(self, task: TaskID) -> bool: ...
