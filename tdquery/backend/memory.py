import copy
from typing import Any, Literal

from pydantic import PrivateAttr

from .base import Backend
from ..types import TaskID


class MemoryBackend(Backend):
    """
    Keeps progress records in the process. Only durable as long as the
    instance lives, so use it when the caller persists the instance itself
    or in tests.
    """

    type: Literal["memory"] = "memory"

    _meta: dict[TaskID, dict[str, Any]] = PrivateAttr(default_factory=dict)
    _data: dict[TaskID, Any] = PrivateAttr(default_factory=dict)
    _done: set[TaskID] = PrivateAttr(default_factory=set)

    def save_meta(self, task: TaskID, meta: dict[str, Any]) -> None:
        self._meta[task] = copy.deepcopy(meta)

    def load_meta(self, task: TaskID) -> dict[str, Any] | None:
        meta = self._meta.get(task)
        return copy.deepcopy(meta) if meta is not None else None

    def meta_exists(self, task: TaskID) -> bool:
        return task in self._meta

    def mark_done(self, task: TaskID) -> None:
        self._done.add(task)

    def is_done(self, task: TaskID) -> bool:
        return task in self._done

    def save_data(self, task: TaskID, content: Any) -> None:
        self._data[task] = copy.deepcopy(content)

    def load_data(self, task: TaskID) -> Any:
        if task not in self._data:
            raise KeyError(str(task))
        return copy.deepcopy(self._data[task])

    def data_exists(self, task: TaskID) -> bool:
        return task in self._data
