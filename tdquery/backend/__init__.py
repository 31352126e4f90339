from typing import Union

from .base import Backend
from .filesystem import FileSystemBackend
from .memory import MemoryBackend

BackendType = Union[FileSystemBackend, MemoryBackend]
