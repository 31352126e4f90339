import logging
from importlib import import_module
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from .backend import BackendType
from .exceptions import ConfigurationError
from .io import JobClient, JobConfig, TdJob
from .types import TaskIdentity


logger = logging.getLogger(__name__)


class ClientConfig(BaseModel):
    factory: str = Field(..., description="'module:callable' returning a JobClient")
    options: dict[str, Any] = {}

    @field_validator("factory")
    @classmethod
    def check_factory_path(cls, v: str) -> str:
        module, _, attr = v.partition(":")
        if not module or not attr:
            raise ValueError(f"client factory has to look like 'module:callable', got '{v}'")
        return v

    def build_client(self) -> JobClient:
        module_name, _, attr = self.factory.partition(":")
        factory = getattr(import_module(module_name), attr)
        client = factory(**self.options)
        if not isinstance(client, JobClient):
            raise TypeError(f"{self.factory} returned {type(client).__name__}, not a JobClient")
        return client


class TdQueryConfig(BaseModel):
    task: TaskIdentity
    job: JobConfig
    backend: BackendType = Field(..., discriminator="type")
    client: ClientConfig

    @classmethod
    def from_yaml(cls, path: str | Path):
        path = Path(path)
        assert path.exists(), f"{path} not found!"
        with path.open("r") as f:
            config_dict = yaml.safe_load(f)
        try:
            return cls.model_validate(config_dict)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid config {path}:\n{e}") from e

    def build_job(self, client: JobClient | None = None) -> TdJob:
        return TdJob(
            cfg=self.job,
            client=client or self.client.build_client(),
            backend=self.backend,
            identity=self.task,
        )
