import logging
from pathlib import Path
from typing import Any, Optional

from pydantic import BaseModel, Field, field_validator, model_validator

from ..exceptions import ConfigurationError
from ..query import EngineType, PrestoEngine, TableParam, parse_engine
from ..util.path import expand, resolve_within
from .retry import RetryPolicy


logger = logging.getLogger(__name__)

PRIORITIES = {
    "VERY_LOW": -2,
    "LOW": -1,
    "NORMAL": 0,
    "HIGH": 1,
    "VERY_HIGH": 2,
}


class JobConfig(BaseModel):
    database: str
    query: Optional[str] = Field(None, description="Rendered query text")
    query_file: Optional[Path] = Field(None, description="Query file in the workspace")
    engine: EngineType = PrestoEngine()
    insert_into: Optional[TableParam] = None
    create_table: Optional[TableParam] = None
    priority: int = 0
    result_url: Optional[str] = None
    job_retry: int = Field(0, ge=0)
    download_file: Optional[str] = None
    store_last_results: bool = False
    preview: bool = False
    poll_interval: float = Field(10.0, ge=0)
    retry: RetryPolicy = RetryPolicy()
    workspace: Path = Path(".")

    @field_validator("engine", mode="before")
    @classmethod
    def engine_from_name(cls, v: Any) -> Any:
        if isinstance(v, str):
            return parse_engine(v)
        return v

    @field_validator("priority", mode="before")
    @classmethod
    def priority_from_name(cls, v: Any) -> Any:
        if isinstance(v, str) and not v.lstrip("-").isdigit():
            if v.upper() not in PRIORITIES:
                raise ConfigurationError(
                    f"Unknown priority '{v}', use one of {', '.join(PRIORITIES)} "
                    f"or an integer between -2 and 2"
                )
            return PRIORITIES[v.upper()]
        return v

    @field_validator("priority")
    @classmethod
    def priority_in_range(cls, v: int) -> int:
        if not -2 <= v <= 2:
            raise ConfigurationError(f"priority must be between -2 and 2, got {v}")
        return v

    @model_validator(mode="after")
    def check_exclusive_options(self) -> "JobConfig":
        if (self.query is None) == (self.query_file is None):
            raise ConfigurationError("Exactly one of query and query_file has to be set")

        if self.query_file is not None and not self.query_path.is_file():
            raise ConfigurationError(f"query_file: {self.query_path} not found")

        if self.insert_into is not None and self.create_table is not None:
            raise ConfigurationError("Setting both insert_into and create_table is invalid")

        if self.download_file is not None:
            if self.destination_table is not None:
                # the result set is empty if INSERT INTO or CREATE TABLE runs
                raise ConfigurationError(
                    "download_file is invalid if insert_into or create_table is set"
                )
            try:
                resolve_within(self.workspace, self.download_file)
            except ValueError as e:
                raise ConfigurationError(f"download_file: {e}") from None
        return self

    @property
    def destination_table(self) -> Optional[TableParam]:
        return self.insert_into if self.insert_into is not None else self.create_table

    @property
    def download_path(self) -> Optional[Path]:
        if self.download_file is None:
            return None
        return resolve_within(self.workspace, self.download_file)

    @property
    def query_path(self) -> Optional[Path]:
        if self.query_file is None:
            return None
        return expand(self.workspace) / self.query_file

    def load_query(self) -> str:
        if self.query is not None:
            return self.query
        path = self.query_path
        logger.debug(f"reading query from {path}")
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError as e:
            raise ConfigurationError(f"query_file: {path} not found") from e
