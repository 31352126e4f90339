import logging
from typing import Any, Optional, TYPE_CHECKING

from pydantic import BaseModel, ConfigDict, ValidationError, model_validator

from ..exceptions import ConfigurationError

if TYPE_CHECKING:
    from ..io.client import JobClient


logger = logging.getLogger(__name__)


class TableParam(BaseModel):
    """
    A destination table, ``table`` or ``database.table``. Without a database
    the job's default database applies.
    """

    model_config = ConfigDict(frozen=True)

    database: Optional[str] = None
    table: str

    @model_validator(mode="before")
    @classmethod
    def parse_string(cls, data: Any) -> Any:
        if isinstance(data, str):
            return cls.split(data)
        return data

    @model_validator(mode="after")
    def check_not_empty(self) -> "TableParam":
        if not self.table or (self.database is not None and not self.database):
            raise ConfigurationError(f"Invalid table name: '{self}'")
        return self

    @staticmethod
    def split(value: str) -> dict[str, str | None]:
        if "." in value:
            database, table = value.split(".", 1)
            return {"database": database, "table": table}
        return {"database": None, "table": value}

    @classmethod
    def parse(cls, value: str) -> "TableParam":
        try:
            return cls.model_validate(value)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid table name: '{value}'") from e

    def resolve(self, default_database: str) -> tuple[str, str]:
        return self.database or default_database, self.table

    def __str__(self):
        if self.database is not None:
            return f"{self.database}.{self.table}"
        return self.table


def ensure_table_created(
    client: "JobClient", table: TableParam, default_database: str
) -> None:
    database, name = table.resolve(default_database)
    logger.debug(f"ensuring table {database}.{name} exists")
    client.ensure_table_exists(database, name)
