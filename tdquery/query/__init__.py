from typing import Annotated, TypeAlias, Union

from pydantic import Field, TypeAdapter, ValidationError

from .base import Engine
from .hive import HiveEngine
from .presto import PrestoEngine
from .statement import insert_command_statement
from .table import TableParam, ensure_table_created
from ..exceptions import ConfigurationError

# Discriminated union of all engines
EngineType: TypeAlias = Annotated[
    Union[PrestoEngine, HiveEngine], Field(discriminator="name")
]

ENGINE_NAMES = ("hive", "presto")


def parse_engine(name: str) -> Engine:
    try:
        return TypeAdapter(EngineType).validate_python({"name": name})
    except ValidationError:
        raise ConfigurationError(
            f"Unknown 'engine:' option (available options are: "
            f"{' and '.join(ENGINE_NAMES)}): {name}"
        ) from None
