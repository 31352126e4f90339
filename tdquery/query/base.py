import abc
from typing import ClassVar, Literal

from pydantic import BaseModel

from .table import TableParam


WriteMode = Literal["insert_into", "create_table"]


class Engine(abc.ABC, BaseModel):
    """
    A query engine of the job service. Each engine knows how to quote
    identifiers and how to write a query result into a table.
    """

    name: str

    # whether the target has to exist before the statement runs
    precreate: ClassVar[dict[str, bool]]

    @staticmethod
    @abc.abstractmethod
    def escape_ident(ident: str) -> str: ...

    @abc.abstractmethod
    def insert_into_command(self, table: TableParam) -> str: ...

    @abc.abstractmethod
    def create_table_command(self, table: TableParam) -> str: ...

    def escape_table_name(self, table: TableParam) -> str:
        if table.database is not None:
            return self.escape_ident(table.database) + "." + self.escape_ident(table.table)
        return self.escape_ident(table.table)

    def needs_precreated_table(self, mode: WriteMode) -> bool:
        return self.precreate[mode]

    def write_command(self, mode: WriteMode, table: TableParam) -> str:
        if mode == "insert_into":
            return self.insert_into_command(table)
        return self.create_table_command(table)
