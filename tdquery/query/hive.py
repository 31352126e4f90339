from typing import ClassVar, Literal

from .base import Engine
from .table import TableParam


class HiveEngine(Engine):
    name: Literal["hive"] = "hive"
    precreate: ClassVar[dict[str, bool]] = {
        "insert_into": True,
        "create_table": True,
    }

    @staticmethod
    def escape_ident(ident: str) -> str:
        return "`" + ident.replace("`", "``") + "`"

    def insert_into_command(self, table: TableParam) -> str:
        return "INSERT INTO TABLE " + self.escape_table_name(table)

    def create_table_command(self, table: TableParam) -> str:
        return "INSERT OVERWRITE TABLE " + self.escape_table_name(table)
