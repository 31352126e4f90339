import re
from typing import ClassVar, Literal

from .base import Engine
from .table import TableParam


PLAIN_IDENT = re.compile(r"[a-z_][a-z0-9_]*")

RESERVED_WORDS = frozenset(
    """
    alter and as between by case cast constraint create cross cube
    current_date current_time current_timestamp deallocate delete describe
    distinct drop else end escape except execute exists extract false for
    from full group grouping having in inner insert intersect into is join
    left like localtime localtimestamp natural normalize not null on or
    order outer prepare recursive right rollup select table then true
    uescape union unnest using values when where with
    """.split()
)


class PrestoEngine(Engine):
    name: Literal["presto"] = "presto"
    precreate: ClassVar[dict[str, bool]] = {
        "insert_into": True,
        "create_table": False,
    }

    @staticmethod
    def escape_ident(ident: str) -> str:
        if PLAIN_IDENT.fullmatch(ident) and ident not in RESERVED_WORDS:
            return ident
        return '"' + ident.replace('"', '""') + '"'

    def insert_into_command(self, table: TableParam) -> str:
        return "INSERT INTO " + self.escape_table_name(table)

    def create_table_command(self, table: TableParam) -> str:
        # TODO: create into a temporary table and rename it to make the swap atomic
        name = self.escape_table_name(table)
        return f"DROP TABLE IF EXISTS {name};\nCREATE TABLE {name} AS"
