import json
from typing import Any, Iterable, Protocol


DELIMITER_CHAR = ","
ESCAPE_CHAR = '"'
QUOTE_CHAR = '"'
LINE_END = "\r\n"


class TextSink(Protocol):
    def write(self, s: str, /) -> Any: ...


def escape_and_quote_csv_value(v: str) -> str:
    if not v:
        return QUOTE_CHAR + QUOTE_CHAR

    escaped = []
    previous_char = " "
    require_quote = False

    for c in v:
        if c == QUOTE_CHAR:
            escaped.append(ESCAPE_CHAR)
            escaped.append(c)
            require_quote = True
        elif c == "\r":
            escaped.append("\n")
            require_quote = True
        elif c == "\n":
            # CRLF was already written as a single \n
            if previous_char != "\r":
                escaped.append("\n")
                require_quote = True
        elif c == DELIMITER_CHAR:
            escaped.append(c)
            require_quote = True
        else:
            escaped.append(c)
        previous_char = c

    text = "".join(escaped)
    if require_quote:
        return QUOTE_CHAR + text + QUOTE_CHAR
    return text


def csv_value_text(value: Any) -> str:
    """Text of one field. Strings are escaped, None is an empty field, anything else is JSON."""
    if isinstance(value, str):
        return escape_and_quote_csv_value(value)
    if value is None:
        return ""
    return escape_and_quote_csv_value(
        json.dumps(value, separators=(",", ":"), ensure_ascii=False, default=str)
    )


def add_csv_header(out: TextSink, column_names: Iterable[str]) -> None:
    out.write(
        DELIMITER_CHAR.join(escape_and_quote_csv_value(c) for c in column_names)
        + LINE_END
    )


def add_csv_row(out: TextSink, row: Iterable[Any]) -> None:
    out.write(DELIMITER_CHAR.join(csv_value_text(v) for v in row) + LINE_END)
