import re


# "-- DIGDAG_INSERT_LINE" at the start of the query or of any line.
# The marker line ends before the next line terminator.
INSERT_LINE_PATTERN = re.compile(r"(\A|\r?\n)--\s*DIGDAG_INSERT_LINE[^\r\n]*")

# one or more contiguous "--" lines at the head of the query, then the rest
HEADER_COMMENT_BLOCK_PATTERN = re.compile(
    r"\A([\r\n\t]*(?:(?:\A|\n)--[^\n]*)+)\n?(.*)\Z", re.DOTALL
)


def insert_command_statement(command: str, original: str) -> str:
    """
    Combine a control statement (INSERT INTO ..., CREATE TABLE ... AS) with a
    user query.

    Job lists of the service show the first lines of a statement, so the
    command goes where it hides the least of what the user wrote:

    1. in place of a ``-- DIGDAG_INSERT_LINE`` line,
    2. after the leading block of ``--`` comment lines,
    3. otherwise in front of the query.

    This is plain text matching. Comment syntax inside string literals or
    block comments is not recognized.
    """
    ml = INSERT_LINE_PATTERN.search(original)
    if ml:
        return original[: ml.start()] + ml.group(1) + command + original[ml.end() :]

    mc = HEADER_COMMENT_BLOCK_PATTERN.match(original)
    if mc:
        return mc.group(1) + "\n" + command + "\n" + mc.group(2)

    return command + "\n" + original
