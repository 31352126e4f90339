from pathlib import Path
import os


def expand(path: Path | str) -> Path:
    """
    Fully expand and resolve the Path with the given environment variables.
    """
    path = Path(path)
    return Path(os.path.expandvars(path)).expanduser().resolve()


def resolve_within(base: Path, relative: Path | str) -> Path:
    """
    Resolve ``relative`` against ``base`` and make sure the result does not
    leave ``base``.
    """
    base = expand(base)
    resolved = (base / os.path.expandvars(relative)).resolve()
    if not resolved.is_relative_to(base):
        raise ValueError(f"{relative} is outside of {base}")
    return resolved
