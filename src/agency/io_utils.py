from __future__ import annotations

from pathlib import Path
from typing import IO, Union

from .errors import ResourceUnavailable

PathLike = Union[str, Path]


def read_text(source: Union[PathLike, IO[str]]) -> str:
    """Read a whole text resource, either a path or an open readable stream."""
    if hasattr(source, "read"):
        try:
            return source.read()  # type: ignore[union-attr]
        except (OSError, ValueError) as e:
            raise ResourceUnavailable(f"Could not read stream: {e}") from e

    p = Path(source)  # type: ignore[arg-type]
    if not p.is_file():
        raise ResourceUnavailable(f"Could not open file {p}")
    try:
        return p.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ResourceUnavailable(f"Could not read file {p}: {e}") from e
