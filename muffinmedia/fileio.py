"""Reading and writing whole binary files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def _check_path(path: PathLike) -> Path:
    if not os.fspath(path):
        raise ValueError("path must not be empty")
    return Path(path)


def write_to_bin(path: PathLike, data: bytes) -> int:
    """Write ``data`` to ``path`` as a binary file and return the byte count."""
    target = _check_path(path)
    if not data:
        raise ValueError("data must not be empty")
    with target.open("wb") as handle:
        return handle.write(data)


def read_from_bin(path: PathLike) -> bytes:
    """Return the whole contents of the binary file at ``path``."""
    source = _check_path(path)
    with source.open("rb") as handle:
        return handle.read()