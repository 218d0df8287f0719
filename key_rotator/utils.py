"""
key_rotator.utils
-----------------
Small helpers for base64 handling and parsing of
comma separated name lists coming from environment variables or events.
"""

from __future__ import annotations
import base64
from typing import Iterable, Tuple, Union


def b64e(b: bytes) -> str:
    return base64.b64encode(b).decode("ascii")


def b64d(s: str) -> bytes:
    return base64.b64decode(s.encode("ascii"))


def parse_name_list(value: Union[str, Iterable[str], None]) -> Tuple[str, ...]:
    """
    Normalize "repo-a, repo-b" or ["repo-a", "repo-b"] into a tuple of
    stripped, non-empty names. Order is kept, duplicates dropped.
    """
    if not value:
        return ()
    items = value.split(",") if isinstance(value, str) else value
    names = []
    for item in items:
        name = str(item).strip()
        if name and name not in names:
            names.append(name)
    return tuple(names)
