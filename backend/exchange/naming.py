"""Filename sanitization for names that come from clients."""

import re
from pathlib import Path

from exchange.errors import InvalidFileName

# Both separators are stripped regardless of host OS: a Windows client
# may send "C:\\Users\\me\\photo.jpg" as the declared name.
_SEPARATORS = re.compile(r"[\\/]+")


def safe_basename(name: str) -> str:
    """
    Reduce a client-supplied name to a bare file name.

    Any directory component is dropped. Names that are still unusable
    afterwards (empty, ``.``, ``..``, or containing NUL) raise InvalidFileName.
    """
    if name is None:
        raise InvalidFileName("missing file name")
    base = _SEPARATORS.split(name.strip())[-1].strip()
    if base in ("", ".", "..") or "\x00" in base:
        raise InvalidFileName(f"unusable file name: {name!r}")
    return base


def display_name(name: str) -> str:
    """Last path component of a client name, control characters escaped, for reports."""
    last = _SEPARATORS.split((name or "").strip())[-1]
    return "".join(
        c if c.isprintable() else c.encode("unicode_escape").decode("ascii")
        for c in last
    )


def is_hidden(name: str) -> bool:
    return name.startswith(".")


def is_servable(name: str) -> bool:
    """
    True when a stored file name survives sanitization unchanged.

    Names that sanitization would rewrite (e.g. ``a\\b.txt`` on POSIX, or
    surrounding spaces) cannot be requested back, so they are not offered.
    """
    if is_hidden(name):
        return False
    try:
        return safe_basename(name) == name
    except InvalidFileName:
        return False


def join_inside(directory: Path, name: str) -> Path:
    """Join a sanitized name to ``directory``, refusing anything that escapes it."""
    base = safe_basename(name)
    path = directory / base
    if path.parent != directory:
        raise InvalidFileName(f"{name!r} escapes {directory}")
    return path
