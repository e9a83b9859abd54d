"""Candidate list loading and normalisation."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable

from ..config.models import DEFAULT_SUFFIX
from ..errors import NoInputError


def normalise_identifier(raw: str, suffix: str = DEFAULT_SUFFIX) -> str | None:
    """Return the suffix-qualified identifier, or ``None`` for blank input."""

    name = raw.strip()
    if not name:
        return None
    if not name.endswith(suffix):
        name = name + suffix
    return name


def load_identifiers(lines: Iterable[str], suffix: str = DEFAULT_SUFFIX) -> list[str]:
    """Normalise raw lines into identifiers, keeping first-seen order.

    Duplicates are kept; the output sink is what guarantees unique lines.
    """

    identifiers: list[str] = []
    for line in lines:
        identifier = normalise_identifier(line, suffix)
        if identifier is not None:
            identifiers.append(identifier)
    if not identifiers:
        raise NoInputError("No identifiers found in input")
    return identifiers


def read_identifiers(path: Path, suffix: str = DEFAULT_SUFFIX) -> list[str]:
    """Load identifiers from a newline-delimited UTF-8 file.

    ``OSError`` from opening or reading the file propagates unchanged; bytes
    that are not UTF-8 are reported as an ``OSError`` too.
    """

    try:
        with path.open("r", encoding="utf-8") as stream:
            return load_identifiers(stream, suffix)
    except UnicodeDecodeError as exc:
        raise OSError(f"{path} is not valid UTF-8: {exc.reason} at byte {exc.start}") from exc


def strip_suffix(identifier: str, suffix: str = DEFAULT_SUFFIX) -> str:
    """Return the bare label the registrar expects (``alice.eth`` -> ``alice``)."""

    if identifier.endswith(suffix):
        return identifier[: -len(suffix)]
    return identifier


__all__ = ["load_identifiers", "normalise_identifier", "read_identifiers", "strip_suffix"]
