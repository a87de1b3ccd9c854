# /webbot/domain/extractor.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class FieldMatch:
    value: str
    raw: str | None = None  # start + value + end, only when raw values are requested


def find_between(text: str, start: str, end: str) -> str | None:
    """
    Substring strictly between the first ``start`` and the next ``end`` after it.
    None when either marker is missing (an ``end`` before ``start`` does not count).
    """
    if not start or not end:
        return None
    i = text.find(start)
    if i < 0:
        return None
    i += len(start)
    j = text.find(end, i)
    if j < 0:
        return None
    return text[i:j]


def find_field(text: str, start: str, end: str, include_raw: bool = False) -> FieldMatch | None:
    value = find_between(text, start, end)
    if value is None:
        return None
    return FieldMatch(value=value, raw=f"{start}{value}{end}" if include_raw else None)


def extract_fields(
    text: str,
    fields: Mapping[str, tuple[str, str]],
    include_raw: bool = False,
) -> dict[str, FieldMatch | None]:
    """``{"title": ("<title>", "</title>")}`` -> ``{"title": FieldMatch(...) | None}``"""
    return {name: find_field(text, start, end, include_raw) for name, (start, end) in fields.items()}
