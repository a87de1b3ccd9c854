# /webbot/domain/document.py
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass

from webbot.domain.extractor import FieldMatch, extract_fields, find_between, find_field
from webbot.domain.http_response import HttpResponse


@dataclass(frozen=True, slots=True)
class Document:
    """One fetched target: the response plus the caller's identifier for it."""

    response: HttpResponse
    id: str

    @property
    def url(self) -> str:
        return self.response.url

    @property
    def success(self) -> bool:
        return self.response.success

    def find_between(self, start: str, end: str) -> str | None:
        return find_between(self.response.text, start, end)

    def find_field(self, start: str, end: str, include_raw: bool = False) -> FieldMatch | None:
        return find_field(self.response.text, start, end, include_raw)

    def extract(
        self, fields: Mapping[str, tuple[str, str]], include_raw: bool = False
    ) -> dict[str, FieldMatch | None]:
        return extract_fields(self.response.text, fields, include_raw)
