# /webbot/domain/harvest.py
from __future__ import annotations

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from urllib.parse import quote

from webbot.domain.document import Document
from webbot.ports.storage_sink import StorageSinkPort

LOG = logging.getLogger("harvest")


@dataclass(slots=True)
class HarvestItem:
    id: str
    url: str
    value: str | None
    raw: str | None = None
    stored: bool = False
    path: str | None = None
    error: str | None = None


def data_filename(url: str) -> str:
    return quote(url, safe="") + ".dat"


def harvest(
    documents: Iterable[Document],
    start: str,
    end: str,
    sink: StorageSinkPort | None = None,
    include_raw: bool = False,
) -> list[HarvestItem]:
    """Pull the ``start``...``end`` span out of every document and, given a sink, persist it."""
    items: list[HarvestItem] = []
    for doc in documents:
        match = doc.find_field(start, end, include_raw)
        # an empty span counts as nothing found
        item = HarvestItem(id=doc.id, url=doc.url, value=match.value if match and match.value else None)
        if item.value is None:
            item.error = "Data not found"
            items.append(item)
            continue

        item.raw = match.raw
        if sink is not None:
            result = sink.store(data_filename(doc.url), match.value)
            item.stored, item.path, item.error = result.ok, result.path, result.reason
        items.append(item)

    LOG.info(
        "harvest.done",
        extra={"extra": {"documents": len(items), "found": sum(1 for i in items if i.value is not None)}},
    )
    return items
