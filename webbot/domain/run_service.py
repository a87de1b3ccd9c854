# /webbot/domain/run_service.py
from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass, field

from webbot.config import Settings
from webbot.domain.fetch_bot import FetchBot
from webbot.domain.harvest import harvest
from webbot.ports.http_client import HTTPClientPort
from webbot.ports.storage_sink import StorageSinkPort

LOG = logging.getLogger("run_service")


@dataclass(slots=True)
class RunRequestDTO:
    targets: dict[str, str]
    start: str | None = None
    end: str | None = None
    store: bool = False
    extra_fields: dict[str, tuple[str, str]] = field(default_factory=dict)


async def perform_run(
    req: RunRequestDTO,
    client: HTTPClientPort,
    *,
    settings: Settings,
    sink: StorageSinkPort | None = None,
) -> dict:
    """Fetch every target, then (when markers are given) harvest and optionally store."""
    bot = FetchBot(req.targets, client, settings=settings)
    report = await bot.run()
    out = asdict(report)

    if req.start and req.end:
        items = harvest(
            bot.documents.values(),
            req.start,
            req.end,
            sink if req.store else None,
            include_raw=settings.INCLUDE_RAW_FIELD_VALUES,
        )
        out["harvest"] = [asdict(i) for i in items]

    if req.extra_fields:
        out["fields"] = {
            doc.id: {
                name: asdict(m) if m else None
                for name, m in doc.extract(req.extra_fields, settings.INCLUDE_RAW_FIELD_VALUES).items()
            }
            for doc in bot.documents.values()
        }

    LOG.info(
        "run.done",
        extra={"extra": {"success": report.success, "distinct": report.total_distinct}},
    )
    return out


def targets_from(urls: Mapping[str, str] | list[str]) -> dict[str, str]:
    """A bare URL list gets positional ids ("0", "1", ...)."""
    if isinstance(urls, Mapping):
        return dict(urls)
    return {str(i): u for i, u in enumerate(urls)}
