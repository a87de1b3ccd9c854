# /webbot/adapters/cli.py
from __future__ import annotations

import argparse
import asyncio
import json
import logging
import re
import sys

from webbot.config import Settings, settings as default_settings
from webbot.adapters.http.aiohttp_client import AiohttpClient
from webbot.adapters.storage.file_store import FileStore
from webbot.adapters.system.logging_cfg import configure_logger
from webbot.domain.run_service import RunRequestDTO, perform_run

LOG = logging.getLogger("adapter.cli")

_PLAIN_ID = re.compile(r"^\w[\w-]*$")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="webbot", description="Fetch pages and pull text between two markers.")
    p.add_argument("urls", nargs="+", help="URL, or ID=URL to name the target")
    p.add_argument("--start", help="start marker, e.g. '<title>'")
    p.add_argument("--end", help="end marker, e.g. '</title>'")
    p.add_argument("--store", action="store_true", help="write matches to STORE_DIR")
    p.add_argument("--store-dir", help="override STORE_DIR")
    p.add_argument("--delay", type=float, help="seconds between fetches")
    p.add_argument("--timeout", type=float, help="per-request timeout in seconds")
    p.add_argument("--https", action="store_true", help="use https:// for URLs without a scheme")
    p.add_argument("--raw", action="store_true", help="include the raw matched span")
    return p


def parse_targets(items: list[str]) -> dict[str, str]:
    targets: dict[str, str] = {}
    for i, item in enumerate(items):
        ident, sep, url = item.partition("=")
        # only a plain word before '=' is an id; 'site.com?q=1' is a URL
        if sep and _PLAIN_ID.match(ident):
            targets[ident] = url
        else:
            targets[str(i)] = item
    return targets


def settings_from(args: argparse.Namespace, base: Settings) -> Settings:
    overrides: dict = {}
    if args.store_dir:
        overrides["STORE_DIR"] = args.store_dir
    if args.delay is not None:
        overrides["DELAY_BETWEEN_FETCHES_SECONDS"] = args.delay
    if args.timeout is not None:
        overrides["DEFAULT_TIMEOUT_SECONDS"] = args.timeout
    if args.https:
        overrides["FORCE_HTTPS"] = True
    if args.raw:
        overrides["INCLUDE_RAW_FIELD_VALUES"] = True
    return base.model_copy(update=overrides)


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if (args.start is None) != (args.end is None):
        parser.error("--start and --end go together")

    cfg = settings_from(args, default_settings)
    configure_logger(cfg.LOG_LEVEL, stream=sys.stderr)
    req = RunRequestDTO(targets=parse_targets(args.urls), start=args.start, end=args.end, store=args.store)

    async def _run() -> dict:
        client = AiohttpClient(cfg)
        try:
            return await perform_run(req, client, settings=cfg, sink=FileStore(cfg.STORE_DIR))
        finally:
            await client.close()

    result = asyncio.run(_run())
    json.dump(result, sys.stdout, indent=2, default=str)
    sys.stdout.write("\n")
    return 0 if result["success"] else 1
