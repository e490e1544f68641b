"""Command line interface for the Ad Exchange Seller client.

Listing commands print one JSON object per line and follow every page.
``report`` prints the decoded report as JSON, or with ``--csv`` saves
the raw media download to disk.

Exit codes: 0 on success, 1 on client errors, 2 when the server
answered "not modified" to ``--if-none-match``.

Examples
--------
.. code-block:: bash

    adx-seller adclients
    adx-seller adunits ca-pub-123 --include-inactive
    adx-seller report today-7d today --dimension DATE --metric EARNINGS
    adx-seller report 2026-01-01 2026-01-31 --metric CLICKS --csv out.csv
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

import httpx
from pydantic import SecretStr
from pydantic import ValidationError as PydanticValidationError

from . import __version__
from .api import AdExchangeSellerService
from .config import Settings, get_settings
from .exceptions import AdExchangeSellerError, NotModifiedError
from .models.options import (
    AdUnitListOptions,
    GetOptions,
    ListOptions,
    ReportOptions,
    SavedReportListOptions,
    SavedReportOptions,
)
from .utils.http import http_client_manager
from .utils.report_download_handler import ReportDownloadHandler
from .utils.security import setup_secure_logging

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_NOT_MODIFIED = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="adx-seller", description="Ad Exchange Seller API client"
    )
    parser.add_argument("--version", action="version", version=__version__)
    parser.add_argument("--base-url", help="Override ADX_SELLER_BASE_URL")
    parser.add_argument("--token", help="Bearer token (default: ADX_SELLER_ACCESS_TOKEN)")
    parser.add_argument("--timeout", type=float, help="Per-call timeout in seconds")
    parser.add_argument("--fields", help="Partial-response field mask")
    parser.add_argument("--if-none-match", help="Cache-validation tag")

    subparsers = parser.add_subparsers(dest="command", required=True)

    def add_paging(sub: argparse.ArgumentParser) -> None:
        sub.add_argument("--max-results", type=int, help="Page size")
        sub.add_argument("--page-token", help="Resume from a continuation token")
        sub.add_argument("--max-pages", type=int, help="Stop after this many pages")

    sub = subparsers.add_parser("adclients", help="List ad clients")
    add_paging(sub)

    sub = subparsers.add_parser("adunits", help="List ad units of an ad client")
    sub.add_argument("ad_client_id")
    sub.add_argument("--custom-channel", help="Only ad units in this custom channel")
    sub.add_argument("--include-inactive", action="store_true", default=None)
    add_paging(sub)

    sub = subparsers.add_parser("customchannels", help="List custom channels")
    sub.add_argument("ad_client_id")
    sub.add_argument("--ad-unit", help="Only custom channels containing this ad unit")
    add_paging(sub)

    sub = subparsers.add_parser("urlchannels", help="List URL channels")
    sub.add_argument("ad_client_id")
    add_paging(sub)

    sub = subparsers.add_parser("savedreports", help="List saved reports")
    add_paging(sub)

    sub = subparsers.add_parser("report", help="Generate a report")
    sub.add_argument("start_date", nargs="?")
    sub.add_argument("end_date", nargs="?")
    sub.add_argument("--saved", metavar="SAVED_REPORT_ID", help="Run a saved report")
    sub.add_argument("--dimension", action="append", dest="dimensions")
    sub.add_argument("--metric", action="append", dest="metrics")
    sub.add_argument("--filter", action="append", dest="filters")
    sub.add_argument("--sort", action="append")
    sub.add_argument("--locale")
    sub.add_argument("--max-results", type=int)
    sub.add_argument("--start-index", type=int)
    sub.add_argument(
        "--csv",
        nargs="?",
        const="",
        metavar="OUT",
        help="Save the raw download; without OUT it goes to ADX_SELLER_DOWNLOAD_DIR",
    )
    return parser


def _options_kwargs(args: argparse.Namespace, *names: str) -> dict:
    kwargs = {"field_mask": args.fields, "if_none_match": args.if_none_match}
    for name in names:
        kwargs[name] = getattr(args, name, None)
    return {k: v for k, v in kwargs.items() if v is not None}


def _print_json(document) -> None:
    print(json.dumps(document, sort_keys=False))


async def _list_command(service: AdExchangeSellerService, args: argparse.Namespace) -> None:
    paging = ("max_results", "page_token")
    if args.command == "adclients":
        pages = service.adclients.pages(
            ListOptions(**_options_kwargs(args, *paging)), max_pages=args.max_pages
        )
    elif args.command == "adunits":
        options = AdUnitListOptions(**_options_kwargs(args, *paging, "include_inactive"))
        if args.custom_channel:
            pages = service.customchannels.adunits.pages(
                args.ad_client_id, args.custom_channel, options, max_pages=args.max_pages
            )
        else:
            pages = service.adunits.pages(args.ad_client_id, options, max_pages=args.max_pages)
    elif args.command == "customchannels":
        options = ListOptions(**_options_kwargs(args, *paging))
        if args.ad_unit:
            pages = service.adunits.customchannels.pages(
                args.ad_client_id, args.ad_unit, options, max_pages=args.max_pages
            )
        else:
            pages = service.customchannels.pages(
                args.ad_client_id, options, max_pages=args.max_pages
            )
    elif args.command == "urlchannels":
        pages = service.urlchannels.pages(
            args.ad_client_id,
            ListOptions(**_options_kwargs(args, *paging)),
            max_pages=args.max_pages,
        )
    else:
        pages = service.reports.saved.pages(
            SavedReportListOptions(**_options_kwargs(args, *paging)),
            max_pages=args.max_pages,
        )

    async for page in pages:
        for item in page.items:
            _print_json(item.to_api_dict())


async def _report_command(
    service: AdExchangeSellerService, args: argparse.Namespace, settings: Settings
) -> None:
    window = ("locale", "max_results", "start_index")
    if args.saved:
        options = SavedReportOptions(**_options_kwargs(args, *window))
        report = await service.reports.saved.generate(args.saved, options)
        _print_json(report.to_api_dict())
        return

    options = ReportOptions(
        **_options_kwargs(args, *window, "dimensions", "metrics", "filters", "sort")
    )
    if args.csv is None:
        report = await service.reports.generate(args.start_date, args.end_date, options)
        _print_json(report.to_api_dict())
        return

    download = await service.reports.download(args.start_date, args.end_date, options)
    handler = ReportDownloadHandler(
        Path(settings.download_dir) if settings.download_dir else None
    )
    path = await handler.save(
        download,
        metadata={"start_date": args.start_date, "end_date": args.end_date},
        path=Path(args.csv) if args.csv else None,
    )
    print(path)


async def run(
    args: argparse.Namespace,
    settings: Settings,
    client: Optional[httpx.AsyncClient] = None,
) -> None:
    """Execute one parsed command against the API."""
    try:
        async with AdExchangeSellerService.from_settings(settings, client=client) as service:
            if args.command == "report":
                await _report_command(service, args, settings)
            else:
                await _list_command(service, args)
    finally:
        await http_client_manager.close_all()


def main(
    argv: Optional[List[str]] = None, client: Optional[httpx.AsyncClient] = None
) -> int:
    """Run the ``adx-seller`` command.

    :param argv: Arguments without the program name; defaults to ``sys.argv``
    :param client: Optional injected HTTP client
    :return: Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.command == "report" and not args.saved:
        if not (args.start_date and args.end_date):
            parser.error("report requires START_DATE and END_DATE unless --saved is given")

    settings = get_settings()
    updates = {}
    if args.base_url:
        updates["base_url"] = args.base_url if args.base_url.endswith("/") else args.base_url + "/"
    if args.token:
        updates["access_token"] = SecretStr(args.token)
    if args.timeout:
        updates["timeout"] = args.timeout
    if updates:
        settings = settings.model_copy(update=updates)

    setup_secure_logging(level=settings.log_level)
    logger.debug("Running %s", args.command)

    try:
        asyncio.run(run(args, settings, client=client))
    except NotModifiedError as e:
        logger.info("Not modified (etag %s)", e.etag)
        return EXIT_NOT_MODIFIED
    except AdExchangeSellerError as e:
        print(f"error: {e.message}", file=sys.stderr)
        return EXIT_ERROR
    except PydanticValidationError as e:
        print(f"error: invalid arguments: {e}", file=sys.stderr)
        return EXIT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
