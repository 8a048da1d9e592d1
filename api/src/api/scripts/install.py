"""Seed legal pages and settings defaults."""

from __future__ import annotations

import argparse
import asyncio
import logging
import sys

from legalnotices.config import get_settings
from legalnotices.database import close_engine, get_session
from legalnotices.i18n import get_language_catalog
from legalnotices.services.install import InstallReport, install_defaults


async def run_install(*, force: bool) -> InstallReport:
    try:
        async with get_session() as db:
            return await install_defaults(db, get_language_catalog(), force=force)
    finally:
        await close_engine()


def _parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Install Legal Notices default pages and settings.")
    parser.add_argument(
        "--force",
        action="store_true",
        help="Purge existing pages and settings and reseed every default.",
    )
    return parser


def main() -> None:
    args = _parser().parse_args()
    logging.basicConfig(
        level=getattr(logging, get_settings().log_level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
        stream=sys.stdout,
    )
    report = asyncio.run(run_install(force=bool(args.force)))
    print(
        "legalnotices-install:",
        f"pages_changed={report.pages_changed}",
        f"settings_changed={report.settings_changed}",
        f"page_count={report.page_count}",
        "(forced)" if args.force else "",
    )


if __name__ == "__main__":
    main()
