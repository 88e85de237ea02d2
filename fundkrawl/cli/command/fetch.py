# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from pathlib import Path

from clikit.api.args.format import Option

from fundkrawl.cli.command import KrawlCommand
from fundkrawl.config import BASE_SCHEMA
from fundkrawl.errors import KrawlerError, SchemaError
from fundkrawl.log import get_child_logger
from fundkrawl.reporter import Status
from fundkrawl.reporter.dummy import DummyReporter
from fundkrawl.reporter.file import FileReporter

log = get_child_logger("fetch")


class FetchCommand(KrawlCommand):
    """Fetches funding.json manifests, validates them and checks their provenance.

    fetch
        {url* : URLs of the manifests to fetch}
    """

    def __init__(self):
        super().__init__()
        self._config.add_option(
            long_name="report",
            flags=Option.REQUIRED_VALUE,
            description="Path of reporting file",
        )
        self._add_options_from_schema(schema=BASE_SCHEMA)

    def handle(self):
        report_path = Path(self.option("report")) if self.option("report") else None
        config = self._load_config()
        reporter = FileReporter(report_path) if report_path else DummyReporter()

        failures = 0
        with self._create_crawler(config) as crawler, reporter:
            for url in self.argument("url"):
                try:
                    manifest = crawler.fetch_manifest(url)
                except KrawlerError as err:
                    reasons = err.reasons if isinstance(err, SchemaError) else [str(err)]
                    reporter.add(url, Status.FAILED, reasons)
                    log.info("Skipping manifest '%s' because: %s", url, reasons[0])
                    failures = failures + 1
                    continue
                reporter.add(url, Status.OK)
                self.line(f"{url}: {len(manifest.projects)} project(s), {len(manifest.funding.plans)} plan(s)")

        if failures > 0:
            raise SystemExit(min(failures, 255))
