# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from pathlib import Path

from fundkrawl.cli.command import KrawlCommand
from fundkrawl.config import BASE_SCHEMA
from fundkrawl.errors import KrawlerError, SchemaError


class ValidateManifestCommand(KrawlCommand):
    """Validate a local funding.json file. Non-zero return codes indicate an error.

    manifest
        {file : Manifest file to validate}
        {--u|url= : URL the manifest is (to be) published at}
        {--p|check-provenance : Also check the .well-known lists of all URLs (needs --url)}
        {--q|quiet : Do not print reasons in case of invalid manifest}
    """

    def __init__(self):
        super().__init__()
        # fetching options are needed for the provenance checks
        self._add_options_from_schema(schema=BASE_SCHEMA)

    def handle(self):
        path = Path(self.argument("file"))
        manifest_url = self.option("url") or ""
        check_provenance = self.option("check-provenance")
        quiet = self.option("quiet")

        if not path.is_file():
            raise FileNotFoundError(f"'{path}' doesn't exist or is not a file")
        if check_provenance and not manifest_url:
            raise ValueError("--check-provenance requires --url")

        try:
            with self._create_crawler(self._load_config()) as crawler:
                crawler.parse_manifest(path.read_bytes(), manifest_url, check_provenance=check_provenance)
        except KrawlerError as err:
            if not quiet:
                for reason in err.reasons if isinstance(err, SchemaError) else [str(err)]:
                    self.line(reason)
            return 1

        return 0
