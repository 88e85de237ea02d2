# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from pathlib import Path

from fundkrawl.cli.command import KrawlCommand
from fundkrawl.config import BASE_SCHEMA, MergingConfigLoader, YamlFileConfigLoader
from fundkrawl.errors import ConfigError


class ValidateConfigCommand(KrawlCommand):
    """Validate a given configuration. Non-zero return codes indicate an error.

    config
        {file : Config file to validate}
        {--q|quiet : Do not print reasons in case of invalid config}
    """

    def handle(self):
        path = Path(self.argument("file"))
        quiet = self.option("quiet")

        if not path.is_file():
            raise FileNotFoundError(f"'{path}' doesn't exist or is not a file")

        try:
            MergingConfigLoader(BASE_SCHEMA, YamlFileConfigLoader(BASE_SCHEMA, path)).load()
        except ConfigError as err:
            if not quiet:
                for reason in err.reasons:
                    self.line(reason)
            return 1

        return 0
