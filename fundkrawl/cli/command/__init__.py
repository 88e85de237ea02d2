# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import re
from collections.abc import Mapping

from cleo import Command
from clikit.api.args.format import Option

from fundkrawl.config import (BASE_SCHEMA, CliConfigLoader, Config, MergingConfigLoader, YamlFileConfigLoader,
                              effective_config_info, iterate_schema)
from fundkrawl.crawl import Crawler
from fundkrawl.fetcher import FetchConfig, Fetcher
from fundkrawl.log import get_child_logger
from fundkrawl.validator.v1 import V1Validator

log = get_child_logger("cli")


class KrawlCommand(Command):

    def _load_config(self) -> Config:
        cli_options = self._get_options_from_schema(BASE_SCHEMA)

        # the order specifies the priority of the options (CLI before file)
        cli_config_loader = CliConfigLoader(BASE_SCHEMA, cli_options)
        yaml_config_loader = YamlFileConfigLoader(BASE_SCHEMA, self.option("config"))
        config = MergingConfigLoader(BASE_SCHEMA, cli_config_loader, yaml_config_loader).load()

        for line in effective_config_info(config):
            log.debug("config: %s", line)
        return config

    def _create_crawler(self, config: Config) -> Crawler:
        fetcher = Fetcher(FetchConfig.from_config(config))
        return Crawler(fetcher, V1Validator())

    @staticmethod
    def _normalize_option_name(name: str) -> str:
        return re.sub(r"[^a-z0-9]", "-", name)

    def _add_options_from_schema(self, schema: Mapping) -> None:
        for _, rule in iterate_schema(schema):
            meta = rule.get("meta", {})
            long_name = meta.get("long_name")
            if not long_name:
                continue
            self._config.add_option(
                long_name=self._normalize_option_name(long_name),
                flags=Option.NO_VALUE if rule.get("type") == "boolean" else Option.REQUIRED_VALUE,
                description=meta.get("description"),
            )

    def _get_options_from_schema(self, schema: Mapping) -> Config:
        options = Config()
        for key_path, rule in iterate_schema(schema):
            long_name = rule.get("meta", {}).get("long_name")
            if long_name:
                options[key_path] = self.option(self._normalize_option_name(long_name))
        return options
