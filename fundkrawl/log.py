# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import logging
import logging.config

app_logger = logging.getLogger("fundkrawl")

COLORED_FORMAT = "<info>%(asctime)s</info> | <c1>%(levelname)-7s</c1> | <c2>%(name)s</c2> | %(message)s"

# number of '-v' flags -> level of the application logger
_VERBOSITY_LEVELS = ["error", "warning", "info", "debug"]


def verbosity_to_level(verbosity: int) -> str:
    return _VERBOSITY_LEVELS[max(0, min(verbosity, len(_VERBOSITY_LEVELS) - 1))]


def configure_logger(level: str, format: str, error_stream) -> None:
    # NOTE According to <https://clig.dev/#the-basics>,
    #      all logging goes to stderr; stdout is reserved for results.
    logging_config = {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "message_only": {
                "format": format
            },
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "formatter": "message_only",
                "stream": error_stream
            },
        },
        "loggers": {
            "fundkrawl": {
                "level": level.upper(),
                "propagate": True
            }
        },
        "root": {
            "handlers": ["stderr"],
            "level": "ERROR",
        },
    }
    logging.config.dictConfig(logging_config)


def get_child_logger(suffix: str) -> logging.Logger:
    return app_logger.getChild(suffix)
