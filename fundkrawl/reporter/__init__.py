# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from enum import StrEnum

from fundkrawl.errors import NotOverriddenError


class Status(StrEnum):
    OK = "ok"
    FAILED = "failed"

    def __str__(self) -> str:
        return self.name


class Reporter:
    """Interface for creating a crawl report, one entry per manifest URL."""

    def add(self, manifest_url: str, status: Status, reasons: list[str] | None = None) -> None:
        raise NotOverriddenError()

    def close(self) -> None:
        """Closes the underlying resources."""
        raise NotOverriddenError()

    def __enter__(self) -> Reporter:
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()
