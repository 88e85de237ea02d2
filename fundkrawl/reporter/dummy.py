# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from fundkrawl.reporter import Reporter, Status


class DummyReporter(Reporter):
    """Reporter that does nothing"""

    def add(self, manifest_url: str, status: Status, reasons: list[str] | None = None) -> None:
        pass

    def close(self) -> None:
        pass
