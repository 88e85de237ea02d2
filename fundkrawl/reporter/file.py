# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import io
from pathlib import Path

from fundkrawl.reporter import Reporter, Status


class FileReporter(Reporter):
    """Writes one line per crawled manifest to a file."""

    def __init__(self, path: Path) -> None:
        super().__init__()
        self._file: io.TextIOWrapper | None = None
        self._open(path)

    def add(self, manifest_url: str, status: Status, reasons: list[str] | None = None) -> None:
        match status:
            case Status.OK:
                line = f"{str(status):<8}: {manifest_url}\n"
            case Status.FAILED:
                line = f"{str(status):<8}: {manifest_url} : {', '.join(reasons or [])}\n"
            case _:
                raise ValueError(f"unknown status: {status}")
        self._file.write(line)

    def close(self) -> None:
        if self._file and not self._file.closed:
            self._file.close()

    def _open(self, path: Path):
        if path.exists() and not path.is_file():
            raise OSError(f"'{path}' is not a file")
        self._file = path.open("w")
