# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from fundkrawl.model.manifest import Manifest


class KrawlerError(Exception):
    pass


class ConfigError(KrawlerError):

    def __init__(self, msg: str, reasons: list[str]) -> None:
        super().__init__(msg)
        self.reasons = reasons


class NotOverriddenError(KrawlerError, NotImplementedError):
    pass


class FetcherError(KrawlerError):
    """A request failed on the transport level (DNS, connect, timeout, read)."""

    def __init__(self, msg: str, url: str) -> None:
        super().__init__(msg)
        self.url = url


class HTTPStatusError(FetcherError):
    """The server answered with something other than 200. Never retried."""

    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"{url} returned {status_code}", url)
        self.status_code = status_code


class ParserError(KrawlerError):
    pass


class SchemaError(KrawlerError):
    """The manifest did not pass schema validation.

    `manifest` is whatever the validator handed back, possibly only partially
    normalized."""

    def __init__(self, msg: str, reasons: list[str], manifest: Manifest | None = None) -> None:
        super().__init__(msg)
        self.reasons = reasons
        self.manifest = manifest


class ProvenanceError(KrawlerError):
    pass


class ManifestNotListed(ProvenanceError):
    pass


class WellKnownListTooLarge(ProvenanceError):
    pass
