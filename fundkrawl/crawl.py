# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

from fundkrawl.errors import ManifestNotListed, SchemaError, WellKnownListTooLarge
from fundkrawl.fetcher import Fetcher
from fundkrawl.log import get_child_logger
from fundkrawl.model.manifest import Manifest, URLRef
from fundkrawl.validator import Validator

log = get_child_logger("crawl")

# a disclosure list longer than this is not taken seriously
MAX_WELL_KNOWN_LINES = 100


class Crawler:
    """Fetches funding.json manifests, validates them
    and establishes the provenance of the URLs they claim.

    Args:
        fetcher (Fetcher): Used for the manifests and the disclosure lists.
        validator (Validator): Schema the manifests have to conform to.
    """

    def __init__(self, fetcher: Fetcher, validator: Validator) -> None:
        self._fetcher = fetcher
        self._validator = validator

    def close(self) -> None:
        self._fetcher.close()

    def __enter__(self) -> Crawler:
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()

    def fetch_manifest(self, manifest_url: str) -> Manifest:
        """Fetch a manifest, parse and validate it,
        and check the provenance of all its URLs."""
        body = self._fetcher.fetch(manifest_url)
        return self.parse_manifest(body, manifest_url, check_provenance=True)

    def parse_manifest(self, body: bytes, manifest_url: str, check_provenance: bool = True) -> Manifest:
        """Parse and validate an already retrieved manifest body.

        Raises:
            ParserError: If the body is not a funding.json document.
            SchemaError: If the manifest is invalid; `err.manifest` holds
                the manifest as returned by the validator.
            FetcherError: If a disclosure list could not be fetched.
            ProvenanceError: If a URL's disclosure list does not list the manifest.
        """
        manifest = Manifest.from_json(body)
        manifest.url = manifest_url
        manifest.body = bytes(body)

        manifest, reasons = self._validator.validate(manifest)
        if reasons:
            raise SchemaError(f"invalid manifest {manifest_url}: {reasons[0]}", reasons, manifest=manifest)

        if check_provenance:
            for url_ref in manifest.url_refs():
                self.check_provenance(url_ref, manifest_url)

        return manifest

    def check_provenance(self, url_ref: URLRef, manifest_url: str) -> None:
        """Check that the disclosure list of `url_ref` contains `manifest_url`,
        line by line and byte for byte.

        URLs without a disclosure list are not checked.
        """
        if not url_ref.well_known:
            return

        body = self._fetcher.fetch(url_ref.well_known)

        expected = manifest_url.encode("utf-8")
        for n, line in enumerate(body.split(b"\n"), start=1):
            if line == expected:
                log.debug("%s is listed in %s", manifest_url, url_ref.well_known)
                return
            if n > MAX_WELL_KNOWN_LINES:
                raise WellKnownListTooLarge(f"too many lines in the .well-known list {url_ref.well_known}")

        raise ManifestNotListed(f"manifest URL {manifest_url} was not found in the .well-known list"
                                f" {url_ref.well_known}")
