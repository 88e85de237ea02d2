# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import re
from urllib.parse import urlparse

import validators

from fundkrawl.errors import NotOverriddenError
from fundkrawl.model.manifest import Manifest

WELL_KNOWN_PATH = "/.well-known/funding-manifest-urls"

_guid_pattern = re.compile(r"^[a-z0-9][a-z0-9-]*$")


@validators.utils.validator
def is_guid(value):
    """Return whether or not given value is a lower-case, dash separated identifier."""
    return isinstance(value, str) and bool(_guid_pattern.match(value))


@validators.utils.validator
def is_well_known_of(value, url):
    """Return whether or not given value is the disclosure list location
    belonging to the domain of `url`."""
    if not isinstance(value, str) or not isinstance(url, str):
        return False
    well_known = urlparse(value)
    return (well_known.hostname is not None and well_known.hostname == urlparse(url).hostname
            and well_known.path.endswith(WELL_KNOWN_PATH))


def same_host(url_a: str, url_b: str) -> bool:
    return urlparse(url_a).hostname == urlparse(url_b).hostname


class Validator:
    """Checks a manifest against a schema.

    Implementations must not do any network I/O.
    """

    def validate(self, manifest: Manifest) -> tuple[Manifest, list[str] | None]:
        """Validate and normalize the given manifest.

        Returns:
            tuple(Manifest, list[str] | None): The normalized manifest and
                None, or the manifest as far as it got and the reasons why it
                is invalid.
        """
        raise NotOverriddenError()
