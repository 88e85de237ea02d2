# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
Schema of funding.json v1.0.0 manifests.

Structure, types and value ranges are checked with cerberus;
what can not be expressed in a cerberus schema
(uniqueness of guids, references between plans and channels,
and where a URL's disclosure list lives)
is checked on the normalized manifest afterwards.\
"""

from __future__ import annotations

from collections import Counter
from typing import Any

import validators
from cerberus import Validator as CerberusValidator

from fundkrawl.config import FlatErrorHandler
from fundkrawl.log import get_child_logger
from fundkrawl.model.manifest import Manifest, URLRef
from fundkrawl.validator import WELL_KNOWN_PATH, Validator, is_guid, is_well_known_of, same_host

log = get_child_logger("validator-v1")

VERSION = "v1.0.0"

ENTITY_TYPES = ["individual", "group", "organisation", "other"]
ENTITY_ROLES = ["owner", "steward", "maintainer", "contributor", "other"]
CHANNEL_TYPES = ["bank", "payment-provider", "cheque", "cash", "other"]
PLAN_STATUSES = ["active", "inactive"]
PLAN_FREQUENCIES = ["one-time", "weekly", "fortnightly", "monthly", "yearly", "other"]


def _string(min: int = 0, max: int = 1024, **rules: Any) -> dict:
    return {"type": "string", "coerce": "strip_str", "minlength": min, "maxlength": max, **rules}


def _choice(allowed: list[str]) -> dict:
    return {"type": "string", "coerce": ["strip_str", "lower"], "allowed": allowed}


_GUID = _string(min=3, max=32, check_with="guid")
_CURRENCY = {"type": "string", "coerce": ["strip_str", "upper"], "regex": "^[A-Z]{3}$"}
_AMOUNT = {"type": "number", "min": 0}
_URL_REF = {
    "type": "dict",
    "schema": {
        "url": _string(min=1, check_with="url"),
        "wellKnown": _string(check_with="url_or_empty"),
    },
}

SCHEMA = {
    "version": {"type": "string", "coerce": "strip_str", "allowed": [VERSION]},
    "entity": {
        "type": "dict",
        "schema": {
            "type": _choice(ENTITY_TYPES),
            "role": _choice(ENTITY_ROLES),
            "name": _string(min=2),
            "email": _string(min=3, check_with="email"),
            "phone": _string(max=64),
            "description": _string(min=5, max=10000),
            "webpageUrl": _URL_REF,
        },
    },
    "projects": {
        "type": "list",
        "maxlength": 1000,
        "schema": {
            "type": "dict",
            "schema": {
                "guid": _GUID,
                "name": _string(min=1),
                "description": _string(min=5, max=10000),
                "webpageUrl": _URL_REF,
                "repositoryUrl": _URL_REF,
                "licenses": {
                    "type": "list",
                    "schema": _string(min=1, max=64, regex=r"^spdx:[A-Za-z0-9.+\-]+$"),
                },
                "tags": {
                    "type": "list",
                    "schema": _string(min=2, max=32, regex="^[a-z0-9-]+$"),
                },
            },
        },
    },
    "funding": {
        "type": "dict",
        "schema": {
            "channels": {
                "type": "list",
                "minlength": 1,
                "schema": {
                    "type": "dict",
                    "schema": {
                        "guid": _GUID,
                        "type": _choice(CHANNEL_TYPES),
                        "address": _string(),
                        "description": _string(max=10000),
                    },
                },
            },
            "plans": {
                "type": "list",
                "minlength": 1,
                "schema": {
                    "type": "dict",
                    "schema": {
                        "guid": _GUID,
                        "status": _choice(PLAN_STATUSES),
                        "name": _string(min=1),
                        "description": _string(max=10000),
                        "amount": _AMOUNT,
                        "currency": _CURRENCY,
                        "frequency": _choice(PLAN_FREQUENCIES),
                        "channels": {"type": "list", "minlength": 1, "schema": _GUID},
                    },
                },
            },
            "history": {
                "type": "list",
                "schema": {
                    "type": "dict",
                    "schema": {
                        "year": {"type": "integer", "min": 1900, "max": 2100},
                        "income": _AMOUNT,
                        "expenses": _AMOUNT,
                        "taxes": _AMOUNT,
                        "currency": _CURRENCY,
                        "description": _string(max=10000),
                    },
                },
            },
        },
    },
}


class ManifestSchemaValidator(CerberusValidator):

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.error_handler = FlatErrorHandler()

    def _normalize_coerce_strip_str(self, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        return value

    def _normalize_coerce_lower(self, value: Any) -> Any:
        return value.lower() if isinstance(value, str) else value

    def _normalize_coerce_upper(self, value: Any) -> Any:
        return value.upper() if isinstance(value, str) else value

    def _check_with_url(self, field, value):
        if not validators.url(value):
            self._error(field, f"invalid URL: '{value}'")

    def _check_with_url_or_empty(self, field, value):
        if value:
            self._check_with_url(field, value)

    def _check_with_email(self, field, value):
        if not validators.email(value):
            self._error(field, f"invalid e-mail address: '{value}'")

    def _check_with_guid(self, field, value):
        if not is_guid(value):
            self._error(field, f"invalid guid '{value}', only lower-case letters, digits and '-' are allowed")


def _labelled_url_refs(manifest: Manifest) -> list[tuple[str, URLRef]]:
    refs = [("entity.webpageUrl", manifest.entity.webpage_url)]
    for n, project in enumerate(manifest.projects):
        refs.append((f"projects.{n}.webpageUrl", project.webpage_url))
        refs.append((f"projects.{n}.repositoryUrl", project.repository_url))
    return refs


def _duplicates(title: str, guids: list[str]) -> list[str]:
    return [f"duplicate {title} guid '{guid}'" for guid, count in Counter(guids).items() if count > 1]


class V1Validator(Validator):
    """Validates and normalizes funding.json v1.0.0 manifests."""

    def validate(self, manifest: Manifest) -> tuple[Manifest, list[str] | None]:
        validator = ManifestSchemaValidator(SCHEMA, purge_unknown=True)
        if not validator.validate(manifest.to_dict()):
            reasons = [f"invalid field '{'.'.join(str(p) for p in e['path'])}': {e['msg']}" for e in validator.errors]
            return manifest, reasons

        normalized = Manifest.from_dict(validator.document)
        normalized.url = manifest.url
        normalized.body = manifest.body

        reasons = self._cross_check(normalized)
        if reasons:
            return normalized, reasons
        log.debug("manifest %s is valid", manifest.url)
        return normalized, None

    def _cross_check(self, manifest: Manifest) -> list[str]:
        reasons = []
        reasons.extend(_duplicates("project", [p.guid for p in manifest.projects]))
        reasons.extend(_duplicates("channel", [c.guid for c in manifest.funding.channels]))
        reasons.extend(_duplicates("plan", [p.guid for p in manifest.funding.plans]))

        channel_guids = {c.guid for c in manifest.funding.channels}
        for plan in manifest.funding.plans:
            for channel in plan.channels:
                if channel not in channel_guids:
                    reasons.append(f"plan '{plan.guid}' refers to unknown channel '{channel}'")

        for title, url_ref in _labelled_url_refs(manifest):
            if url_ref.well_known:
                if not is_well_known_of(url_ref.well_known, url_ref.url):
                    reasons.append(f"{title}.wellKnown must be on the same host as '{url_ref.url}'"
                                   f" and end in '{WELL_KNOWN_PATH}'")
            elif manifest.url and not same_host(url_ref.url, manifest.url):
                reasons.append(f"{title}.wellKnown is required, because '{url_ref.url}'"
                               f" is not on the same host as the manifest")
        return reasons
