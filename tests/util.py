# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import copy
import io
import json

import requests
import urllib3

from fundkrawl.fetcher import FetchConfig

MANIFEST_URL = "https://example.org/funding.json"
REPO_URL = "https://github.com/example/widget"
REPO_WELL_KNOWN = "https://github.com/example/widget/.well-known/funding-manifest-urls"

_MANIFEST = {
    "version": "v1.0.0",
    "entity": {
        "type": "organisation",
        "role": "owner",
        "name": "Example Org",
        "email": "funding@example.org",
        "description": "We build example widgets.",
        "webpageUrl": {
            "url": "https://example.org",
        },
    },
    "projects": [{
        "guid": "widget",
        "name": "Widget",
        "description": "The one and only widget.",
        "webpageUrl": {
            "url": "https://example.org/widget",
        },
        "repositoryUrl": {
            "url": REPO_URL,
            "wellKnown": REPO_WELL_KNOWN,
        },
        "licenses": ["spdx:MIT"],
        "tags": ["hardware", "widgets"],
    }],
    "funding": {
        "channels": [{
            "guid": "bank-transfer",
            "type": "bank",
            "address": "IBAN DE00 0000 0000 0000 0000 00",
        }],
        "plans": [{
            "guid": "monthly-backer",
            "status": "active",
            "name": "Monthly backer",
            "amount": 25,
            "currency": "EUR",
            "frequency": "monthly",
            "channels": ["bank-transfer"],
        }],
        "history": [{
            "year": 2023,
            "income": 12000,
            "expenses": 9000,
            "taxes": 0,
            "currency": "EUR",
        }],
    },
}


def manifest_dict() -> dict:
    """A valid v1 manifest, as found on the wire."""
    return copy.deepcopy(_MANIFEST)


def manifest_json(raw: dict | None = None) -> bytes:
    return json.dumps(manifest_dict() if raw is None else raw).encode("utf-8")


def fetch_config(**overrides) -> FetchConfig:
    options = {
        "user_agent": "fundkrawl-test",
        "max_host_conns": 2,
        "req_timeout": 2.0,
        "attempts": 3,
        "max_bytes": 1024,
    }
    options.update(overrides)
    return FetchConfig(**options)


def make_response(status: int = 200, body: bytes = b"", fp=None) -> requests.Response:
    """A streamed response, backed by an in-memory body."""
    response = requests.Response()
    response.status_code = status
    response.raw = urllib3.HTTPResponse(body=fp if fp is not None else io.BytesIO(body),
                                        status=status,
                                        preload_content=False)
    return response


class BrokenStream(io.BytesIO):
    """A body that breaks off while being read."""

    def read(self, *args, **kwargs):
        raise OSError("connection reset by peer")

    read1 = read


class Clock:
    """Stands in for `time.monotonic`."""

    def __init__(self, now: float = 100.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now


class TricklingStream(io.BytesIO):
    """A body that arrives one byte at a time, `delay` seconds apart."""

    def __init__(self, body: bytes, clock: Clock, delay: float) -> None:
        super().__init__(body)
        self.clock = clock
        self.delay = delay

    def read1(self, size=-1):
        self.clock.now += self.delay
        return super().read1(1)


class CountingStream(io.BytesIO):
    """Counts the bytes handed out, i.e. what would have been downloaded."""

    def __init__(self, body: bytes) -> None:
        super().__init__(body)
        self.handed_out = 0

    def read(self, size=-1):
        data = super().read(size)
        self.handed_out += len(data)
        return data

    def read1(self, size=-1):
        data = super().read1(size)
        self.handed_out += len(data)
        return data


class FakeFetcher:
    """Serves canned bodies (or errors) per URL and records what was fetched."""

    def __init__(self, responses: dict[str, bytes | Exception]) -> None:
        self.responses = responses
        self.fetched: list[str] = []

    def fetch(self, url: str) -> bytes:
        self.fetched.append(url)
        response = self.responses[url]
        if isinstance(response, Exception):
            raise response
        return response

    def close(self) -> None:
        pass
