# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later

from __future__ import annotations

import time
from dataclasses import dataclass
from http.cookiejar import DefaultCookiePolicy

import requests
import urllib3
from requests.adapters import DEFAULT_POOLSIZE, HTTPAdapter
from requests.cookies import RequestsCookieJar

from fundkrawl.config import Config
from fundkrawl.errors import FetcherError, HTTPStatusError
from fundkrawl.log import get_child_logger

log = get_child_logger("fetcher")

READ_CHUNK_SIZE = 16 * 1024


@dataclass(slots=True, frozen=True)
class FetchConfig:
    user_agent: str
    max_host_conns: int
    req_timeout: float
    """seconds; bounds connecting, waiting for the headers and each read"""
    attempts: int
    max_bytes: int
    """response bodies are cut off after this many bytes"""

    @classmethod
    def from_config(cls, config: Config) -> FetchConfig:
        return cls(
            user_agent=config.user_agent,
            max_host_conns=config.crawl.max_host_conns,
            req_timeout=config.crawl.req_timeout,
            attempts=config.crawl.attempts,
            max_bytes=config.crawl.max_bytes,
        )


@dataclass(slots=True, frozen=True)
class Attempt:
    """Outcome of a single request."""
    body: bytes | None = None
    retry: bool = False
    """Whether trying again might help"""
    error: FetcherError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class Fetcher:
    """Fetches URLs over a pooled HTTP session, retrying on network errors.

    Each attempt is bounded by `req_timeout` as a whole, reading the body included.
    Only transport and body-read failures are retried.
    Any status other than 200 is taken as the server's final answer.
    """

    def __init__(self, config: FetchConfig) -> None:
        self._config = config

        # retries are done by `fetch`, so we can tell transient from terminal failures
        adapter = HTTPAdapter(
            pool_connections=DEFAULT_POOLSIZE,
            pool_maxsize=config.max_host_conns,
            pool_block=True,
            max_retries=0,
        )
        self._session = requests.Session()
        self._session.mount("https://", adapter)
        self._session.mount("http://", adapter)
        self._session.headers.update({
            "User-Agent": config.user_agent,
            # max_bytes counts bytes on the wire
            "Accept-Encoding": "identity",
        })
        # cookies set by one crawled host are never sent anywhere
        self._session.cookies = RequestsCookieJar(policy=DefaultCookiePolicy(allowed_domains=[]))

    @property
    def config(self) -> FetchConfig:
        return self._config

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> Fetcher:
        return self

    def __exit__(self, *_exc_info) -> None:
        self.close()

    def fetch(self, url: str) -> bytes:
        """GET the given URL, trying up to `attempts` times.

        Raises:
            FetcherError: If the last attempt failed, or any attempt failed
                in a non-retriable way (HTTPStatusError).
        """
        attempt = Attempt(error=FetcherError(f"no attempt made to fetch {url}", url))
        for _ in range(self._config.attempts):
            attempt = self.do_request("GET", url)
            if attempt.ok or not attempt.retry:
                break
        if not attempt.ok:
            raise attempt.error
        return attempt.body

    def do_request(self, method: str, url: str) -> Attempt:
        attempt = self._do_request(method, url)
        log.info("%s %s -> %s", method, url, "OK" if attempt.ok else attempt.error)
        return attempt

    def _do_request(self, method: str, url: str) -> Attempt:
        timeout = self._config.req_timeout
        deadline = time.monotonic() + timeout
        try:
            response = self._session.request(method, url, timeout=(timeout, timeout), stream=True)
        except requests.RequestException as err:
            # includes malformed URLs, which requests reports the same way
            return Attempt(retry=True, error=FetcherError(f"{method} {url} failed: {err}", url))

        try:
            # bodies of error responses are read as well (within the same limits),
            # so the connection can go back to the pool
            body = self._read_body(response, deadline)
        except (urllib3.exceptions.HTTPError, OSError) as err:
            if response.status_code != 200:
                return Attempt(retry=False, error=HTTPStatusError(url, response.status_code))
            return Attempt(retry=True, error=FetcherError(f"reading response of {url} failed: {err}", url))
        finally:
            # a connection with unread data left is discarded, not pooled
            response.close()

        if response.status_code != 200:
            return Attempt(retry=False, error=HTTPStatusError(url, response.status_code))
        return Attempt(body=body)

    def _read_body(self, response: requests.Response, deadline: float) -> bytes:
        """Read at most `max_bytes` of the body, raising TimeoutError once `deadline` has passed.

        Reads return whatever has arrived, so a slowly trickling body can not
        hold up the attempt for longer than one read timeout.
        """
        limit = self._config.max_bytes
        body = bytearray()
        while len(body) < limit:
            self._limit_read_timeout(response, deadline)
            chunk = response.raw.read1(min(READ_CHUNK_SIZE, limit - len(body)), decode_content=False)
            if not chunk:
                break
            body.extend(chunk)
            if time.monotonic() > deadline:
                raise TimeoutError(f"no complete response within {self._config.req_timeout}s")
        return bytes(body)

    @staticmethod
    def _limit_read_timeout(response: requests.Response, deadline: float) -> None:
        connection = response.raw.connection
        if connection is not None and connection.sock is not None:
            connection.sock.settimeout(max(deadline - time.monotonic(), 0.001))
