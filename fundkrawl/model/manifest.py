# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""\
In-memory representation of a funding.json (v1) manifest.

The wire format uses camelCase keys; the dataclasses use snake_case.
Absent keys decode to empty values, values of the wrong type are an error.\
"""

from __future__ import annotations

import json
from collections.abc import Generator, Mapping
from dataclasses import dataclass, field
from typing import Any

from fundkrawl.errors import ParserError


def _str(raw: Mapping, key: str) -> str:
    value = raw.get(key)
    if value is None:
        return ""
    if not isinstance(value, str):
        raise ParserError(f"'{key}' must be a string, but is '{type(value).__name__}'")
    return value


def _number(raw: Mapping, key: str) -> int | float:
    value = raw.get(key)
    if value is None:
        return 0
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ParserError(f"'{key}' must be a number, but is '{type(value).__name__}'")
    return value


def _obj(raw: Mapping, key: str) -> Mapping:
    value = raw.get(key)
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise ParserError(f"'{key}' must be an object, but is '{type(value).__name__}'")
    return value


def _list(raw: Mapping, key: str) -> list:
    value = raw.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ParserError(f"'{key}' must be an array, but is '{type(value).__name__}'")
    return value


def _objs(raw: Mapping, key: str) -> list[Mapping]:
    items = _list(raw, key)
    for n, item in enumerate(items):
        if not isinstance(item, Mapping):
            raise ParserError(f"'{key}[{n}]' must be an object, but is '{type(item).__name__}'")
    return items


def _strs(raw: Mapping, key: str) -> list[str]:
    items = _list(raw, key)
    for n, item in enumerate(items):
        if not isinstance(item, str):
            raise ParserError(f"'{key}[{n}]' must be a string, but is '{type(item).__name__}'")
    return list(items)


@dataclass(slots=True)
class URLRef:
    """A URL that is subject to provenance checking."""

    url: str = ""
    well_known: str = ""
    """Absolute URL of the `.well-known/funding-manifest-urls` list published
    on the domain of `url`. If empty, the URL is not checked."""

    @classmethod
    def from_dict(cls, raw: Mapping) -> URLRef:
        return cls(url=_str(raw, "url"), well_known=_str(raw, "wellKnown"))

    def to_dict(self) -> dict[str, Any]:
        return {"url": self.url, "wellKnown": self.well_known}


@dataclass(slots=True)
class Entity:
    """The individual or organisation publishing the manifest."""

    type: str = ""
    role: str = ""
    name: str = ""
    email: str = ""
    phone: str = ""
    description: str = ""
    webpage_url: URLRef = field(default_factory=URLRef)

    @classmethod
    def from_dict(cls, raw: Mapping) -> Entity:
        return cls(
            type=_str(raw, "type"),
            role=_str(raw, "role"),
            name=_str(raw, "name"),
            email=_str(raw, "email"),
            phone=_str(raw, "phone"),
            description=_str(raw, "description"),
            webpage_url=URLRef.from_dict(_obj(raw, "webpageUrl")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "type": self.type,
            "role": self.role,
            "name": self.name,
            "email": self.email,
            "phone": self.phone,
            "description": self.description,
            "webpageUrl": self.webpage_url.to_dict(),
        }


@dataclass(slots=True)
class Project:
    guid: str = ""
    name: str = ""
    description: str = ""
    webpage_url: URLRef = field(default_factory=URLRef)
    repository_url: URLRef = field(default_factory=URLRef)
    licenses: list[str] = field(default_factory=list)
    tags: list[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping) -> Project:
        return cls(
            guid=_str(raw, "guid"),
            name=_str(raw, "name"),
            description=_str(raw, "description"),
            webpage_url=URLRef.from_dict(_obj(raw, "webpageUrl")),
            repository_url=URLRef.from_dict(_obj(raw, "repositoryUrl")),
            licenses=_strs(raw, "licenses"),
            tags=_strs(raw, "tags"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "guid": self.guid,
            "name": self.name,
            "description": self.description,
            "webpageUrl": self.webpage_url.to_dict(),
            "repositoryUrl": self.repository_url.to_dict(),
            "licenses": list(self.licenses),
            "tags": list(self.tags),
        }


@dataclass(slots=True)
class Channel:
    """A way of receiving money, e.g. a bank account or a payment provider."""

    guid: str = ""
    type: str = ""
    address: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping) -> Channel:
        return cls(guid=_str(raw, "guid"),
                   type=_str(raw, "type"),
                   address=_str(raw, "address"),
                   description=_str(raw, "description"))

    def to_dict(self) -> dict[str, Any]:
        return {"guid": self.guid, "type": self.type, "address": self.address, "description": self.description}


@dataclass(slots=True)
class Plan:
    guid: str = ""
    status: str = ""
    name: str = ""
    description: str = ""
    amount: int | float = 0
    currency: str = ""
    frequency: str = ""
    channels: list[str] = field(default_factory=list)
    """guids of the channels the plan can be paid through"""

    @classmethod
    def from_dict(cls, raw: Mapping) -> Plan:
        return cls(
            guid=_str(raw, "guid"),
            status=_str(raw, "status"),
            name=_str(raw, "name"),
            description=_str(raw, "description"),
            amount=_number(raw, "amount"),
            currency=_str(raw, "currency"),
            frequency=_str(raw, "frequency"),
            channels=_strs(raw, "channels"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "guid": self.guid,
            "status": self.status,
            "name": self.name,
            "description": self.description,
            "amount": self.amount,
            "currency": self.currency,
            "frequency": self.frequency,
            "channels": list(self.channels),
        }


@dataclass(slots=True)
class HistoryEntry:
    year: int = 0
    income: int | float = 0
    expenses: int | float = 0
    taxes: int | float = 0
    currency: str = ""
    description: str = ""

    @classmethod
    def from_dict(cls, raw: Mapping) -> HistoryEntry:
        year = _number(raw, "year")
        if not isinstance(year, int):
            raise ParserError(f"'year' must be an integer, but is '{year}'")
        return cls(
            year=year,
            income=_number(raw, "income"),
            expenses=_number(raw, "expenses"),
            taxes=_number(raw, "taxes"),
            currency=_str(raw, "currency"),
            description=_str(raw, "description"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "year": self.year,
            "income": self.income,
            "expenses": self.expenses,
            "taxes": self.taxes,
            "currency": self.currency,
            "description": self.description,
        }


@dataclass(slots=True)
class Funding:
    channels: list[Channel] = field(default_factory=list)
    plans: list[Plan] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)

    @classmethod
    def from_dict(cls, raw: Mapping) -> Funding:
        return cls(
            channels=[Channel.from_dict(c) for c in _objs(raw, "channels")],
            plans=[Plan.from_dict(p) for p in _objs(raw, "plans")],
            history=[HistoryEntry.from_dict(h) for h in _objs(raw, "history")],
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "channels": [c.to_dict() for c in self.channels],
            "plans": [p.to_dict() for p in self.plans],
            "history": [h.to_dict() for h in self.history],
        }


@dataclass(slots=True)
class Manifest:
    """A decoded funding.json manifest.

    `url` and `body` are not part of the wire format; they are filled in by
    whoever fetched the manifest."""

    version: str = ""
    entity: Entity = field(default_factory=Entity)
    projects: list[Project] = field(default_factory=list)
    funding: Funding = field(default_factory=Funding)
    url: str = ""
    """Where the manifest was fetched from"""
    body: bytes = b""
    """The raw JSON body, verbatim"""

    @classmethod
    def from_json(cls, body: bytes | str) -> Manifest:
        try:
            raw = json.loads(body)
        except (ValueError, UnicodeDecodeError) as err:
            raise ParserError(f"error parsing JSON body: {err}") from err
        if not isinstance(raw, Mapping):
            raise ParserError(f"error parsing JSON body: expected an object, got '{type(raw).__name__}'")
        return cls.from_dict(raw)

    @classmethod
    def from_dict(cls, raw: Mapping) -> Manifest:
        return cls(
            version=_str(raw, "version"),
            entity=Entity.from_dict(_obj(raw, "entity")),
            projects=[Project.from_dict(p) for p in _objs(raw, "projects")],
            funding=Funding.from_dict(_obj(raw, "funding")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "version": self.version,
            "entity": self.entity.to_dict(),
            "projects": [p.to_dict() for p in self.projects],
            "funding": self.funding.to_dict(),
        }

    def url_refs(self) -> Generator[URLRef]:
        """All URLs the manifest claims, in document order:
        the entity's webpage, then each project's webpage and repository."""
        yield self.entity.webpage_url
        for project in self.projects:
            yield project.webpage_url
            yield project.repository_url
