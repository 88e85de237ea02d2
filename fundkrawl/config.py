# SPDX-FileCopyrightText: 2026 fundkrawl contributors
#
# SPDX-License-Identifier: GPL-3.0-or-later
"""Loading, normalizing and validating the crawler configuration.

All configuration sources (YAML file, CLI options) are run through the same
cerberus schema, each on its own, so a bad option can be traced back to the
source it came from. The sources are then merged, in order of priority, and
the result is validated once more, this time with defaults filled in.
"""

from __future__ import annotations

from collections.abc import Generator, Mapping, MutableMapping
from copy import deepcopy
from pathlib import Path
from typing import Any

import yaml
from cerberus import Validator
from cerberus.errors import REQUIRED_FIELD, BasicErrorHandler, ValidationError

from fundkrawl.errors import ConfigError, NotOverriddenError

# see: https://docs.python-cerberus.org/en/stable/index.html
BASE_SCHEMA = {
    "user_agent": {
        "type": "string",
        "coerce": "strip_str",
        "default": "fundkrawl (funding.json crawler)",
        "nullable": False,
        "empty": False,
        "meta": {
            # used in CLI
            "long_name": "user-agent",
            "description": "Agent name used for requesting remote resources"
        },
    },
    "crawl": {
        "type": "dict",
        "default": {},
        "meta": {
            "long_name": "crawl",
        },
        "schema": {
            "max_host_conns": {
                "type": "integer",
                "coerce": "integer",
                "default": 10,
                "min": 1,
                "meta": {
                    "long_name": "max-host-conns",
                    "description": "Max number of (pooled) connections per host"
                },
            },
            "req_timeout": {
                "type": "float",
                "coerce": "float",
                "default": 5.0,
                "min": 0.1,
                "meta": {
                    "long_name": "timeout",
                    "description": "Max seconds to wait for a not responding host"
                },
            },
            "attempts": {
                "type": "integer",
                "coerce": "integer",
                "default": 3,
                "min": 1,
                "meta": {
                    "long_name": "attempts",
                    "description": "Number of attempts per request in cases of network errors"
                },
            },
            "max_bytes": {
                "type": "integer",
                "coerce": "integer",
                "default": 500 * 1024,
                "min": 1,
                "meta": {
                    "long_name": "max-bytes",
                    "description": "Max size of a response body; longer bodies are cut off"
                },
            },
        },
    },
}

# represents a missing option
missing = type("MissingType", (), {"__repr__": lambda x: "missing"})()


def iterate_schema(schema: Mapping,
                   _key_path: list[str] | None = None,
                   _long_names: list[str] | None = None) -> Generator[tuple[list[str], Mapping]]:
    """Iterate over the leaf options of a schema.

    Nested dicts are descended into; the CLI long name of a leaf is prefixed
    with the long names of all its parents.

    Yields:
        Tuple: Key path of the option and its (copied) rules.
    """
    key_path = _key_path or []
    long_names = _long_names or []
    for key, rules in schema.items():
        long_name = rules.get("meta", {}).get("long_name")
        if rules["type"] == "dict" and "schema" in rules:
            yield from iterate_schema(rules["schema"], key_path + [key], long_names + [long_name])
            continue
        rules = deepcopy(rules)
        if long_name:
            rules["meta"]["long_name"] = "-".join(n for n in long_names + [long_name] if n)
        yield (key_path + [key], rules)


def validate(config: Mapping, schema: Mapping, middle_stage=False) -> tuple[Mapping | None, list[str]]:
    """Normalize and validate a config against a given schema.

    Args:
        config (Mapping): Config to normalize and validate.
        schema (Mapping): Schema used for validation.
        middle_stage (bool): If True, defaults are not filled in, because
            another source might still provide the value.

    Returns:
        tuple(Mapping | None, list[str]): The normalized config (None if
            invalid) and the reasons why validation failed.
    """
    validator = ConfigValidator(schema, ignore_defaults=middle_stage)
    reasons = []
    if not validator.validate(_to_dict(config)):
        for error in validator.errors:
            path = ".".join(str(p) for p in error["path"])
            if error["code"] == REQUIRED_FIELD.code:
                reasons.append(f"missing option '{path}'")
            else:
                reasons.append(f"invalid option '{path}': {error['msg']}")
    if reasons:
        return None, reasons
    return validator.document, reasons


def _to_dict(mapping: Mapping) -> dict:
    return {k: _to_dict(v) if isinstance(v, Mapping) else v for k, v in mapping.items()}


def effective_config_info(config: Config) -> Generator[str]:
    for key_path, _rules in iterate_schema(BASE_SCHEMA):
        yield f"{'.'.join(key_path)}={config[key_path]}"


class Config(MutableMapping):
    """Configuration with nested access.

    These are equivalent:
        - config["crawl"]["attempts"]
        - config[["crawl", "attempts"]]
        - config.crawl.attempts
    """

    def __init__(self, mapping: Mapping | None = None) -> None:
        super().__setattr__("_mapping", {})
        self.update(mapping or {})

    def _branch(self, key_path: list[str], create: bool) -> MutableMapping:
        branch = self
        for part in key_path:
            if not (part in branch and isinstance(branch[part], Mapping)):
                if not create:
                    raise KeyError(part)
                branch[part] = Config()
            branch = branch[part]
        return branch

    def __getitem__(self, key):
        if isinstance(key, list):
            return self._branch(key[:-1], create=False)[key[-1]]
        return self._mapping[key]

    def __setitem__(self, key, value):
        if isinstance(key, list):
            self._branch(key[:-1], create=True)[key[-1]] = value
            return
        self._mapping[key] = Config(value) if isinstance(value, Mapping) else value

    def __delitem__(self, key):
        del self._mapping[key]

    def __getattr__(self, key):
        try:
            return self[key]
        except KeyError:
            raise AttributeError(key)  # pylint: disable=raise-missing-from

    def __setattr__(self, key, value):
        self[key] = value

    def get(self, key, default=None):
        try:
            return self[key]
        except KeyError:
            return default

    def __copy__(self):
        return type(self)(self._mapping)

    def __iter__(self):
        return iter(self._mapping)

    def __len__(self):
        return len(self._mapping)

    def __repr__(self):
        return f"{type(self).__name__}({self._mapping!r})"


class FlatErrorHandler(BasicErrorHandler):
    """Reports cerberus errors as a flat list instead of a tree."""

    def __call__(self, errors: list[ValidationError]) -> list[dict[str, Any]]:
        return self._flatten(errors)

    def _flatten(self, errors: list[ValidationError]) -> list[dict[str, Any]]:
        flat = []
        for error in errors:
            if error.is_logic_error:
                for definition_errors in error.definitions_errors.values():
                    flat.extend(self._flatten(definition_errors))
            elif error.is_group_error:
                flat.extend(self._flatten(error.child_errors))
            elif error.code in self.messages:
                flat.append({
                    "path": list(error.document_path),
                    "code": error.code,
                    "msg": self._format_message(error.field, error),
                })
        return flat


class ConfigValidator(Validator):

    def __init__(self, *args: Any, **kwargs: Any):
        super().__init__(*args, **kwargs)
        self.ignore_defaults = kwargs.get("ignore_defaults", False)
        self.purge_unknown = True
        self.error_handler = FlatErrorHandler()

    def _normalize_default(self, mapping, schema, field):
        """ {'nullable': True} """
        if self.ignore_defaults:
            return
        super()._normalize_default(mapping, schema, field)

    def _normalize_coerce_strip_str(self, value: Any) -> Any:
        if isinstance(value, str):
            return value.strip()
        # leave other types untouched, so type validation will detect wrong types
        return value

    def _normalize_coerce_integer(self, value: Any) -> int:
        if isinstance(value, int) and not isinstance(value, bool):
            return value
        return int(str(value).strip())

    def _normalize_coerce_float(self, value: Any) -> float:
        if isinstance(value, float):
            return value
        if isinstance(value, int) and not isinstance(value, bool):
            return float(value)
        return float(str(value).strip())


class ConfigLoader:
    """Loads a configuration from one source and normalizes/validates it."""

    def load(self) -> Config:
        """
        Raises:
            ConfigError: If the source could not be loaded or is invalid.
        """
        raise NotOverriddenError()


class CliConfigLoader(ConfigLoader):
    """Configuration loader for options given on the command line.

    Options that were not given (None) are dropped, so they do not shadow
    lower priority sources.
    """

    def __init__(self, schema: Mapping, options: Mapping | None) -> None:
        self._schema = schema
        self._options = options or {}

    def load(self) -> Config:
        options = Config(self._options)
        given = Config()
        for key_path, _rules in iterate_schema(self._schema):
            value = options.get(key_path)
            if value is not None:
                given[key_path] = value
        validated, reasons = validate(given, self._schema, middle_stage=True)
        if reasons:
            raise ConfigError(f"Invalid command line option: {reasons[0]}", reasons)
        return Config(validated)


class YamlFileConfigLoader(ConfigLoader):
    """Configuration loader for a single YAML file; no path means an empty config."""

    def __init__(self, schema: Mapping, path: str | Path | None) -> None:
        self._schema = schema
        self._path = Path(path) if path is not None else None

    def load(self) -> Config:
        if not self._path:
            return Config()
        try:
            with self._path.open("r") as f:
                raw = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as err:
            raise ConfigError(f"Failed to load YAML config: {err}", reasons=[str(err)]) from err
        if not isinstance(raw, Mapping):
            raise ConfigError(f"YAML config '{self._path}' is not a mapping", reasons=["not a mapping"])

        validated, reasons = validate(raw, self._schema, middle_stage=True)
        if reasons:
            raise ConfigError(
                "There is one or more errors in the configuration file '{}':\n    {}".format(
                    self._path, "\n    ".join(reasons)),
                reasons,
            )
        return Config(validated)


class MergingConfigLoader(ConfigLoader):
    """Merges the configs of multiple loaders, the first one taking priority,
    and validates the result, filling in defaults.
    """

    def __init__(self, schema: Mapping, *loaders: ConfigLoader) -> None:
        self._schema = schema
        self._loaders = loaders

    def load(self) -> Config:
        configs = [loader.load() for loader in self._loaders]

        merged = Config()
        for key_path, _rules in iterate_schema(self._schema):
            for config in configs:
                value = config.get(key_path, missing)
                if value is not missing:
                    merged[key_path] = value
                    break

        validated, reasons = validate(merged, self._schema)
        if reasons:
            raise ConfigError(
                "There is one or more errors in the configuration:\n    {}".format("\n    ".join(reasons)),
                reasons,
            )
        return Config(validated)
