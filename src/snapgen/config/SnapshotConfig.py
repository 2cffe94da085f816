"""Configuration for snapshot generation.

Configuration is a small JSON document. It is validated against
``CONFIG_SCHEMA`` before use, and every key is optional:

    {
        "render": {"indent": 4, "line_width": 88},
        "accessors": {"excluded": ["to_dict"]},
        "logging": {
            "level": "INFO",
            "debug": {"enabled": false, "modules": []},
            "format": {"json": true}
        }
    }

``load_config()`` reads the file named by the ``SNAPGEN_CONFIG`` environment
variable when no explicit path is given, and falls back to the defaults when
neither is available.
"""

from __future__ import annotations

import json as _json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import jsonschema

from snapgen.errors import InvalidConfig

CONFIG_ENV_VAR = "SNAPGEN_CONFIG"


class JSONSchema(dict[str, Any]):
    """A JSON Schema dictionary checked against the Draft 2020-12 meta-schema."""

    def __new__(cls, data: Any) -> JSONSchema:
        if not isinstance(data, dict):
            raise TypeError("JSONSchema must be a dict")
        try:
            jsonschema.Draft202012Validator.check_schema(data)
        except jsonschema.SchemaError as e:
            raise TypeError(f"Invalid JSON Schema: {e.message}") from e
        return super().__new__(cls, data)

    def __reduce__(self) -> tuple[type[JSONSchema], tuple[dict[str, Any]]]:
        """Support pickling and deepcopy."""
        return (JSONSchema, (dict(self),))

    def validate(self, document: Any) -> None:
        """Validate a document against this schema.

        Raises:
            InvalidConfig: If the document does not match. The message names the
                path of the first offending value.
        """
        validator = jsonschema.Draft202012Validator(self)
        error = jsonschema.exceptions.best_match(validator.iter_errors(document))
        if error is not None:
            where = ".".join(str(p) for p in error.absolute_path) or "<root>"
            raise InvalidConfig(f"Invalid snapshot config at {where}: {error.message}")


CONFIG_SCHEMA = JSONSchema({
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "additionalProperties": False,
    "properties": {
        "render": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "indent": {"type": "integer", "minimum": 1, "maximum": 16},
                "line_width": {"type": "integer", "minimum": 20},
            },
        },
        "accessors": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "excluded": {"type": "array", "items": {"type": "string"}},
            },
        },
        "logging": {
            "type": "object",
            "additionalProperties": False,
            "properties": {
                "level": {
                    "enum": ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
                },
                "debug": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {
                        "enabled": {"type": "boolean"},
                        "modules": {"type": "array", "items": {"type": "string"}},
                    },
                },
                "format": {
                    "type": "object",
                    "additionalProperties": False,
                    "properties": {"json": {"type": "boolean"}},
                },
            },
        },
    },
})


@dataclass(frozen=True)
class RenderConfig:
    indent: int = 4
    line_width: int = 88


@dataclass(frozen=True)
class AccessorConfig:
    excluded: frozenset[str] = frozenset()
    """Extra accessor names to skip, on top of the equality and hash methods."""


@dataclass(frozen=True)
class LoggingConfig:
    level: str = "INFO"
    debug_enabled: bool = False
    debug_modules: frozenset[str] = frozenset()
    json: bool = True


@dataclass(frozen=True)
class SnapshotConfig:
    render: RenderConfig = field(default_factory=RenderConfig)
    accessors: AccessorConfig = field(default_factory=AccessorConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SnapshotConfig:
        """Build a config from a parsed JSON document.

        Raises:
            InvalidConfig: If the document does not match CONFIG_SCHEMA
        """
        CONFIG_SCHEMA.validate(data)

        render = data.get("render", {})
        accessors = data.get("accessors", {})
        logging = data.get("logging", {})
        debug = logging.get("debug", {})

        defaults = RenderConfig()
        return cls(
            render=RenderConfig(
                indent=render.get("indent", defaults.indent),
                line_width=render.get("line_width", defaults.line_width),
            ),
            accessors=AccessorConfig(
                excluded=frozenset(accessors.get("excluded", [])),
            ),
            logging=LoggingConfig(
                level=logging.get("level", "INFO"),
                debug_enabled=debug.get("enabled", False),
                debug_modules=frozenset(debug.get("modules", [])),
                json=logging.get("format", {}).get("json", True),
            ),
        )


DEFAULT_CONFIG = SnapshotConfig()


def load_config(path: str | Path | None = None) -> SnapshotConfig:
    """Load configuration from a JSON file.

    Args:
        path: Path to the JSON config. When omitted, the SNAPGEN_CONFIG
            environment variable is consulted.

    Returns:
        The parsed config, or DEFAULT_CONFIG when no file is configured

    Raises:
        InvalidConfig: If the file is not valid JSON or fails schema validation
    """
    if path is None:
        path = os.environ.get(CONFIG_ENV_VAR)
        if not path:
            return DEFAULT_CONFIG

    try:
        data = _json.loads(Path(path).read_text())
    except _json.JSONDecodeError as e:
        raise InvalidConfig(f"Snapshot config {path} is not valid JSON: {e}") from e
    return SnapshotConfig.from_dict(data)
