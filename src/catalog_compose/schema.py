# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""JSON schema validators for ``olm.package``, ``olm.channel`` and ``olm.bundle`` blobs."""

from __future__ import annotations

import importlib
import json
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from types import ModuleType
from typing import Final, Protocol, cast, runtime_checkable

from .errors import DeclarativeConfigError, ValidationError
from .types import SCHEMA_BUNDLE, SCHEMA_CHANNEL, SCHEMA_PACKAGE, JSONValue

SCHEMA_ROOT: Final[Path] = Path(__file__).resolve().parent / "schemas"


@runtime_checkable
class SchemaValidator(Protocol):
    """Protocol describing the minimal interface exposed by jsonschema validators."""

    def validate(self, instance: JSONValue) -> None:
        """Validate ``instance`` against the bound schema."""

    def iter_errors(self, instance: JSONValue) -> Iterable[object]:
        """Iterate over validation errors for ``instance``."""


SchemaValidatorFactory = Callable[[JSONValue], SchemaValidator]

jsonschema_module = importlib.import_module("jsonschema")
jsonschema_exceptions: ModuleType = cast(ModuleType, jsonschema_module.exceptions)
JsonSchemaValidationError = cast(type[Exception], getattr(jsonschema_exceptions, "ValidationError"))
Draft202012Validator = cast(SchemaValidatorFactory, jsonschema_module.Draft202012Validator)


def load_schema(path: Path) -> Mapping[str, JSONValue]:
    """Load a JSON schema from disk and ensure it is a JSON object.

    Args:
        path: Filesystem path to the schema file.

    Returns:
        Mapping[str, JSONValue]: Parsed JSON schema mapping.

    Raises:
        FileNotFoundError: If the schema file does not exist.
        DeclarativeConfigError: If the schema cannot be parsed or is not a JSON object.
    """
    if not path.exists():
        raise FileNotFoundError(path)
    with path.open("r", encoding="utf-8") as stream:
        try:
            payload = json.load(stream)
        except json.JSONDecodeError as exc:  # pragma: no cover - json module provides rich context
            raise DeclarativeConfigError(f"{path}: failed to parse JSON schema") from exc
    if not isinstance(payload, Mapping):
        raise DeclarativeConfigError(f"{path}: expected a JSON object")
    return cast(Mapping[str, JSONValue], payload)


@dataclass(slots=True)
class SchemaRepository:
    """Blob validators keyed by declarative config schema tag."""

    schema_root: Path
    validators: Mapping[str, SchemaValidator]

    @classmethod
    def load(cls, schema_root: Path | None = None) -> SchemaRepository:
        """Load the packaged validators, or those found under ``schema_root``.

        Args:
            schema_root: Optional override for the schema directory.

        Returns:
            SchemaRepository: Repository configured with one validator per typed schema.
        """
        resolved_root = schema_root or SCHEMA_ROOT
        files = {
            SCHEMA_PACKAGE: "package.schema.json",
            SCHEMA_CHANNEL: "channel.schema.json",
            SCHEMA_BUNDLE: "bundle.schema.json",
        }
        validators = {
            schema: Draft202012Validator(load_schema(resolved_root / filename)) for schema, filename in files.items()
        }
        return cls(schema_root=resolved_root, validators=validators)

    def validate_blob(self, blob: Mapping[str, JSONValue], *, context: str) -> None:
        """Validate ``blob`` when its schema tag has a registered validator.

        Blobs of other schemas pass through unchecked.

        Raises:
            ValidationError: When the blob fails schema validation.
        """

        schema = blob.get("schema")
        if not isinstance(schema, str):
            raise ValidationError(f"{context}: blob has no 'schema' key")
        validator = self.validators.get(schema)
        if validator is None:
            return
        try:
            validator.validate(cast(JSONValue, blob))
        except JsonSchemaValidationError as exc:
            message = getattr(exc, "message", str(exc))
            raise ValidationError(f"{context} ({schema}): {message}") from exc


@lru_cache(maxsize=1)
def default_repository() -> SchemaRepository:
    """Return the cached repository of packaged schemas."""

    return SchemaRepository.load()


__all__ = ["SCHEMA_ROOT", "SchemaRepository", "SchemaValidator", "default_repository", "load_schema"]
