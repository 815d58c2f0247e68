# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError, ValidationError
from jsonschema.protocols import Validator
from jsonschema.validators import validator_for
from referencing import Registry, Resource
from referencing.exceptions import Unresolvable
from referencing.jsonschema import DRAFT202012

from .loader import SchemeURLLoader
from ..errors import SchemaCompilationError, SchemaValidationError, Violation
from ..logger import logger


def _pointer(parts) -> str:
    return "".join("/" + str(p).replace("~", "~0").replace("/", "~1") for p in parts)


def _missing_property(error: ValidationError) -> str | None:
    # draft 3 marks required on the property itself with a boolean
    if not isinstance(error.instance, Mapping) or not isinstance(error.validator_value, list):
        return None
    for name in error.validator_value:
        if name not in error.instance and error.message.startswith(repr(name)):
            return name
    return None


def _violation(error: ValidationError) -> Violation:
    path = list(error.absolute_path)
    message = error.message
    if error.validator == "required":
        # locate the missing property itself, not its parent object
        name = _missing_property(error)
        if name is not None:
            path.append(name)
            message = f"missing property '{name}'"
    return Violation(
        pointer=_pointer(path),
        keyword=str(error.validator),
        schema_path="#" + _pointer(error.absolute_schema_path),
        message=message,
    )


@dataclass(frozen=True)
class CompiledSchema:
    uri: str
    validator: Validator

    def validate(self, config: Any) -> None:
        """Validate the config JSON value, collecting every violation.

        :raises SchemaValidationError: config does not conform to the schema
        :raises SchemaCompilationError: a `$ref` of the schema cannot be resolved
        """
        try:
            errors = list(self.validator.iter_errors(config))
        except Unresolvable as e:
            raise SchemaCompilationError(f"{self.uri}: {e}", keyword="$ref") from e

        if errors:
            violations = sorted(map(_violation, errors), key=lambda v: (v.pointer, v.schema_path))
            raise SchemaValidationError(self.uri, violations)


def compile_schema(
    uri: str, document: Any, loader: SchemeURLLoader | None = None
) -> CompiledSchema:
    """Compile a schema document registered under `uri`.

    The meta-schema named by `$schema` is honored, draft 2020-12 is assumed otherwise.
    `loader`, if any, retrieves the resources referenced from the document.

    :raises SchemaCompilationError: document is not a valid JSON schema
    """
    if not isinstance(document, (Mapping, bool)):
        raise SchemaCompilationError(
            f"{uri}: schema must be an object or a boolean, got {type(document).__name__}"
        )

    cls = validator_for(document, default=Draft202012Validator)
    try:
        cls.check_schema(document)
    except SchemaError as e:
        location = e.json_path
        raise SchemaCompilationError(
            f"{uri} is not a valid schema: at '{location}' [{e.validator}] {e.message}",
            location=location,
            keyword=str(e.validator),
        ) from e

    # Anchor relative references on the location the document was loaded from.
    if isinstance(document, Mapping) and "$id" not in document and "://" in uri:
        document = {**document, "$id": uri}

    resource = Resource.from_contents(document, default_specification=DRAFT202012)
    registry: Registry = Registry(retrieve=loader.retrieve) if loader is not None else Registry()
    registry = registry.with_resource(uri, resource).crawl()
    logger.debug(f"schema {uri} compiled with {cls.__name__}")

    return CompiledSchema(uri, cls(document, registry=registry))
