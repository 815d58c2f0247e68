# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""Check pipeline errors.

Every stage of the check pipeline fails with a subclass of :class:`CheckError`.
The ``stage`` class attribute is the headline printed to the operator, the
exception message carries the underlying cause.
"""

from collections.abc import Sequence
from dataclasses import dataclass


class CheckError(Exception):
    stage: str = "ERROR checking the configuration file:"


class MissingConfigPath(CheckError):
    stage = (
        "Please, provide the path to the configuration file with --config "
        "or see all the options with --help"
    )


class ConfigParseError(CheckError):
    stage = "ERROR parsing the configuration file:"


class RawContentUnavailable(CheckError):
    stage = "ERROR loading the configuration content:"


class InvalidJSON(CheckError):
    stage = "ERROR converting configuration content to JSON:"


class ConflictingOptions(CheckError):
    stage = (
        "You cannot use both the --schema and --online options simultaneously. "
        "These arguments are mutually exclusive."
    )


class SchemaLoadError(CheckError):
    stage = "ERROR loading the schema:"


class UpstreamUnavailable(SchemaLoadError):
    pass


class UnexpectedStatus(SchemaLoadError):
    def __init__(self, url: str, status_code: int) -> None:
        super().__init__(f"{url} returned status code {status_code}")
        self.url = url
        self.status_code = status_code


class UnsupportedScheme(SchemaLoadError):
    pass


class SchemaCompilationError(CheckError):
    stage = "ERROR compiling the schema:"

    def __init__(self, message: str, location: str = "", keyword: str = "") -> None:
        super().__init__(message)
        self.location = location
        self.keyword = keyword


@dataclass(frozen=True)
class Violation:
    """One schema non-conformance, located by a JSON pointer into the config."""

    pointer: str
    keyword: str
    schema_path: str
    message: str

    def __str__(self) -> str:
        return f"at '{self.pointer}' [{self.keyword}] {self.message}"


class SchemaValidationError(CheckError):
    stage = "ERROR linting the configuration file:"

    def __init__(self, schema_uri: str, violations: Sequence[Violation]) -> None:
        self.schema_uri = schema_uri
        self.violations = list(violations)
        lines = [f"jsonschema validation failed with '{schema_uri}'"]
        lines.extend(f"- {v}" for v in self.violations)
        super().__init__("\n".join(lines))


class DumpError(CheckError):
    stage = "ERROR checking the configuration file:"


class SimulationFailure(CheckError):
    stage = "ERROR testing the configuration file:"
