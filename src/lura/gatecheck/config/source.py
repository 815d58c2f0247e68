# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

"""Schema source resolution.

Exactly one schema source is active per check: an explicit location given by the
operator, the hosted schema matching the running release line, or the schema
bundled with the package.
"""

from dataclasses import dataclass

from . import EMBEDDED_SCHEMA_URI
from ..errors import ConflictingOptions

ONLINE_SCHEMA = "https://www.krakend.io/schema/v{}/krakend.json"


@dataclass(frozen=True)
class CustomLocation:
    location: str

    def describe(self) -> str:
        return self.location


@dataclass(frozen=True)
class OnlineDefault:
    location: str

    def describe(self) -> str:
        return self.location


@dataclass(frozen=True)
class EmbeddedDefault:
    text: str = ""

    def describe(self) -> str:
        return f"{EMBEDDED_SCHEMA_URI} (embedded)"


SchemaSource = CustomLocation | OnlineDefault | EmbeddedDefault


def version_minor(version: str) -> str:
    """Return `major.minor` of a version string.

    Patch and pre-release qualifiers are dropped. Strings with less than two dot
    separated components are returned verbatim.
    """
    comps = version.split(".")
    if len(comps) < 2:
        return version
    return f"{comps[0]}.{comps[1]}"


def online_schema_url(version: str) -> str:
    return ONLINE_SCHEMA.format(version_minor(version))


def resolve_schema_source(
    custom_location: str, force_online: bool, embedded: str | None, version: str
) -> SchemaSource:
    """Pick the schema source for this run.

    :param custom_location: schema path or URL given by the operator, may be empty
    :param force_online: fetch the hosted schema for the running release line
    :param embedded: bundled schema text, None or empty if the build ships none
    :param version: running version, used to derive the hosted schema URL

    :raises ConflictingOptions: both a custom location and online fetch are requested
    """
    if custom_location and force_online:
        raise ConflictingOptions("--schema and --online")

    # The hosted schema is also the fallback when nothing is bundled.
    if force_online or not embedded:
        return OnlineDefault(online_schema_url(version))
    if custom_location:
        return CustomLocation(custom_location)
    return EmbeddedDefault(embedded)
