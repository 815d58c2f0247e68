# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from ._schemas import _embedded_schema

# Logical identifier the embedded schema is registered under, diagnostics refer to it.
EMBEDDED_SCHEMA_URI = "schema.json"
EMBEDDED_SCHEMA = _embedded_schema()

__all__ = ["EMBEDDED_SCHEMA", "EMBEDDED_SCHEMA_URI"]
