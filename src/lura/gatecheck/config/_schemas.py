# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

from importlib.resources import files


def _embedded_schema() -> str | None:
    schema = files(__package__).joinpath("schemas").joinpath("gateway.json")
    if not schema.is_file():
        return None
    return schema.read_text(encoding="utf-8")
