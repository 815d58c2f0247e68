# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

import copy
import io
import json

import pytest
from rich.console import Console as RichConsole

from lura.gatecheck.console import Console

SAMPLE = {
    "version": 3,
    "name": "sample gateway",
    "port": 8080,
    "host": ["http://localhost:9000"],
    "endpoints": [
        {
            "endpoint": "/users/{id}",
            "method": "GET",
            "backend": [{"url_pattern": "/u/{id}"}],
        },
        {
            "endpoint": "/users",
            "method": "POST",
            "backend": [{"url_pattern": "/u"}],
        },
    ],
}


class DummyResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self._body = body
        self.read = False
        self.closed = False

    @property
    def content(self):
        self.read = True
        return json.dumps(self._body).encode()

    def close(self):
        self.closed = True


class DummySession:
    def __init__(self, response=None, exc=None):
        self.response = response
        self.exc = exc
        self.calls = []

    def get(self, url, timeout):
        self.calls.append((url, timeout))
        if self.exc is not None:
            raise self.exc
        return self.response


@pytest.fixture
def sample():
    return copy.deepcopy(SAMPLE)


@pytest.fixture
def write_config(tmp_path):
    def _write(content, name="gateway.json"):
        path = tmp_path / name
        if not isinstance(content, str):
            content = json.dumps(content)
        path.write_text(content, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def output():
    buffer = io.StringIO()
    console = Console(RichConsole(file=buffer, force_terminal=False, width=200, soft_wrap=True))
    return console, buffer
