# SPDX-FileCopyrightText: 2026 H2Lab
#
# SPDX-License-Identifier: Apache-2.0

import json

import pytest

from conftest import DummyResponse, DummySession
from lura.gatecheck.check import CheckOptions, Checker, check
from lura.gatecheck.config.loader import default_loader
from lura.gatecheck.errors import (
    ConflictingOptions,
    InvalidJSON,
    MissingConfigPath,
    SchemaValidationError,
    SimulationFailure,
)
from lura.gatecheck.parser import Parser, ServiceConfig, service_config

ONLINE_URL = "https://www.krakend.io/schema/v2.9/krakend.json"
HOSTED_SCHEMA = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "type": "object",
    "required": ["version", "name"],
}


class ForbiddenLoader(dict):
    def load(self, url):
        raise AssertionError(f"unexpected schema load: {url}")

    def retrieve(self, uri):
        raise AssertionError(f"unexpected schema load: {uri}")


class PlainParser:
    """Parser without the last source capability."""

    def parse(self, path):
        with open(path, encoding="utf-8") as f:
            text = f.read()
        return service_config(json.loads(text.split("\n", 1)[0]))


def checker(options, output, **kwargs):
    console, _ = output
    return Checker(options, console=console, **kwargs)


class TestEndToEnd:
    def test_syntax_ok_without_lint(self, sample, write_config, output):
        """Scenario A: no linting, no network access."""
        console, buffer = output
        options = CheckOptions(config=write_config(sample))
        status = check(options, console=console, loader=ForbiddenLoader())

        assert status == 0
        text = buffer.getvalue()
        assert "Parsing configuration file:" in text
        assert "Syntax OK!" in text
        assert "Linting" not in text

    def test_online_schema_without_embedded(self, sample, write_config, output):
        """Scenario B: no embedded schema, the hosted one is fetched."""
        console, buffer = output
        del sample["name"]
        session = DummySession(DummyResponse(200, HOSTED_SCHEMA))
        options = CheckOptions(
            config=write_config(sample), lint=True, embedded_schema=None, version="2.9.1"
        )

        status = check(options, console=console, loader=default_loader(session))

        assert status == 1
        assert session.calls == [(ONLINE_URL, 10)]
        text = buffer.getvalue()
        assert f"Using schema {ONLINE_URL}" in text
        assert "ERROR linting the configuration file:" in text
        assert "'/name'" in text
        assert "Syntax OK!" not in text

    def test_conflicting_options(self, sample, write_config, output):
        """Scenario C: --schema with --online fails before loading anything."""
        console, buffer = output
        options = CheckOptions(
            config=write_config(sample), lint=True, schema="custom.json", online=True
        )

        status = check(options, console=console, loader=ForbiddenLoader())

        assert status == 1
        assert "mutually exclusive" in buffer.getvalue()

    def test_embedded_schema(self, sample, write_config, output):
        console, buffer = output
        options = CheckOptions(config=write_config(sample), lint=True)
        assert check(options, console=console, loader=ForbiddenLoader()) == 0
        assert "Using schema schema.json (embedded)" in buffer.getvalue()

    def test_custom_schema(self, sample, write_config, output, tmp_path):
        schema = tmp_path / "custom.json"
        schema.write_text(json.dumps({"required": ["owner"]}), encoding="utf-8")
        options = CheckOptions(
            config=write_config(sample), lint=True, schema=str(schema), embedded_schema="{}"
        )
        with pytest.raises(SchemaValidationError) as exc:
            checker(options, output).run()
        assert exc.value.violations[0].pointer == "/owner"

    def test_route_check(self, sample, write_config, output):
        console, buffer = output
        options = CheckOptions(config=write_config(sample), test_routes=True)
        assert check(options, console=console) == 0

        sample["endpoints"].append(
            {"endpoint": "/users/{name}", "backend": [{"url_pattern": "/u/{name}"}]}
        )
        options = CheckOptions(config=write_config(sample), test_routes=True)
        assert check(options, console=console) == 1
        assert "ERROR testing the configuration file:" in buffer.getvalue()

    def test_debug_dump(self, sample, write_config, output):
        console, buffer = output
        options = CheckOptions(config=write_config(sample), debug=2)
        assert check(options, console=console) == 0
        assert "/u/{id}" in buffer.getvalue()


class TestStages:
    def test_missing_config_path(self, output):
        with pytest.raises(MissingConfigPath):
            checker(CheckOptions(), output).run()

    def test_parse_error_exit_status(self, write_config, output):
        console, buffer = output
        options = CheckOptions(config=write_config('{"version": 2}'))
        assert check(options, console=console) == 1
        assert "ERROR parsing the configuration file:" in buffer.getvalue()

    def test_raw_bytes_from_parser(self, sample, write_config, output):
        sample["name"] = "__NAME__"
        path = write_config(json.dumps(sample).replace("__NAME__", '{{ env "GATEWAY_NAME" }}'))
        parser = Parser(environ={"GATEWAY_NAME": "rendered"})
        c = checker(CheckOptions(config=path), output, parser=parser)
        c.run()
        assert json.loads(c.raw_config())["name"] == "rendered"

    def test_raw_bytes_fallback_to_file(self, sample, write_config, output):
        path = write_config(json.dumps(sample) + "\nnot json")
        c = checker(CheckOptions(config=path), output, parser=PlainParser())
        c.run()
        assert c.raw_config() == path.read_bytes()

    def test_invalid_json(self, sample, write_config, output):
        path = write_config(json.dumps(sample) + "\nnot json")
        options = CheckOptions(config=path, lint=True)
        with pytest.raises(InvalidJSON):
            checker(options, output, parser=PlainParser(), loader=ForbiddenLoader()).run()

    def test_conflict_before_load(self, sample, write_config, output):
        options = CheckOptions(config=write_config(sample), lint=True, schema="s.json", online=True)
        with pytest.raises(ConflictingOptions):
            checker(options, output, loader=ForbiddenLoader()).run()

    def test_simulation_port_override(self, sample, write_config, output):
        options = CheckOptions(config=write_config(sample), test_routes=True, port=70000)
        with pytest.raises(SimulationFailure):
            checker(options, output).run()


class VanishingParser(PlainParser):
    """Removes the configuration file once parsed."""

    def parse(self, path):
        config = super().parse(path)
        path.unlink()
        return config


class FixedParser:
    def __init__(self, config):
        self.config = config

    def parse(self, path):
        return self.config


class TestFailureReport:
    def run(self, options, output, **kwargs):
        console, buffer = output
        status = check(options, console=console, **kwargs)
        return status, buffer.getvalue()

    def test_structural_parse_error(self, write_config, output):
        options = CheckOptions(config=write_config({"version": 3, "endpoints": [1]}))
        status, text = self.run(options, output)
        assert status == 1
        assert "ERROR parsing the configuration file:" in text
        assert "endpoints[0] must be an object" in text

    def test_raw_content_unavailable(self, sample, write_config, output):
        options = CheckOptions(config=write_config(sample), lint=True)
        status, text = self.run(
            options, output, parser=VanishingParser(), loader=ForbiddenLoader()
        )
        assert status == 1
        assert "ERROR loading the configuration content:" in text
        assert "Syntax OK!" not in text

    def test_dump_error(self, sample, write_config, output):
        config = ServiceConfig(extra_config={"bad": object()})
        options = CheckOptions(config=write_config(sample), debug=3)
        status, text = self.run(options, output, parser=FixedParser(config))
        assert status == 1
        assert "ERROR checking the configuration file:" in text

    @pytest.mark.parametrize("status_code", [404, 500])
    def test_unexpected_status(self, sample, write_config, output, status_code):
        session = DummySession(DummyResponse(status_code, HOSTED_SCHEMA))
        options = CheckOptions(config=write_config(sample), lint=True, online=True)
        status, text = self.run(options, output, loader=default_loader(session))
        assert status == 1
        assert "ERROR loading the schema:" in text
        assert f"{ONLINE_URL} returned status code {status_code}" in text

    def test_schema_compilation_error(self, sample, write_config, output, tmp_path):
        schema = tmp_path / "broken.json"
        schema.write_text(json.dumps({"type": 12}), encoding="utf-8")
        options = CheckOptions(
            config=write_config(sample), lint=True, schema=str(schema), embedded_schema="{}"
        )
        status, text = self.run(options, output)
        assert status == 1
        assert "ERROR compiling the schema:" in text
        assert "is not a valid schema" in text
