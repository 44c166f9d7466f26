"""Tests for the apimeta command line interface."""

import json
import shutil

import pytest
import yaml
from click.testing import CliRunner

from apimeta.cli import cli


@pytest.fixture
def workspace(tmp_path, monkeypatch, petstore_file):
    """A working directory holding the pet store definitions."""
    monkeypatch.chdir(tmp_path)
    shutil.copy(petstore_file, tmp_path / "api.yml")
    return tmp_path


@pytest.fixture
def runner():
    return CliRunner()


class TestRender:
    """Test the render command."""

    def test_default_version(self, runner, workspace):
        result = runner.invoke(cli, ["render", "api.yml"])
        assert result.exit_code == 0, result.output
        assert json.loads(result.stdout)["openapi"] == "3.1.1"

    def test_configured_version(self, runner, workspace):
        (workspace / "apimeta.yml").write_text("default_version: '3.0'\n")
        result = runner.invoke(cli, ["render", "api.yml"])
        assert json.loads(result.stdout)["openapi"] == "3.0.3"

    def test_swagger(self, runner, workspace):
        result = runner.invoke(cli, ["render", "api.yml", "--version", "2.0"])
        assert result.exit_code == 0, result.output
        document = json.loads(result.stdout)
        assert document["swagger"] == "2.0"
        assert document["host"] == "api.example.com"

    def test_yaml(self, runner, workspace):
        result = runner.invoke(cli, ["render", "api.yml", "--format", "yaml"])
        assert result.exit_code == 0, result.output
        assert yaml.safe_load(result.stdout)["info"]["title"] == "Pet Store"

    def test_output_file(self, runner, workspace):
        result = runner.invoke(cli, ["render", "api.yml", "--version", "3.2", "-o", "out.json"])
        assert result.exit_code == 0, result.output
        assert "Wrote OpenAPI 3.2.0 document" in result.stdout
        assert json.loads((workspace / "out.json").read_text())["openapi"] == "3.2.0"

    def test_invalid_definitions(self, runner, workspace):
        (workspace / "broken.yml").write_text("models: {}\n")
        result = runner.invoke(cli, ["render", "broken.yml"])
        assert result.exit_code == 1
        assert "Error: Definitions validation error" in result.output


class TestCheck:
    """Test the check command."""

    def test_valid(self, runner, workspace):
        (workspace / "pet.json").write_text(json.dumps({"name": "Rex", "tags": ["good"]}))
        result = runner.invoke(cli, ["check", "api.yml", "Pet", "pet.json"])
        assert result.exit_code == 0, result.output
        assert "✅" in result.stdout

    def test_invalid(self, runner, workspace):
        (workspace / "pet.yml").write_text("name: ''\ntags: [1]\n")
        result = runner.invoke(cli, ["check", "api.yml", "Pet", "pet.yml"])
        assert result.exit_code == 1
        assert "❌" in result.stdout
        assert "name can't be blank" in result.stdout
        assert "tags[0] must be of type string" in result.stdout

    def test_json_output(self, runner, workspace):
        (workspace / "pet.json").write_text(json.dumps({"name": ""}))
        result = runner.invoke(cli, ["check", "api.yml", "Pet", "pet.json", "--json-output"])
        assert result.exit_code == 1
        report = json.loads(result.stdout)
        assert report["status"] == "invalid"
        assert report["errors"] == [
            {"path": "name", "kind": "blank", "message": "can't be blank"}
        ]

    def test_context(self, runner, workspace):
        """Read-only properties are ignored within requests."""
        (workspace / "pet.json").write_text(json.dumps({"id": "x", "name": "Rex"}))
        result = runner.invoke(cli, ["check", "api.yml", "Pet", "pet.json"])
        assert result.exit_code == 1
        result = runner.invoke(
            cli, ["check", "api.yml", "Pet", "pet.json", "--context", "request"]
        )
        assert result.exit_code == 0, result.output

    def test_unknown_schema(self, runner, workspace):
        (workspace / "pet.json").write_text("{}")
        result = runner.invoke(cli, ["check", "api.yml", "Unicorn", "pet.json"])
        assert result.exit_code == 1
        assert "Error:" in result.output
