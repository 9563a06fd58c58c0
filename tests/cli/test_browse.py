"""Tests for the query commands."""

import json

import pytest
from typer.testing import CliRunner

from cyberdoc_tree import __version__
from cyberdoc_tree.cli import app

runner = CliRunner()


@pytest.fixture
def source_args(dataset_file):
    return ["--source", str(dataset_file), "--no-cache", "--quiet"]


class TestRoots:
    def test_json(self, source_args):
        result = runner.invoke(app, ["roots", *source_args, "--format", "json"])
        assert result.exit_code == 0
        assert json.loads(result.stdout) == [
            {"index": 1, "name": "IScriptable", "descendants": 5},
            {"index": 8, "name": "ISerializable", "descendants": 2},
        ]

    def test_table(self, source_args):
        result = runner.invoke(app, ["roots", *source_args])
        assert result.exit_code == 0
        assert "IScriptable" in result.stdout
        assert "Lonely" not in result.stdout


class TestTree:
    def test_json_with_filter(self, source_args):
        result = runner.invoke(
            app, ["tree", "IScriptable", "Entity", "--filter", "player", "--format", "json", *source_args]
        )
        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["ids"] == ["1", "2", "3", "5"]
        assert data["level"] == "2"

    def test_rich_tree(self, source_args):
        result = runner.invoke(app, ["tree", "ISerializable", *source_args])
        assert result.exit_code == 0
        assert "inkText" in result.stdout

    def test_no_match(self, source_args):
        result = runner.invoke(app, ["tree", "IScriptable", "-f", "zzz", *source_args])
        assert result.exit_code == 0
        assert "No entries match" in result.stdout

    def test_unknown_root(self, source_args):
        result = runner.invoke(app, ["tree", "DoesNotExist", *source_args])
        assert result.exit_code == 1
        assert "Error" in result.stdout


class TestRoute:
    def test_route(self, source_args):
        result = runner.invoke(app, ["route", "3", *source_args])
        assert result.exit_code == 0
        assert result.stdout.strip() == "IScriptable/Entity/Player"

    def test_unknown_id(self, source_args):
        result = runner.invoke(app, ["route", "404", *source_args])
        assert result.exit_code == 1


class TestMissingSource:
    def test_reports_load_error(self, tmp_path):
        result = runner.invoke(
            app, ["roots", "--source", str(tmp_path / "gone.json"), "--no-cache", "--quiet"]
        )
        assert result.exit_code == 1
        assert "Cannot load dataset" in result.stdout


def test_version():
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.stdout
