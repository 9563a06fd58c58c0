"""Tests for cache-info and cache-clear."""

from typer.testing import CliRunner

from cyberdoc_tree.cache import DatasetCache
from cyberdoc_tree.cli import app

runner = CliRunner()


def test_cache_info_reports_dataset(tmp_path, monkeypatch, sample_records):
    cache_dir = tmp_path / "cache"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CYBERDOC_CACHE_DIR", str(cache_dir))
    with DatasetCache(cache_dir=str(cache_dir)) as cache:
        cache.set("cyberdoc-api", sample_records)

    result = runner.invoke(app, ["cache-info"])
    assert result.exit_code == 0
    assert "Enabled" in result.stdout
    assert "10 records" in result.stdout


def test_cache_clear(tmp_path, monkeypatch, sample_records):
    cache_dir = tmp_path / "cache"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CYBERDOC_CACHE_DIR", str(cache_dir))
    with DatasetCache(cache_dir=str(cache_dir)) as cache:
        cache.set("cyberdoc-api", sample_records)

    result = runner.invoke(app, ["cache-clear"])
    assert result.exit_code == 0
    with DatasetCache(cache_dir=str(cache_dir)) as cache:
        assert cache.get("cyberdoc-api") is None


def test_cache_disabled(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CYBERDOC_CACHE_ENABLED", "false")
    result = runner.invoke(app, ["cache-info"])
    assert result.exit_code == 0
    assert "Disabled" in result.stdout


def test_logging_options(tmp_path, monkeypatch, sample_records):
    cache_dir = tmp_path / "cache"
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("CYBERDOC_CACHE_DIR", str(cache_dir))
    with DatasetCache(cache_dir=str(cache_dir)) as cache:
        cache.set("cyberdoc-api", sample_records)

    result = runner.invoke(app, ["cache-info", "--verbose"])
    assert result.exit_code == 0
    assert "10 records" in result.stdout

    result = runner.invoke(app, ["cache-clear", "-q"])
    assert result.exit_code == 0
    assert "Cache cleared successfully" in result.stdout
