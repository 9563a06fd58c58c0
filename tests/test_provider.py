"""Tests for the asynchronous dataset provider."""

import json
from dataclasses import replace
from unittest.mock import AsyncMock, MagicMock, patch

import httpx
import pytest

from cyberdoc_tree.exceptions import DatasetLoadError, InvalidRecordError
from cyberdoc_tree.provider import DatasetProvider


def _mock_client(mock_client, response):
    mock_client.return_value.__aenter__.return_value.get = AsyncMock(return_value=response)


class TestLocalSource:
    @pytest.mark.asyncio
    async def test_reads_file(self, file_config, sample_records):
        provider = DatasetProvider(file_config)
        try:
            assert await provider.fetch() == sample_records
        finally:
            provider.cache.close()

    @pytest.mark.asyncio
    async def test_second_fetch_served_from_cache(self, file_config, dataset_file, sample_records):
        provider = DatasetProvider(file_config)
        try:
            await provider.fetch()
            dataset_file.unlink()
            assert await provider.fetch() == sample_records
        finally:
            provider.cache.close()

    @pytest.mark.asyncio
    async def test_force_bypasses_cache(self, file_config, dataset_file):
        provider = DatasetProvider(file_config)
        try:
            await provider.fetch()
            dataset_file.write_text(json.dumps([{"index": 1, "base": 0, "name": "New"}]))
            records = await provider.fetch(force=True)
            assert [r["name"] for r in records] == ["New"]
            assert await provider.fetch() == records
        finally:
            provider.cache.close()

    @pytest.mark.asyncio
    async def test_fetch_without_remember_leaves_cache_empty(self, file_config, sample_records):
        provider = DatasetProvider(file_config)
        try:
            assert await provider.fetch(remember=False) == sample_records
            assert not provider.last_from_cache
            assert provider.cache.get(file_config.cache_key) is None

            provider.remember(sample_records)
            assert await provider.fetch() == sample_records
            assert provider.last_from_cache

            provider.forget()
            assert provider.cache.get(file_config.cache_key) is None
        finally:
            provider.cache.close()

    @pytest.mark.asyncio
    async def test_missing_file(self, uncached_config, tmp_path):
        provider = DatasetProvider(replace(uncached_config, source=str(tmp_path / "gone.json")))
        with pytest.raises(DatasetLoadError):
            await provider.fetch()

    @pytest.mark.asyncio
    async def test_invalid_json(self, uncached_config, dataset_file):
        dataset_file.write_text("{not json")
        with pytest.raises(DatasetLoadError):
            await DatasetProvider(uncached_config).fetch()

    @pytest.mark.asyncio
    async def test_non_array_document(self, uncached_config, dataset_file):
        dataset_file.write_text('{"index": 1}')
        with pytest.raises(InvalidRecordError):
            await DatasetProvider(uncached_config).fetch()


class TestRemoteSource:
    @pytest.mark.asyncio
    async def test_downloads_url(self, uncached_config, sample_records):
        config = replace(uncached_config, source="https://example.com/cyberdoc-api.json")
        response = MagicMock()
        response.text = json.dumps(sample_records)
        response.raise_for_status = MagicMock()

        with patch("httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, response)
            records = await DatasetProvider(config).fetch()

        assert records == sample_records

    @pytest.mark.asyncio
    async def test_http_error(self, uncached_config):
        config = replace(uncached_config, source="https://example.com/cyberdoc-api.json")
        response = MagicMock()
        response.raise_for_status = MagicMock(
            side_effect=httpx.HTTPStatusError("404 Not Found", request=MagicMock(), response=MagicMock())
        )

        with patch("httpx.AsyncClient") as mock_client:
            _mock_client(mock_client, response)
            with pytest.raises(DatasetLoadError) as exc:
                await DatasetProvider(config).fetch()

        assert exc.value.source == config.source
