"""Tests for the diskcache-backed dataset cache."""

from cyberdoc_tree.cache import DatasetCache


class TestDatasetCache:
    def test_set_and_get(self, tmp_path, sample_records):
        with DatasetCache(cache_dir=str(tmp_path / "c")) as cache:
            cache.set("cyberdoc-api", sample_records)
            assert cache.get("cyberdoc-api") == sample_records

    def test_miss_returns_none(self, tmp_path):
        with DatasetCache(cache_dir=str(tmp_path / "c")) as cache:
            assert cache.get("absent") is None

    def test_persists_across_instances(self, tmp_path, sample_records):
        with DatasetCache(cache_dir=str(tmp_path / "c")) as cache:
            cache.set("k", sample_records)
        with DatasetCache(cache_dir=str(tmp_path / "c")) as cache:
            assert cache.get("k") == sample_records

    def test_clear_and_delete(self, tmp_path):
        with DatasetCache(cache_dir=str(tmp_path / "c")) as cache:
            cache.set("a", [1])
            cache.set("b", [2])
            cache.delete("a")
            assert cache.get("a") is None
            cache.clear()
            assert cache.get("b") is None

    def test_stats(self, tmp_path):
        with DatasetCache(cache_dir=str(tmp_path / "c")) as cache:
            cache.set("a", [1])
            stats = cache.stats()
        assert stats["enabled"] is True
        assert stats["size"] == 1

    def test_disabled_cache_is_noop(self, tmp_path):
        cache = DatasetCache(cache_dir=str(tmp_path / "c"), enabled=False)
        cache.set("a", [1])
        assert cache.get("a") is None
        assert cache.stats() == {"enabled": False}
        assert not (tmp_path / "c").exists()
