"""Shared test fixtures for cyberdoc-tree."""

import json

import pytest

from cyberdoc_tree.config import TreeConfig
from cyberdoc_tree.index import HierarchyIndex
from cyberdoc_tree.query import HierarchyQuery
from cyberdoc_tree.store import RecordStore


@pytest.fixture
def example_records():
    """Three-level chain: IScriptable -> Entity -> Player."""
    return [
        {"index": 1, "base": 0, "name": "IScriptable"},
        {"index": 2, "base": 1, "name": "Entity"},
        {"index": 3, "base": 2, "name": "Player"},
    ]


@pytest.fixture
def sample_records():
    """Two rooted trees plus a parentless leaf.

    IScriptable(1)
      Entity(2)
        Player(3)
          PlayerPuppet(5)
        Vehicle(4)
      gameObject(6)
    Lonely(7)
    ISerializable(8)
      inkWidget(9)
        inkText(10)
    """
    return [
        {"index": 1, "base": 0, "name": "IScriptable"},
        {"index": 2, "base": 1, "name": "Entity"},
        {"index": 3, "base": 2, "name": "Player"},
        {"index": 4, "base": 2, "name": "Vehicle"},
        {"index": 5, "base": 3, "name": "PlayerPuppet"},
        {"index": 6, "base": 1, "name": "gameObject"},
        {"index": 7, "base": 0, "name": "Lonely"},
        {"index": 8, "base": 0, "name": "ISerializable"},
        {"index": 9, "base": 8, "name": "inkWidget"},
        {"index": 10, "base": 9, "name": "inkText"},
    ]


@pytest.fixture
def sample_store(sample_records):
    return RecordStore.from_records(sample_records)


@pytest.fixture
def sample_index(sample_store):
    return HierarchyIndex.build(sample_store)


@pytest.fixture
def sample_query(sample_index):
    return HierarchyQuery(sample_index)


@pytest.fixture
def dataset_file(tmp_path, sample_records):
    """Sample records written to a JSON file."""
    path = tmp_path / "cyberdoc-api.json"
    path.write_text(json.dumps(sample_records))
    return path


@pytest.fixture
def file_config(tmp_path, dataset_file):
    """Config reading ``dataset_file`` with the cache under ``tmp_path``."""
    return TreeConfig(source=str(dataset_file), cache_dir=str(tmp_path / "cache"))


@pytest.fixture
def uncached_config(dataset_file):
    return TreeConfig(source=str(dataset_file), cache_enabled=False)
