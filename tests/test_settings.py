"""
Tests for the persisted mapping store.
"""

import json

from seatable_gantt.mapping import FieldMapping
from seatable_gantt.settings import MappingStore


class TestMappingStore:

    def test_missing_file(self, tmp_path):
        store = MappingStore(tmp_path / "mapping.json")
        assert store.load() is None
        assert store.load_mapping() == FieldMapping()

    def test_save_then_load(self, tmp_path):
        store = MappingStore(tmp_path / "nested" / "mapping.json")
        store.save(FieldMapping({"name": "任务名", "startTime": "开始"}))
        assert json.loads(store.path.read_text(encoding="utf-8")) == {"name": "任务名", "startTime": "开始"}
        assert store.load_mapping().get("startTime") == "开始"

    def test_save_replaces_whole_file(self, tmp_path):
        store = MappingStore(tmp_path / "mapping.json")
        store.save(FieldMapping({"name": "title"}))
        store.save(FieldMapping({"endTime": "finish"}))
        assert store.load() == {"endTime": "finish"}
        assert list(tmp_path.iterdir()) == [store.path]

    def test_corrupt_file_uses_defaults(self, tmp_path, caplog):
        path = tmp_path / "mapping.json"
        path.write_text("{not json", encoding="utf-8")
        store = MappingStore(path)
        assert store.load() is None
        assert store.load_mapping() == FieldMapping()
        assert "mapping.json" in caplog.text

    def test_malformed_content_uses_defaults(self, tmp_path):
        path = tmp_path / "mapping.json"
        path.write_text(json.dumps({"name": "title", "nope": "x"}), encoding="utf-8")
        assert MappingStore(path).load_mapping().overrides == {}
