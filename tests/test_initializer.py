"""Tests for section seeding."""

import json
from pathlib import Path

from baseproject.app import store as store_module
from baseproject.app.initializer import initialize_store
from baseproject.app.schema import SectionKey, default_document
from baseproject.app.store import StoreGateway


class CountingStore(StoreGateway):
    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.save_calls = 0
        self.set_calls = 0

    def set(self, key, value):
        self.set_calls += 1
        super().set(key, value)

    def save(self):
        self.save_calls += 1
        super().save()


def test_fresh_install_writes_exact_default_document(tmp_path: Path):
    path = tmp_path / "baseproject.config"
    store = StoreGateway.open(path)
    result = initialize_store(store)
    assert result.seeded == [
        SectionKey.PROJECT_CONFIG,
        SectionKey.WINDOW_CONFIG,
        SectionKey.WINDOW_STATE,
    ]
    assert result.saved
    assert json.loads(path.read_text(encoding="utf-8")) == default_document()


def test_seeding_saves_exactly_once(tmp_path: Path):
    store = CountingStore(tmp_path / "baseproject.config")
    initialize_store(store)
    assert store.set_calls == 3
    assert store.save_calls == 1


def test_second_initialize_is_a_noop(tmp_path: Path):
    store = CountingStore(tmp_path / "baseproject.config")
    initialize_store(store)
    snapshot = store.document()
    result = initialize_store(store)
    assert not result.changed
    assert store.set_calls == 3
    assert store.save_calls == 1
    assert store.document() == snapshot


def test_partial_document_only_gains_missing_section(tmp_path: Path):
    path = tmp_path / "baseproject.config"
    existing = {
        "project_config": {"name": "Keep", "filepath": "/k", "remarks": "r"},
        "window_config": {
            "title": "Custom",
            "min_width": 1,
            "min_height": 2,
            "max_width": 3,
            "max_height": 4,
        },
    }
    path.write_text(json.dumps(existing), encoding="utf-8")
    store = StoreGateway.open(path)
    result = initialize_store(store)
    assert result.seeded == [SectionKey.WINDOW_STATE]
    on_disk = json.loads(path.read_text(encoding="utf-8"))
    assert on_disk["project_config"] == existing["project_config"]
    assert on_disk["window_config"] == existing["window_config"]
    assert on_disk["window_state"] == default_document()["window_state"]


def test_existing_invalid_section_is_not_overwritten(tmp_path: Path):
    path = tmp_path / "baseproject.config"
    doc = default_document()
    doc["window_state"] = {"width": "huge"}
    path.write_text(json.dumps(doc), encoding="utf-8")
    store = StoreGateway.open(path)
    result = initialize_store(store)
    assert not result.changed
    assert store.get("window_state") == {"width": "huge"}


def test_save_failure_is_reported_not_raised(tmp_path: Path, monkeypatch):
    def failing_replace(src, dst):
        raise PermissionError("read-only")

    monkeypatch.setattr(store_module, "SAVE_RETRY_DELAY_S", 0.0)
    monkeypatch.setattr(store_module.os, "replace", failing_replace)
    store = StoreGateway.open(tmp_path / "baseproject.config")
    result = initialize_store(store)
    assert result.save_error is not None
    assert not result.saved
    # defaults are still usable in memory
    assert store.document() == default_document()


def test_initialize_in_memory_store():
    store = StoreGateway.in_memory()
    result = initialize_store(store)
    assert result.changed
    assert not result.saved
    assert store.document() == default_document()
