"""Tests for typed section loading under strict and lenient policies."""

import json
from pathlib import Path

import pytest

from baseproject.app.errors import DeserializationError, SectionMissingError, SectionShapeError
from baseproject.app.schema import (
    ProjectConfig,
    SectionKey,
    ThemeSetting,
    WindowConfig,
    WindowState,
    default_document,
)
from baseproject.app.sections import (
    LoadPolicy,
    load_all_sections,
    load_project_config,
    load_section,
    load_window_config,
    load_window_state,
)
from baseproject.app.store import StoreGateway
from baseproject.services.diagnostics import SECTION_INVALID, SECTION_MISSING, DiagnosticsLog


def _store_with(doc) -> StoreGateway:
    return StoreGateway.in_memory(doc)


def test_missing_section_strict_vs_lenient():
    doc = default_document()
    del doc["window_state"]
    store = _store_with(doc)
    with pytest.raises(SectionMissingError) as info:
        load_section(store, SectionKey.WINDOW_STATE, LoadPolicy.STRICT)
    assert info.value.key == "window_state"

    state = load_section(store, SectionKey.WINDOW_STATE, LoadPolicy.LENIENT)
    assert state == WindowState()
    events = store.diagnostics.filter(kind=SECTION_MISSING)
    assert [e.key for e in events] == ["window_state"]


def test_invalid_section_strict_raises_deserialization_error():
    doc = default_document()
    doc["window_config"]["min_width"] = "wide"
    store = _store_with(doc)
    with pytest.raises(DeserializationError) as info:
        load_window_config(store, LoadPolicy.STRICT)
    assert info.value.key == "window_config"
    assert isinstance(info.value.cause, SectionShapeError)


def test_invalid_section_lenient_returns_full_default_not_partial():
    doc = default_document()
    doc["window_state"]["x"] = 555
    doc["window_state"]["fullscreen"] = "yes"
    store = _store_with(doc)
    state = load_window_state(store, LoadPolicy.LENIENT)
    assert state == WindowState()
    assert state.x == 100  # valid sibling field is not carried over
    event = store.diagnostics.filter(kind=SECTION_INVALID)[0]
    assert event.key == "window_state"
    assert "fullscreen" in event.cause


def test_valid_sections_load_fully():
    doc = default_document()
    doc["project_config"]["name"] = "Alpha"
    doc["window_state"]["theme"] = "Light"
    store = _store_with(doc)
    sections = load_all_sections(store, LoadPolicy.STRICT)
    assert sections.project == ProjectConfig(name="Alpha")
    assert sections.window_config == WindowConfig()
    assert sections.window_state.theme is ThemeSetting.LIGHT
    assert len(store.diagnostics) == 0


def test_lenient_events_go_to_explicit_sink():
    store = _store_with({})
    sink = DiagnosticsLog()
    load_section(store, "project_config", LoadPolicy.LENIENT, diagnostics=sink)
    assert len(sink) == 1
    assert len(store.diagnostics) == 0


def test_unknown_key_rejected():
    with pytest.raises(ValueError):
        load_section(_store_with({}), "plugins", LoadPolicy.LENIENT)


def test_corrupt_file_lenient_load_yields_all_defaults(tmp_path: Path):
    path = tmp_path / "baseproject.config"
    path.write_text("\x00\x01 definitely not json", encoding="utf-8")
    store = StoreGateway.open(path)
    sections = load_all_sections(store, LoadPolicy.LENIENT)
    assert sections.project == ProjectConfig()
    assert sections.window_config == WindowConfig()
    assert sections.window_state == WindowState()


def test_strict_load_after_round_trip(tmp_path: Path):
    path = tmp_path / "baseproject.config"
    store = StoreGateway.open(path)
    store.set(SectionKey.PROJECT_CONFIG, ProjectConfig(name="P", filepath="/p", remarks="n"))
    store.save()
    reopened = StoreGateway.open(path)
    assert load_project_config(reopened, LoadPolicy.STRICT) == ProjectConfig(
        name="P", filepath="/p", remarks="n"
    )
    assert json.loads(path.read_text(encoding="utf-8"))["project_config"]["name"] == "P"
