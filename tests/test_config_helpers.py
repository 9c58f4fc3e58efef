from pathlib import Path

import pytest

from baseproject.app.config_helpers import (
    record_fullscreen,
    record_panel_layout,
    record_theme,
    record_window_geometry,
    reset_section,
    update_project,
)
from baseproject.app.initializer import initialize_store
from baseproject.app.schema import ConcreteTheme, ThemeSetting, WindowState, default_document
from baseproject.app.sections import LoadPolicy, load_project_config, load_window_state
from baseproject.app.store import StoreGateway


@pytest.fixture
def store(tmp_path: Path) -> StoreGateway:
    s = StoreGateway.open(tmp_path / "baseproject.config")
    initialize_store(s)
    return s


def test_record_window_geometry_keeps_other_fields(store):
    record_theme(store, "light")
    record_window_geometry(store, width=1440.5, height=900, x=-20, y=40)
    state = load_window_state(store, LoadPolicy.STRICT)
    assert (state.width, state.height, state.x, state.y) == (1440.5, 900, -20, 40)
    assert state.theme is ThemeSetting.LIGHT


def test_helpers_do_not_save(store, tmp_path: Path):
    before = (tmp_path / "baseproject.config").read_text(encoding="utf-8")
    record_fullscreen(store, True)
    assert (tmp_path / "baseproject.config").read_text(encoding="utf-8") == before
    assert store.dirty
    assert load_window_state(store).fullscreen is True


def test_record_theme_accepts_concrete_and_rejects_unknown(store):
    assert record_theme(store, ConcreteTheme.DARK).theme is ThemeSetting.DARK
    with pytest.raises(ValueError):
        record_theme(store, "sepia")


def test_record_panel_layout_partial_update(store):
    record_panel_layout(store, vertical=[60, 40])
    state = load_window_state(store, LoadPolicy.STRICT)
    assert state.layout.horizontal == [15, 70, 15]
    assert state.layout.vertical == [60, 40]
    with pytest.raises(ValueError):
        record_panel_layout(store, horizontal=[1, 2])


def test_update_project_and_reset(store):
    update_project(store, name="Alpha", filepath="/data/alpha.bp")
    project = load_project_config(store, LoadPolicy.STRICT)
    assert project.name == "Alpha" and project.remarks == ""
    reset_section(store, "project_config")
    assert store.get("project_config") == default_document()["project_config"]


def test_helpers_repair_invalid_state(store):
    store.set("window_state", {"broken": True})
    state = record_window_geometry(store, width=800, height=600, x=0, y=0)
    assert state.theme is WindowState().theme
    assert load_window_state(store, LoadPolicy.STRICT).width == 800


def test_record_window_geometry_rejects_nan(store, tmp_path: Path):
    record_window_geometry(store, width=1024, height=768, x=1, y=2)
    with pytest.raises(ValueError):
        record_window_geometry(store, width=float("nan"), height=600, x=0, y=0)
    state = load_window_state(store, LoadPolicy.STRICT)
    assert (state.width, state.height) == (1024, 768)
    store.save()
    text = (tmp_path / "baseproject.config").read_text(encoding="utf-8")
    assert "NaN" not in text
