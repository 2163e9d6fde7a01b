import copy

import pygame

from colorcorner.config import DEFAULT_CONFIG
from colorcorner.paint import app as paint_app
from colorcorner.paint.app import ColoringApp, _coerce_palette, _row_rects


def test_coerce_palette_skips_bad_entries():
    assert _coerce_palette(["#000000", "red", "#ff0000"]) == [(0, 0, 0), (255, 0, 0)]


def test_row_rects_split_width_evenly():
    rects = _row_rects(10, 20, 100, 2, height=30)
    assert [rect.topleft for rect in rects] == [(10, 20), (62, 20)]
    assert all(rect.size == (48, 30) for rect in rects)
    assert _row_rects(0, 0, 100, 0) == []


def _refuse_load_config():
    raise AssertionError("config should come from the caller")


def test_app_uses_given_config(tmp_path, monkeypatch):
    monkeypatch.setattr(paint_app, "load_config", _refuse_load_config)
    pygame.font.init()
    config = copy.deepcopy(DEFAULT_CONFIG)
    config["data_root"] = str(tmp_path)
    config["editor"]["brush_size"] = 12

    app = ColoringApp(config=config, screen=pygame.Surface((800, 600)))

    assert app.config is config
    assert (tmp_path / "exports").exists()
    assert app.session.tool_state.brush_size == 12


def test_main_loads_config_once(monkeypatch):
    calls = []
    created = []

    def fake_load_config():
        calls.append(1)
        return {"log_level": "INFO"}

    class FakeApp:
        def __init__(self, image_path=None, *, config=None):
            created.append((image_path, config))

        def run(self, *, quit_on_exit=True):
            pass

    monkeypatch.setattr(paint_app, "load_config", fake_load_config)
    monkeypatch.setattr(paint_app, "ColoringApp", FakeApp)

    paint_app.main([])

    assert len(calls) == 1
    assert created == [(None, {"log_level": "INFO"})]
