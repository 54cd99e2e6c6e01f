"""
Tests for Animation Mode Storage

Tests validate:
1. JSON store round trip and file format
2. Missing / malformed files are ignored with a warning
3. clear() removes the file and tolerates a missing one
4. The engine picks up a mode saved by a previous run

Run with: pytest tests/test_mode_store.py -v
"""

import json
import logging

import pytest

import sys
import os

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from core.animation import AnimationEngine, JsonModeStore, MemoryModeStore, ModeId, StripBuffers


@pytest.fixture
def state_path(tmp_path):
    return str(tmp_path / "state" / "animation.json")


class TestJsonModeStore:

    def test_missing_file(self, state_path):
        assert JsonModeStore(state_path).load_selected_mode() is None

    def test_save_and_load(self, state_path):
        store = JsonModeStore(state_path)
        store.save_selected_mode(7)
        assert store.load_selected_mode() == 7
        assert JsonModeStore(state_path).load_selected_mode() == 7

    def test_file_format(self, state_path):
        JsonModeStore(state_path).save_selected_mode(ModeId.FIRE)
        with open(state_path) as f:
            saved = json.load(f)
        assert saved['mode'] == 17
        assert 'saved_at' in saved

    def test_no_temp_files_left(self, state_path):
        store = JsonModeStore(state_path)
        for mode in range(5):
            store.save_selected_mode(mode)
        assert os.listdir(os.path.dirname(state_path)) == ["animation.json"]

    def test_failed_save_removes_temp_file(self, state_path, monkeypatch, caplog):
        store = JsonModeStore(state_path)
        store.save_selected_mode(2)

        def fail_replace(src, dst):
            raise OSError("disk full")

        monkeypatch.setattr(os, 'replace', fail_replace)
        with caplog.at_level(logging.ERROR):
            store.save_selected_mode(9)
        assert "disk full" in caplog.text
        assert os.listdir(os.path.dirname(state_path)) == ["animation.json"]
        assert store.load_selected_mode() == 2

    @pytest.mark.parametrize("content", [
        "not json",
        json.dumps([1, 2, 3]),
        json.dumps({"mode": "fire"}),
        json.dumps({"mode": True}),
        json.dumps({}),
    ])
    def test_malformed_file_ignored(self, state_path, content, caplog):
        os.makedirs(os.path.dirname(state_path))
        with open(state_path, 'w') as f:
            f.write(content)
        with caplog.at_level(logging.WARNING):
            assert JsonModeStore(state_path).load_selected_mode() is None
        assert caplog.records

    def test_clear(self, state_path):
        store = JsonModeStore(state_path)
        store.save_selected_mode(3)
        store.clear()
        assert not os.path.exists(state_path)
        store.clear()
        assert store.load_selected_mode() is None


class TestMemoryModeStore:

    def test_round_trip(self):
        store = MemoryModeStore()
        assert store.load_selected_mode() is None
        store.save_selected_mode(4)
        assert store.load_selected_mode() == 4
        assert store.save_count == 1
        store.clear()
        assert store.load_selected_mode() is None


class TestRestartPersistence:

    def test_engine_restores_previous_run(self, state_path):
        first = AnimationEngine(StripBuffers(20), JsonModeStore(state_path))
        first.set_mode(ModeId.SPLIT_COMPLEMENTARY_RAIN)

        second = AnimationEngine(StripBuffers(20), JsonModeStore(state_path))
        assert second.get_current_mode() == ModeId.SPLIT_COMPLEMENTARY_RAIN
