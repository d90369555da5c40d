"""Tests for the stylesheet cache and its reload paths."""

import logging
import time

import pytest
from rbxcss.core.cache import CHANGE_EVENT, StyleCache
from rbxcss.core.models import StyleSheet


@pytest.fixture
def css_file(tmp_path):
    path = tmp_path / "roblox.css"
    path.write_text(".a { gap: 1px; }", encoding="utf-8")
    return path


class TestLoad:
    def test_missing_file(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="rbxcss")
        cache = StyleCache(tmp_path / "missing.css")
        sheet = cache.load()
        assert sheet == StyleSheet.empty()
        assert cache.sheet is sheet
        assert len([r for r in caplog.records if r.levelno == logging.WARNING]) == 1

    def test_unreadable_path_gives_empty_sheet(self, tmp_path, caplog):
        caplog.set_level(logging.WARNING, logger="rbxcss")
        folder = tmp_path / "roblox.css"
        folder.mkdir()
        sheet = StyleCache(folder).load()
        assert sheet == StyleSheet.empty()
        assert any("Could not read CSS file" in r.message for r in caplog.records)

    def test_initial_load(self, css_file):
        cache = StyleCache(css_file)
        assert cache.sheet == StyleSheet.empty()
        cache.load()
        assert "a" in cache.sheet


class TestReload:
    def test_notify_change_publishes_new_sheet(self, css_file):
        cache = StyleCache(css_file)
        old = cache.load()
        css_file.write_text(".a { gap: 2px; } .b { gap: 3px; }", encoding="utf-8")

        assert cache.notify(css_file, CHANGE_EVENT) is True
        assert cache.sheet is not old
        assert cache.sheet.get("a").declarations["gap"] == "2 px"
        # The previously published sheet is untouched
        assert old.get("a").declarations["gap"] == "1 px"
        assert "b" not in old

    def test_other_events_and_paths_are_ignored(self, css_file, tmp_path):
        cache = StyleCache(css_file)
        old = cache.load()
        assert cache.notify(css_file, "rename") is False
        assert cache.notify(tmp_path / "other.css", CHANGE_EVENT) is False
        assert cache.sheet is old

    def test_read_error_keeps_previous_sheet(self, css_file, caplog):
        caplog.set_level(logging.ERROR, logger="rbxcss")
        calls = []

        def loader(path):
            calls.append(path)
            if len(calls) > 1:
                raise OSError("disk on fire")
            return StyleSheet.empty()

        cache = StyleCache(css_file, loader=loader)
        old = cache.load()
        assert cache.reload() is False
        assert cache.sheet is old
        assert any("disk on fire" in r.message for r in caplog.records)

    def test_deleted_file_keeps_previous_sheet(self, css_file, caplog):
        caplog.set_level(logging.ERROR, logger="rbxcss")
        cache = StyleCache(css_file)
        old = cache.load()
        css_file.unlink()

        assert cache.notify(css_file, CHANGE_EVENT) is False
        assert cache.sheet is old
        assert len(cache.sheet) == 1
        assert any("Failed to reload CSS" in r.message for r in caplog.records)

    def test_recreated_file_is_picked_up(self, css_file):
        cache = StyleCache(css_file)
        cache.load()
        css_file.unlink()
        assert cache.poll() is False
        css_file.write_text(".n { gap: 4px; }", encoding="utf-8")
        assert cache.poll() is True
        assert list(cache.sheet) == ["n"]

    def test_reload_logs_class_count(self, css_file, caplog):
        caplog.set_level(logging.INFO, logger="rbxcss")
        cache = StyleCache(css_file)
        cache.load()
        cache.reload()
        assert any("CSS updated" in r.message and "1 classes" in r.message for r in caplog.records)


class TestPolling:
    def test_poll_detects_content_change(self, css_file):
        cache = StyleCache(css_file)
        cache.load()
        assert cache.poll() is False
        css_file.write_text(".z { gap: 9px; }", encoding="utf-8")
        assert cache.poll() is True
        assert list(cache.sheet) == ["z"]
        assert cache.poll() is False

    def test_poll_with_missing_file(self, tmp_path):
        cache = StyleCache(tmp_path / "missing.css")
        cache.load()
        assert cache.poll() is False

    def test_watch_thread_reloads(self, css_file):
        cache = StyleCache(css_file)
        cache.load()
        cache.watch(interval=0.01)
        try:
            assert cache.watching
            css_file.write_text(".w { gap: 5px; }", encoding="utf-8")
            deadline = time.monotonic() + 5
            while "w" not in cache.sheet and time.monotonic() < deadline:
                time.sleep(0.01)
            assert "w" in cache.sheet
        finally:
            cache.stop()
        assert not cache.watching
