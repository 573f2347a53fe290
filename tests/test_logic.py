"""Tests for next/previous navigation between sibling files."""

import pytest

from quickplay.logic import SiblingNavigator
from quickplay.utils import MediaPath


class TestSiblingNavigator:
    def test_next_from_middle(self, video_dir):
        nav = SiblingNavigator()
        assert nav.next(video_dir / "ep2.mkv").name == "ep10.mkv"

    def test_next_wraps_to_first(self, video_dir):
        nav = SiblingNavigator()
        assert nav.next(video_dir / "ep10.mkv").name == "ep1.mkv"

    def test_previous_wraps_to_last(self, video_dir):
        nav = SiblingNavigator()
        assert nav.previous(video_dir / "ep1.mkv").name == "ep10.mkv"

    def test_previous_from_middle(self, video_dir):
        nav = SiblingNavigator()
        assert nav.previous(video_dir / "ep10.mkv").name == "ep2.mkv"

    @pytest.mark.parametrize("name", ["ep1.mkv", "ep2.mkv", "ep10.mkv"])
    def test_next_and_previous_are_inverse(self, video_dir, name):
        nav = SiblingNavigator()
        current = MediaPath.from_path(video_dir / name)
        assert nav.next(nav.previous(current)) == current
        assert nav.previous(nav.next(current)) == current

    def test_two_element_set(self, tmp_path):
        (tmp_path / "a.mp4").write_bytes(b"")
        (tmp_path / "b.mp4").write_bytes(b"")
        nav = SiblingNavigator()
        assert nav.next(tmp_path / "a.mp4").name == "b.mp4"
        assert nav.previous(tmp_path / "a.mp4").name == "b.mp4"

    def test_single_element_returns_itself(self, tmp_path):
        only = tmp_path / "only.mov"
        only.write_bytes(b"")
        nav = SiblingNavigator()
        assert nav.next(only) == MediaPath.from_path(only)
        assert nav.previous(only) == MediaPath.from_path(only)

    def test_empty_set_returns_none(self, tmp_path):
        nav = SiblingNavigator()
        assert nav.next(tmp_path / "ghost.mkv") is None
        assert nav.previous(tmp_path / "ghost.mkv") is None

    def test_current_missing_returns_none(self, video_dir):
        (video_dir / "ep2.mkv").rename(video_dir / "renamed.mkv")
        nav = SiblingNavigator()
        assert nav.next(video_dir / "ep2.mkv") is None
        assert nav.previous(video_dir / "ep2.mkv") is None

    def test_lists_folder_on_every_call(self, tmp_path):
        calls = []
        items = [MediaPath.from_path(tmp_path / n) for n in ("a.mkv", "b.mkv")]

        def lister(current):
            calls.append(current)
            return list(items)

        nav = SiblingNavigator(lister=lister)
        nav.next(items[0])
        nav.next(items[0])
        nav.previous(items[1])
        assert len(calls) == 3

    def test_unreadable_directory_returns_none(self, tmp_path):
        nav = SiblingNavigator(lister=lambda current: [])
        assert nav.next(tmp_path / "x.mkv") is None
