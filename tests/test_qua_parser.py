"""Tests for .qua map loading."""

from __future__ import annotations

import pytest

from src.strain_engine.lookup_tables import GameMode
from src.strain_engine.qua_parser import extract_map, parse_qua

QUA_4K = """\
AudioFile: audio.mp3
Mode: Keys4
Title: Test Song
Artist: Someone
DifficultyName: Hard
TimingPoints:
- Bpm: 180
HitObjects:
- Lane: 1
- StartTime: 500
  Lane: 3
  EndTime: 900
- StartTime: 250
  Lane: 2
- StartTime: 250
  Lane: 1
"""


def test_parse_4k_map(tmp_path):
    path = tmp_path / "song.qua"
    path.write_text(QUA_4K, encoding="utf-8")

    qua_map = parse_qua(path)

    assert qua_map.mode is GameMode.KEYS4
    assert qua_map.title == "Test Song"
    assert qua_map.difficulty_name == "Hard"
    assert [(h.lane, h.start_time) for h in qua_map.hit_objects] == [
        (1, 0.0),
        (1, 250.0),
        (2, 250.0),
        (3, 500.0),
    ]
    assert qua_map.hit_objects[3].end_time == 900.0
    assert qua_map.length == 900.0


def test_parse_7k_mode():
    qua_map = extract_map({"Mode": "Keys7", "HitObjects": [{"Lane": 4, "StartTime": 10}]})
    assert qua_map.mode is GameMode.KEYS7
    assert qua_map.hit_objects[0].end_time is None


def test_zero_end_time_is_plain_note():
    qua_map = extract_map({"Mode": "Keys4", "HitObjects": [{"Lane": 1, "EndTime": 0}]})
    assert not qua_map.hit_objects[0].is_long_note


def test_empty_map():
    qua_map = extract_map({"Mode": "Keys4"})
    assert qua_map.hit_objects == []
    assert qua_map.length == 0.0


def test_unsupported_mode():
    with pytest.raises(ValueError, match="Unsupported game mode"):
        extract_map({"Mode": "Keys5", "HitObjects": []})


def test_hit_object_without_lane():
    with pytest.raises(ValueError, match="Lane"):
        extract_map({"Mode": "Keys4", "HitObjects": [{"StartTime": 100}]})


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        parse_qua(tmp_path / "missing.qua")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "broken.qua"
    path.write_text("Mode: [Keys4\n", encoding="utf-8")
    with pytest.raises(ValueError, match="broken.qua"):
        parse_qua(path)
