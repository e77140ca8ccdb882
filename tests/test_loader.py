import logging
from pathlib import Path

import pytest

from storydoc.data import StoryLoadError, StorySyntaxError, parse, parse_file, read_story_text
from tests.helpers.story_sources import FULL_STORY, MINIMAL_STORY


def test_parse_file_reads_utf8(tmp_path: Path) -> None:
    path = tmp_path / "story.sdc"
    path.write_text(MINIMAL_STORY.replace('"Only" }', '"Ünïcode" }', 1), encoding="utf-8")
    data = parse_file(path)
    assert data.chapters[0].name == "Ünïcode"


def test_parse_file_accepts_string_path(tmp_path: Path) -> None:
    path = tmp_path / "story.sdc"
    path.write_text(FULL_STORY, encoding="utf-8")
    assert parse_file(str(path)) == parse(FULL_STORY)


def test_parse_file_handles_crlf(tmp_path: Path) -> None:
    path = tmp_path / "story.sdc"
    path.write_bytes(MINIMAL_STORY.replace("\n", "\r\n").encode("utf-8"))
    assert parse_file(path) == parse(MINIMAL_STORY)


def test_missing_file_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(StoryLoadError) as excinfo:
        parse_file(tmp_path / "absent.sdc")
    assert "not found" in str(excinfo.value)


def test_invalid_utf8_raises_load_error(tmp_path: Path) -> None:
    path = tmp_path / "story.sdc"
    path.write_bytes(b"states [ \"\xff\" ]")
    with pytest.raises(StoryLoadError):
        read_story_text(path)


def test_directory_raises_load_error(tmp_path: Path) -> None:
    with pytest.raises(StoryLoadError):
        read_story_text(tmp_path)


def test_parse_error_propagates_from_file(tmp_path: Path) -> None:
    path = tmp_path / "broken.sdc"
    path.write_text("chapter 1 { name: 3 }", encoding="utf-8")
    with pytest.raises(StorySyntaxError):
        parse_file(path)


def test_parse_file_logs_load(tmp_path: Path, caplog) -> None:
    path = tmp_path / "story.sdc"
    path.write_text(MINIMAL_STORY, encoding="utf-8")
    with caplog.at_level(logging.INFO, logger="storydoc.data.loader"):
        parse_file(path)
    assert "Loaded story file" in caplog.text
