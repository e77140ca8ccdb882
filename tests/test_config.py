import json
from pathlib import Path

import pytest

from storydoc.core import config as config_module
from storydoc.core.config import DEFAULT_CONFIG, ParserConfig, load_config, save_config


def test_missing_config_file_returns_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("STORYDOC_MAX_CHOICE_DEPTH", raising=False)
    assert load_config(tmp_path / "absent.json") == DEFAULT_CONFIG


def test_malformed_config_file_returns_defaults(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("STORYDOC_MAX_CHOICE_DEPTH", raising=False)
    path = tmp_path / "config.json"
    path.write_text("{not json", encoding="utf-8")
    assert load_config(path) == DEFAULT_CONFIG


def test_config_values_are_normalized(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("STORYDOC_MAX_CHOICE_DEPTH", raising=False)
    path = tmp_path / "config.json"
    path.write_text(
        json.dumps({"max_choice_depth": 5000, "allow_int_for_float": "yes", "extra": 1}),
        encoding="utf-8",
    )
    config = load_config(path)
    assert config.max_choice_depth == 200
    assert config.allow_int_for_float is True


def test_save_then_load(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.delenv("STORYDOC_MAX_CHOICE_DEPTH", raising=False)
    path = tmp_path / "nested" / "config.json"
    save_config(ParserConfig(max_choice_depth=4, allow_int_for_float=False), path)
    assert load_config(path) == ParserConfig(max_choice_depth=4, allow_int_for_float=False)


def test_environment_overrides_depth(tmp_path: Path, monkeypatch) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"max_choice_depth": 4}), encoding="utf-8")
    monkeypatch.setenv("STORYDOC_MAX_CHOICE_DEPTH", "7")
    assert load_config(path).max_choice_depth == 7
    monkeypatch.setenv("STORYDOC_MAX_CHOICE_DEPTH", "deep")
    assert load_config(path).max_choice_depth == 4


def test_non_integer_depth_override_is_logged(tmp_path: Path, monkeypatch, caplog) -> None:
    monkeypatch.setenv("STORYDOC_MAX_CHOICE_DEPTH", "deep")
    with caplog.at_level("WARNING", logger="storydoc.core.config"):
        config = load_config(tmp_path / "absent.json")
    assert config == DEFAULT_CONFIG
    assert "STORYDOC_MAX_CHOICE_DEPTH" in caplog.text
    assert "'deep'" in caplog.text


def test_default_path_uses_user_config_dir(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setattr(config_module, "get_user_config_dir", lambda: tmp_path)
    assert config_module.get_default_config_path() == tmp_path / "config.json"


@pytest.mark.parametrize("depth", [0, -3, 201])
def test_out_of_range_depth_is_rejected(depth: int) -> None:
    with pytest.raises(ValueError):
        ParserConfig(max_choice_depth=depth)
