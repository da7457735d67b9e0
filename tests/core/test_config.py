"""Tests for the JSON configuration file."""

import json
import pathlib

from abrscope.core.config import Config
from abrscope.core.utils.startup import get_appdata_dir, get_config_file


def test_data_dir_override(data_dir: pathlib.Path) -> None:
    assert get_appdata_dir() == data_dir
    assert get_config_file() == data_dir / "config.json"


def test_creates_default_file(data_dir: pathlib.Path) -> None:
    config = Config()

    assert (data_dir / "config.json").exists()
    assert config.timeout() == 10
    assert config.cache_ttl_seconds() == 30
    assert config.validate_on_parse() is True
    assert config.export_format() == "text"
    assert config.show_segments() is False
    assert config.max_rows() == 50
    assert config.debug_mode() is False


def test_missing_keys_are_back_filled(data_dir: pathlib.Path) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "config.json").write_text(json.dumps({"timeout": 5}))

    config = Config()
    assert config.timeout() == 5
    assert config.max_rows() == 50


def test_corrupted_file_falls_back_to_defaults(data_dir: pathlib.Path) -> None:
    data_dir.mkdir(parents=True, exist_ok=True)
    (data_dir / "config.json").write_text("{not json")

    config = Config()
    assert config.get_all() == Config.DEFAULT_CONFIG
    assert json.loads((data_dir / "config.json").read_text()) == Config.DEFAULT_CONFIG


def test_set_value_coerces_and_persists() -> None:
    config = Config()
    assert config.set_value("max_rows", "10")
    assert config.set_value("validate_on_parse", "false")
    assert config.set_value("user_agent", "abrscope-test/2")

    reloaded = Config()
    assert reloaded.max_rows() == 10
    assert reloaded.validate_on_parse() is False
    assert reloaded.user_agent() == "abrscope-test/2"


def test_unknown_export_format_uses_default() -> None:
    config = Config()
    config.set("export_format", "xml")
    assert config.export_format() == "text"


def test_explicit_config_file(tmp_path: pathlib.Path) -> None:
    path = tmp_path / "elsewhere" / "abrscope.json"
    config = Config(config_file=path)

    assert path.exists()
    assert config.get_config_file_path() == str(path)
