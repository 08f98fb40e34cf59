"""Tests for ConfigManager."""

from pathlib import Path

import pytest
import yaml

from photometa.config import DEFAULT_CONFIG, ConfigError, ConfigManager


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    """Keep config searches away from the real home and working directory."""
    home = tmp_path / "home"
    work = tmp_path / "work"
    home.mkdir()
    work.mkdir()
    monkeypatch.setattr(Path, "home", classmethod(lambda cls: home))
    monkeypatch.chdir(work)
    return home


def test_defaults_when_no_file(isolated_home):
    config = ConfigManager.load()
    assert config.config_path is None
    assert config.get("thumbnail.max_size") == 200
    assert config.get("media.allowed_types") == ["image/jpeg", "image/png", "image/webp"]
    assert not (isolated_home / ".photometa").exists()


def test_user_values_merge_over_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(yaml.safe_dump({"thumbnail": {"max_size": 64}, "extra": {"key": 1}}))

    config = ConfigManager.load(str(path))

    assert config.config_path == path
    assert config.get("thumbnail.max_size") == 64
    assert config.get("thumbnail.quality") == 70
    assert config.get("extra.key") == 1
    assert DEFAULT_CONFIG["thumbnail"]["max_size"] == 200


def test_finds_config_in_home(isolated_home):
    config_dir = isolated_home / ".photometa"
    config_dir.mkdir()
    (config_dir / "config.yaml").write_text("processing:\n  max_workers: 9\n")

    assert ConfigManager.load().get("processing.max_workers") == 9


def test_finds_config_in_working_directory():
    Path("config.yaml").write_text("extraction:\n  apply_altitude_ref: false\n")
    assert ConfigManager.load().get("extraction.apply_altitude_ref") is False


def test_empty_file_gives_defaults(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("")
    assert ConfigManager.load(str(path)).get("processing.max_workers") == 4


def test_missing_explicit_file_raises(tmp_path):
    with pytest.raises(ConfigError, match="not found"):
        ConfigManager.load(str(tmp_path / "missing.yaml"))


def test_create_if_missing_writes_defaults(tmp_path):
    path = tmp_path / "nested" / "config.yaml"
    config = ConfigManager.load(str(path), create_if_missing=True)

    assert path.exists()
    assert yaml.safe_load(path.read_text()) == DEFAULT_CONFIG
    assert config.config_path == path


def test_invalid_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("thumbnail: [unclosed")
    with pytest.raises(ConfigError, match="parse"):
        ConfigManager.load(str(path))


def test_non_mapping_yaml_raises(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text("- just\n- a list\n")
    with pytest.raises(ConfigError, match="dictionary"):
        ConfigManager.load(str(path))


def test_get_and_set_dot_notation():
    config = ConfigManager.defaults()
    config.set("thumbnail.quality", 90)
    config.set("new.section.value", "x")

    assert config.get("thumbnail.quality") == 90
    assert config.get("new.section.value") == "x"
    assert config.get("nonexistent.key", "fallback") == "fallback"
    assert DEFAULT_CONFIG["thumbnail"]["quality"] == 70


def test_save_round_trip(tmp_path):
    config = ConfigManager.defaults()
    config.set("thumbnail.enabled", False)
    path = tmp_path / "saved.yaml"
    config.save(str(path))

    assert ConfigManager.load(str(path)).get("thumbnail.enabled") is False


def test_save_without_path_raises():
    with pytest.raises(ConfigError):
        ConfigManager.defaults().save()


def test_to_dict_is_a_copy():
    config = ConfigManager.defaults()
    snapshot = config.to_dict()
    snapshot["thumbnail"]["max_size"] = 1
    assert config.get("thumbnail.max_size") == 200
