"""
Tests for the configuration module.
"""

import os
import tempfile

import pytest
import yaml

from lsx.config import Config, ConfigValidationError
from lsx.options import Options, SortBy


def test_default_config():
    """Test that default configuration is loaded when no file is provided."""
    config = Config()

    assert not config.config_file_found
    assert config.to_options() == Options()


def test_config_from_file():
    """Test loading configuration from a file."""
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yml", delete=False) as temp:
        yaml.dump({
            "defaults": {
                "long_format": True,
                "sort_by": "time",
            }
        }, temp)

    try:
        config = Config(temp.name)
        options = config.to_options()

        assert config.config_file_found
        assert options.long_format
        assert options.sort_by == SortBy.TIME
        # Values not in the file keep their defaults
        assert not options.all_files
        assert options.expand_patterns
    finally:
        os.unlink(temp.name)


def test_default_location(isolated_environment):
    """Test that ~/.lsx/config.yml is picked up."""
    config_dir = isolated_environment / ".lsx"
    config_dir.mkdir()
    (config_dir / "config.yml").write_text("defaults:\n  all_files: true\n")

    config = Config()

    assert config.config_file_found
    assert config.to_options().all_files


def test_xdg_location(isolated_environment):
    """Test that ~/.config/lsx/config.yml is picked up."""
    config_dir = isolated_environment / ".config" / "lsx"
    config_dir.mkdir(parents=True)
    (config_dir / "config.yml").write_text("defaults:\n  sort_by: size\n")

    assert Config().to_options().sort_by == SortBy.SIZE


def test_missing_explicit_file(tmp_path):
    """Test that a missing explicit file falls back to defaults."""
    config = Config(str(tmp_path / "nope.yml"))

    assert not config.config_file_found
    assert config.to_options() == Options()


def test_broken_yaml_is_reported(tmp_path, capsys):
    """Test that an unreadable file is reported and defaults are used."""
    path = tmp_path / "config.yml"
    path.write_text("defaults: [unclosed\n")

    config = Config(str(path))

    assert not config.config_file_found
    assert "Error loading configuration file" in capsys.readouterr().err
    assert config.to_options() == Options()


def test_env_override(monkeypatch):
    """Test that environment variables override configuration values."""
    monkeypatch.setenv("LSX_ALL_FILES", "yes")
    monkeypatch.setenv("LSX_SORT_BY", "Size")
    monkeypatch.setenv("LSX_MAX_DEPTH", "3")

    options = Config().to_options()

    assert options.all_files
    assert options.sort_by == SortBy.SIZE
    assert options.max_depth == 3


def test_env_invalid_bool(monkeypatch):
    """Test that an invalid boolean environment value is rejected."""
    monkeypatch.setenv("LSX_RECURSIVE", "maybe")

    with pytest.raises(ConfigValidationError):
        Config()


def test_overrides_take_precedence(tmp_path):
    """Test that explicit overrides beat file values, and None is ignored."""
    path = tmp_path / "config.yml"
    path.write_text("defaults:\n  reverse: true\n  sort_by: time\n")

    options = Config(str(path)).to_options(sort_by="size", reverse=None, long_format=True)

    assert options.sort_by == SortBy.SIZE
    assert options.reverse
    assert options.long_format


@pytest.mark.parametrize("defaults", [
    {"sort_by": "color"},
    {"long_format": "sometimes"},
    {"max_depth": -1},
    {"max_depth": "deep"},
    {"unknown_flag": True},
])
def test_invalid_values(tmp_path, defaults):
    """Test that invalid configuration values are rejected."""
    path = tmp_path / "config.yml"
    path.write_text(yaml.safe_dump({"defaults": defaults}))

    with pytest.raises(ConfigValidationError):
        Config(str(path)).to_options()


@pytest.mark.parametrize("text", ["defaults: null\n", "defaults: [a, b]\n", "defaults: yes\n"])
def test_defaults_must_be_mapping(tmp_path, text):
    """Test that a non-mapping defaults section is rejected."""
    path = tmp_path / "config.yml"
    path.write_text(text)

    with pytest.raises(ConfigValidationError, match="defaults in .* must be a mapping"):
        Config(str(path))


def test_create_default_config(tmp_path):
    """Test writing the default configuration file."""
    path = tmp_path / "sub" / "config.yml"

    written = Config.create_default_config(path)

    assert written == path
    assert yaml.safe_load(path.read_text()) == Config.DEFAULT_CONFIG
    assert Config(str(path)).to_options() == Options()
    # An existing file is never overwritten
    assert Config.create_default_config(path) is None
