from pathlib import Path

import pytest

from kofparse.common.config_loader import DEFAULT_CONFIG_PATH, ParserConfig, load_parser_config
from kofparse.common.errors import ConfigError


def test_load_parser_config_from_packaged_defaults():
    config = load_parser_config()

    assert config == ParserConfig()
    assert DEFAULT_CONFIG_PATH.name == "defaults.yml"


def test_load_parser_config_applies_overlay_values(tmp_path: Path):
    overlay = tmp_path / "overlay.yml"
    overlay.write_text(
        """mode: columns
valid_points_only: false
encodings: [cp1252]
log_level: debug
""",
        encoding="utf-8",
    )

    config = load_parser_config(overlay_path=overlay)

    assert config.mode == "columns"
    assert config.valid_points_only is False
    assert config.encodings == ("cp1252",)
    assert config.log_level == "DEBUG"
    assert config.validate_extension is True


def test_load_parser_config_ignores_empty_overlay_file(tmp_path: Path):
    overlay = tmp_path / "overlay.yml"
    overlay.write_text("", encoding="utf-8")

    assert load_parser_config(overlay_path=overlay) == ParserConfig()


def test_load_parser_config_rejects_non_mapping_overlay(tmp_path: Path):
    overlay = tmp_path / "overlay.yml"
    overlay.write_text("- columns\n", encoding="utf-8")

    with pytest.raises(ConfigError):
        load_parser_config(overlay_path=overlay)


def test_load_parser_config_missing_file_raises(tmp_path: Path):
    with pytest.raises(ConfigError):
        load_parser_config(tmp_path / "missing.yml")


def test_load_parser_config_reads_registry_path(tmp_path: Path):
    config_path = tmp_path / "parser.yml"
    config_path.write_text(
        """mode: auto
valid_points_only: true
encodings: [utf-8]
epsg_registry: custom/epsg.yml
""",
        encoding="utf-8",
    )

    config = load_parser_config(config_path)

    assert config.epsg_registry == Path("custom/epsg.yml")
    assert config.recursive is False
