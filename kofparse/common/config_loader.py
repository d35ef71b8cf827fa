"""Configuration loading and validation."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from kofparse.common.errors import ConfigError
from kofparse.common.fs import read_yaml
from kofparse.common.schema import validate_parser_config

PACKAGE_DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CONFIG_PATH = PACKAGE_DATA_DIR / "defaults.yml"


@dataclass(frozen=True)
class ParserConfig:
    mode: str = "auto"
    valid_points_only: bool = True
    encodings: tuple[str, ...] = ("utf-8", "cp1252")
    validate_extension: bool = True
    recursive: bool = False
    default_header: str | None = None
    log_level: str = "INFO"
    epsg_registry: Path | None = None


def _deep_merge(base: Any, overlay: Any) -> Any:
    if isinstance(base, dict) and isinstance(overlay, dict):
        merged = dict(base)
        for key, value in overlay.items():
            if key in merged:
                merged[key] = _deep_merge(merged[key], value)
            else:
                merged[key] = value
        return merged
    return overlay


def _load_yaml_with_overlay(path: Path, overlay_path: Path | None) -> dict:
    base = read_yaml(path)
    if overlay_path is None or not overlay_path.exists():
        return base
    overlay = read_yaml(overlay_path)
    if overlay is None:
        return base
    if not isinstance(overlay, dict):
        raise ConfigError(f"Overlay config must be a mapping: {overlay_path}")
    return _deep_merge(base, overlay)


def load_parser_config(
    path: Path | None = None,
    *,
    overlay_path: Path | None = None,
    allow_unknown: bool = False,
) -> ParserConfig:
    config_path = path or DEFAULT_CONFIG_PATH
    if not config_path.exists():
        raise ConfigError(f"Missing parser config: {config_path}")
    cfg = validate_parser_config(_load_yaml_with_overlay(config_path, overlay_path), allow_unknown=allow_unknown)

    registry = cfg.get("epsg_registry")
    return ParserConfig(
        mode=cfg["mode"],
        valid_points_only=cfg["valid_points_only"],
        encodings=tuple(cfg["encodings"]),
        validate_extension=bool(cfg.get("validate_extension", True)),
        recursive=bool(cfg.get("recursive", False)),
        default_header=cfg.get("default_header"),
        log_level=str(cfg.get("log_level", "INFO")).upper(),
        epsg_registry=Path(registry) if registry else None,
    )
