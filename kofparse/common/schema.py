"""Minimal strict schemas for YAML config validation."""

from __future__ import annotations

from kofparse.common.constants import PARSER_MODES
from kofparse.common.errors import ConfigError

PARSER_CONFIG_KEYS = {
    "mode",
    "valid_points_only",
    "encodings",
    "validate_extension",
    "recursive",
    "default_header",
    "log_level",
    "epsg_registry",
}
LOG_LEVELS = {"DEBUG", "INFO", "WARN", "WARNING", "ERROR"}


def _assert_required_keys(obj: dict, required: set[str], ctx: str) -> None:
    missing = required - set(obj)
    if missing:
        missing_str = ", ".join(sorted(missing))
        raise ConfigError(f"Missing keys in {ctx}: {missing_str}")


def _assert_no_unknown_keys(obj: dict, known: set[str], ctx: str, allow_unknown: bool) -> None:
    if allow_unknown:
        return
    unknown = set(obj) - known
    if unknown:
        unknown_str = ", ".join(sorted(unknown))
        raise ConfigError(f"Unknown keys in {ctx}: {unknown_str}")


def _assert_mapping(obj, ctx: str) -> dict:
    if not isinstance(obj, dict):
        raise ConfigError(f"{ctx} must be a mapping")
    return obj


def validate_parser_config(cfg: dict, *, allow_unknown: bool = False) -> dict:
    _assert_mapping(cfg, "parser config")
    _assert_required_keys(cfg, {"mode", "valid_points_only", "encodings"}, "parser config")
    _assert_no_unknown_keys(cfg, PARSER_CONFIG_KEYS, "parser config", allow_unknown)

    if cfg["mode"] not in PARSER_MODES:
        raise ConfigError(f"parser config mode must be one of: {', '.join(PARSER_MODES)}")
    if not isinstance(cfg["valid_points_only"], bool):
        raise ConfigError("parser config valid_points_only must be a boolean")
    encodings = cfg["encodings"]
    if not isinstance(encodings, list) or not encodings or not all(isinstance(e, str) for e in encodings):
        raise ConfigError("parser config encodings must be a non-empty list of strings")

    header = cfg.get("default_header")
    if header is not None and (not isinstance(header, str) or not header.strip().startswith("-05")):
        raise ConfigError("parser config default_header must be a '-05' header string")

    level = str(cfg.get("log_level", "INFO")).upper()
    if level not in LOG_LEVELS:
        raise ConfigError(f"parser config log_level must be one of: {', '.join(sorted(LOG_LEVELS))}")

    return cfg


def validate_epsg_registry(cfg: dict) -> dict:
    _assert_mapping(cfg, "epsg registry")
    _assert_required_keys(cfg, {"codes", "descriptions"}, "epsg registry")
    for table in ("codes", "descriptions"):
        entries = cfg[table]
        if not isinstance(entries, dict) or not entries:
            raise ConfigError(f"epsg registry {table} must be a non-empty mapping")
        for key, value in entries.items():
            if not str(key).isdigit():
                raise ConfigError(f"epsg registry {table} key must be a bare numeric code: {key}")
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(f"epsg registry {table}[{key}] must be a non-empty string")
    return cfg
