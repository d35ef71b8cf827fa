import pytest

from kofparse.common.errors import ConfigError
from kofparse.common.schema import validate_epsg_registry, validate_parser_config

BASE_PARSER = {
    "mode": "auto",
    "valid_points_only": True,
    "encodings": ["utf-8", "cp1252"],
    "validate_extension": True,
    "recursive": False,
    "default_header": None,
    "log_level": "INFO",
    "epsg_registry": None,
}


def test_validate_parser_config_accepts_valid_shape():
    validated = validate_parser_config(dict(BASE_PARSER))
    assert validated["mode"] == "auto"


def test_validate_parser_config_rejects_unknown_key_by_default():
    bad = dict(BASE_PARSER)
    bad["unexpected"] = True
    with pytest.raises(ConfigError):
        validate_parser_config(bad)


def test_validate_parser_config_allows_unknown_when_enabled():
    okay = dict(BASE_PARSER)
    okay["extra"] = 1
    validate_parser_config(okay, allow_unknown=True)


@pytest.mark.parametrize(
    "key,value",
    [
        ("mode", "fixed"),
        ("valid_points_only", "yes"),
        ("encodings", []),
        ("default_header", "05 PPPP"),
        ("log_level", "LOUD"),
    ],
)
def test_validate_parser_config_rejects_bad_values(key: str, value):
    bad = dict(BASE_PARSER)
    bad[key] = value
    with pytest.raises(ConfigError):
        validate_parser_config(bad)


def test_validate_parser_config_requires_core_keys():
    with pytest.raises(ConfigError):
        validate_parser_config({"mode": "auto"})


def test_validate_epsg_registry_requires_both_tables():
    with pytest.raises(ConfigError):
        validate_epsg_registry({"codes": {25832: "ETRS89 / UTM zone 32N"}})


def test_validate_epsg_registry_rejects_non_numeric_codes_and_blank_text():
    with pytest.raises(ConfigError):
        validate_epsg_registry({"codes": {"EPSG:25832": "x"}, "descriptions": {25832: "y"}})
    with pytest.raises(ConfigError):
        validate_epsg_registry({"codes": {25832: "x"}, "descriptions": {25832: "  "}})
