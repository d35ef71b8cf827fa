"""EPSG code registry used to gate source/target CRS settings."""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping

from kofparse.common.config_loader import PACKAGE_DATA_DIR
from kofparse.common.errors import ConfigError, InvalidEpsgCodeError
from kofparse.common.fs import read_yaml
from kofparse.common.schema import validate_epsg_registry

DEFAULT_REGISTRY_PATH = PACKAGE_DATA_DIR / "epsg.yml"

_CODE_RE = re.compile(r"^(?:epsg:)?(\d{3,6})$", re.IGNORECASE)
_FILENAME_EPSG_RE = re.compile(r"epsg[_:-]?(\d{3,6})", re.IGNORECASE)


def normalize_epsg(code: str | int | None) -> str | None:
    if code is None:
        return None
    match = _CODE_RE.match(str(code).strip())
    if not match:
        return None
    return f"EPSG:{int(match.group(1))}"


def epsg_from_filename(name: str) -> str | None:
    match = _FILENAME_EPSG_RE.search(Path(name).stem)
    return f"EPSG:{int(match.group(1))}" if match else None


@dataclass(frozen=True)
class EpsgRegistry:
    names: Mapping[int, str]
    descriptions: Mapping[int, str]

    @classmethod
    def load(cls, path: Path | None = None) -> "EpsgRegistry":
        registry_path = path or DEFAULT_REGISTRY_PATH
        if not registry_path.exists():
            raise ConfigError(f"Missing EPSG registry: {registry_path}")
        cfg = validate_epsg_registry(read_yaml(registry_path))
        return cls(
            names={int(key): str(value) for key, value in cfg["codes"].items()},
            descriptions={int(key): str(value) for key, value in cfg["descriptions"].items()},
        )

    @staticmethod
    def normalize(code: str | int | None) -> str | None:
        return normalize_epsg(code)

    @staticmethod
    def _number(code: str | int | None) -> int | None:
        normalized = normalize_epsg(code)
        return int(normalized.split(":", 1)[1]) if normalized else None

    def contains(self, code: str | int | None) -> bool:
        number = self._number(code)
        return number is not None and number in self.names and number in self.descriptions

    def name(self, code: str | int | None) -> str | None:
        number = self._number(code)
        return self.names.get(number) if number is not None else None

    def describe(self, code: str | int | None) -> str | None:
        number = self._number(code)
        return self.descriptions.get(number) if number is not None else None

    def require(self, code: str | int | None) -> tuple[str, str]:
        """Normalized code and description, or InvalidEpsgCodeError."""
        normalized = normalize_epsg(code)
        if normalized is None:
            raise InvalidEpsgCodeError(f"Invalid EPSG code: {code!r}")
        if not self.contains(normalized):
            raise InvalidEpsgCodeError(f"EPSG code not in registry: {normalized}")
        return normalized, self.describe(normalized)
