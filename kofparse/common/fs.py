"""Filesystem helpers."""

from __future__ import annotations

import codecs
import json
from pathlib import Path
from typing import Iterable

from kofparse.common.constants import DEFAULT_ENCODINGS, KOF_EXTENSION
from kofparse.common.errors import UnsupportedFileError


def ensure_dir(path: Path) -> None:
    path.mkdir(parents=True, exist_ok=True)


def read_yaml(path: Path):
    import yaml

    with path.open("r", encoding="utf-8") as f:
        return yaml.safe_load(f)


def write_json(path: Path, payload) -> None:
    ensure_dir(path.parent)
    with path.open("w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2, sort_keys=True)
        f.write("\n")


def read_json(path: Path):
    with path.open("r", encoding="utf-8") as f:
        return json.load(f)


def decode_kof_bytes(data: bytes, encodings: Iterable[str] = DEFAULT_ENCODINGS) -> str:
    """Decode raw KOF bytes, trying each encoding in turn.

    A UTF-8 byte order mark is stripped before decoding, and a decoded
    U+FEFF is stripped afterwards so the ``-05`` header sniff always sees
    the first real character. Line endings are normalised to ``\\n``.
    """
    if data.startswith(codecs.BOM_UTF8):
        data = data[len(codecs.BOM_UTF8) :]

    text = None
    tried: list[str] = []
    for encoding in encodings:
        tried.append(encoding)
        try:
            text = data.decode(encoding)
            break
        except UnicodeDecodeError:
            continue
    if text is None:
        raise UnsupportedFileError(f"Could not decode KOF content with any of: {', '.join(tried)}")

    return text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n")


def read_kof_text(path: Path, encodings: Iterable[str] = DEFAULT_ENCODINGS) -> str:
    if not path.is_file():
        raise UnsupportedFileError(f"Missing KOF input: {path}")
    return decode_kof_bytes(path.read_bytes(), encodings)


def has_kof_extension(path: Path) -> bool:
    return path.suffix.lower() == KOF_EXTENSION


def iter_kof_paths(folder: Path, *, recursive: bool = False) -> list[Path]:
    candidates = folder.rglob("*") if recursive else folder.glob("*")
    return sorted(path for path in candidates if path.is_file() and has_kof_extension(path))
