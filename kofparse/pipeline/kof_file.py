"""KofFile: one KOF source with its parse result, CRS settings and outputs."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable

from kofparse.common.config_loader import ParserConfig
from kofparse.common.errors import ReprojectionError, UnsupportedFileError
from kofparse.common.fs import has_kof_extension, iter_kof_paths, read_kof_text
from kofparse.common.ids import generate_run_id
from kofparse.common.logging import get_logger, log_event
from kofparse.common.models import Diagnostic, FileMetadata, Geometry, ParseResult, ParseWarning
from kofparse.parsing.layout import find_header
from kofparse.parsing.parser import parse_kof
from kofparse.pipeline.coordinates import CoordinateTransform, reproject_collection
from kofparse.pipeline.epsg import EpsgRegistry, epsg_from_filename
from kofparse.pipeline.geojson import feature_collection
from kofparse.pipeline.kof_text import to_kof_text
from kofparse.pipeline.wkb import to_wkb_geometries


class KofFile:
    def __init__(
        self,
        name: str,
        text: str,
        *,
        config: ParserConfig | None = None,
        registry: EpsgRegistry | None = None,
        file_size: int | None = None,
        logger: logging.Logger | None = None,
    ):
        self.name = name
        self.text = text
        self.config = config or ParserConfig()
        self.registry = registry or EpsgRegistry.load(self.config.epsg_registry)
        self.logger = logger or get_logger("kof_file")
        self.metadata = FileMetadata(
            file_name=Path(name).name,
            file_extension=Path(name).suffix.lower() or None,
            file_size=file_size if file_size is not None else len(text.encode("utf-8")),
        )
        self._result: ParseResult | None = None

        sniffed = epsg_from_filename(name)
        if sniffed and self.registry.contains(sniffed):
            self.set_source_crs(sniffed)

    @classmethod
    def from_path(
        cls,
        path: Path,
        *,
        validate_extension: bool | None = None,
        config: ParserConfig | None = None,
        registry: EpsgRegistry | None = None,
        logger: logging.Logger | None = None,
    ) -> "KofFile":
        config = config or ParserConfig()
        check_extension = config.validate_extension if validate_extension is None else validate_extension
        if check_extension and not has_kof_extension(path):
            raise UnsupportedFileError(f"Not a .kof file: {path}")
        text = read_kof_text(path, config.encodings)
        return cls(
            str(path),
            text,
            config=config,
            registry=registry,
            file_size=path.stat().st_size,
            logger=logger,
        )

    @classmethod
    def from_text(cls, name: str, text: str, **kwargs) -> "KofFile":
        return cls(name, text, **kwargs)

    def parse(self) -> ParseResult:
        if self._result is None:
            self._result = parse_kof(
                self.text,
                mode=self.config.mode,
                valid_points_only=self.config.valid_points_only,
                default_header=self.config.default_header,
                metadata=self.metadata,
                logger=self.logger,
            )
            log_event(
                self.logger,
                "KOF file parsed",
                stage="parse",
                file=self.metadata.file_name,
                event="FILE_PARSED",
                status="ok",
                strategy=self.metadata.mode,
                geometries=len(self._result.geometries),
                warnings=len(self._result.warnings),
            )
        return self._result

    @property
    def result(self) -> ParseResult:
        return self.parse()

    @property
    def geometries(self) -> list[Geometry]:
        return self.result.geometries

    @property
    def warnings(self) -> list[ParseWarning]:
        return self.result.warnings

    @property
    def diagnostics(self) -> list[Diagnostic]:
        return self.result.diagnostics

    def feature_codes(self) -> list[str]:
        self.parse()
        return sorted(self.metadata.feature_codes)

    def set_source_crs(self, code: str | int) -> str:
        normalized, description = self.registry.require(code)
        self.metadata.source_crs = normalized
        self.metadata.source_crs_description = description
        return normalized

    def set_target_crs(self, code: str | int) -> str:
        normalized, description = self.registry.require(code)
        self.metadata.target_crs = normalized
        self.metadata.target_crs_description = description
        return normalized

    def to_geojson(self, transform: CoordinateTransform | None = None) -> dict:
        """FeatureCollection in the target CRS when one is set, else as parsed.

        Reprojection problems never raise: the untransformed collection is
        returned and the reason is kept in ``metadata.reprojection_error``.
        """
        collection = feature_collection(self.geometries, crs=self.metadata.source_crs)
        target = self.metadata.target_crs
        if target is None or target == self.metadata.source_crs:
            return collection

        self.metadata.reprojection_error = None
        try:
            if self.metadata.source_crs is None:
                raise ReprojectionError("No source CRS set")
            if transform is None:
                raise ReprojectionError("No coordinate transform configured")
            projected = reproject_collection(collection, self.metadata.source_crs, target, transform)
        except ReprojectionError as exc:
            self.metadata.reprojection_error = str(exc)
            log_event(
                self.logger,
                "Reprojection skipped",
                stage="reproject",
                file=self.metadata.file_name,
                event="REPROJECTION_FAILED",
                status="fail_soft",
                error_code=exc.error_code,
            )
            return collection

        projected["crs"] = {"type": "name", "properties": {"name": target}}
        return projected

    def reproject(self, target: str | int, transform: CoordinateTransform | None = None) -> dict:
        self.set_target_crs(target)
        return self.to_geojson(transform=transform)

    def to_wkb_geometries(self) -> list[dict]:
        return to_wkb_geometries(self.geometries)

    def to_kof_text(self) -> str:
        header = find_header(self.text.splitlines())
        return to_kof_text(self.result, header=header.rstrip() if header else None)


def _collect_paths(source: Path | str | Iterable[Path | str], recursive: bool) -> list[Path]:
    if isinstance(source, (str, Path)):
        path = Path(source)
        if path.is_dir():
            return iter_kof_paths(path, recursive=recursive)
        return [path]
    return [Path(item) for item in source]


def read_kof(
    source: Path | str | Iterable[Path | str],
    *,
    validate_extension: bool | None = None,
    recursive: bool | None = None,
    config: ParserConfig | None = None,
    registry: EpsgRegistry | None = None,
    logger: logging.Logger | None = None,
) -> list[KofFile]:
    """Load and parse a file, a list of files, or every .kof file in a folder."""
    config = config or ParserConfig()
    registry = registry or EpsgRegistry.load(config.epsg_registry)
    logger = logger or get_logger("kof_file")
    walk = config.recursive if recursive is None else recursive
    run_id = generate_run_id()

    files: list[KofFile] = []
    for path in _collect_paths(source, walk):
        kof = KofFile.from_path(
            path,
            validate_extension=validate_extension,
            config=config,
            registry=registry,
            logger=logger,
        )
        kof.parse()
        files.append(kof)

    log_event(
        logger,
        f"Read {len(files)} KOF file(s)",
        run_id=run_id,
        stage="read",
        event="READ_COMPLETE",
        status="ok",
        geometries=sum(len(kof.geometries) for kof in files),
    )
    return files
