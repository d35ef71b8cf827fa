"""Line-by-line KOF parse driver."""

from __future__ import annotations

import logging

from kofparse.common.constants import HEADER_MARKER, PARSER_MODES
from kofparse.common.logging import get_logger, log_debug
from kofparse.common.models import Diagnostic, FileMetadata, ParseResult, WarningKind
from kofparse.parsing.assembler import GroupAssembler
from kofparse.parsing.attributes import parse_attrs
from kofparse.parsing.layout import DEFAULT_LAYOUT, ColumnLayout, find_header, parse_header
from kofparse.parsing.records import PASSIVE_CODES, ClassifiedRow, RecordCode, classify_line
from kofparse.parsing.row_decoder import MalformedRow, decode_row


def resolve_layout(lines: list[str], mode: str, default_header: str | None = None) -> ColumnLayout | None:
    """Column layout for the file, or None for token mode.

    A ``-05`` header anywhere in the file forces column mode. Without one,
    only an explicit ``columns`` mode uses a layout (the configured default
    header, else the built-in template).
    """
    if mode not in PARSER_MODES:
        raise ValueError(f"Unknown parser mode '{mode}', expected one of {PARSER_MODES}")
    header = find_header(lines)
    if header is not None:
        return parse_header(header)
    if mode == "columns":
        return parse_header(default_header) if default_header else DEFAULT_LAYOUT
    return None


class KofParser:
    def __init__(
        self,
        *,
        mode: str = "auto",
        valid_points_only: bool = True,
        default_header: str | None = None,
        logger: logging.Logger | None = None,
    ):
        self.mode = mode
        self.valid_points_only = valid_points_only
        self.default_header = default_header
        self.logger = logger or get_logger("parser")

    def parse(self, text: str, metadata: FileMetadata | None = None) -> ParseResult:
        lines = text.lstrip("\ufeff").replace("\r\n", "\n").replace("\r", "\n").split("\n")
        if lines and lines[-1] == "":
            lines.pop()

        layout = resolve_layout(lines, self.mode, self.default_header)
        result = ParseResult(metadata=metadata or FileMetadata())
        result.metadata.number_of_lines = len(lines)
        result.metadata.mode = "columns" if layout is not None else "tokens"

        assembler = GroupAssembler(result, logger=self.logger)
        ignored_run: list[int] = []

        for idx, raw in enumerate(lines):
            row = classify_line(raw, idx)
            if row is None:
                continue
            if row.code is RecordCode.IGNORED:
                if row.raw.strip().startswith(HEADER_MARKER):
                    if ignored_run:
                        self._flush_ignored(result, ignored_run)
                        ignored_run = []
                    result.metadata.count_record(HEADER_MARKER)
                else:
                    ignored_run.append(row.line_number)
                continue
            if ignored_run:
                self._flush_ignored(result, ignored_run)
                ignored_run = []

            result.metadata.count_record(row.composite_code)
            self._dispatch(row, result, assembler, layout)

        if ignored_run:
            self._flush_ignored(result, ignored_run)
        assembler.finish()

        log_debug(
            self.logger,
            "KOF text parsed",
            event="PARSE_COMPLETE",
            strategy=result.metadata.mode,
            geometries=len(result.geometries),
            warnings=len(result.warnings),
        )
        return result

    def _dispatch(
        self,
        row: ClassifiedRow,
        result: ParseResult,
        assembler: GroupAssembler,
        layout: ColumnLayout | None,
    ) -> None:
        code = row.code
        if code is RecordCode.POINT:
            self._handle_point(row, result, assembler, layout)
        elif code is RecordCode.CONTROL:
            assembler.handle_control(row)
        elif code is RecordCode.COMMENT:
            result.comments.append(row.text)
        elif code is RecordCode.ADMIN:
            result.admin_blocks.append(row.raw.strip())
        elif code in (RecordCode.FILE_ATTRIBUTES, RecordCode.FILE_PROPERTIES):
            result.add_file_attributes(parse_attrs(row.raw))
        elif code in (RecordCode.PENDING_ATTRIBUTES, RecordCode.GROUP_ATTRIBUTES):
            assembler.set_pending_attributes(parse_attrs(row.raw))
        elif code is RecordCode.MEASUREMENT:
            values = parse_attrs(row.raw)
            result.warn(
                row.line_number,
                f"KOF line {row.line_number} has measurement data {values}, not applied.",
                WarningKind.MEASUREMENT,
            )
        elif code in PASSIVE_CODES:
            log_debug(self.logger, f"record {code.value} skipped", line=row.line_number, event="RECORD_SKIPPED")
        else:
            result.warn(
                row.line_number,
                f"KOF line {row.line_number} has unknown record code '{row.raw_code}'.",
                WarningKind.UNKNOWN_CODE,
            )

    def _handle_point(
        self,
        row: ClassifiedRow,
        result: ParseResult,
        assembler: GroupAssembler,
        layout: ColumnLayout | None,
    ) -> None:
        decoded = decode_row(row.raw, row.line_index, layout)
        if isinstance(decoded, MalformedRow):
            result.warn(decoded.line, decoded.message, WarningKind.MALFORMED_ROW)
            return

        result.diagnostics.append(Diagnostic(line=row.line_number, strategy=decoded.strategy))
        point = decoded.to_point(raw=row.raw)
        if self.valid_points_only and not point.is_valid:
            log_debug(self.logger, "zero coordinates dropped", line=row.line_number, event="POINT_DROPPED")
            return
        result.metadata.observe_feature_code(point.code)
        assembler.add_point(point)

    @staticmethod
    def _flush_ignored(result: ParseResult, run: list[int]) -> None:
        first, last = run[0], run[-1]
        if first == last:
            message = f"KOF line {first} ignored (starts with '-')."
        else:
            message = f"KOF lines {first} to {last} ignored (start with '-')."
        result.warn(first, message, WarningKind.IGNORED_LINES, end_line=last)


def parse_kof(
    text: str,
    *,
    mode: str = "auto",
    valid_points_only: bool = True,
    default_header: str | None = None,
    metadata: FileMetadata | None = None,
    logger: logging.Logger | None = None,
) -> ParseResult:
    parser = KofParser(
        mode=mode,
        valid_points_only=valid_points_only,
        default_header=default_header,
        logger=logger,
    )
    return parser.parse(text, metadata=metadata)
