from __future__ import annotations

from kofparse.common.models import Line, Point, Polygon, WarningKind
from kofparse.parsing.assembler import GroupAssembler, GroupState
from kofparse.parsing.records import classify_line


def _point(i: int) -> Point:
    return Point(easting=314000.0 + i, northing=6540000.0 + i, elevation=10.0, name=f"P{i}", code="1001")


def _control(assembler: GroupAssembler, text: str, line_index: int = 0) -> None:
    assembler.handle_control(classify_line(text, line_index))


def test_point_while_idle_is_standalone_and_takes_pending_attributes():
    assembler = GroupAssembler()
    assembler.set_pending_attributes({"layer": "VEG"})

    assembler.add_point(_point(1))
    assembler.add_point(_point(2))

    first, second = assembler.result.geometries
    assert isinstance(first, Point)
    assert first.attributes == {"layer": "VEG"}
    assert second.attributes == {}
    assert assembler.state is GroupState.IDLE


def test_start_and_end_line_marker_emit_line():
    assembler = GroupAssembler()
    _control(assembler, "09 91")
    assert assembler.state is GroupState.OPEN

    assembler.add_point(_point(1))
    assembler.add_point(_point(2))
    _control(assembler, "09 99", 3)

    (line,) = assembler.result.geometries
    assert isinstance(line, Line)
    assert line.name == "P1"
    assert line.code == "1001"
    assert assembler.state is GroupState.IDLE
    assert assembler.result.metadata.line_strings == 1
    assert assembler.result.metadata.line_points == 2


def test_end_marker_without_group_warns():
    assembler = GroupAssembler()
    _control(assembler, "09 99", 0)
    _control(assembler, "96", 1)

    kinds = [warning.kind for warning in assembler.result.warnings]
    assert kinds == [WarningKind.ORPHAN_CONTROL_MARKER, WarningKind.ORPHAN_CONTROL_MARKER]
    assert assembler.result.warnings[0].message == "KOF line 1 has 99 but no open group."
    assert assembler.result.warnings[1].message == "KOF line 2 has 96 but no open group."
    assert assembler.result.geometries == []


def test_second_start_marker_flushes_open_group_as_line():
    assembler = GroupAssembler()
    _control(assembler, "09 91", 0)
    assembler.add_point(_point(1))
    assembler.add_point(_point(2))
    _control(assembler, "09 91", 3)
    for i in range(3, 6):
        assembler.add_point(_point(i))
    _control(assembler, "09 96", 7)

    line, polygon = assembler.result.geometries
    assert isinstance(line, Line)
    assert isinstance(polygon, Polygon)
    assert len(polygon.closed_ring()) == 4


def test_short_groups_warn_and_emit_nothing():
    assembler = GroupAssembler()
    _control(assembler, "09 91", 0)
    assembler.add_point(_point(1))
    _control(assembler, "09 99", 2)
    _control(assembler, "09 91", 3)
    assembler.add_point(_point(1))
    assembler.add_point(_point(2))
    _control(assembler, "09 96", 6)

    assert assembler.result.geometries == []
    assert [warning.kind for warning in assembler.result.warnings] == [WarningKind.SHORT_GROUP] * 2
    assert "less than 2 points" in assembler.result.warnings[0].message
    assert "less than 3 points" in assembler.result.warnings[1].message


def test_conflicting_marker_discards_group():
    assembler = GroupAssembler()
    _control(assembler, "09 91 99", 4)

    assert assembler.state is GroupState.IDLE
    (warning,) = assembler.result.warnings
    assert warning.kind is WarningKind.CONFLICTING_MARKER
    assert warning.line == 5

    assembler.add_point(_point(1))
    assert isinstance(assembler.result.geometries[0], Point)


def test_conflicting_marker_flushes_open_group_first():
    assembler = GroupAssembler()
    _control(assembler, "09 91", 0)
    assembler.add_point(_point(1))
    assembler.add_point(_point(2))
    _control(assembler, "09 91 96", 3)

    assert isinstance(assembler.result.geometries[0], Line)
    assert assembler.result.warnings[-1].kind is WarningKind.CONFLICTING_MARKER


def test_end_of_input_flushes_open_group_as_line():
    assembler = GroupAssembler()
    _control(assembler, "09 91")
    for i in range(3):
        assembler.add_point(_point(i))
    assembler.finish()

    (line,) = assembler.result.geometries
    assert isinstance(line, Line)
    assert len(line.points) == 3


def test_saw_marker_opens_group_and_splits_into_lines():
    assembler = GroupAssembler()
    _control(assembler, "09 72")
    assert assembler.state is GroupState.OPEN
    points = [_point(i) for i in range(4)]
    for point in points:
        assembler.add_point(point)
    _control(assembler, "09 99", 5)

    first, second = assembler.result.geometries
    assert list(first.points) == [points[0], points[2]]
    assert list(second.points) == [points[1], points[3]]


def test_wave_marker_inside_empty_group_converts_it():
    assembler = GroupAssembler()
    _control(assembler, "09 91", 0)
    _control(assembler, "09 82", 1)
    points = [_point(i) for i in range(4)]
    for point in points:
        assembler.add_point(point)
    _control(assembler, "09 99", 6)

    first, second = assembler.result.geometries
    assert list(first.points) == [points[0], points[3]]
    assert list(second.points) == [points[1], points[2]]
    assert assembler.result.warnings == []


def test_multiline_bucket_too_short_is_dropped_with_warning():
    assembler = GroupAssembler()
    _control(assembler, "09 73")
    for i in range(4):
        assembler.add_point(_point(i))
    _control(assembler, "09 99", 5)

    assert len(assembler.result.geometries) == 1
    assert len(assembler.result.warnings) == 2
    assert all(warning.kind is WarningKind.SHORT_GROUP for warning in assembler.result.warnings)


def test_multiline_polygon_uses_first_large_bucket():
    assembler = GroupAssembler()
    _control(assembler, "09 73")
    points = [_point(i) for i in range(9)]
    for point in points:
        assembler.add_point(point)
    _control(assembler, "09 96", 10)

    (polygon,) = assembler.result.geometries
    assert isinstance(polygon, Polygon)
    assert list(polygon.ring.points) == [points[0], points[3], points[6]]


def test_pending_attributes_apply_to_every_line_of_a_flush():
    assembler = GroupAssembler()
    assembler.set_pending_attributes({"fcode": "KANT"})
    _control(assembler, "09 72")
    for i in range(4):
        assembler.add_point(_point(i))
    _control(assembler, "09 99", 5)
    assembler.add_point(_point(9))

    first, second, standalone = assembler.result.geometries
    assert first.code == second.code == "KANT"
    assert standalone.attributes == {}


def test_unsupported_and_unknown_control_codes_warn():
    assembler = GroupAssembler()
    _control(assembler, "09 90", 0)
    _control(assembler, "09 45", 1)
    _control(assembler, "09", 2)

    assert [warning.kind for warning in assembler.result.warnings] == [WarningKind.UNKNOWN_CODE] * 3
    assert "09_90" in assembler.result.warnings[0].message
    assert "09_45" in assembler.result.warnings[1].message
