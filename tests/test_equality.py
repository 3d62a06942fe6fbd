"""Tests for equality class resolution and checking."""

from primitives.field import FF
from primitives.value import Value
from protocol.columns import AbsoluteCell
from protocol.data import Assignment
from protocol.equality import check_equality, resolve_equality_classes
from protocol.failures import FailureKind


def _setup(meta):
    a = meta.advice_column()
    pi = meta.instance_column()
    meta.freeze()
    return a, pi, Assignment.empty(meta.space, 8, FF)


def test_classes_close_transitively(meta) -> None:
    a, _, _ = _setup(meta)
    cells = [AbsoluteCell(a, row) for row in range(5)]
    classes = resolve_equality_classes([
        (cells[3], cells[1]),
        (cells[1], cells[0]),
        (cells[2], cells[4]),
    ])
    assert classes == [[cells[0], cells[1], cells[3]], [cells[2], cells[4]]]


def test_equal_values_pass(meta) -> None:
    a, _, grid = _setup(meta)
    grid.set_cell(a, 0, Value.known(5))
    grid.set_cell(a, 4, Value.known(5))
    grid.equality_classes = resolve_equality_classes([(AbsoluteCell(a, 0), AbsoluteCell(a, 4))])
    assert check_equality(grid) == []


def test_mismatch_reported_against_first_member(meta) -> None:
    a, _, grid = _setup(meta)
    for row, value in [(0, 5), (1, 5), (2, 6)]:
        grid.set_cell(a, row, Value.known(value))
    grid.equality_classes = resolve_equality_classes([
        (AbsoluteCell(a, 0), AbsoluteCell(a, 1)),
        (AbsoluteCell(a, 1), AbsoluteCell(a, 2)),
    ])

    failures = check_equality(grid)
    assert len(failures) == 1
    failure = failures[0]
    assert failure.kind == FailureKind.EQUALITY
    assert (failure.row, failure.value) == (2, 6)
    assert failure.cells == ("Advice[0]@2 = 6", "Advice[0]@0 = 5")


def test_unknown_members_skipped(meta) -> None:
    a, _, grid = _setup(meta)
    grid.set_cell(a, 0, Value.known(5))
    grid.equality_classes = resolve_equality_classes([
        (AbsoluteCell(a, 0), AbsoluteCell(a, 1)),
        (AbsoluteCell(a, 2), AbsoluteCell(a, 3)),
    ])
    assert check_equality(grid) == []


def test_instance_mismatch(meta) -> None:
    a, pi, grid = _setup(meta)
    grid.set_instance(pi, [1, 9])
    grid.set_cell(a, 0, Value.known(8))
    grid.equality_classes = resolve_equality_classes([(AbsoluteCell(a, 0), AbsoluteCell(pi, 1))])

    failures = check_equality(grid)
    assert [(f.kind, f.name, f.row, f.value) for f in failures] == [
        (FailureKind.INSTANCE_MISMATCH, "instance", 0, 8),
    ]


def test_instance_defaults_to_zero_beyond_inputs(meta) -> None:
    a, pi, grid = _setup(meta)
    grid.set_instance(pi, [3])
    grid.set_cell(a, 0, Value.known(0))
    grid.equality_classes = resolve_equality_classes([(AbsoluteCell(a, 0), AbsoluteCell(pi, 5))])
    assert check_equality(grid) == []
