"""Verification failure records.

A failed check is data, not an exception: every checker returns a list of
VerifyFailure and the mock prover merges them into one deterministically
sorted report.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, List, Optional, Tuple, Union

from primitives.field import to_ints
from protocol.data import Assignment
from protocol.expressions import Expression


class FailureKind(IntEnum):
    CONSTRAINT_NOT_SATISFIED = 0
    CELL_NOT_ASSIGNED = 1
    QUERY_OUT_OF_BOUNDS = 2
    LOOKUP = 3
    EQUALITY = 4
    INSTANCE_MISMATCH = 5


@dataclass(frozen=True)
class VerifyFailure:
    """One violated constraint.

    Attributes:
        kind: Category of the failure
        name: Gate or lookup name ("equality" / "instance" for copy constraints)
        row: Absolute row of the failure
        value: Evaluated value (gates), input tuple (lookups) or offending
            cell value (equality), if known
        region: Name of the region containing `row`, if any
        offset: `row` relative to the start of that region
        constraint: Name of the constraint within the gate
        cells: Cells involved, formatted as "Column@row" or "Column@row = value"
    """
    kind: FailureKind
    name: str
    row: Optional[int] = None
    value: Optional[Union[int, Tuple[int, ...]]] = None
    region: Optional[str] = None
    offset: Optional[int] = None
    constraint: Optional[str] = None
    cells: Tuple[str, ...] = ()

    def sort_key(self) -> tuple:
        row = -1 if self.row is None else self.row
        return (row, int(self.kind), self.name, self.constraint or "", self.cells)

    def __str__(self) -> str:
        where = f"row {self.row}"
        if self.region is not None:
            where += f" (region '{self.region}', offset {self.offset})"
        target = self.name if self.constraint is None else f"{self.name}.{self.constraint}"
        detail = f" [{', '.join(self.cells)}]" if self.cells else ""
        if self.kind == FailureKind.CONSTRAINT_NOT_SATISFIED:
            return f"Constraint '{target}' not satisfied at {where}: evaluated to {self.value}{detail}"
        if self.kind == FailureKind.CELL_NOT_ASSIGNED:
            return f"'{target}' queries unassigned cells at {where}{detail}"
        if self.kind == FailureKind.QUERY_OUT_OF_BOUNDS:
            return f"'{target}' queries rows outside the grid at {where}{detail}"
        if self.kind == FailureKind.LOOKUP:
            return f"Lookup '{target}' input {self.value} not found in table at {where}{detail}"
        if self.kind == FailureKind.INSTANCE_MISMATCH:
            return f"Public input mismatch at {where}{detail}"
        return f"Equality constraint violated at {where}{detail}"


def locate(assignment: Assignment, row: Optional[int]) -> Tuple[Optional[str], Optional[int]]:
    """(region name, offset) of an absolute row, or (None, None) outside all regions."""
    if row is None:
        return None, None
    span = assignment.region_at(row)
    if span is None:
        return None, None
    return span.name, row - span.start


def queried_cells(assignment: Assignment, exprs: Iterable[Expression], row: int) -> Tuple[Tuple[str, ...], bool]:
    """Describe the cells `exprs` query at `row`.

    Returns:
        Tuple of (cell descriptions, whether any query falls outside the grid).
        Known cells are shown with their value, unknown ones bare.
    """
    seen = set()
    cells = []
    out_of_bounds = False
    for expr in exprs:
        for query in expr.queries():
            key = (query.column, row + query.rotation)
            if key in seen:
                continue
            seen.add(key)
            column, target = key
            if not 0 <= target < assignment.n:
                out_of_bounds = True
                cells.append(f"{column}@{target} (out of bounds)")
            elif assignment.is_known(column, target):
                cells.append(f"{column}@{target} = {to_ints(assignment.values[column][target])[0]}")
            else:
                cells.append(f"{column}@{target}")
    return tuple(cells), out_of_bounds


def unknown_failure(
    assignment: Assignment, name: str, exprs: List[Expression], row: int, constraint: Optional[str] = None
) -> VerifyFailure:
    """Failure for a check whose result at `row` depends on unavailable cells."""
    cells, out_of_bounds = queried_cells(assignment, exprs, row)
    kind = FailureKind.QUERY_OUT_OF_BOUNDS if out_of_bounds else FailureKind.CELL_NOT_ASSIGNED
    region, offset = locate(assignment, row)
    return VerifyFailure(kind, name, row, None, region, offset, constraint, cells)
