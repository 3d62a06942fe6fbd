"""Region-based witness assignment and the simple floor planner.

Synthesis drives a Layouter. Each assign_region call hands its closure a Region
whose assignments are addressed by offsets relative to the region start; the
region never sees absolute rows. Placement policy:

    - regions are placed in the order they are requested;
    - each region starts at the row following the previous region's block;
    - a region's size is its largest relative offset used + 1.

Placement is therefore append-only and deterministic: the same sequence of
assign_region calls always yields the same absolute rows. Constants assigned
through regions are placed after the last region in the constants column when
the layout is finished.

Example:
    def mul(region):
        a = lhs.copy_advice(region, config.advice, 0)
        b = rhs.copy_advice(region, config.advice, 1)
        config.q_mul.enable(region, 0)
        return region.assign_advice(config.advice, 2, a.value * b.value)

    product = layouter.assign_region("mul", mul)
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Set, Tuple, TypeVar, Union

from primitives.field import felt, to_ints
from primitives.value import Value
from protocol.columns import AbsoluteCell, Column, ColumnKind, Selector, TableColumn
from protocol.constraint_system import ConstraintSystem
from protocol.data import Assignment, RegionSpan
from protocol.errors import (
    CellAlreadyAssigned,
    ColumnNotInPermutation,
    NotEnoughRowsAvailable,
    SynthesisError,
    TableError,
)

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True, order=True)
class Cell:
    """A cell addressed relative to the region that assigned it."""
    region_index: int
    row_offset: int
    column: Column


class AssignedCell:
    """A cell assigned inside a region, together with its witness value."""

    def __init__(self, value: Value, cell: Cell):
        self._value = value
        self._cell = cell

    @property
    def value(self) -> Value:
        return self._value

    @property
    def cell(self) -> Cell:
        return self._cell

    def copy_advice(self, region: "Region", column: Column, offset: int) -> "AssignedCell":
        """Assign this cell's value at (column, offset) of `region` and constrain them equal.

        Raises:
            ColumnNotInPermutation: If either column does not have equality enabled
        """
        region.require_equality(self._cell.column)
        region.require_equality(column)
        copied = region.assign_advice(column, offset, self._value)
        region.constrain_equal(self._cell, copied.cell)
        return copied

    def __repr__(self) -> str:
        return f"AssignedCell({self._cell}, {self._value!r})"


class Region:
    """Relative-offset view of a contiguous block of rows."""

    def __init__(self, layouter: "Layouter", index: int, name: str):
        self._layouter = layouter
        self.index = index
        self.name = name
        self._assigned: Set[Tuple[Column, int]] = set()
        self._max_offset = -1

    @property
    def size(self) -> int:
        return self._max_offset + 1

    def _place(self, offset: int, what: str) -> int:
        if offset < 0:
            raise SynthesisError(f"Negative offset {offset} for {what} in region '{self.name}'")
        row = self._layouter.to_absolute(self.index, offset)
        if row >= self._layouter.n:
            raise NotEnoughRowsAvailable(row, self._layouter.n, f"{what} in region '{self.name}'")
        self._max_offset = max(self._max_offset, offset)
        return row

    def _assign(self, kind: ColumnKind, column: Column, offset: int, value: Any) -> AssignedCell:
        if not isinstance(column, Column):
            raise SynthesisError(f"Cannot assign {column} in region '{self.name}': not a grid column")
        self._layouter.cs._check_owned(column)
        if column.kind != kind:
            raise SynthesisError(f"Cannot assign {column} as {kind} in region '{self.name}'")
        if (column, offset) in self._assigned:
            raise CellAlreadyAssigned(
                f"{column} at offset {offset} already assigned in region '{self.name}'"
            )
        row = self._place(offset, str(column))
        value = Value.coerce(value).map(lambda v: felt(self._layouter.field, v))
        self._layouter.assignment.set_cell(column, row, value)
        self._assigned.add((column, offset))
        return AssignedCell(value, Cell(self.index, offset, column))

    def assign_advice(self, column: Column, offset: int, value: Any) -> AssignedCell:
        return self._assign(ColumnKind.ADVICE, column, offset, value)

    def assign_fixed(self, column: Column, offset: int, value: Any) -> AssignedCell:
        """Fixed cells are circuit constants, so `value` must be known."""
        if not Value.coerce(value).is_known:
            raise SynthesisError(f"{column} at offset {offset} in region '{self.name}' needs a known value")
        return self._assign(ColumnKind.FIXED, column, offset, value)

    def assign_advice_from_constant(self, column: Column, offset: int, constant: int) -> AssignedCell:
        """Assign a constant to an advice cell and bind it to the constants column."""
        cell = self.assign_advice(column, offset, Value.known(constant))
        self.constrain_constant(cell.cell, constant)
        return cell

    def enable_selector(self, selector: Selector, offset: int) -> None:
        if not isinstance(selector, Selector):
            raise SynthesisError(f"Cannot enable {selector} in region '{self.name}': not a selector")
        self._layouter.cs._check_owned(selector)
        row = self._place(offset, str(selector))
        self._layouter.assignment.enable_selector(selector, row)

    def require_equality(self, column: Column) -> None:
        if not self._layouter.cs.is_equality_enabled(column):
            raise ColumnNotInPermutation(
                f"{column} does not have equality enabled (region '{self.name}')"
            )

    def constrain_equal(self, left: Cell, right: Cell) -> None:
        self.require_equality(left.column)
        self.require_equality(right.column)
        self._layouter.request_equality(left, right)

    def constrain_constant(self, cell: Cell, constant: int) -> None:
        self.require_equality(cell.column)
        self._layouter.request_constant(cell, constant)


class Table:
    """Assigns lookup table columns from row 0."""

    def __init__(self, layouter: "Layouter", name: str):
        self._layouter = layouter
        self.name = name
        self.columns: List[TableColumn] = []
        self._assigned: Set[Tuple[TableColumn, int]] = set()

    def assign_cell(self, column: TableColumn, offset: int, value: Any) -> None:
        layouter = self._layouter
        if not isinstance(column, TableColumn):
            raise SynthesisError(f"Table '{self.name}' can only assign table columns, got {column}")
        layouter.cs._check_owned(column)
        if column in layouter.used_table_columns and column not in self.columns:
            raise SynthesisError(f"{column} was already filled by another table")
        if offset < 0:
            raise SynthesisError(f"Negative offset {offset} in table '{self.name}'")
        if offset >= layouter.n:
            raise NotEnoughRowsAvailable(offset, layouter.n, f"{column} in table '{self.name}'")
        if (column, offset) in self._assigned:
            raise CellAlreadyAssigned(f"{column} at row {offset} already assigned in table '{self.name}'")
        value = Value.coerce(value)
        if not value.is_known:
            raise TableError(f"{column} at row {offset} of table '{self.name}' has an unknown value")
        if column not in self.columns:
            self.columns.append(column)
        layouter.assignment.set_table_cell(column, offset, value)
        self._assigned.add((column, offset))

    def check_complete(self) -> int:
        """Return the table length; every column must be filled to it without holes."""
        assignment = self._layouter.assignment
        lengths = {column: assignment.table_length(column) for column in self.columns}
        for column in self.columns:
            holes = assignment.table_holes(column)
            if holes:
                raise TableError(f"{column} of table '{self.name}' has unassigned rows {holes[:8]}")
        if len(set(lengths.values())) > 1:
            detail = ", ".join(f"{column}={length}" for column, length in lengths.items())
            raise TableError(f"Columns of table '{self.name}' have different lengths: {detail}")
        return next(iter(lengths.values()), 0)


class Layouter:
    """Simple floor planner: request-ordered, contiguous region placement.

    Args:
        cs: Constraint system of the circuit; frozen here if it is not already
        assignment: Grid to populate
    """

    def __init__(self, cs: ConstraintSystem, assignment: Assignment):
        cs.freeze()
        self.cs = cs
        self.assignment = assignment
        self.field = cs.field
        self.n = assignment.n
        self._region_starts: List[int] = []
        self._regions: List[Region] = []
        self._cursor = 0
        self._open = False
        self._finished = False
        self._equalities: List[Tuple[Union[Cell, AbsoluteCell], Union[Cell, AbsoluteCell]]] = []
        self._constants: List[Tuple[Cell, int]] = []
        self.used_table_columns: Set[TableColumn] = set()

    # --- Placement ---

    def to_absolute(self, region_index: int, offset: int) -> int:
        """Translate a region-relative offset to an absolute row."""
        return self._region_starts[region_index] + offset

    def _resolve(self, cell: Union[Cell, AbsoluteCell]) -> AbsoluteCell:
        if isinstance(cell, AbsoluteCell):
            return cell
        if not 0 <= cell.region_index < len(self._region_starts):
            raise SynthesisError(f"{cell} refers to a region that was never opened")
        return AbsoluteCell(cell.column, self.to_absolute(cell.region_index, cell.row_offset))

    def _check_active(self, what: str) -> None:
        if self._finished:
            raise SynthesisError(f"Cannot {what}: layout already finished")
        if self._open:
            raise SynthesisError(f"Cannot {what} while another region is open")

    def assign_region(self, name: str, assignment: Callable[[Region], T]) -> T:
        """Open a region at the next free row, run `assignment` on it, and close it."""
        self._check_active(f"assign region '{name}'")
        index = len(self._regions)
        region = Region(self, index, name)
        self._region_starts.append(self._cursor)
        self._regions.append(region)
        self._open = True
        try:
            result = assignment(region)
        finally:
            self._open = False
        span = RegionSpan(index, name, self._cursor, region.size)
        self.assignment.regions.append(span)
        self._cursor = span.end
        logger.debug("Region %d '%s' placed at rows [%d, %d)", index, name, span.start, span.end)
        return result

    def assign_table(self, name: str, assignment: Callable[[Table], Any]) -> None:
        """Fill lookup table columns; every column used must end up hole-free and equal length."""
        self._check_active(f"assign table '{name}'")
        table = Table(self, name)
        self._open = True
        try:
            assignment(table)
        finally:
            self._open = False
        length = table.check_complete()
        self.used_table_columns.update(table.columns)
        logger.debug("Table '%s' assigned: %d columns x %d rows", name, len(table.columns), length)

    # --- Equality ---

    def request_equality(self, left: Union[Cell, AbsoluteCell], right: Union[Cell, AbsoluteCell]) -> None:
        self._equalities.append((left, right))

    def request_constant(self, cell: Cell, constant: int) -> None:
        self._constants.append((cell, constant))

    def constrain_instance(self, cell: Cell, instance_column: Column, row: int) -> None:
        """Constrain `cell` to equal the public input at `row` of `instance_column`."""
        self.cs._check_owned(instance_column)
        if instance_column.kind != ColumnKind.INSTANCE:
            raise SynthesisError(f"{instance_column} is not an instance column")
        if not 0 <= row < self.n:
            raise NotEnoughRowsAvailable(row, self.n, f"instance {instance_column}")
        for column in (cell.column, instance_column):
            if not self.cs.is_equality_enabled(column):
                raise ColumnNotInPermutation(f"{column} does not have equality enabled")
        self.request_equality(cell, AbsoluteCell(instance_column, row))

    # --- Completion ---

    def _place_constants(self) -> None:
        if not self._constants:
            return
        if not self.cs.constant_columns:
            raise SynthesisError("Constants were assigned but no fixed column is enabled for constants")
        column = self.cs.constant_columns[0]
        rows: Dict[int, int] = {}
        start = self._cursor
        for cell, constant in self._constants:
            key = to_ints(felt(self.field, constant))[0]
            if key not in rows:
                row = start + len(rows)
                if row >= self.n:
                    raise NotEnoughRowsAvailable(row, self.n, "constant")
                self.assignment.set_cell(column, row, Value.known(key))
                rows[key] = row
            self.request_equality(cell, AbsoluteCell(column, rows[key]))
        span = RegionSpan(len(self.assignment.regions), "constants", start, len(rows))
        self.assignment.regions.append(span)
        self._cursor = span.end
        logger.debug("Placed %d constants in %s at rows [%d, %d)", len(rows), column, span.start, span.end)

    def finish(self) -> Assignment:
        """Place constants and translate every equality request to absolute cells."""
        self._check_active("finish layout")
        self._place_constants()
        self.assignment.equality_requests = [
            (self._resolve(left), self._resolve(right)) for left, right in self._equalities
        ]
        self._finished = True
        return self.assignment

    @property
    def rows_used(self) -> int:
        return self._cursor


__all__ = [
    "AssignedCell",
    "Cell",
    "Layouter",
    "Region",
    "Table",
]
