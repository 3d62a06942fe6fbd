"""Grid storage for a synthesized circuit.

Architecture Overview:
    A circuit run uses a two-layer model:

    1. ConstraintSystem (protocol/constraint_system.py)
       - Column declarations, gates, lookups, equality-enabled columns
       - Built once per circuit shape, frozen before synthesis

    2. Assignment (this module)
       - One field array per column with a known-mask, selector masks,
         lookup tables, region spans and equality requests
       - Built once per witness by the Layouter, read-only during verification

Defaults:
    Fixed cells start as known zero, instance cells hold the public inputs
    (zero beyond them), advice cells start unknown. Table cells start
    unassigned; a table with holes is rejected before verification.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Set, Tuple

import galois
import numpy as np

from primitives.field import felt, to_ints
from primitives.value import Value
from protocol.columns import AbsoluteCell, Column, ColumnKind, ColumnSpace, Selector, TableColumn


@dataclass(frozen=True)
class RegionSpan:
    """Absolute placement of a region: rows [start, start + size)."""
    index: int
    name: str
    start: int
    size: int

    @property
    def end(self) -> int:
        return self.start + self.size

    def contains(self, row: int) -> bool:
        return self.start <= row < self.end


@dataclass
class Assignment:
    """Absolute rows x columns grid of field values for one witness.

    Attributes:
        field: galois field class of every cell
        n: Number of rows (2^k)
        values: Per-column field arrays keyed by Column
        known: Per-column boolean masks, True where the cell value is known
        selectors: Per-selector boolean enable masks
        tables: Per-table-column field arrays
        table_assigned: Per-table-column boolean masks of assigned rows
        regions: Region spans in placement order
        equality_requests: Pairs of cells requested equal
        equality_classes: Resolved equivalence classes (sorted, size >= 2)
    """
    field: type
    n: int
    values: dict[Column, galois.FieldArray] = field(default_factory=dict)
    known: dict[Column, np.ndarray] = field(default_factory=dict)
    selectors: dict[Selector, np.ndarray] = field(default_factory=dict)
    tables: dict[TableColumn, galois.FieldArray] = field(default_factory=dict)
    table_assigned: dict[TableColumn, np.ndarray] = field(default_factory=dict)
    regions: List[RegionSpan] = field(default_factory=list)
    equality_requests: List[Tuple[AbsoluteCell, AbsoluteCell]] = field(default_factory=list)
    equality_classes: List[List[AbsoluteCell]] = field(default_factory=list)

    @classmethod
    def empty(cls, space: ColumnSpace, n: int, field_type: type) -> "Assignment":
        """Allocate a grid for every column declared in `space`."""
        assignment = cls(field=field_type, n=n)
        for kind, columns in space.columns.items():
            for column in columns:
                assignment.values[column] = field_type.Zeros(n)
                assignment.known[column] = np.full(n, kind != ColumnKind.ADVICE, dtype=bool)
        for selector in space.selectors:
            assignment.selectors[selector] = np.zeros(n, dtype=bool)
        for table_column in space.table_columns:
            assignment.tables[table_column] = field_type.Zeros(n)
            assignment.table_assigned[table_column] = np.zeros(n, dtype=bool)
        return assignment

    # --- Cells ---

    def column(self, column: Column) -> Tuple[galois.FieldArray, np.ndarray]:
        return self.values[column], self.known[column]

    def set_cell(self, column: Column, row: int, value: Value) -> None:
        if value.is_known:
            self.values[column][row] = felt(self.field, value.inner)
            self.known[column][row] = True
        else:
            self.values[column][row] = self.field(0)
            self.known[column][row] = False

    def cell_value(self, cell: AbsoluteCell) -> Value:
        return self.value_at(cell.column, cell.row)

    def value_at(self, column: Column, row: int) -> Value:
        if not self.is_known(column, row):
            return Value.unknown()
        return Value.known(self.values[column][row])

    def is_known(self, column: Column, row: int) -> bool:
        return 0 <= row < self.n and bool(self.known[column][row])

    def set_instance(self, column: Column, public_inputs: List[int]) -> None:
        values = self.values[column]
        for row, value in enumerate(public_inputs):
            values[row] = felt(self.field, value)

    # --- Selectors ---

    def enable_selector(self, selector: Selector, row: int) -> None:
        self.selectors[selector][row] = True

    def selector_values(self, selector: Selector) -> galois.FieldArray:
        out = self.field.Zeros(self.n)
        out[self.selectors[selector]] = self.field(1)
        return out

    def is_enabled(self, selector: Selector, row: int) -> bool:
        return bool(self.selectors[selector][row])

    # --- Lookup Tables ---

    def set_table_cell(self, column: TableColumn, row: int, value: Value) -> None:
        self.tables[column][row] = felt(self.field, value.inner)
        self.table_assigned[column][row] = True

    def table_length(self, column: TableColumn) -> int:
        """One past the last assigned row of a table column (0 if never assigned)."""
        rows = np.flatnonzero(self.table_assigned[column])
        return int(rows[-1]) + 1 if len(rows) else 0

    def table_holes(self, column: TableColumn) -> List[int]:
        """Unassigned rows below the table column's length."""
        length = self.table_length(column)
        return [int(row) for row in np.flatnonzero(~self.table_assigned[column][:length])]

    def table_rows(self, columns: List[TableColumn]) -> Set[Tuple[int, ...]]:
        """Distinct rows of the table formed by `columns`, as integer tuples."""
        length = self.table_length(columns[0])
        cols = [to_ints(self.tables[column][:length]) for column in columns]
        return set(zip(*cols))

    # --- Regions ---

    def region_at(self, row: int) -> Optional[RegionSpan]:
        for span in self.regions:
            if span.contains(row):
                return span
        return None
