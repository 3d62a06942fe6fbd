"""Column, selector and cell handles.

Handles are small frozen dataclasses created only by a ConstraintSystem during
configuration. Each carries the id of the ColumnSpace that created it so that
handles from a different constraint system are rejected when queried.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import List


class ColumnKind(IntEnum):
    """Storage class of a column."""
    ADVICE = 0    # witness values
    FIXED = 1     # circuit-defined constants
    INSTANCE = 2  # public inputs

    def __str__(self) -> str:
        return self.name.capitalize()


@dataclass(frozen=True, order=True)
class Column:
    """A column of the grid, identified by kind and per-kind index."""
    kind: ColumnKind
    index: int
    owner: int = field(default=0, repr=False, compare=False)

    def __str__(self) -> str:
        return f"{self.kind}[{self.index}]"


@dataclass(frozen=True, order=True)
class Selector:
    """Boolean pseudo-column gating gates and lookups.

    A simple selector may appear in at most one gate and never in a lookup;
    a complex selector is an ordinary 0/1 expression usable anywhere.
    """
    index: int
    simple: bool = field(default=False, compare=False)
    owner: int = field(default=0, repr=False, compare=False)

    def enable(self, region, offset: int) -> None:
        """Enable this selector at `offset` of `region`."""
        region.enable_selector(self, offset)

    def __str__(self) -> str:
        return f"Selector[{self.index}]"


@dataclass(frozen=True, order=True)
class TableColumn:
    """A lookup table column, populated only through Layouter.assign_table."""
    index: int
    owner: int = field(default=0, repr=False, compare=False)

    def __str__(self) -> str:
        return f"Table[{self.index}]"


@dataclass(frozen=True, order=True)
class AbsoluteCell:
    """A cell of the global grid: (column, absolute row)."""
    column: Column
    row: int

    def __str__(self) -> str:
        return f"{self.column}@{self.row}"


class ColumnSpace:
    """Registry of declared columns, selectors and table columns.

    Indices are stable and dense per kind. The space is append-only until
    frozen.
    """

    def __init__(self):
        self.columns: dict[ColumnKind, List[Column]] = {kind: [] for kind in ColumnKind}
        self.selectors: List[Selector] = []
        self.table_columns: List[TableColumn] = []

    @property
    def token(self) -> int:
        return id(self)

    def new_column(self, kind: ColumnKind) -> Column:
        column = Column(kind, len(self.columns[kind]), owner=self.token)
        self.columns[kind].append(column)
        return column

    def new_selector(self, simple: bool) -> Selector:
        selector = Selector(len(self.selectors), simple=simple, owner=self.token)
        self.selectors.append(selector)
        return selector

    def new_table_column(self) -> TableColumn:
        column = TableColumn(len(self.table_columns), owner=self.token)
        self.table_columns.append(column)
        return column

    def owns(self, handle) -> bool:
        """True if `handle` (Column, Selector or TableColumn) was created here."""
        if handle.owner != self.token:
            return False
        if isinstance(handle, Column):
            return handle.index < len(self.columns[handle.kind])
        if isinstance(handle, Selector):
            return handle.index < len(self.selectors)
        if isinstance(handle, TableColumn):
            return handle.index < len(self.table_columns)
        return False

    def num_columns(self, kind: ColumnKind) -> int:
        return len(self.columns[kind])
