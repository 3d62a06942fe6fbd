"""Protocol - constraint system, layouter and mock prover."""

from protocol.columns import AbsoluteCell, Column, ColumnKind, Selector, TableColumn
from protocol.errors import (
    CellAlreadyAssigned,
    CircuitError,
    ColumnNotInPermutation,
    ConfigurationError,
    InstanceError,
    NotEnoughRowsAvailable,
    SynthesisError,
    TableError,
)
from protocol.expressions import Expression, evaluate

from protocol.constraint_system import ConstraintSystem, Gate, Lookup, VirtualCells

from protocol.data import Assignment, RegionSpan
from protocol.layouter import AssignedCell, Cell, Layouter, Region, Table

from protocol.failures import FailureKind, VerifyFailure
from protocol.prover_config import MockProverConfig
from protocol.verifier import MockProver

__all__ = [
    # Columns
    "AbsoluteCell",
    "Column",
    "ColumnKind",
    "Selector",
    "TableColumn",
    # Errors
    "CircuitError",
    "ConfigurationError",
    "SynthesisError",
    "NotEnoughRowsAvailable",
    "CellAlreadyAssigned",
    "ColumnNotInPermutation",
    "TableError",
    "InstanceError",
    # Constraint system
    "ConstraintSystem",
    "Expression",
    "Gate",
    "Lookup",
    "VirtualCells",
    "evaluate",
    # Layout
    "Assignment",
    "RegionSpan",
    "AssignedCell",
    "Cell",
    "Layouter",
    "Region",
    "Table",
    # Mock prover
    "FailureKind",
    "MockProver",
    "MockProverConfig",
    "VerifyFailure",
]
