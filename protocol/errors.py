"""Exceptions raised while building or synthesizing a circuit.

Three tiers:
1. ConfigurationError - the constraint system is malformed. Construction
   aborts; there is no partial constraint system to recover.
2. SynthesisError (and subclasses) - a witness assignment broke a layout
   precondition. The assignment produced so far is discarded.
3. Constraint violations are NOT exceptions: the mock prover collects them as
   VerifyFailure records (see protocol.verifier).

TableError and InstanceError are preconditions of MockProver.run and abort
before verification starts.
"""


class CircuitError(Exception):
    """Base class for all circuit construction errors."""


class ConfigurationError(CircuitError):
    """Invalid column, selector, gate or lookup declaration."""


class SynthesisError(CircuitError):
    """Invalid witness assignment during synthesis."""


class NotEnoughRowsAvailable(SynthesisError):
    """An assignment landed outside the grid [0, n)."""

    def __init__(self, row: int, n: int, what: str = "cell"):
        super().__init__(f"{what} at absolute row {row} is outside the grid of {n} rows")
        self.row = row
        self.n = n


class CellAlreadyAssigned(SynthesisError):
    """The same cell was assigned twice within one region or table."""


class ColumnNotInPermutation(SynthesisError):
    """An equality request involved a column without equality enabled."""


class TableError(CircuitError):
    """A lookup table is missing, has holes, or has ragged columns."""


class InstanceError(CircuitError):
    """Public inputs do not match the instance columns of the circuit."""
