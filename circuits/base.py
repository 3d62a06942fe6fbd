"""Base class for circuits checked by the mock prover."""

from abc import ABC, abstractmethod
from typing import Any

from primitives.field import FF
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter


class Circuit(ABC):
    """A circuit shape plus (optionally) a witness.

    configure() declares columns, gates and lookups once per circuit class and
    returns a config object holding the handles; synthesize() then assigns one
    witness through the layouter. A circuit built without witnesses (see
    without_witnesses) synthesizes the same layout with unknown advice values.

    Attributes:
        field: galois field class the circuit is defined over
    """

    field = FF

    @classmethod
    @abstractmethod
    def configure(cls, meta: ConstraintSystem) -> Any:
        """Declare the circuit's columns and constraints.

        Args:
            meta: Empty constraint system to populate

        Returns:
            Config object passed back to synthesize()
        """
        pass

    @abstractmethod
    def synthesize(self, config: Any, layouter: Layouter) -> None:
        """Assign the witness into regions and tables.

        Args:
            config: Object returned by configure()
            layouter: Layouter placing regions on the grid
        """
        pass

    @abstractmethod
    def without_witnesses(self) -> "Circuit":
        """Same circuit with every witness value unknown."""
        pass
