"""Pytest configuration and shared fixtures for the mock prover tests."""

import sys
from pathlib import Path
from typing import Any, Callable

import pytest

# Add the project root to the path so absolute imports work
# (tests/ is inside the project root, so parent is the root)
project_dir = Path(__file__).parent.parent
if str(project_dir) not in sys.path:
    sys.path.insert(0, str(project_dir))

from circuits.base import Circuit  # noqa: E402
from primitives.field import FF  # noqa: E402
from protocol.constraint_system import ConstraintSystem  # noqa: E402
from protocol.data import Assignment  # noqa: E402
from protocol.layouter import Layouter  # noqa: E402


def make_circuit(configure: Callable[[ConstraintSystem], Any], synthesize: Callable[[Any, Layouter], None]) -> Circuit:
    """Build a one-off Circuit from a configure and a synthesize function."""

    class AdHocCircuit(Circuit):
        @classmethod
        def configure(cls, meta: ConstraintSystem) -> Any:
            return configure(meta)

        def synthesize(self, config: Any, layouter: Layouter) -> None:
            synthesize(config, layouter)

        def without_witnesses(self) -> "AdHocCircuit":
            return self

    return AdHocCircuit()


@pytest.fixture
def meta() -> ConstraintSystem:
    """Empty constraint system over the default field."""
    return ConstraintSystem(FF)


@pytest.fixture
def layouter_for() -> Callable[[ConstraintSystem, int], Layouter]:
    """Factory: freeze a constraint system and open a layouter over 2^k rows."""

    def build(cs: ConstraintSystem, k: int = 4) -> Layouter:
        cs.freeze()
        return Layouter(cs, Assignment.empty(cs.space, 1 << k, cs.field))

    return build
