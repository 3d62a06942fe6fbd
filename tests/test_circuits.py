"""Tests for the circuit registry and the fixed/constant bindings circuit."""

import pytest

from circuits import CIRCUIT_REGISTRY, FibonacciCircuit, FixedConstantCircuit, get_circuit
from circuits.base import Circuit
from protocol.failures import FailureKind
from protocol.verifier import MockProver


class TestRegistry:
    """Tests for circuit lookup by name."""

    def test_get_circuit(self) -> None:
        assert get_circuit("Fibonacci") is FibonacciCircuit

    def test_unknown_name(self) -> None:
        with pytest.raises(KeyError, match="Available"):
            get_circuit("Nope")

    def test_all_registered_are_circuits(self) -> None:
        for cls in CIRCUIT_REGISTRY.values():
            assert issubclass(cls, Circuit)

    def test_without_witnesses_keeps_class(self) -> None:
        circuit = FibonacciCircuit()
        assert type(circuit.without_witnesses()) is FibonacciCircuit


class TestFixedConstant:
    """Tests for binding an advice cell to fixed and constants-column cells."""

    def test_matching_constant(self) -> None:
        prover = MockProver.run(8, FixedConstantCircuit(1, constant=1), [])
        prover.assert_satisfied()
        assert prover.assignment.regions[-1].name == "constants"

    def test_mismatched_constant(self) -> None:
        failures = MockProver.run(8, FixedConstantCircuit(2, constant=1), []).verify()

        assert [(f.kind, f.row) for f in failures] == [
            (FailureKind.CONSTRAINT_NOT_SATISFIED, 1),
            (FailureKind.EQUALITY, 1),
            (FailureKind.EQUALITY, 2),
            (FailureKind.EQUALITY, 3),
        ]
        assert failures[0].name == "equal-constant"
        assert failures[-1].region == "constants"

    def test_unknown_secret(self) -> None:
        failures = MockProver.run(8, FixedConstantCircuit(None), []).verify()
        assert [(f.kind, f.row) for f in failures] == [(FailureKind.CELL_NOT_ASSIGNED, 1)]
