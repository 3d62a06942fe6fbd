"""Tests for the standard PLONK gate chip with public inputs."""

import pytest

from circuits.plonk_chip import PlonkChip, PlonkChipCircuit
from primitives.field import FF
from protocol.failures import FailureKind
from protocol.verifier import MockProver
from tests.conftest import make_circuit


class TestPlonkChipCircuit:
    """Tests for (x*y) * (x*y + z) == expected with y == z."""

    def test_valid_inputs(self) -> None:
        prover = MockProver.run(8, PlonkChipCircuit([1, 2, 8], [2]), [[1, 2, 8]])
        prover.assert_satisfied()
        assert [span.name for span in prover.assignment.regions[4:]] == [
            "multiplication", "addition", "multiplication", "equality", "equality",
        ]

    def test_private_input_breaks_y_equals_z(self) -> None:
        failures = MockProver.run(8, PlonkChipCircuit([1, 2, 8], [3]), [[1, 2, 8]]).verify()

        assert [(f.kind, f.name, f.row, f.region) for f in failures] == [
            (FailureKind.CONSTRAINT_NOT_SATISFIED, "Plonk Gate", 7, "equality"),
            (FailureKind.CONSTRAINT_NOT_SATISFIED, "Plonk Gate", 8, "equality"),
        ]
        # y - z = 2 - 3
        assert failures[0].value == FF.order - 1

    def test_public_input_mismatch(self) -> None:
        failures = MockProver.run(8, PlonkChipCircuit([1, 2, 8], [2]), [[1, 2, 9]]).verify()
        assert {f.kind for f in failures} == {FailureKind.INSTANCE_MISMATCH}
        assert [(f.row, f.value) for f in failures] == [(2, 8), (8, 8)]

    def test_wrong_number_of_inputs(self) -> None:
        with pytest.raises(ValueError):
            PlonkChipCircuit([1, 2], [2])


def _constants_circuit(result: int):
    """3 + 4 == result, using the chip's constant regions."""

    def configure(meta):
        columns = [meta.advice_column() for _ in range(3)]
        for column in columns:
            meta.enable_equality(column)
        return PlonkChip.configure(meta, *columns)

    def synthesize(chip, layouter):
        three = chip.constant(layouter, 3)
        four = chip.constant(layouter, 4)
        total = chip.add(layouter, three, four)
        chip.enforce_equal(layouter, total, chip.constant(layouter, result))

    return make_circuit(configure, synthesize)


def test_chip_constants() -> None:
    MockProver.run(6, _constants_circuit(7), []).assert_satisfied()


def test_chip_constants_mismatch() -> None:
    failures = MockProver.run(6, _constants_circuit(8), []).verify()
    assert [(f.name, f.region) for f in failures] == [("Plonk Gate", "equality")]
