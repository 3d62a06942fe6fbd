"""Tests for the multiplication chain with copy constraints."""

from circuits.mul_chain import MulChainCircuit
from protocol.failures import FailureKind
from protocol.verifier import MockProver


def test_two_to_the_fifth() -> None:
    prover = MockProver.run(8, MulChainCircuit(2, 32), [])
    prover.assert_satisfied()
    assert [span.name for span in prover.assignment.regions] == [
        "free variable", "mul", "mul", "mul", "expected result",
    ]


def test_copies_form_equality_classes() -> None:
    prover = MockProver.run(8, MulChainCircuit(3, 243), [])
    prover.assert_satisfied()
    rows = [[cell.row for cell in members] for members in prover.assignment.equality_classes]
    # a is used three times, a2 twice, a3 and a5 once each
    assert rows == [[0, 1, 2, 5], [3, 4, 8], [6, 7], [9, 10]]


def test_wrong_expected_result() -> None:
    failures = MockProver.run(8, MulChainCircuit(2, 33), []).verify()
    assert len(failures) == 1
    failure = failures[0]
    assert failure.kind == FailureKind.EQUALITY
    assert (failure.row, failure.value) == (10, 33)
    assert (failure.region, failure.offset) == ("expected result", 0)


def test_unknown_secret_passes_equality() -> None:
    """Unknown copies are skipped; the gates report unassigned cells instead."""
    failures = MockProver.run(8, MulChainCircuit(None, 32), []).verify()
    assert {f.kind for f in failures} == {FailureKind.CELL_NOT_ASSIGNED}
    assert [f.row for f in failures] == [1, 4, 7]
