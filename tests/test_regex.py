"""Tests for the a+b+c automaton circuit."""

import pytest

from circuits.regex import (
    EOF,
    MAX_STR_LEN,
    ST_A,
    ST_B,
    ST_C,
    ST_DONE,
    ST_I,
    RegexCircuit,
    transition_rows,
)
from protocol.failures import FailureKind
from protocol.verifier import MockProver


def test_transition_table_has_zero_row() -> None:
    rows = transition_rows()
    assert rows[0] == (0, 0, 0)
    assert (ST_C, ST_DONE, EOF) in rows
    assert (ST_I, ST_A, ord("a")) in rows


def test_accepts_aaabbbc() -> None:
    circuit = RegexCircuit("aaabbbc", [ST_I, ST_A, ST_A, ST_A, ST_B, ST_B, ST_B, ST_C])
    prover = MockProver.run(8, circuit, [])
    prover.assert_satisfied()
    assert prover.assignment.regions[0].size == MAX_STR_LEN + 1


def test_accepts_padded_bbbc() -> None:
    circuit = RegexCircuit("bbbc", [ST_I, ST_B, ST_B, ST_B, ST_C])
    MockProver.run(8, circuit, []).assert_satisfied()


def test_invalid_jump_to_done() -> None:
    circuit = RegexCircuit("aaabbbc", [ST_I, ST_A, ST_A, ST_A, ST_B, ST_B, ST_B, ST_DONE])
    failures = MockProver.run(8, circuit, []).verify()

    assert [(f.kind, f.name, f.row) for f in failures] == [(FailureKind.LOOKUP, "transition-st", 6)]
    assert failures[0].value == (ST_B, ST_DONE, ord('c'))


def test_wrong_start_state() -> None:
    circuit = RegexCircuit("bbbc", [ST_B, ST_B, ST_B, ST_B, ST_C])
    failures = MockProver.run(8, circuit, []).verify()
    kinds = {(f.kind, f.name, f.row) for f in failures}
    assert (FailureKind.CONSTRAINT_NOT_SATISFIED, "fix-st", 0) in kinds


def test_string_too_long() -> None:
    with pytest.raises(ValueError):
        RegexCircuit("a" * (MAX_STR_LEN + 1))
