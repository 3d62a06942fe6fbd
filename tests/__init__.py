"""Tests - mock prover test suite."""
