"""Tests for ConstraintSystem declarations and their validation."""

import pytest

from protocol.columns import ColumnKind
from protocol.constraint_system import ConstraintSystem
from protocol.errors import ConfigurationError


class TestColumns:
    """Tests for column, selector and table column allocation."""

    def test_indices_are_dense_per_kind(self, meta) -> None:
        a0 = meta.advice_column()
        f0 = meta.fixed_column()
        a1 = meta.advice_column()
        i0 = meta.instance_column()
        assert (a0.index, a1.index, f0.index, i0.index) == (0, 1, 0, 0)
        assert meta.num_advice_columns == 2
        assert meta.num_fixed_columns == 1
        assert meta.num_instance_columns == 1
        assert meta.new_column(ColumnKind.FIXED).index == 1

    def test_selectors(self, meta) -> None:
        simple = meta.selector()
        complex_ = meta.complex_selector()
        assert simple.simple and not complex_.simple
        assert meta.num_selectors == 2

    def test_str(self, meta) -> None:
        assert str(meta.advice_column()) == "Advice[0]"
        assert str(meta.instance_column()) == "Instance[0]"
        assert str(meta.lookup_table_column()) == "Table[0]"


class TestGates:
    """Tests for gate declaration rules."""

    def test_named_constraints(self, meta) -> None:
        a = meta.advice_column()
        gate = meta.create_gate("pair", lambda vc: [
            ("first", vc.query_advice(a, 0)),
            vc.query_advice(a, 1),
        ])
        assert gate.constraint_names == ["first", "1"]
        assert len(meta.gates) == 1

    def test_empty_gate_rejected(self, meta) -> None:
        with pytest.raises(ConfigurationError):
            meta.create_gate("empty", lambda vc: [])

    def test_simple_selector_single_gate(self, meta) -> None:
        a = meta.advice_column()
        q = meta.selector()
        meta.create_gate("one", lambda vc: [vc.query_selector(q) * vc.query_advice(a, 0)])
        with pytest.raises(ConfigurationError):
            meta.create_gate("two", lambda vc: [vc.query_selector(q) * vc.query_advice(a, 1)])

    def test_complex_selector_reusable(self, meta) -> None:
        a = meta.advice_column()
        q = meta.complex_selector()
        meta.create_gate("one", lambda vc: [vc.query_selector(q) * vc.query_advice(a, 0)])
        meta.create_gate("two", lambda vc: [vc.query_selector(q) * vc.query_advice(a, 1)])
        assert [gate.name for gate in meta.gates] == ["one", "two"]

    def test_query_wrong_kind(self, meta) -> None:
        f = meta.fixed_column()
        with pytest.raises(ConfigurationError):
            meta.create_gate("bad", lambda vc: [vc.query_advice(f, 0)])

    def test_query_any_rejects_selector(self, meta) -> None:
        q = meta.complex_selector()
        with pytest.raises(ConfigurationError):
            meta.create_gate("bad", lambda vc: [vc.query_any(q, 0)])

    def test_query_selector_rejects_column(self, meta) -> None:
        a = meta.advice_column()
        with pytest.raises(ConfigurationError):
            meta.create_gate("bad", lambda vc: [vc.query_selector(a)])

    def test_foreign_column_rejected(self, meta) -> None:
        other = ConstraintSystem()
        foreign = other.advice_column()
        with pytest.raises(ConfigurationError):
            meta.create_gate("bad", lambda vc: [vc.query_advice(foreign, 0)])


class TestLookups:
    """Tests for lookup declaration rules."""

    def test_lookup_with_complex_selector(self, meta) -> None:
        a = meta.advice_column()
        q = meta.complex_selector()
        t = meta.lookup_table_column()
        lookup = meta.lookup("range", lambda vc: [(vc.query_selector(q) * vc.query_advice(a, 0), t)])
        assert lookup.tables == [t]
        assert lookup.degree() == 2

    def test_simple_selector_rejected(self, meta) -> None:
        a = meta.advice_column()
        q = meta.selector()
        t = meta.lookup_table_column()
        with pytest.raises(ConfigurationError):
            meta.add_lookup("range", lambda vc: [(vc.query_selector(q) * vc.query_advice(a, 0), t)])

    def test_target_must_be_table_column(self, meta) -> None:
        a = meta.advice_column()
        f = meta.fixed_column()
        with pytest.raises(ConfigurationError):
            meta.add_lookup("bad", lambda vc: [(vc.query_advice(a, 0), f)])

    def test_empty_lookup_rejected(self, meta) -> None:
        with pytest.raises(ConfigurationError):
            meta.add_lookup("empty", lambda vc: [])


class TestEqualityAndFreeze:
    """Tests for equality enabling, constants and freezing."""

    def test_enable_equality(self, meta) -> None:
        a = meta.advice_column()
        b = meta.advice_column()
        meta.enable_equality(a)
        meta.enable_equality(a)
        assert meta.is_equality_enabled(a)
        assert not meta.is_equality_enabled(b)
        assert meta.permutation_columns == [a]

    def test_enable_equality_on_table_column_rejected(self, meta) -> None:
        with pytest.raises(ConfigurationError):
            meta.enable_equality(meta.lookup_table_column())

    def test_enable_constant_requires_fixed(self, meta) -> None:
        with pytest.raises(ConfigurationError):
            meta.enable_constant(meta.advice_column())
        f = meta.fixed_column()
        meta.enable_constant(f)
        assert meta.constant_columns == [f]
        assert meta.is_equality_enabled(f)

    def test_frozen_rejects_declarations(self, meta) -> None:
        a = meta.advice_column()
        meta.freeze()
        assert meta.frozen
        with pytest.raises(ConfigurationError):
            meta.advice_column()
        with pytest.raises(ConfigurationError):
            meta.enable_equality(a)
        with pytest.raises(ConfigurationError):
            meta.create_gate("late", lambda vc: [vc.query_advice(a, 0)])
