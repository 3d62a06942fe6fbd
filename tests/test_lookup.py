"""Tests for lookup table validation and membership checks."""

import pytest

from primitives.value import Value
from protocol.errors import TableError
from protocol.expressions import GridContext
from protocol.failures import FailureKind
from protocol.lookup import check_lookup, check_tables


def _range_lookup(meta):
    a = meta.advice_column()
    q = meta.complex_selector()
    t = meta.lookup_table_column()
    lookup = meta.lookup("range", lambda vc: [(vc.query_selector(q) * vc.query_advice(a, 0), t)])
    return a, q, t, lookup


def _fill(layouter, t, size=4):
    layouter.assign_table("range", lambda table: [table.assign_cell(t, i, i) for i in range(size)])


class TestCheckTables:
    """Tests for pre-verification table validation."""

    def test_unfilled_table_rejected(self, meta, layouter_for) -> None:
        _range_lookup(meta)
        layouter = layouter_for(meta)
        with pytest.raises(TableError):
            check_tables(meta, layouter.finish())

    def test_lookup_across_tables_of_different_length(self, meta, layouter_for) -> None:
        a = meta.advice_column()
        t0 = meta.lookup_table_column()
        t1 = meta.lookup_table_column()
        meta.lookup("pair", lambda vc: [(vc.query_advice(a, 0), t0), (vc.query_advice(a, 0), t1)])
        layouter = layouter_for(meta)
        _fill(layouter, t0, 4)
        _fill(layouter, t1, 2)
        with pytest.raises(TableError):
            check_tables(meta, layouter.finish())


class TestCheckLookup:
    """Tests for per-row membership."""

    def test_all_rows_in_table(self, meta, layouter_for) -> None:
        a, q, t, lookup = _range_lookup(meta)
        layouter = layouter_for(meta)
        _fill(layouter, t)

        def assign(region):
            for i in range(3):
                region.assign_advice(a, i, i + 1)
                q.enable(region, i)

        layouter.assign_region("values", assign)
        grid = layouter.finish()
        check_tables(meta, grid)
        assert check_lookup(lookup, grid, GridContext(grid)) == []

    def test_missing_row_reported(self, meta, layouter_for) -> None:
        a, q, t, lookup = _range_lookup(meta)
        layouter = layouter_for(meta)
        _fill(layouter, t)

        def assign(region):
            region.assign_advice(a, 0, 2)
            region.assign_advice(a, 1, 9)
            q.enable(region, 0)
            q.enable(region, 1)

        layouter.assign_region("values", assign)
        grid = layouter.finish()
        failures = check_lookup(lookup, grid, GridContext(grid))
        assert [(f.kind, f.name, f.row, f.region, f.offset) for f in failures] == [
            (FailureKind.LOOKUP, "range", 1, "values", 1),
        ]
        assert failures[0].value == (9,)
        assert "input (9,) not found" in str(failures[0])

    def test_unassigned_input(self, meta, layouter_for) -> None:
        a, q, t, lookup = _range_lookup(meta)
        layouter = layouter_for(meta)
        _fill(layouter, t)

        def assign(region):
            region.assign_advice(a, 0, Value.unknown())
            q.enable(region, 0)

        layouter.assign_region("values", assign)
        grid = layouter.finish()
        failures = check_lookup(lookup, grid, GridContext(grid))
        assert [(f.kind, f.row) for f in failures] == [(FailureKind.CELL_NOT_ASSIGNED, 0)]
        assert check_lookup(lookup, grid, GridContext(grid), report_unassigned=False) == []
