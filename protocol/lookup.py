"""Lookup argument checking.

A lookup pairs input expressions with table columns. At every row of the
grid, the tuple of evaluated inputs must equal some row of the table formed
by those columns. Rows where no selector is enabled normally evaluate to the
all-zero tuple, so tables used with selector-gated inputs contain a zero row.

Tables are validated before any lookup is checked: a lookup over a table
column that was never filled, or over columns of different lengths, raises
TableError instead of producing a failure report.
"""

import logging
from typing import List

import numpy as np

from protocol.constraint_system import ConstraintSystem, Lookup
from protocol.data import Assignment
from protocol.errors import TableError
from protocol.expressions import EvaluationContext
from protocol.failures import FailureKind, VerifyFailure, locate, queried_cells, unknown_failure

logger = logging.getLogger(__name__)


def check_tables(cs: ConstraintSystem, assignment: Assignment) -> None:
    """Validate every table column referenced by a lookup.

    Raises:
        TableError: If a column is unfilled, has holes, or differs in length
            from the other columns of its lookup
    """
    for lookup in cs.lookups:
        lengths = []
        for column in lookup.tables:
            length = assignment.table_length(column)
            if length == 0:
                raise TableError(f"Lookup '{lookup.name}' uses {column}, which was never assigned")
            holes = assignment.table_holes(column)
            if holes:
                raise TableError(f"Lookup '{lookup.name}' uses {column}, which has unassigned rows {holes[:8]}")
            lengths.append(length)
        if len(set(lengths)) > 1:
            raise TableError(f"Lookup '{lookup.name}' spans table columns of different lengths {lengths}")


def check_lookup(
    lookup: Lookup, assignment: Assignment, ctx: EvaluationContext, report_unassigned: bool = True
) -> List[VerifyFailure]:
    """Rows of `assignment` whose input tuple is missing from the lookup's table."""
    table = assignment.table_rows(lookup.tables)
    evaluated = [expr.evaluate(ctx) for expr in lookup.inputs]
    known = np.logical_and.reduce([e.known for e in evaluated])
    inputs = list(zip(*(e.values.view(np.ndarray).tolist() for e in evaluated)))

    failures = []
    for row in range(assignment.n):
        if not known[row]:
            if report_unassigned:
                failures.append(unknown_failure(assignment, lookup.name, lookup.inputs, row))
            continue
        key = tuple(int(v) for v in inputs[row])
        if key in table:
            continue
        cells, _ = queried_cells(assignment, lookup.inputs, row)
        region, offset = locate(assignment, row)
        failures.append(VerifyFailure(
            kind=FailureKind.LOOKUP,
            name=lookup.name,
            row=row,
            value=key,
            region=region,
            offset=offset,
            cells=cells,
        ))
    logger.debug("Lookup '%s': %d table rows, %d failures", lookup.name, len(table), len(failures))
    return failures
