"""Mock prover: synthesize a circuit into a concrete grid and check it directly.

No polynomial commitments are involved. The grid produced by synthesis is
checked cell by cell against every declared constraint, and each violation is
reported with enough context (gate, constraint, row, region) to debug the
circuit.

Usage:
    prover = MockProver.run(8, FibonacciCircuit(witness), [])
    failures = prover.verify()      # [] when satisfied
    prover.assert_satisfied()       # AssertionError listing failures otherwise

Checks:
    gates     - every polynomial must evaluate to zero on every row
    lookups   - every row's input tuple must occur in the table
    equality  - every equality class holds a single value; classes that
                contain a public input must match it
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from functools import partial
from typing import Any, Callable, List, Optional, Sequence

import numpy as np

from protocol.constraint_system import ConstraintSystem, Gate
from protocol.data import Assignment
from protocol.equality import check_class, resolve_equality_classes
from protocol.errors import InstanceError
from protocol.expressions import EvaluationContext, GridContext
from protocol.failures import FailureKind, VerifyFailure, locate, queried_cells, unknown_failure
from protocol.layouter import Layouter
from protocol.lookup import check_lookup, check_tables
from protocol.prover_config import MockProverConfig

logger = logging.getLogger(__name__)


def check_gate(
    gate: Gate, assignment: Assignment, ctx: EvaluationContext, report_unassigned: bool = True
) -> List[VerifyFailure]:
    """Rows where a polynomial of `gate` is non-zero (or cannot be evaluated)."""
    failures = []
    for constraint, poly in zip(gate.constraint_names, gate.polys):
        result = poly.evaluate(ctx)
        values = result.values.view(np.ndarray)
        for row in np.flatnonzero(result.known & (values != 0)):
            row = int(row)
            cells, _ = queried_cells(assignment, [poly], row)
            region, offset = locate(assignment, row)
            failures.append(VerifyFailure(
                kind=FailureKind.CONSTRAINT_NOT_SATISFIED,
                name=gate.name,
                row=row,
                value=int(values[row]),
                region=region,
                offset=offset,
                constraint=constraint,
                cells=cells,
            ))
        if report_unassigned:
            for row in np.flatnonzero(~result.known):
                failures.append(unknown_failure(assignment, gate.name, [poly], int(row), constraint))
    return failures


class MockProver:
    """A synthesized circuit ready to be checked.

    Build with MockProver.run; the constructor only stores its parts.
    """

    def __init__(self, k: int, cs: ConstraintSystem, assignment: Assignment, config: MockProverConfig):
        self.k = k
        self.n = assignment.n
        self.cs = cs
        self.assignment = assignment
        self.config = config

    @classmethod
    def run(
        cls,
        k: int,
        circuit: Any,
        instances: Sequence[Sequence[int]],
        config: Optional[MockProverConfig] = None,
    ) -> "MockProver":
        """Configure and synthesize `circuit` over a grid of 2^k rows.

        Args:
            k: log2 of the number of rows
            circuit: Circuit instance (configure classmethod + synthesize)
            instances: One public input vector per instance column
            config: Prover options (defaults to MockProverConfig())

        Returns:
            MockProver holding the synthesized assignment

        Raises:
            ValueError: If k is outside [1, config.max_k]
            ConfigurationError: If the circuit's configuration is malformed
            InstanceError: If `instances` does not fit the instance columns
            SynthesisError: If synthesis breaks a layout precondition
            TableError: If a lookup table is missing or malformed
        """
        config = config or MockProverConfig()
        if not 1 <= k <= config.max_k:
            raise ValueError(f"k must be in [1, {config.max_k}], got {k}")
        n = 1 << k

        cs = ConstraintSystem(field=circuit.field)
        circuit_config = type(circuit).configure(cs)
        cs.freeze()

        instance_columns = cs.instance_columns
        if len(instances) != len(instance_columns):
            raise InstanceError(
                f"Circuit has {len(instance_columns)} instance columns, got {len(instances)} vectors"
            )
        assignment = Assignment.empty(cs.space, n, cs.field)
        for column, public_inputs in zip(instance_columns, instances):
            if len(public_inputs) > n:
                raise InstanceError(f"{column} has {len(public_inputs)} values but the grid has {n} rows")
            assignment.set_instance(column, list(public_inputs))

        layouter = Layouter(cs, assignment)
        circuit.synthesize(circuit_config, layouter)
        layouter.finish()
        logger.debug("Synthesized %s: %d of %d rows used", type(circuit).__name__, layouter.rows_used, n)

        check_tables(cs, assignment)
        assignment.equality_classes = resolve_equality_classes(assignment.equality_requests)
        return cls(k, cs, assignment, config)

    def _checks(self) -> List[Callable[[], List[VerifyFailure]]]:
        assignment = self.assignment
        report = self.config.report_unassigned
        ctx = GridContext(assignment)
        checks: List[Callable[[], List[VerifyFailure]]] = []
        for gate in self.cs.gates:
            checks.append(partial(check_gate, gate, assignment, ctx, report))
        for lookup in self.cs.lookups:
            checks.append(partial(check_lookup, lookup, assignment, ctx, report))
        for members in assignment.equality_classes:
            checks.append(partial(check_class, assignment, members))
        return checks

    def verify(self) -> List[VerifyFailure]:
        """Run every check and return all failures in a deterministic order."""
        checks = self._checks()
        if self.config.max_workers == 1:
            results = [check() for check in checks]
        else:
            with ThreadPoolExecutor(max_workers=self.config.max_workers) as executor:
                futures = [executor.submit(check) for check in checks]
                results = [future.result() for future in futures]

        failures = [failure for result in results for failure in result]
        failures.sort(key=VerifyFailure.sort_key)
        logger.info(
            "Verified %d gates, %d lookups, %d equality classes over %d rows: %d failures",
            len(self.cs.gates), len(self.cs.lookups), len(self.assignment.equality_classes),
            self.n, len(failures),
        )
        return failures

    def assert_satisfied(self) -> None:
        """Raise AssertionError describing every failure, if there are any."""
        failures = self.verify()
        if failures:
            lines = "\n".join(f"  {failure}" for failure in failures)
            raise AssertionError(f"Circuit not satisfied ({len(failures)} failures):\n{lines}")


__all__ = ["FailureKind", "MockProver", "VerifyFailure", "check_gate"]
