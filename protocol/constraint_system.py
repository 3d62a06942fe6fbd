"""Declarative constraint system: columns, selectors, gates, lookups, equality.

A ConstraintSystem is built once per circuit shape during configuration and is
independent of any witness. Gate and lookup builders receive a VirtualCells
query context, the only place column and selector handles are turned into
expressions, so a gate is written once regardless of where in the grid it is
later enabled:

    meta = ConstraintSystem()
    advice = meta.advice_column()
    q = meta.complex_selector()
    meta.create_gate("fib", lambda vc: [
        vc.query_selector(q) * (
            vc.query_advice(advice, 2) - vc.query_advice(advice, 1) - vc.query_advice(advice, 0)
        )
    ])

Once frozen (opening a Layouter does this before synthesis) no declaration may be
added. Every misuse raises ConfigurationError.
"""

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Sequence, Tuple, Union

from primitives.field import FF
from protocol.columns import Column, ColumnKind, ColumnSpace, Selector, TableColumn
from protocol.errors import ConfigurationError
from protocol.expressions import ColumnQuery, Expression, SelectorQuery, as_expression

logger = logging.getLogger(__name__)

GateItem = Union[Expression, Tuple[str, Expression]]


@dataclass
class Gate:
    """A named set of polynomials that must vanish at every row."""
    name: str
    constraint_names: List[str]
    polys: List[Expression]
    queried_selectors: List[Selector] = field(default_factory=list)

    def degree(self) -> int:
        return max(poly.degree() for poly in self.polys)


@dataclass
class Lookup:
    """Each row's input tuple must equal some row of the table columns."""
    name: str
    inputs: List[Expression]
    tables: List[TableColumn]

    def degree(self) -> int:
        return max(expr.degree() for expr in self.inputs)


class VirtualCells:
    """Query context handed to gate and lookup builders."""

    def __init__(self, cs: "ConstraintSystem"):
        self._cs = cs
        self.queried_selectors: List[Selector] = []

    def query_any(self, column: Column, rotation: int = 0) -> Expression:
        if not isinstance(column, Column):
            raise ConfigurationError(f"Expected a grid column, got {column}")
        self._cs._check_owned(column)
        return ColumnQuery(column, int(rotation))

    def query_advice(self, column: Column, rotation: int = 0) -> Expression:
        return self._query_kind(column, ColumnKind.ADVICE, rotation)

    def query_fixed(self, column: Column, rotation: int = 0) -> Expression:
        return self._query_kind(column, ColumnKind.FIXED, rotation)

    def query_instance(self, column: Column, rotation: int = 0) -> Expression:
        return self._query_kind(column, ColumnKind.INSTANCE, rotation)

    def query_selector(self, selector: Selector) -> Expression:
        if not isinstance(selector, Selector):
            raise ConfigurationError(f"Expected a selector, got {selector}")
        self._cs._check_owned(selector)
        if selector not in self.queried_selectors:
            self.queried_selectors.append(selector)
        return SelectorQuery(selector)

    def _query_kind(self, column: Column, kind: ColumnKind, rotation: int) -> Expression:
        if not isinstance(column, Column) or column.kind != kind:
            raise ConfigurationError(f"Expected a {kind} column, got {column}")
        return self.query_any(column, rotation)


class ConstraintSystem:
    """Owns the column space and accumulates gates, lookups and equality columns.

    Args:
        field: galois field class of every cell (defaults to Goldilocks FF)
    """

    def __init__(self, field=FF):
        self.field = field
        self.space = ColumnSpace()
        self.gates: List[Gate] = []
        self.lookups: List[Lookup] = []
        self.permutation_columns: List[Column] = []
        self.constant_columns: List[Column] = []
        self._frozen = False
        self._simple_selector_gates: dict[Selector, str] = {}

    # --- Lifecycle ---

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Forbid further declarations; called before the first region is opened."""
        if not self._frozen:
            logger.debug(
                "Constraint system frozen: %d advice, %d fixed, %d instance, %d selectors, "
                "%d gates, %d lookups",
                self.num_advice_columns, self.num_fixed_columns, self.num_instance_columns,
                self.num_selectors, len(self.gates), len(self.lookups),
            )
        self._frozen = True

    def _check_mutable(self, what: str) -> None:
        if self._frozen:
            raise ConfigurationError(f"Cannot {what}: constraint system is frozen after synthesis began")

    def _check_owned(self, handle) -> None:
        if not self.space.owns(handle):
            raise ConfigurationError(f"{handle} does not belong to this constraint system")

    # --- Columns ---

    def new_column(self, kind: ColumnKind) -> Column:
        self._check_mutable("add a column")
        return self.space.new_column(ColumnKind(kind))

    def advice_column(self) -> Column:
        return self.new_column(ColumnKind.ADVICE)

    def fixed_column(self) -> Column:
        return self.new_column(ColumnKind.FIXED)

    def instance_column(self) -> Column:
        return self.new_column(ColumnKind.INSTANCE)

    def new_selector(self, complex: bool = False) -> Selector:
        self._check_mutable("add a selector")
        return self.space.new_selector(simple=not complex)

    def selector(self) -> Selector:
        """A simple selector: usable in a single gate, never in a lookup."""
        return self.new_selector(complex=False)

    def complex_selector(self) -> Selector:
        return self.new_selector(complex=True)

    def lookup_table_column(self) -> TableColumn:
        self._check_mutable("add a table column")
        return self.space.new_table_column()

    def enable_equality(self, column: Column) -> None:
        """Allow `column` to take part in copy and equality constraints."""
        self._check_mutable("enable equality")
        if not isinstance(column, Column):
            raise ConfigurationError(f"Equality can only be enabled on grid columns, got {column}")
        self._check_owned(column)
        if column not in self.permutation_columns:
            self.permutation_columns.append(column)

    def enable_constant(self, column: Column) -> None:
        """Use a fixed column to hold constants assigned through regions."""
        if not isinstance(column, Column) or column.kind != ColumnKind.FIXED:
            raise ConfigurationError(f"Constants need a fixed column, got {column}")
        self.enable_equality(column)
        if column not in self.constant_columns:
            self.constant_columns.append(column)

    def is_equality_enabled(self, column: Column) -> bool:
        return column in self.permutation_columns

    # --- Gates and Lookups ---

    def create_gate(self, name: str, constraints: Callable[[VirtualCells], Sequence[GateItem]]) -> Gate:
        """Declare a gate from a builder returning expressions or (name, expression) pairs."""
        self._check_mutable(f"create gate '{name}'")
        cells = VirtualCells(self)
        items = list(constraints(cells))
        if not items:
            raise ConfigurationError(f"Gate '{name}' has no constraints")

        constraint_names: List[str] = []
        polys: List[Expression] = []
        for i, item in enumerate(items):
            if isinstance(item, tuple):
                constraint_name, poly = item
            else:
                constraint_name, poly = str(i), item
            constraint_names.append(constraint_name)
            polys.append(as_expression(poly))

        for selector in cells.queried_selectors:
            if not selector.simple:
                continue
            owner = self._simple_selector_gates.get(selector)
            if owner is not None:
                raise ConfigurationError(
                    f"Simple {selector} is already used by gate '{owner}'; use a complex selector"
                )
            self._simple_selector_gates[selector] = name

        gate = Gate(name, constraint_names, polys, cells.queried_selectors)
        self.gates.append(gate)
        logger.debug("Gate '%s': %d constraints, degree %d", name, len(polys), gate.degree())
        return gate

    def add_lookup(
        self, name: str, inputs: Callable[[VirtualCells], Sequence[Tuple[Expression, TableColumn]]]
    ) -> Lookup:
        """Declare a lookup from a builder returning (input, table column) pairs."""
        self._check_mutable(f"add lookup '{name}'")
        cells = VirtualCells(self)
        pairs = list(inputs(cells))
        if not pairs:
            raise ConfigurationError(f"Lookup '{name}' has no inputs")

        for selector in cells.queried_selectors:
            if selector.simple:
                raise ConfigurationError(
                    f"Simple {selector} cannot be used in lookup '{name}'; use a complex selector"
                )

        exprs: List[Expression] = []
        tables: List[TableColumn] = []
        for expr, table in pairs:
            if not isinstance(table, TableColumn):
                raise ConfigurationError(f"Lookup '{name}' must target table columns, got {table}")
            self._check_owned(table)
            exprs.append(as_expression(expr))
            tables.append(table)

        lookup = Lookup(name, exprs, tables)
        self.lookups.append(lookup)
        logger.debug("Lookup '%s': %d inputs", name, len(exprs))
        return lookup

    lookup = add_lookup

    # --- Introspection ---

    @property
    def num_advice_columns(self) -> int:
        return self.space.num_columns(ColumnKind.ADVICE)

    @property
    def num_fixed_columns(self) -> int:
        return self.space.num_columns(ColumnKind.FIXED)

    @property
    def num_instance_columns(self) -> int:
        return self.space.num_columns(ColumnKind.INSTANCE)

    @property
    def num_selectors(self) -> int:
        return len(self.space.selectors)

    @property
    def instance_columns(self) -> List[Column]:
        return list(self.space.columns[ColumnKind.INSTANCE])

    def degree(self) -> int:
        """Maximum degree over all gate polynomials and lookup inputs."""
        degrees = [gate.degree() for gate in self.gates]
        degrees += [lookup.degree() for lookup in self.lookups]
        return max(degrees, default=0)
