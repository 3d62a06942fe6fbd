"""Expression AST for gate and lookup constraints.

Expressions are trees over constants, column queries at a row rotation, and
selector queries, combined by addition, negation and multiplication. They are
pure descriptions: evaluation happens against an EvaluationContext, which
supplies the values of every leaf.

The same expression evaluates over all rows at once (GridContext, numpy
broadcasting over galois arrays) or at a single row (RowContext):

    expr = q * (meta.query_advice(a, 2) - meta.query_advice(a, 1) - meta.query_advice(a, 0))
    everywhere = expr.evaluate(GridContext(assignment))   # length-n Evaluated
    at_row_3 = evaluate(expr, 3, assignment)              # Value

Unknown cells propagate through arithmetic, except that a product with a
known-zero factor is known zero: `selector * (...)` vanishes wherever the
selector is off, even over unassigned cells. Rotations never wrap; a query
outside [0, n) is unknown.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Tuple

import galois
import numpy as np

from primitives.field import constant_column
from primitives.value import Value
from protocol.columns import Column, Selector


# --- Evaluation Results ---

@dataclass(frozen=True, eq=False)
class Evaluated:
    """Values of an expression over a window of rows.

    Attributes:
        values: Field array of evaluated values (meaningless where not known)
        known: Boolean mask, True where the value is determined
    """
    values: galois.FieldArray
    known: np.ndarray

    def __add__(self, other: "Evaluated") -> "Evaluated":
        return Evaluated(self.values + other.values, self.known & other.known)

    def __neg__(self) -> "Evaluated":
        return Evaluated(-self.values, self.known)

    def __mul__(self, other: "Evaluated") -> "Evaluated":
        self_zero = self.known & _is_zero(self.values)
        other_zero = other.known & _is_zero(other.values)
        known = (self.known & other.known) | self_zero | other_zero
        return Evaluated(self.values * other.values, known)

    def __len__(self) -> int:
        return len(self.known)

    def at(self, i: int) -> Value:
        if not self.known[i]:
            return Value.unknown()
        return Value.known(self.values[i])


def _is_zero(values: galois.FieldArray) -> np.ndarray:
    return values.view(np.ndarray) == 0


class EvaluationContext(ABC):
    """Supplies leaf values to Expression.evaluate."""

    @abstractmethod
    def constant(self, value: Any) -> Evaluated:
        pass

    @abstractmethod
    def query(self, column: Column, rotation: int) -> Evaluated:
        pass

    @abstractmethod
    def selector(self, selector: Selector) -> Evaluated:
        pass


class GridContext(EvaluationContext):
    """Evaluate over every row of an assignment at once.

    Column queries are shifted by their rotation; rows whose rotated row falls
    outside the grid are unknown. Shifted columns are cached, so evaluating
    many gates against one context reuses the work.
    """

    def __init__(self, assignment):
        self._assignment = assignment
        self._field = assignment.field
        self._n = assignment.n
        self._cache: Dict[Tuple[Any, int], Evaluated] = {}

    def constant(self, value: Any) -> Evaluated:
        return Evaluated(constant_column(self._field, value, self._n), np.ones(self._n, dtype=bool))

    def query(self, column: Column, rotation: int) -> Evaluated:
        key = (column, rotation)
        if key not in self._cache:
            values, known = self._assignment.column(column)
            self._cache[key] = _shift(self._field, values, known, rotation)
        return self._cache[key]

    def selector(self, selector: Selector) -> Evaluated:
        key = (selector, 0)
        if key not in self._cache:
            values = self._assignment.selector_values(selector)
            self._cache[key] = Evaluated(values, np.ones(self._n, dtype=bool))
        return self._cache[key]


class RowContext(EvaluationContext):
    """Evaluate at a single row; results have length 1."""

    def __init__(self, assignment, row: int):
        self._assignment = assignment
        self._field = assignment.field
        self._row = row

    def constant(self, value: Any) -> Evaluated:
        return Evaluated(constant_column(self._field, value, 1), np.ones(1, dtype=bool))

    def query(self, column: Column, rotation: int) -> Evaluated:
        row = self._row + rotation
        if not 0 <= row < self._assignment.n:
            return Evaluated(self._field.Zeros(1), np.zeros(1, dtype=bool))
        values, known = self._assignment.column(column)
        return Evaluated(values[row:row + 1], known[row:row + 1])

    def selector(self, selector: Selector) -> Evaluated:
        values = self._assignment.selector_values(selector)
        return Evaluated(values[self._row:self._row + 1], np.ones(1, dtype=bool))


def _shift(field, values: galois.FieldArray, known: np.ndarray, rotation: int) -> Evaluated:
    """out[r] = values[r + rotation], unknown where r + rotation is outside [0, n)."""
    n = len(known)
    if rotation == 0:
        return Evaluated(values, known)
    out_values = field.Zeros(n)
    out_known = np.zeros(n, dtype=bool)
    if abs(rotation) < n:
        if rotation > 0:
            out_values[:n - rotation] = values[rotation:]
            out_known[:n - rotation] = known[rotation:]
        else:
            out_values[-rotation:] = values[:n + rotation]
            out_known[-rotation:] = known[:n + rotation]
    return Evaluated(out_values, out_known)


# --- Expression Tree ---

class Expression(ABC):
    """Base class of the constraint AST. Supports + - * and unary -."""

    @abstractmethod
    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        pass

    @abstractmethod
    def degree(self) -> int:
        pass

    def children(self) -> Tuple["Expression", ...]:
        return ()

    def walk(self) -> Iterator["Expression"]:
        """Pre-order traversal of the tree."""
        yield self
        for child in self.children():
            yield from child.walk()

    def queries(self) -> Iterator["ColumnQuery"]:
        return (node for node in self.walk() if isinstance(node, ColumnQuery))

    def selectors(self) -> Iterator[Selector]:
        return (node.selector for node in self.walk() if isinstance(node, SelectorQuery))

    def __add__(self, other: Any) -> "Expression":
        return Sum(self, as_expression(other))

    def __radd__(self, other: Any) -> "Expression":
        return Sum(as_expression(other), self)

    def __sub__(self, other: Any) -> "Expression":
        return Sum(self, Negated(as_expression(other)))

    def __rsub__(self, other: Any) -> "Expression":
        return Sum(as_expression(other), Negated(self))

    def __mul__(self, other: Any) -> "Expression":
        return Product(self, as_expression(other))

    def __rmul__(self, other: Any) -> "Expression":
        return Product(as_expression(other), self)

    def __neg__(self) -> "Expression":
        return Negated(self)


@dataclass(frozen=True, eq=False)
class Constant(Expression):
    """A field constant; Python ints are reduced into the field when evaluated."""
    value: Any

    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        return ctx.constant(self.value)

    def degree(self) -> int:
        return 0

    def __str__(self) -> str:
        return str(int(self.value))


@dataclass(frozen=True, eq=False)
class ColumnQuery(Expression):
    """Value of `column` at the current row plus `rotation`."""
    column: Column
    rotation: int = 0

    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        return ctx.query(self.column, self.rotation)

    def degree(self) -> int:
        return 1

    def __str__(self) -> str:
        if self.rotation == 0:
            return str(self.column)
        return f"{self.column}@{self.rotation:+d}"


@dataclass(frozen=True, eq=False)
class SelectorQuery(Expression):
    selector: Selector

    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        return ctx.selector(self.selector)

    def degree(self) -> int:
        return 1

    def __str__(self) -> str:
        return str(self.selector)


@dataclass(frozen=True, eq=False)
class Negated(Expression):
    inner: Expression

    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        return -self.inner.evaluate(ctx)

    def degree(self) -> int:
        return self.inner.degree()

    def children(self) -> Tuple[Expression, ...]:
        return (self.inner,)

    def __str__(self) -> str:
        return f"-{_wrap(self.inner)}"


@dataclass(frozen=True, eq=False)
class Sum(Expression):
    left: Expression
    right: Expression

    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        return self.left.evaluate(ctx) + self.right.evaluate(ctx)

    def degree(self) -> int:
        return max(self.left.degree(), self.right.degree())

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        if isinstance(self.right, Negated):
            return f"{self.left} - {_wrap(self.right.inner)}"
        return f"{self.left} + {self.right}"


@dataclass(frozen=True, eq=False)
class Product(Expression):
    left: Expression
    right: Expression

    def evaluate(self, ctx: EvaluationContext) -> Evaluated:
        return self.left.evaluate(ctx) * self.right.evaluate(ctx)

    def degree(self) -> int:
        return self.left.degree() + self.right.degree()

    def children(self) -> Tuple[Expression, ...]:
        return (self.left, self.right)

    def __str__(self) -> str:
        return f"{_wrap(self.left)} * {_wrap(self.right)}"


def _wrap(expr: Expression) -> str:
    if isinstance(expr, Sum):
        return f"({expr})"
    return str(expr)


def as_expression(value: Any) -> Expression:
    """Coerce ints and field elements to Constant; pass expressions through."""
    if isinstance(value, Expression):
        return value
    if isinstance(value, (int, np.integer, galois.FieldArray)):
        return Constant(value)
    raise TypeError(f"Cannot use {type(value).__name__} in an expression")


def evaluate(expr: Expression, row: int, assignment) -> Value:
    """Evaluate `expr` at one row of `assignment`; unknown if any needed cell is."""
    return expr.evaluate(RowContext(assignment, row)).at(0)

