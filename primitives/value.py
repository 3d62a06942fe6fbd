"""Known-or-unknown witness values.

A Value wraps a witness value that may not be available, e.g. when a circuit
is synthesized without witnesses to obtain its layout. Arithmetic on Values
propagates unknown: if either operand is unknown, so is the result.

Example:
    a = Value.known(FF(3))
    b = Value.unknown()
    (a * a).inner    # FF(9)
    (a + b).is_known # False
"""

from typing import Any, Callable


class Value:
    """A witness value that is either known or unknown."""

    __slots__ = ("_inner", "_known")

    def __init__(self, inner: Any = None, known: bool = False):
        self._inner = inner
        self._known = known

    @classmethod
    def known(cls, inner: Any) -> "Value":
        return cls(inner, True)

    @classmethod
    def unknown(cls) -> "Value":
        return cls(None, False)

    @classmethod
    def coerce(cls, value: Any) -> "Value":
        """Wrap raw values as known; pass Values through unchanged."""
        if isinstance(value, Value):
            return value
        return cls.known(value)

    @property
    def is_known(self) -> bool:
        return self._known

    @property
    def inner(self) -> Any:
        """The wrapped value.

        Raises:
            ValueError: If the value is unknown
        """
        if not self._known:
            raise ValueError("Value is unknown")
        return self._inner

    def unwrap_or(self, default: Any) -> Any:
        return self._inner if self._known else default

    def map(self, fn: Callable[[Any], Any]) -> "Value":
        if not self._known:
            return self
        return Value.known(fn(self._inner))

    def and_then(self, fn: Callable[[Any], "Value"]) -> "Value":
        if not self._known:
            return self
        return fn(self._inner)

    def zip(self, other: "Value") -> "Value":
        other = Value.coerce(other)
        if self._known and other._known:
            return Value.known((self._inner, other._inner))
        return Value.unknown()

    # --- Arithmetic ---

    def _binary(self, other: Any, op: Callable[[Any, Any], Any]) -> "Value":
        other = Value.coerce(other)
        if self._known and other._known:
            return Value.known(op(self._inner, other._inner))
        return Value.unknown()

    def __add__(self, other: Any) -> "Value":
        return self._binary(other, lambda a, b: a + b)

    def __radd__(self, other: Any) -> "Value":
        return Value.coerce(other) + self

    def __sub__(self, other: Any) -> "Value":
        return self._binary(other, lambda a, b: a - b)

    def __rsub__(self, other: Any) -> "Value":
        return Value.coerce(other) - self

    def __mul__(self, other: Any) -> "Value":
        return self._binary(other, lambda a, b: a * b)

    def __rmul__(self, other: Any) -> "Value":
        return Value.coerce(other) * self

    def __neg__(self) -> "Value":
        return self.map(lambda a: -a)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Value):
            return NotImplemented
        if self._known != other._known:
            return False
        return not self._known or bool(self._inner == other._inner)

    def __hash__(self) -> int:
        return hash((self._known, int(self._inner) if self._known else None))

    def __repr__(self) -> str:
        if self._known:
            return f"Value.known({self._inner!r})"
        return "Value.unknown()"

