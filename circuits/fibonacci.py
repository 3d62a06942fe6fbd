"""Fibonacci sequence in a single advice column.

A complex selector enables the "fib" gate on every row whose value has two
successors; the gate relates a row to the next two rows via rotations:

    q * (a[r+2] - a[r+1] - a[r]) = 0
"""

from dataclasses import dataclass
from typing import List, Optional

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column, Selector
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter, Region

STEPS = 10


def fibonacci(steps: int = STEPS) -> List[int]:
    """First `steps` Fibonacci numbers starting 0, 1."""
    values = [0, 1]
    while len(values) < steps:
        values.append(values[-1] + values[-2])
    return values[:steps]


@dataclass
class FibonacciConfig:
    q_enable: Selector
    advice: Column


class FibonacciCircuit(Circuit):
    """Proves knowledge of a sequence where each value is the sum of the previous two."""

    def __init__(self, values: Optional[List[int]] = None, steps: int = STEPS):
        if values is not None and len(values) != steps:
            raise ValueError(f"Expected {steps} values, got {len(values)}")
        self.values = values
        self.steps = steps

    def without_witnesses(self) -> "FibonacciCircuit":
        return FibonacciCircuit(None, self.steps)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> FibonacciConfig:
        q_enable = meta.complex_selector()
        advice = meta.advice_column()

        def fib(vc):
            current_row = vc.query_advice(advice, 0)
            next_row = vc.query_advice(advice, 1)
            second_next_row = vc.query_advice(advice, 2)
            q = vc.query_selector(q_enable)
            return [q * (second_next_row - next_row - current_row)]

        meta.create_gate("fib", fib)
        return FibonacciConfig(q_enable, advice)

    def _value(self, i: int) -> Value:
        if self.values is None:
            return Value.unknown()
        return Value.known(self.values[i])

    def synthesize(self, config: FibonacciConfig, layouter: Layouter) -> None:
        def steps(region: Region) -> None:
            for i in range(self.steps - 2):
                region.assign_advice(config.advice, i, self._value(i))
                config.q_enable.enable(region, i)
            # the final two values close the last enabled row
            region.assign_advice(config.advice, self.steps - 2, self._value(self.steps - 2))
            region.assign_advice(config.advice, self.steps - 1, self._value(self.steps - 1))

        layouter.assign_region("steps", steps)
