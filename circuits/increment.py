"""Counter: every enabled row is one less than the row after it."""

from dataclasses import dataclass
from typing import List, Optional

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column, Selector
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter, Region


@dataclass
class IncrementConfig:
    q_enable: Selector
    advice: Column


class IncrementCircuit(Circuit):
    """Gate "step": q * (a[r] - a[r+1] + 1) = 0 on every row but the last."""

    def __init__(self, values: Optional[List[int]] = None, length: Optional[int] = None):
        if values is None and length is None:
            raise ValueError("Either values or length is required")
        self.values = values
        self.length = len(values) if values is not None else length

    def without_witnesses(self) -> "IncrementCircuit":
        return IncrementCircuit(None, self.length)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> IncrementConfig:
        q_enable = meta.complex_selector()
        advice = meta.advice_column()

        meta.create_gate("step", lambda vc: [
            vc.query_selector(q_enable) * (vc.query_advice(advice, 0) - vc.query_advice(advice, 1) + 1)
        ])
        return IncrementConfig(q_enable, advice)

    def synthesize(self, config: IncrementConfig, layouter: Layouter) -> None:
        values = self.values

        def steps(region: Region) -> None:
            for i in range(self.length):
                value = Value.unknown() if values is None else Value.known(values[i])
                region.assign_advice(config.advice, i, value)
                if i + 1 < self.length:
                    config.q_enable.enable(region, i)

        layouter.assign_region("steps", steps)
