"""Multiplication chain with copy constraints.

Computes a^5 from a private a as a2 = a*a, a3 = a2*a, a5 = a3*a2. Each
product lives in its own "mul" region of three rows; operands are copied in
with copy_advice, so the equality argument ties every use of a value back to
the cell that produced it. The result is finally constrained equal to an
expected value assigned in its own region.
"""

from dataclasses import dataclass
from typing import Optional

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column, Selector
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import AssignedCell, Layouter, Region


@dataclass
class MulChainConfig:
    q_mul: Selector
    advice: Column


class MulChainCircuit(Circuit):
    """a^5 == expected, with a private and expected a witness."""

    def __init__(self, secret: Optional[int] = None, expected: Optional[int] = None):
        self.secret = secret
        self.expected = expected

    def without_witnesses(self) -> "MulChainCircuit":
        return MulChainCircuit()

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> MulChainConfig:
        q_mul = meta.complex_selector()
        advice = meta.advice_column()
        meta.enable_equality(advice)

        def vertical_mul(vc):
            w0 = vc.query_advice(advice, 0)
            w1 = vc.query_advice(advice, 1)
            w2 = vc.query_advice(advice, 2)
            return [vc.query_selector(q_mul) * (w0 * w1 - w2)]

        meta.create_gate("vertical-mul", vertical_mul)
        return MulChainConfig(q_mul, advice)

    @staticmethod
    def mul(config: MulChainConfig, layouter: Layouter, lhs: AssignedCell, rhs: AssignedCell) -> AssignedCell:
        def assign(region: Region) -> AssignedCell:
            w0 = lhs.copy_advice(region, config.advice, 0)
            w1 = rhs.copy_advice(region, config.advice, 1)
            config.q_mul.enable(region, 0)
            return region.assign_advice(config.advice, 2, w0.value * w1.value)

        return layouter.assign_region("mul", assign)

    @staticmethod
    def unconstrained(config: MulChainConfig, layouter: Layouter, value: Value) -> AssignedCell:
        return layouter.assign_region(
            "free variable", lambda region: region.assign_advice(config.advice, 0, value)
        )

    def synthesize(self, config: MulChainConfig, layouter: Layouter) -> None:
        secret = Value.unknown() if self.secret is None else Value.known(self.secret)
        expected = Value.unknown() if self.expected is None else Value.known(self.expected)

        a = self.unconstrained(config, layouter, secret)
        a2 = self.mul(config, layouter, a, a)
        a3 = self.mul(config, layouter, a2, a)
        a5 = self.mul(config, layouter, a3, a2)

        def expected_result(region: Region) -> None:
            cell = region.assign_advice(config.advice, 0, expected)
            region.constrain_equal(cell.cell, a5.cell)

        layouter.assign_region("expected result", expected_result)
