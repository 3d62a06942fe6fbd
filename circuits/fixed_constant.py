"""Binding advice cells to circuit constants.

Two ways of pinning a witness to a constant are shown side by side:

    - "fixed": the constant is written into an equality-enabled fixed column
      and the advice cell is constrain_equal'ed to it;
    - "constant": the constant goes through constrain_constant, and the
      layouter places it in the constants column after the last region.

The "equal-constant" gate (q * (advice - fixed)) is the row-local variant of
the same check, enabled on the "fixed" region.
"""

from dataclasses import dataclass
from typing import Optional

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column, Selector
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import AssignedCell, Layouter, Region


@dataclass
class FixedConstantConfig:
    q_fixed: Selector
    fixed: Column
    constants: Column
    advice: Column


class FixedConstantCircuit(Circuit):
    """Constrains a private value to equal `constant`."""

    def __init__(self, secret: Optional[int] = None, constant: int = 1):
        self.secret = secret
        self.constant = constant

    def without_witnesses(self) -> "FixedConstantCircuit":
        return FixedConstantCircuit(None, self.constant)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> FixedConstantConfig:
        q_fixed = meta.complex_selector()
        fixed = meta.fixed_column()
        constants = meta.fixed_column()
        advice = meta.advice_column()
        meta.enable_equality(advice)
        meta.enable_equality(fixed)
        meta.enable_constant(constants)

        meta.create_gate("equal-constant", lambda vc: [
            vc.query_selector(q_fixed) * (vc.query_advice(advice, 0) - vc.query_fixed(fixed, 0))
        ])
        return FixedConstantConfig(q_fixed, fixed, constants, advice)

    def synthesize(self, config: FixedConstantConfig, layouter: Layouter) -> None:
        secret = Value.unknown() if self.secret is None else Value.known(self.secret)
        variable = layouter.assign_region(
            "free variable", lambda region: region.assign_advice(config.advice, 0, secret)
        )

        def fixed(region: Region) -> None:
            cell = variable.copy_advice(region, config.advice, 0)
            fixed_cell = region.assign_fixed(config.fixed, 0, self.constant)
            config.q_fixed.enable(region, 0)
            region.constrain_equal(variable.cell, fixed_cell.cell)
            region.constrain_equal(cell.cell, fixed_cell.cell)

        def constant(region: Region) -> AssignedCell:
            region.constrain_constant(variable.cell, self.constant)
            return region.assign_advice_from_constant(config.advice, 0, self.constant)

        layouter.assign_region("fixed", fixed)
        layouter.assign_region("constant", constant)
