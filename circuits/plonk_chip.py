"""Standard PLONK gate with public inputs.

One custom gate drives everything, with fixed columns as coefficients:

    a * ql + b * qr + a * b * qm + c * qo + qc = 0

Each operation is a one-row region that sets the coefficients and copies its
operands in:

    multiplication  ql=0  qr=0  qm=1  qo=-1 qc=0    c = a * b
    addition        ql=1  qr=1  qm=0  qo=-1 qc=0    c = a + b
    constant        ql=0  qr=0  qm=0  qo=-1 qc=k    c = k
    equality        ql=1  qr=-1 qm=0  qo=0  qc=0    a = b

The example circuit takes public inputs (x, y, expected) and a private z, and
proves (x*y) * (x*y + z) == expected with y == z.
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import AssignedCell, Layouter, Region


@dataclass
class PlonkChip:
    ql: Column
    qr: Column
    qm: Column
    qo: Column
    qc: Column
    a: Column
    b: Column
    c: Column

    @classmethod
    def configure(cls, meta: ConstraintSystem, a: Column, b: Column, c: Column) -> "PlonkChip":
        ql = meta.fixed_column()
        qr = meta.fixed_column()
        qm = meta.fixed_column()
        qo = meta.fixed_column()
        qc = meta.fixed_column()

        def plonk_gate(vc):
            a_ = vc.query_advice(a, 0)
            b_ = vc.query_advice(b, 0)
            c_ = vc.query_advice(c, 0)
            return [
                a_ * vc.query_fixed(ql, 0)
                + b_ * vc.query_fixed(qr, 0)
                + a_ * b_ * vc.query_fixed(qm, 0)
                + vc.query_fixed(qo, 0) * c_
                + vc.query_fixed(qc, 0)
            ]

        meta.create_gate("Plonk Gate", plonk_gate)
        return cls(ql, qr, qm, qo, qc, a, b, c)

    def _coefficients(self, region: Region, ql: int, qr: int, qm: int, qo: int, qc: int) -> None:
        region.assign_fixed(self.ql, 0, ql)
        region.assign_fixed(self.qr, 0, qr)
        region.assign_fixed(self.qm, 0, qm)
        region.assign_fixed(self.qo, 0, qo)
        region.assign_fixed(self.qc, 0, qc)

    def multiply(self, layouter: Layouter, lhs: AssignedCell, rhs: AssignedCell) -> AssignedCell:
        def assign(region: Region) -> AssignedCell:
            self._coefficients(region, 0, 0, 1, -1, 0)
            a = lhs.copy_advice(region, self.a, 0)
            b = rhs.copy_advice(region, self.b, 0)
            return region.assign_advice(self.c, 0, a.value * b.value)

        return layouter.assign_region("multiplication", assign)

    def add(self, layouter: Layouter, lhs: AssignedCell, rhs: AssignedCell) -> AssignedCell:
        def assign(region: Region) -> AssignedCell:
            self._coefficients(region, 1, 1, 0, -1, 0)
            a = lhs.copy_advice(region, self.a, 0)
            b = rhs.copy_advice(region, self.b, 0)
            return region.assign_advice(self.c, 0, a.value + b.value)

        return layouter.assign_region("addition", assign)

    def constant(self, layouter: Layouter, value: int) -> AssignedCell:
        def assign(region: Region) -> AssignedCell:
            self._coefficients(region, 0, 0, 0, -1, value)
            return region.assign_advice(self.c, 0, value)

        return layouter.assign_region("constant", assign)

    def enforce_equal(self, layouter: Layouter, lhs: AssignedCell, rhs: AssignedCell) -> None:
        def assign(region: Region) -> None:
            self._coefficients(region, 1, -1, 0, 0, 0)
            lhs.copy_advice(region, self.a, 0)
            rhs.copy_advice(region, self.b, 0)

        layouter.assign_region("equality", assign)


@dataclass
class PlonkConfig:
    chip: PlonkChip
    pi: Column


class PlonkChipCircuit(Circuit):
    """Public (x, y, expected), private z: (x*y) * (x*y + z) == expected and y == z."""

    def __init__(self, public_inputs: Optional[List[int]] = None, private_inputs: Optional[List[int]] = None):
        if public_inputs is not None and len(public_inputs) != 3:
            raise ValueError(f"Expected 3 public inputs, got {len(public_inputs)}")
        if private_inputs is not None and len(private_inputs) != 1:
            raise ValueError(f"Expected 1 private input, got {len(private_inputs)}")
        self.public_inputs = public_inputs
        self.private_inputs = private_inputs

    def without_witnesses(self) -> "PlonkChipCircuit":
        return PlonkChipCircuit()

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> PlonkConfig:
        a = meta.advice_column()
        b = meta.advice_column()
        c = meta.advice_column()
        pi = meta.instance_column()
        for column in (a, b, c, pi):
            meta.enable_equality(column)
        return PlonkConfig(PlonkChip.configure(meta, a, b, c), pi)

    def _register_inputs(self, config: PlonkConfig, layouter: Layouter) -> Tuple[List[AssignedCell], List[AssignedCell]]:
        def free(value: Value) -> AssignedCell:
            return layouter.assign_region(
                "free variable", lambda region: region.assign_advice(config.chip.a, 0, value)
            )

        public = self.public_inputs or [None] * 3
        private = self.private_inputs or [None]
        public_cells = [free(Value.unknown() if v is None else Value.known(v)) for v in public]
        private_cells = [free(Value.unknown() if v is None else Value.known(v)) for v in private]
        return public_cells, private_cells

    def synthesize(self, config: PlonkConfig, layouter: Layouter) -> None:
        chip = config.chip
        (x, y, expected), (z,) = self._register_inputs(config, layouter)

        aux1 = chip.multiply(layouter, x, y)
        aux2 = chip.add(layouter, aux1, z)
        aux3 = chip.multiply(layouter, aux1, aux2)
        chip.enforce_equal(layouter, y, z)
        chip.enforce_equal(layouter, aux3, expected)

        for i, cell in enumerate((x, y, expected)):
            layouter.constrain_instance(cell.cell, config.pi, i)
