"""Byte decomposition with a range-check lookup and bitwise xor.

Each row holds a value in `advice` and its little-endian bits in eight bit
columns. With q_decomposed enabled on a row:

    "bits are boolean"   b_i * (b_i - 1) = 0           for every bit
    "u8 decomposed"      advice - sum(b_i * 2^i) = 0
    "range check u8"     q_decomposed * advice in {0, ..., 255}

"bit xor" relates three consecutive rows (left, right, result) with the
arithmetic xor of boolean bits: l^2 + r^2 - 2*l*r - out = 0.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

from .base import Circuit
from primitives.value import Value
from protocol.columns import Column, Selector, TableColumn
from protocol.constraint_system import ConstraintSystem
from protocol.layouter import Layouter, Region, Table

BITS = 8

ByteRow = Tuple[int, Sequence[int]]


def to_bits(value: int) -> List[int]:
    """Little-endian bits of a byte."""
    return [(value >> i) & 1 for i in range(BITS)]


@dataclass
class U8Chip:
    advice: Column
    bits: List[Column]
    t_range: TableColumn
    q_decomposed: Selector
    q_xor: Selector

    @classmethod
    def configure(cls, meta: ConstraintSystem, advice: Column) -> "U8Chip":
        bits = [meta.advice_column() for _ in range(BITS)]
        t_range = meta.lookup_table_column()
        q_decomposed = meta.complex_selector()
        q_xor = meta.complex_selector()

        def bit_xor(vc):
            q = vc.query_selector(q_xor)
            constraints = []
            for i, column in enumerate(bits):
                left = vc.query_advice(column, 0)
                right = vc.query_advice(column, 1)
                result = vc.query_advice(column, 2)
                constraints.append((f"bit {i}", q * (left * left + right * right - 2 * left * right - result)))
            return constraints

        def boolean(vc):
            q = vc.query_selector(q_decomposed)
            constraints = []
            for i, column in enumerate(bits):
                bit = vc.query_advice(column, 0)
                constraints.append((f"bit {i}", q * bit * (bit - 1)))
            return constraints

        def decomposed(vc):
            q = vc.query_selector(q_decomposed)
            total = vc.query_advice(advice, 0)
            for i, column in enumerate(bits):
                total = total - vc.query_advice(column, 0) * (1 << i)
            return [("sum of bits", q * total)]

        meta.create_gate("bit xor", bit_xor)
        meta.create_gate("bits are boolean", boolean)
        meta.create_gate("u8 decomposed", decomposed)
        meta.lookup("range check u8", lambda vc: [
            (vc.query_selector(q_decomposed) * vc.query_advice(advice, 0), t_range)
        ])
        return cls(advice, bits, t_range, q_decomposed, q_xor)

    def load_range_table(self, layouter: Layouter) -> None:
        def assign(table: Table) -> None:
            for i in range(1 << BITS):
                table.assign_cell(self.t_range, i, i)

        layouter.assign_table("range check u8", assign)

    def assign_row(self, region: Region, offset: int, value: Value, bits: Sequence[Value]) -> None:
        self.q_decomposed.enable(region, offset)
        region.assign_advice(self.advice, offset, value)
        for column, bit in zip(self.bits, bits):
            region.assign_advice(column, offset, bit)


class U8DecompositionCircuit(Circuit):
    """Three decomposed bytes; with `xor` set, the third is the xor of the first two.

    Args:
        rows: (value, little-endian bits) per row, or None for no witness
        xor: Enable the "bit xor" gate on the first row
    """

    def __init__(self, rows: Optional[List[ByteRow]] = None, xor: bool = True):
        if rows is not None and len(rows) != 3:
            raise ValueError(f"Expected 3 rows, got {len(rows)}")
        self.rows = rows
        self.xor = xor

    @classmethod
    def from_values(cls, left: int, right: int, xor: bool = True) -> "U8DecompositionCircuit":
        result = left ^ right
        return cls([(v, to_bits(v)) for v in (left, right, result)], xor=xor)

    def without_witnesses(self) -> "U8DecompositionCircuit":
        return U8DecompositionCircuit(None, self.xor)

    @classmethod
    def configure(cls, meta: ConstraintSystem) -> U8Chip:
        advice = meta.advice_column()
        return U8Chip.configure(meta, advice)

    def synthesize(self, config: U8Chip, layouter: Layouter) -> None:
        config.load_range_table(layouter)

        def assign(region: Region) -> None:
            if self.xor:
                config.q_xor.enable(region, 0)
            for offset in range(3):
                if self.rows is None:
                    value, bits = Value.unknown(), [Value.unknown()] * BITS
                else:
                    raw_value, raw_bits = self.rows[offset]
                    value, bits = Value.known(raw_value), [Value.known(b) for b in raw_bits]
                config.assign_row(region, offset, value, bits)

        layouter.assign_region("xor", assign)
