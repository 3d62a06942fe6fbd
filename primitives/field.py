"""Prime field used by constraint systems and the mock prover.

Uses the galois library for all field arithmetic. FF is the default field type:
the Goldilocks prime field GF(p) with p = 2^64 - 2^32 + 1.

Every other component takes the field type as a plain parameter, so any
galois prime field (e.g. galois.GF(2**31 - 1)) can be substituted:

    cs = ConstraintSystem(field=galois.GF(101))
"""

from typing import List

import galois
import numpy as np

# --- Field Construction ---

GOLDILOCKS_PRIME = 0xFFFFFFFF00000001

FF = galois.GF(GOLDILOCKS_PRIME)
"""Default field GF(p) - Goldilocks prime field."""

# Type alias for a field class produced by galois.GF
FieldType = type


# --- Integer Embedding ---

def felt(field: FieldType, value) -> galois.FieldArray:
    """Embed a Python int (or an element already in `field`) as a field scalar.

    Negative and oversized integers are reduced modulo the field order, so
    felt(FF, -1) is the additive inverse of one.
    """
    if isinstance(value, field):
        return value
    return field(int(value) % field.order)


def zero(field: FieldType) -> galois.FieldArray:
    """Additive identity of `field`."""
    return field(0)


def one(field: FieldType) -> galois.FieldArray:
    """Multiplicative identity of `field`."""
    return field(1)


def zeros(field: FieldType, n: int) -> galois.FieldArray:
    """Field array of n zeros."""
    return field.Zeros(n)


def constant_column(field: FieldType, value, n: int) -> galois.FieldArray:
    """Field array of n copies of `value` (broadcast of a scalar)."""
    return field.Zeros(n) + felt(field, value)


def to_ints(values) -> List[int]:
    """Canonical integer representatives of a field array (or scalar)."""
    return [int(v) for v in np.asarray(values).ravel()]
