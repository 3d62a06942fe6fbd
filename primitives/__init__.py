"""Primitives - field arithmetic, witness values and union-find."""

from primitives.disjoint_set import DisjointSet
from primitives.field import (
    FF,
    GOLDILOCKS_PRIME,
    constant_column,
    felt,
    one,
    to_ints,
    zero,
    zeros,
)
from primitives.value import Value

__all__ = [
    # Field
    "FF",
    "GOLDILOCKS_PRIME",
    "felt",
    "zero",
    "one",
    "zeros",
    "constant_column",
    "to_ints",
    # Witness values
    "Value",
    # Union-find
    "DisjointSet",
]
