"""Example circuits for the mock prover.

Each circuit is a Circuit subclass: configure() declares the constraint
system, synthesize() lays out one witness. CIRCUIT_REGISTRY maps names to
circuit classes so callers can pick one by name.
"""

from .base import Circuit
from .fibonacci import FibonacciCircuit
from .fixed_constant import FixedConstantCircuit
from .increment import IncrementCircuit
from .mul_chain import MulChainCircuit
from .plonk_chip import PlonkChip, PlonkChipCircuit
from .regex import RegexCircuit
from .u8_decomposition import U8Chip, U8DecompositionCircuit

# Registry mapping circuit names to circuit classes
CIRCUIT_REGISTRY: dict[str, type[Circuit]] = {
    "Fibonacci": FibonacciCircuit,
    "Increment": IncrementCircuit,
    "MulChain": MulChainCircuit,
    "FixedConstant": FixedConstantCircuit,
    "PlonkChip": PlonkChipCircuit,
    "U8Decomposition": U8DecompositionCircuit,
    "Regex": RegexCircuit,
}


def get_circuit(name: str) -> type[Circuit]:
    """Get the circuit class registered under `name`.

    Args:
        name: Registry name (e.g., 'Fibonacci', 'PlonkChip')

    Returns:
        Circuit subclass; instantiate it with a witness before proving

    Raises:
        KeyError: If no circuit is registered under `name`
    """
    if name in CIRCUIT_REGISTRY:
        return CIRCUIT_REGISTRY[name]
    raise KeyError(
        f"No circuit named '{name}'. "
        f"Available: {list(CIRCUIT_REGISTRY.keys())}"
    )


__all__ = [
    "Circuit",
    "FibonacciCircuit",
    "FixedConstantCircuit",
    "IncrementCircuit",
    "MulChainCircuit",
    "PlonkChip",
    "PlonkChipCircuit",
    "RegexCircuit",
    "U8Chip",
    "U8DecompositionCircuit",
    "CIRCUIT_REGISTRY",
    "get_circuit",
]
