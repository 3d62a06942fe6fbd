"""Mock prover configuration.

Defaults suit tests; a JSON file can override any field:

    {"max_workers": 4, "report_unassigned": false, "max_k": 18}
"""

import json
from dataclasses import dataclass, fields
from typing import Any, Dict


@dataclass
class MockProverConfig:
    """Knobs of MockProver.run / verify.

    Fields:
        max_workers: Threads used to run checks (1 runs them inline)
        report_unassigned: Report gate/lookup rows whose result depends on
            unassigned or out-of-grid cells
        max_k: Largest accepted k (the grid has 2^k rows)
    """
    max_workers: int = 1
    report_unassigned: bool = True
    max_k: int = 20

    def __post_init__(self):
        if self.max_workers < 1:
            raise ValueError(f"max_workers must be >= 1, got {self.max_workers}")
        if not 1 <= self.max_k <= 32:
            raise ValueError(f"max_k must be in [1, 32], got {self.max_k}")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'MockProverConfig':
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(data) - known)
        if unknown:
            raise ValueError(f"Unknown mock prover config keys: {unknown}")
        return cls(**data)

    @classmethod
    def from_json(cls, path: str) -> 'MockProverConfig':
        with open(path, 'r') as f:
            data = json.load(f)
        return cls.from_dict(data)
