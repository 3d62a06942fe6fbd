"""Copy constraints: closing equality requests into classes and checking them.

Every constrain_equal, copy_advice, constrain_instance and constant binding
produces a request between two absolute cells. After synthesis the requests
are closed transitively with a disjoint-set forest; each resulting class must
hold a single value.

Checking a class:
    - unknown members are skipped (a class with no known member passes);
    - a class containing an instance cell uses the first instance cell as its
      reference and reports INSTANCE_MISMATCH;
    - otherwise the first known member is the reference and mismatches are
      reported as EQUALITY, one failure per differing cell.
"""

import logging
from typing import Iterable, List, Tuple

from primitives.disjoint_set import DisjointSet
from primitives.field import to_ints
from protocol.columns import AbsoluteCell, ColumnKind
from protocol.data import Assignment
from protocol.failures import FailureKind, VerifyFailure, locate

logger = logging.getLogger(__name__)


def resolve_equality_classes(requests: Iterable[Tuple[AbsoluteCell, AbsoluteCell]]) -> List[List[AbsoluteCell]]:
    """Transitive closure of pairwise equality requests, as sorted classes."""
    forest: DisjointSet[AbsoluteCell] = DisjointSet()
    count = 0
    for left, right in requests:
        forest.union(left, right)
        count += 1
    classes = forest.groups()
    logger.debug("Resolved %d equality requests into %d classes", count, len(classes))
    return classes


def _cell_int(assignment: Assignment, cell: AbsoluteCell) -> int:
    return to_ints(assignment.values[cell.column][cell.row])[0]


def check_class(assignment: Assignment, members: List[AbsoluteCell]) -> List[VerifyFailure]:
    known = [cell for cell in members if assignment.is_known(cell.column, cell.row)]
    if len(known) < 2:
        return []
    instances = [cell for cell in known if cell.column.kind == ColumnKind.INSTANCE]
    reference = instances[0] if instances else known[0]
    kind = FailureKind.INSTANCE_MISMATCH if instances else FailureKind.EQUALITY
    name = "instance" if instances else "equality"
    expected = _cell_int(assignment, reference)

    failures = []
    for cell in known:
        if cell == reference:
            continue
        actual = _cell_int(assignment, cell)
        if actual == expected:
            continue
        region, offset = locate(assignment, cell.row)
        failures.append(VerifyFailure(
            kind=kind,
            name=name,
            row=cell.row,
            value=actual,
            region=region,
            offset=offset,
            cells=(f"{cell} = {actual}", f"{reference} = {expected}"),
        ))
    return failures


def check_equality(assignment: Assignment) -> List[VerifyFailure]:
    """Check every resolved class of `assignment.equality_classes`."""
    failures: List[VerifyFailure] = []
    for members in assignment.equality_classes:
        failures.extend(check_class(assignment, members))
    return failures
