"""Disjoint-set forest (union-find) over hashable keys.

Used to close equality requests transitively: after union(a, b) and
union(b, c), a, b and c share one root and land in the same group.
"""

from typing import Dict, Generic, Hashable, Iterable, List, TypeVar

K = TypeVar("K", bound=Hashable)


class DisjointSet(Generic[K]):
    """Union-find with path halving and union by size."""

    def __init__(self, keys: Iterable[K] = ()):
        self._parent: Dict[K, K] = {}
        self._size: Dict[K, int] = {}
        for key in keys:
            self.add(key)

    def __contains__(self, key: K) -> bool:
        return key in self._parent

    def __len__(self) -> int:
        return len(self._parent)

    def add(self, key: K) -> None:
        if key not in self._parent:
            self._parent[key] = key
            self._size[key] = 1

    def find(self, key: K) -> K:
        """Return the representative of key's set, adding key if unseen."""
        self.add(key)
        parent = self._parent
        while parent[key] != key:
            parent[key] = parent[parent[key]]
            key = parent[key]
        return key

    def union(self, a: K, b: K) -> K:
        """Merge the sets containing a and b; return the new root."""
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a == root_b:
            return root_a
        if self._size[root_a] < self._size[root_b]:
            root_a, root_b = root_b, root_a
        self._parent[root_b] = root_a
        self._size[root_a] += self._size[root_b]
        return root_a

    def connected(self, a: K, b: K) -> bool:
        return self.find(a) == self.find(b)

    def groups(self) -> List[List[K]]:
        """All sets with at least two members, each sorted, ordered by first member."""
        by_root: Dict[K, List[K]] = {}
        for key in list(self._parent):
            by_root.setdefault(self.find(key), []).append(key)
        groups = [sorted(members) for members in by_root.values() if len(members) > 1]
        return sorted(groups, key=lambda members: members[0])
