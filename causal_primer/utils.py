from __future__ import annotations
from typing import Dict, Hashable, Iterable, List, Optional, Sequence, Tuple
import numpy as np

Array = np.ndarray


class CyclicGraphError(ValueError):
    """Raised when the direct-cause relation contains a directed cycle."""


def rng(seed: Optional[int] = None) -> np.random.Generator:
    return np.random.default_rng(seed)


def as_vector(x: Sequence[float], name: str = "x") -> Array:
    v = np.asarray(x, dtype=np.float64)
    if v.ndim != 1:
        raise ValueError(f"{name} must be one-dimensional, got shape {v.shape}.")
    return v


def topological_sort(nodes: Sequence[Hashable], edges: Iterable[Tuple[Hashable, Hashable]]) -> List[Hashable]:
    """Kahn's algorithm over named nodes; `(a, b)` in edges means a -> b.

    Ties are broken by declaration order so the result is deterministic.
    """
    position = {v: k for k, v in enumerate(nodes)}
    indeg: Dict[Hashable, int] = {v: 0 for v in nodes}
    children: Dict[Hashable, List[Hashable]] = {v: [] for v in nodes}
    for a, b in edges:
        children[a].append(b)
        indeg[b] += 1
    ready = [v for v in nodes if indeg[v] == 0]
    order = []
    while ready:
        ready.sort(key=position.__getitem__)
        v = ready.pop(0)
        order.append(v)
        for c in children[v]:
            indeg[c] -= 1
            if indeg[c] == 0:
                ready.append(c)
    if len(order) != len(position):
        stuck = sorted((v for v in nodes if indeg[v] > 0), key=position.__getitem__)
        raise CyclicGraphError(f"Graph is cyclic; cannot topo-sort (unresolved nodes: {stuck}).")
    return order
