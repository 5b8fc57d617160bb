from __future__ import annotations
from collections import deque
from itertools import combinations
from typing import Iterable, List, Optional, Tuple

from .dag import CausalGraph, UnknownVariableError


def d_separated(graph: CausalGraph, X: Iterable[str], Y: Iterable[str], Z: Iterable[str] = ()) -> bool:
    """Bayes-ball d-separation test.

    Returns True if X and Y are d-separated given Z. Dashed arcs are read as an
    unobserved common cause of their two endpoints.

    Reference: Koller & Friedman (Bayes-ball algorithm).
    """
    X, Y, Z = set(X), set(Y), set(Z)
    for v in X | Y | Z:
        if v not in graph:
            raise UnknownVariableError(v)
    if X & Y:
        raise ValueError(f"X and Y overlap: {sorted(X & Y)}.")
    if graph.dashed:
        graph = graph.with_latent_confounders()

    # Ancestors of Z (Z included): exactly the nodes with a descendant in Z,
    # i.e. the colliders that conditioning on Z opens.
    has_desc_in_Z = set(Z)
    for z in Z:
        has_desc_in_Z |= graph.ancestors(z)

    # Bayes-ball state: (node, direction) where direction in {"up","down"}
    # "up": coming from a child; "down": coming from a parent.
    q = deque()
    visited = set()

    for x in X:
        q.append((x, "up"))

    while q:
        v, direction = q.popleft()
        if (v, direction) in visited:
            continue
        visited.add((v, direction))

        if v in Y and v not in Z:
            return False  # active path found

        if v in Z:
            if direction == "down" and v in has_desc_in_Z:
                # observed collider: bounce back up to the other parents
                for p in graph.parents(v):
                    q.append((p, "up"))
        elif direction == "up":
            for p in graph.parents(v):
                q.append((p, "up"))
            for c in graph.children(v):
                q.append((c, "down"))
        else:
            for c in graph.children(v):
                q.append((c, "down"))
            if v in has_desc_in_Z:
                for p in graph.parents(v):
                    q.append((p, "up"))

    return True


def d_connected(graph: CausalGraph, X: Iterable[str], Y: Iterable[str], Z: Iterable[str] = ()) -> bool:
    return not d_separated(graph, X, Y, Z)


def implied_independencies(graph: CausalGraph, max_given: Optional[int] = None) -> List[Tuple[str, str, Tuple[str, ...]]]:
    """Every (a, b, S) such that a and b are d-separated given S.

    These are the conditional independencies the graph predicts for any data
    it generates. Conditioning sets are enumerated smallest first, up to
    `max_given` variables.
    """
    nodes = list(graph.nodes)
    limit = len(nodes) - 2 if max_given is None else max_given
    out = []
    for a, b in combinations(nodes, 2):
        rest = [v for v in nodes if v not in (a, b)]
        for k in range(0, min(limit, len(rest)) + 1):
            for S in combinations(rest, k):
                if d_separated(graph, [a], [b], S):
                    out.append((a, b, S))
    return out
