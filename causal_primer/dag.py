from __future__ import annotations
from dataclasses import dataclass
from typing import FrozenSet, Iterable, List, Optional, Sequence, Set, Tuple

from .utils import topological_sort


class UnknownVariableError(KeyError):
    """Raised when a variable name is not a node of the graph."""


@dataclass(frozen=True)
class Edge:
    """A direct-cause relation `cause -> effect`."""
    cause: str
    effect: str

    def endpoints(self) -> Tuple[str, str]:
        return self.cause, self.effect

    def other(self, v: str) -> str:
        if v == self.cause:
            return self.effect
        if v == self.effect:
            return self.cause
        raise ValueError(f"{v!r} is not an endpoint of {self}.")

    def __str__(self) -> str:
        return f"{self.cause} -> {self.effect}"


class Path:
    """An ordered sequence of distinct edges where consecutive edges share an endpoint.

    Direction may reverse along the path, so `X -> Y <- Z` is a path. The walk
    starts at `start`; when omitted it is inferred from the first two edges
    (or taken as the cause of a single edge).
    """

    def __init__(self, edges: Sequence[Edge], start: Optional[str] = None):
        edges = tuple(edges)
        if len(edges) == 0:
            raise ValueError("A path needs at least one edge.")
        if len(set(edges)) != len(edges):
            raise ValueError("Edges of a path must be distinct.")
        if start is None:
            start = _infer_start(edges)

        nodes = [start]
        current = start
        for e in edges:
            if current not in e.endpoints():
                raise ValueError(f"Edge {e} does not continue the path at {current!r}.")
            current = e.other(current)
            nodes.append(current)

        self.edges: Tuple[Edge, ...] = edges
        self.nodes: Tuple[str, ...] = tuple(nodes)

    @property
    def start(self) -> str:
        return self.nodes[0]

    @property
    def end(self) -> str:
        return self.nodes[-1]

    def colliders(self) -> List[str]:
        """Interior nodes with both adjacent path edges pointing into them."""
        out = []
        for k in range(1, len(self.nodes) - 1):
            v = self.nodes[k]
            if self.edges[k - 1].effect == v and self.edges[k].effect == v:
                out.append(v)
        return out

    @property
    def is_collider_path(self) -> bool:
        return len(self.colliders()) > 0

    @property
    def is_active(self) -> bool:
        return not self.is_collider_path

    def is_directed(self) -> bool:
        """True when every edge points forward along the walk (a causal path)."""
        return all(e.cause == self.nodes[k] for k, e in enumerate(self.edges))

    def is_blocked(self, graph: "CausalGraph", given: Iterable[str] = ()) -> bool:
        """Pearl's blocking rule relative to a conditioning set.

        A conditioned non-collider blocks the path. A collider blocks it unless
        the collider or one of its descendants is conditioned on.
        """
        given = set(given)
        colliders = set(self.colliders())
        for v in self.nodes[1:-1]:
            if v in colliders:
                if v not in given and not (graph.descendants(v) & given):
                    return True
            elif v in given:
                return True
        return False

    def __len__(self) -> int:
        return len(self.edges)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Path):
            return NotImplemented
        return self.nodes == other.nodes and self.edges == other.edges

    def __hash__(self) -> int:
        return hash((self.nodes, self.edges))

    def __str__(self) -> str:
        parts = [self.nodes[0]]
        for k, e in enumerate(self.edges):
            arrow = "->" if e.cause == self.nodes[k] else "<-"
            parts.append(f"{arrow} {self.nodes[k + 1]}")
        return " ".join(parts)

    def __repr__(self) -> str:
        return f"Path({str(self)!r})"


def _infer_start(edges: Tuple[Edge, ...]) -> str:
    first = edges[0]
    if len(edges) == 1:
        return first.cause
    shared = set(first.endpoints()) & set(edges[1].endpoints())
    if len(shared) != 1:
        raise ValueError(f"Cannot infer the start of a path beginning {first}, {edges[1]}; pass start=.")
    return first.other(shared.pop())


class CausalGraph:
    """A DAG over modeled variables, plus dashed arcs for possible unmodeled common causes.

    An absent edge claims there is no direct effect; a present edge only says a
    direct effect is possible. Graphs are immutable; cycles are rejected here,
    before anything tries to evaluate the model.
    """

    def __init__(
        self,
        nodes: Iterable[str],
        edges: Iterable[Tuple[str, str]] = (),
        dashed: Iterable[Tuple[str, str]] = (),
    ):
        nodes = tuple(nodes)
        if len(nodes) == 0:
            raise ValueError("A causal graph needs at least one node.")
        if len(set(nodes)) != len(nodes):
            raise ValueError(f"Duplicate node names in {nodes}.")
        self._nodes: Tuple[str, ...] = nodes
        self._index = {v: k for k, v in enumerate(nodes)}

        out: List[Edge] = []
        for a, b in edges:
            self._check(a)
            self._check(b)
            if a == b:
                raise ValueError(f"Self-loop on {a!r} is not allowed.")
            e = Edge(a, b)
            if e in out:
                raise ValueError(f"Duplicate edge {e}.")
            out.append(e)
        self._edges: Tuple[Edge, ...] = tuple(out)

        arcs: List[FrozenSet[str]] = []
        for a, b in dashed:
            self._check(a)
            self._check(b)
            if a == b:
                raise ValueError(f"A dashed arc must join two different nodes, got {a!r}.")
            arc = frozenset((a, b))
            if arc not in arcs:
                arcs.append(arc)
        self._dashed: Tuple[FrozenSet[str], ...] = tuple(arcs)

        self._order = topological_sort(self._nodes, [e.endpoints() for e in self._edges])
        self._latents = self._name_latents()

    def _check(self, v: str) -> None:
        if v not in self._index:
            raise UnknownVariableError(v)

    @property
    def nodes(self) -> Tuple[str, ...]:
        return self._nodes

    @property
    def edges(self) -> Tuple[Edge, ...]:
        return self._edges

    @property
    def dashed(self) -> List[Tuple[str, str]]:
        """Dashed arcs as pairs in declaration order of their endpoints."""
        return [tuple(sorted(arc, key=self._index.__getitem__)) for arc in self._dashed]

    def __contains__(self, v: object) -> bool:
        return v in self._index

    def has_edge(self, cause: str, effect: str) -> bool:
        return Edge(cause, effect) in self._edges

    def topological_order(self) -> List[str]:
        return list(self._order)

    def parents(self, v: str) -> List[str]:
        self._check(v)
        return [e.cause for e in self._edges if e.effect == v]

    def children(self, v: str) -> List[str]:
        self._check(v)
        return [e.effect for e in self._edges if e.cause == v]

    def descendants(self, v: str) -> Set[str]:
        return self._reach(v, self.children)

    def ancestors(self, v: str) -> Set[str]:
        return self._reach(v, self.parents)

    def _reach(self, v: str, step) -> Set[str]:
        # DFS
        stack = [v]
        seen = {v}
        while stack:
            u = stack.pop()
            for w in step(u):
                if w not in seen:
                    seen.add(w)
                    stack.append(w)
        seen.discard(v)
        return seen

    def incident(self, v: str) -> List[Edge]:
        self._check(v)
        return [e for e in self._edges if v in e.endpoints()]

    def paths(self, a: str, b: str) -> List[Path]:
        """All paths between `a` and `b` that visit no node twice, ignoring edge direction."""
        self._check(a)
        self._check(b)
        if a == b:
            return []
        found: List[Path] = []

        def walk(v: str, visited: List[str], used: List[Edge]) -> None:
            for e in self.incident(v):
                w = e.other(v)
                if w in visited:
                    continue
                if w == b:
                    found.append(Path(used + [e], start=a))
                else:
                    walk(w, visited + [w], used + [e])

        walk(a, [a], [])
        return found

    def latent_name(self, a: str, b: str) -> str:
        """Name of the unmodeled common cause behind a dashed arc, e.g. `U_XY`."""
        a, b = sorted((a, b), key=self._index.__getitem__)
        return f"U_{a}{b}"

    def _name_latents(self) -> List[Tuple[str, str, str]]:
        # every exogenous source needs its own name: U_<v> per node, U_<a><b> per arc
        noise = {f"U_{v}": v for v in self._nodes}
        clash = sorted(set(noise) & set(self._index))
        if clash:
            raise ValueError(f"Node names {clash} clash with exogenous terms of other nodes.")
        out = []
        taken = {}
        for a, b in self.dashed:
            name = self.latent_name(a, b)
            if name in self._index:
                raise ValueError(f"Latent name {name!r} of {a} <-> {b} clashes with a modeled variable.")
            if name in noise:
                raise ValueError(f"Latent name {name!r} of {a} <-> {b} clashes with the exogenous term of {noise[name]!r}.")
            if name in taken:
                raise ValueError(f"Latent name {name!r} is shared by {a} <-> {b} and {taken[name][0]} <-> {taken[name][1]}.")
            taken[name] = (a, b)
            out.append((name, a, b))
        return out

    def latent_confounders(self) -> List[Tuple[str, str, str]]:
        """(latent name, a, b) for every dashed arc."""
        return list(self._latents)

    def with_latent_confounders(self) -> "CausalGraph":
        """Replace every dashed arc a <-> b by an explicit latent parent U_ab -> a, U_ab -> b."""
        latents = self.latent_confounders()
        nodes = [name for name, _, _ in latents] + list(self._nodes)
        edges = [e.endpoints() for e in self._edges]
        for name, a, b in latents:
            edges += [(name, a), (name, b)]
        return CausalGraph(nodes, edges)

    def mutilate(self, targets: Iterable[str]) -> "CausalGraph":
        """Graph after intervening on `targets`: incoming edges and dashed arcs on them are cut."""
        targets = set(targets)
        for v in targets:
            self._check(v)
        edges = [e.endpoints() for e in self._edges if e.effect not in targets]
        dashed = [(a, b) for a, b in self.dashed if a not in targets and b not in targets]
        return CausalGraph(self._nodes, edges, dashed)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, CausalGraph):
            return NotImplemented
        return (
            self._nodes == other._nodes
            and set(self._edges) == set(other._edges)
            and set(self._dashed) == set(other._dashed)
        )

    def __hash__(self) -> int:
        return hash((self._nodes, frozenset(self._edges), frozenset(self._dashed)))

    def __repr__(self) -> str:
        parts = [str(e) for e in self._edges] + [f"{a} <-> {b}" for a, b in self.dashed]
        return f"CausalGraph(nodes={list(self._nodes)}, {', '.join(parts) or 'no edges'})"


def chain(x: str = "X", y: str = "Y", z: str = "Z") -> CausalGraph:
    """X -> Y -> Z"""
    return CausalGraph([x, y, z], [(x, y), (y, z)])


def fork(x: str = "X", y: str = "Y", z: str = "Z") -> CausalGraph:
    """X <- Y -> Z"""
    return CausalGraph([x, y, z], [(y, x), (y, z)])


def collider(x: str = "X", y: str = "Y", z: str = "Z") -> CausalGraph:
    """X -> Y <- Z"""
    return CausalGraph([x, y, z], [(x, y), (z, y)])


STRUCTURES = {
    "chain": chain,
    "fork": fork,
    "collider": collider,
}
