from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Mapping, Optional, Tuple, Union
import numpy as np
import pandas as pd

from .dag import CausalGraph, UnknownVariableError
from .mechanisms import ConstantMechanism, LinearMechanism, MechanismFn, NoiseSpec
from .utils import rng

Array = np.ndarray
Mechanism = Union[LinearMechanism, ConstantMechanism, MechanismFn]

logger = logging.getLogger(__name__)


def exogenous_name(v: str) -> str:
    return f"U_{v}"


@dataclass(eq=False)
class Realization:
    """One simulated run: a vector of n values per modeled variable and per exogenous source."""
    values: Dict[str, Array]
    exogenous: Dict[str, Array]
    seed: Optional[int] = None
    order: List[str] = field(default_factory=list)

    @property
    def n(self) -> int:
        return len(next(iter(self.values.values())))

    @property
    def variables(self) -> List[str]:
        return list(self.values)

    def __getitem__(self, name: str) -> Array:
        if name in self.values:
            return self.values[name]
        if name in self.exogenous:
            return self.exogenous[name]
        raise UnknownVariableError(name)

    def __contains__(self, name: object) -> bool:
        return name in self.values or name in self.exogenous

    def __iter__(self) -> Iterator[str]:
        return iter(self.values)

    def to_frame(self, include_exogenous: bool = False) -> pd.DataFrame:
        cols = dict(self.values)
        if include_exogenous:
            cols.update(self.exogenous)
        return pd.DataFrame(cols)


class StructuralCausalModel:
    """A linear-Gaussian SCM over a CausalGraph.

    Each modeled variable v is generated as:
        v = f_v( direct causes of v, U_v )
    with U_v ~ N(0, 1) independent across variables. A dashed arc a <-> b adds a
    shared latent U_ab ~ N(0, 1) that enters both a and b.
    """

    def __init__(
        self,
        graph: CausalGraph,
        mechanisms: Optional[Mapping[str, Mechanism]] = None,
        noises: Optional[Mapping[str, NoiseSpec]] = None,
        latents: Optional[List[Tuple[str, str, str]]] = None,
    ):
        self.graph = graph
        self.latents = list(latents) if latents is not None else graph.latent_confounders()
        self._order = graph.topological_order()
        self._causes = {
            v: graph.parents(v) + [name for name, a, b in self.latents if v in (a, b)]
            for v in graph.nodes
        }

        mechanisms = dict(mechanisms or {})
        for v in mechanisms:
            if v not in graph:
                raise UnknownVariableError(v)
        self.mechanisms: Dict[str, Mechanism] = {}
        for v in graph.nodes:
            mech = mechanisms.get(v)
            if mech is None:
                mech = LinearMechanism.additive(self._causes[v])
            extra = set(getattr(mech, "coefficients", {})) - set(self._causes[v])
            if extra:
                raise ValueError(f"Mechanism for {v!r} reads {sorted(extra)}, which are not direct causes of {v!r}.")
            self.mechanisms[v] = mech

        self.exogenous_names = [exogenous_name(v) for v in graph.nodes] + [name for name, _, _ in self.latents]
        if len(set(self.exogenous_names)) != len(self.exogenous_names) or set(self.exogenous_names) & set(graph.nodes):
            raise ValueError(f"Exogenous sources must have distinct names, got {self.exogenous_names}.")
        noises = dict(noises or {})
        for name in noises:
            if name not in self.exogenous_names:
                raise UnknownVariableError(name)
        self.noises: Dict[str, NoiseSpec] = {name: noises.get(name) or NoiseSpec() for name in self.exogenous_names}

    @classmethod
    def additive(cls, graph: CausalGraph) -> "StructuralCausalModel":
        """Every variable is the sum of its causes plus its own exogenous term."""
        return cls(graph)

    def equations(self) -> List[str]:
        out = []
        for v in self._order:
            mech = self.mechanisms[v]
            if hasattr(mech, "describe"):
                out.append(mech.describe(v, exogenous_name(v)))
            else:
                out.append(f"{v} = f({', '.join(self._causes[v] + [exogenous_name(v)])})")
        return out

    def sample_exogenous(self, n: int, r: np.random.Generator) -> Dict[str, Array]:
        """Independent draws, one vector per exogenous source, in a fixed order.

        Modeled variables come first in declaration order, then dashed-arc
        latents. The order does not depend on the graph's edges, so a model and
        its intervened version share their exogenous draws for a given seed.
        """
        return {name: self.noises[name].sample(r, n).astype(np.float64) for name in self.exogenous_names}

    def evaluate(self, exogenous: Mapping[str, Array]) -> Dict[str, Array]:
        """Structural assignments in topological order; causes are always computed first."""
        values: Dict[str, Array] = {}
        for v in self._order:
            parents = {c: values[c] if c in values else exogenous[c] for c in self._causes[v]}
            values[v] = np.asarray(self.mechanisms[v](parents, exogenous[exogenous_name(v)]), dtype=np.float64)
        return {v: values[v] for v in self.graph.nodes}

    def sample(self, n: int, seed: Optional[int] = None) -> Realization:
        """Sample n units."""
        if isinstance(n, bool) or not isinstance(n, (int, np.integer)) or n < 1:
            raise ValueError(f"n must be a positive integer, got {n!r}.")
        r = rng(seed)
        exogenous = self.sample_exogenous(int(n), r)
        values = self.evaluate(exogenous)
        logger.debug("sampled n=%d seed=%s for %s", n, seed, self.graph)
        return Realization(values=values, exogenous=exogenous, seed=seed, order=list(self._order))

    def intervene(self, **assignments: float) -> "StructuralCausalModel":
        """do(v = value): cut incoming edges of v and hold it at a constant."""
        for v in assignments:
            if v not in self.graph:
                raise UnknownVariableError(v)
        mechanisms = dict(self.mechanisms)
        for v, value in assignments.items():
            mechanisms[v] = ConstantMechanism(float(value))
        # latents keep feeding the endpoints that were not intervened on
        return StructuralCausalModel(
            self.graph.mutilate(assignments),
            mechanisms=mechanisms,
            noises=self.noises,
            latents=self.latents,
        )

    do = intervene

    def __repr__(self) -> str:
        return f"StructuralCausalModel({'; '.join(self.equations())})"
