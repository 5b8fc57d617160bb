from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional, Tuple
import numpy as np

from .dag import CausalGraph
from .scm import Mechanism, Realization, StructuralCausalModel


@dataclass
class Dataset:
    realization: Realization
    graph: CausalGraph

    @property
    def seed(self) -> Optional[int]:
        return self.realization.seed

    def save_npz(self, path: str):
        r = self.realization
        np.savez_compressed(
            path,
            names=np.array(r.variables, dtype=str),
            X=np.column_stack([r.values[v] for v in r.variables]),
            exogenous_names=np.array(list(r.exogenous), dtype=str),
            U=np.column_stack([r.exogenous[u] for u in r.exogenous]),
            order=np.array(r.order, dtype=str),
            nodes=np.array(self.graph.nodes, dtype=str),
            edges=np.array([e.endpoints() for e in self.graph.edges], dtype=str).reshape(-1, 2),
            dashed=np.array(self.graph.dashed, dtype=str).reshape(-1, 2),
            seed=-1 if r.seed is None else np.int64(r.seed),
        )

    @classmethod
    def load_npz(cls, path: str) -> "Dataset":
        with np.load(path, allow_pickle=False) as f:
            graph = CausalGraph(
                [str(v) for v in f["nodes"]],
                [(str(a), str(b)) for a, b in f["edges"]],
                [(str(a), str(b)) for a, b in f["dashed"]],
            )
            X, U = f["X"], f["U"]
            values = {str(v): X[:, k].copy() for k, v in enumerate(f["names"])}
            exogenous = {str(u): U[:, k].copy() for k, u in enumerate(f["exogenous_names"])}
            seed = int(f["seed"])
            order = [str(v) for v in f["order"]]
        realization = Realization(
            values=values,
            exogenous=exogenous,
            seed=None if seed == -1 else seed,
            order=order,
        )
        return cls(realization=realization, graph=graph)

def generate_dataset(
    graph: CausalGraph,
    n: int = 1000,
    seed: Optional[int] = None,
    mechanisms: Optional[Mapping[str, Mechanism]] = None,
) -> Tuple[Dataset, StructuralCausalModel]:
    """Realize one SCM over `graph` and return (dataset, scm)."""
    scm = StructuralCausalModel(graph, mechanisms=mechanisms)
    realization = scm.sample(n=n, seed=seed)
    return Dataset(realization=realization, graph=graph), scm
