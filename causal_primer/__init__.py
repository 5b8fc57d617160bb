"""causal_primer: small structural causal models for teaching.

Declare a `CausalGraph`, realize it with `StructuralCausalModel(graph).sample(n, seed)`,
and check what the graph predicts with `correlation_test` / `regression_test`.
"""

from .utils import CyclicGraphError
from .dag import CausalGraph, Edge, Path, UnknownVariableError, chain, fork, collider
from .ci import d_separated, d_connected, implied_independencies
from .mechanisms import NoiseSpec, LinearMechanism, ConstantMechanism
from .scm import StructuralCausalModel, Realization
from .stats import (
    CorrelationResult,
    RegressionResult,
    Coefficient,
    correlation_test,
    regression_test,
    correlate,
    regress,
)
from .datasets import Dataset, generate_dataset
from .config import SimulationConfig
from .demo import DemoReport, run_demo

__all__ = [
    "CyclicGraphError",
    "UnknownVariableError",
    "CausalGraph",
    "Edge",
    "Path",
    "chain",
    "fork",
    "collider",
    "d_separated",
    "d_connected",
    "implied_independencies",
    "NoiseSpec",
    "LinearMechanism",
    "ConstantMechanism",
    "StructuralCausalModel",
    "Realization",
    "CorrelationResult",
    "RegressionResult",
    "Coefficient",
    "correlation_test",
    "regression_test",
    "correlate",
    "regress",
    "Dataset",
    "generate_dataset",
    "SimulationConfig",
    "DemoReport",
    "run_demo",
]
