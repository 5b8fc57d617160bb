from __future__ import annotations
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Iterable, Mapping
import numpy as np

Array = np.ndarray
MechanismFn = Callable[[Mapping[str, Array], Array], Array]
# signature: f(parent_vectors_by_name, own_exogenous_vector) -> output_vector

@dataclass
class NoiseSpec:
    name: str = "gaussian"
    params: Dict[str, Any] = field(default_factory=lambda: {"loc": 0.0, "scale": 1.0})

    def __post_init__(self):
        if self.name != "gaussian":
            raise ValueError(f"Unknown noise: {self.name}")
        if self.params.get("scale", 1.0) <= 0:
            raise ValueError("scale must be > 0.")

    def sample(self, r: np.random.Generator, n: int) -> Array:
        p = self.params
        return r.normal(loc=p.get("loc", 0.0), scale=p.get("scale", 1.0), size=n)


# ---- Structural assignments ----
# A mechanism maps the direct causes' vectors plus the variable's own exogenous
# vector to the variable's vector. `coefficients` lists the causes it reads.

@dataclass
class LinearMechanism:
    """v = intercept + sum_p coefficients[p] * p + noise_scale * U_v"""
    coefficients: Dict[str, float] = field(default_factory=dict)
    intercept: float = 0.0
    noise_scale: float = 1.0

    @classmethod
    def additive(cls, causes: Iterable[str]) -> "LinearMechanism":
        """Sum of causes plus own exogenous term (coefficient 1, intercept 0)."""
        return cls(coefficients={c: 1.0 for c in causes})

    def __call__(self, parents: Mapping[str, Array], u: Array) -> Array:
        out = self.intercept + self.noise_scale * u
        for name, w in self.coefficients.items():
            out = out + w * parents[name]
        return out

    def describe(self, target: str, exogenous: str) -> str:
        terms = []
        if self.intercept != 0:
            terms.append(f"{self.intercept:g}")
        for name, w in self.coefficients.items():
            terms.append(name if w == 1 else f"{w:g}*{name}")
        if self.noise_scale != 0:
            terms.append(exogenous if self.noise_scale == 1 else f"{self.noise_scale:g}*{exogenous}")
        return f"{target} = {' + '.join(terms) or '0'}"


@dataclass
class ConstantMechanism:
    """Assignment installed by an intervention do(v = value)."""
    value: float

    @property
    def coefficients(self) -> Dict[str, float]:
        return {}

    def __call__(self, parents: Mapping[str, Array], u: Array) -> Array:
        return np.full_like(u, self.value, dtype=np.float64)

    def describe(self, target: str, exogenous: str) -> str:
        return f"{target} = {self.value:g}"
