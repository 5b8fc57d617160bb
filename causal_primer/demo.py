from __future__ import annotations
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple

from .ci import d_separated
from .config import SimulationConfig
from .dag import STRUCTURES, CausalGraph
from .scm import Realization, StructuralCausalModel
from .stats import CorrelationResult, RegressionResult, correlate, regress

logger = logging.getLogger(__name__)

PAIRS = (("X", "Y"), ("Y", "Z"), ("X", "Z"))


@dataclass
class DemoReport:
    """Correlations and the regression Z ~ X + Y for one realization of a three-node structure."""
    structure: str
    scm: StructuralCausalModel
    realization: Realization
    correlations: Dict[Tuple[str, str], CorrelationResult]
    regression: RegressionResult
    alpha: float = 0.05
    notes: List[str] = field(default_factory=list)

    @property
    def graph(self) -> CausalGraph:
        return self.scm.graph

    def matches_expectation(self) -> bool:
        """Whether the sample shows the pattern the graph predicts.

        Chain and fork: X and Z are correlated, but X adds nothing once Y is
        controlled for. Collider: X and Z are uncorrelated, but become
        associated once Y is controlled for.
        """
        xz = self.correlations[("X", "Z")].is_significant(self.alpha)
        x_given_y = self.regression.is_significant("X", self.alpha)
        if self.structure == "collider":
            return not xz and x_given_y
        return xz and not x_given_y

    def render(self) -> str:
        g = self.graph
        lines = [f"== {self.structure}: {repr(g)}", ""]
        lines += ["Structural equations:"] + [f"  {eq}" for eq in self.scm.equations()]
        lines += ["", "Paths between X and Z:"]
        for p in g.paths("X", "Z"):
            kind = "collider path" if p.is_collider_path else "active"
            blocked = "blocked" if p.is_blocked(g, ["Y"]) else "open"
            lines.append(f"  {p}  ({kind}; {blocked} given Y)")
        lines += [
            "",
            f"X _||_ Z        : {d_separated(g, ['X'], ['Z'])}",
            f"X _||_ Z | Y    : {d_separated(g, ['X'], ['Z'], ['Y'])}",
        ]
        for pair in PAIRS:
            lines.append(self.correlations[pair].summary())
        lines.append(self.regression.summary())
        lines += [""] + self.notes
        verdict = "matches" if self.matches_expectation() else "does NOT match"
        lines.append(f"Sample {verdict} the {self.structure} prediction at alpha = {self.alpha:g}.")
        return "\n".join(lines)


def run_demo(structure: str, cfg: Optional[SimulationConfig] = None) -> DemoReport:
    """Realize the additive chain, fork or collider model and test it."""
    if structure not in STRUCTURES:
        raise ValueError(f"Unknown structure {structure!r}; expected one of {sorted(STRUCTURES)}.")
    cfg = cfg or SimulationConfig()
    scm = StructuralCausalModel.additive(STRUCTURES[structure]())
    realization = scm.sample(n=cfg.n, seed=cfg.seed)
    logger.info("realized %s with n=%d seed=%s", structure, cfg.n, cfg.seed)

    correlations = {(a, b): correlate(realization, a, b, confidence=cfg.confidence) for a, b in PAIRS}
    regression = regress(realization, "Z", on=["X", "Y"])

    coef_x = regression["X"]
    notes = [
        f"cor(X, Z) = {correlations[('X', 'Z')].r:.3f}; "
        f"coefficient on X controlling for Y = {coef_x.estimate:.3f} (p {coef_x.p_value:.3g})",
    ]
    report = DemoReport(
        structure=structure,
        scm=scm,
        realization=realization,
        correlations=correlations,
        regression=regression,
        alpha=cfg.alpha,
        notes=notes,
    )
    if not report.matches_expectation():
        logger.warning("%s sample deviates from the graph's prediction (seed=%s)", structure, cfg.seed)
    return report
