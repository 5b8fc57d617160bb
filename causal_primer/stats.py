"""Correlation and regression tests with R-style text reports.

`correlation_test` mirrors `cor.test(x, y)`; `regression_test` mirrors
`summary(lm(y ~ x1 + x2 + ...))`.
"""
from __future__ import annotations
import logging
from dataclasses import dataclass
from typing import List, Mapping, Optional, Sequence

import numpy as np
import statsmodels.api as sm
from scipy import stats

from .utils import as_vector

logger = logging.getLogger(__name__)

INTERCEPT = "(Intercept)"


def format_p(p: float) -> str:
    if np.isnan(p):
        return "= NA"
    if p < 2.2e-16:
        return "< 2.2e-16"
    return f"= {p:.4g}"


def _stars(p: float) -> str:
    if p < 0.001:
        return "***"
    if p < 0.01:
        return "**"
    if p < 0.05:
        return "*"
    if p < 0.1:
        return "."
    return ""


@dataclass
class CorrelationResult:
    r: float
    t: float
    df: int
    p_value: float
    ci_low: float
    ci_high: float
    confidence: float
    n: int
    x_name: str = "x"
    y_name: str = "y"

    def is_significant(self, alpha: float = 0.05) -> bool:
        return self.p_value < alpha

    def summary(self) -> str:
        lines = [
            "",
            "\tPearson's product-moment correlation",
            "",
            f"data:  {self.x_name} and {self.y_name}",
            f"t = {self.t:.4g}, df = {self.df}, p-value {format_p(self.p_value)}",
            "alternative hypothesis: true correlation is not equal to 0",
        ]
        if not np.isnan(self.ci_low):
            lines += [
                f"{self.confidence * 100:g} percent confidence interval:",
                f" {self.ci_low:.7f} {self.ci_high:.7f}",
            ]
        lines += [
            "sample estimates:",
            "      cor ",
            f"{self.r:.7f} ",
        ]
        return "\n".join(lines)


def correlation_test(
    x: Sequence[float],
    y: Sequence[float],
    confidence: float = 0.95,
    x_name: str = "x",
    y_name: str = "y",
) -> CorrelationResult:
    """Pearson's r with a t-test on n-2 df under H0: rho = 0 (two-sided).

    The confidence interval uses the Fisher z transform and needs n >= 4;
    with n == 3 it is reported as NaN.
    """
    x = as_vector(x, x_name)
    y = as_vector(y, y_name)
    if len(x) != len(y):
        raise ValueError(f"{x_name} and {y_name} must have the same length ({len(x)} != {len(y)}).")
    n = len(x)
    if n < 3:
        raise ValueError("Need at least 3 observations for a correlation test.")
    if not 0 < confidence < 1:
        raise ValueError("confidence must be in (0, 1).")
    if np.ptp(x) == 0 or np.ptp(y) == 0:
        raise ValueError("Correlation is undefined for a constant vector.")

    res = stats.pearsonr(x, y)
    r = float(res.statistic)
    df = n - 2
    with np.errstate(divide="ignore"):
        t = r * np.sqrt(df / (1.0 - r * r)) if abs(r) < 1 else np.copysign(np.inf, r)
    if n >= 4:
        ci = res.confidence_interval(confidence_level=confidence)
        lo, hi = float(ci.low), float(ci.high)
    else:
        lo = hi = float("nan")
    logger.debug("cor(%s, %s) = %.4f (n=%d, p=%.3g)", x_name, y_name, r, n, res.pvalue)
    return CorrelationResult(
        r=r, t=float(t), df=df, p_value=float(res.pvalue),
        ci_low=lo, ci_high=hi, confidence=confidence, n=n,
        x_name=x_name, y_name=y_name,
    )


@dataclass
class Coefficient:
    name: str
    estimate: float
    std_error: float
    t: float
    p_value: float


@dataclass
class RegressionResult:
    outcome: str
    coefficients: List[Coefficient]
    residual_std_error: float
    df_residual: int
    r_squared: float
    adj_r_squared: float
    f_statistic: Optional[float]
    f_p_value: Optional[float]
    n: int

    @property
    def predictors(self) -> List[str]:
        return [c.name for c in self.coefficients if c.name != INTERCEPT]

    @property
    def formula(self) -> str:
        return f"{self.outcome} ~ {' + '.join(self.predictors) or '1'}"

    def coefficient(self, name: str) -> Coefficient:
        for c in self.coefficients:
            if c.name == name:
                return c
        raise KeyError(name)

    def __getitem__(self, name: str) -> Coefficient:
        return self.coefficient(name)

    def is_significant(self, name: str, alpha: float = 0.05) -> bool:
        return self.coefficient(name).p_value < alpha

    def summary(self) -> str:
        width = max(len(c.name) for c in self.coefficients)
        lines = [
            "",
            "Call:",
            f"lm(formula = {self.formula})",
            "",
            "Coefficients:",
            f"{'':<{width}} {'Estimate':>10} {'Std. Error':>10} {'t value':>8} {'Pr(>|t|)':>10}",
        ]
        for c in self.coefficients:
            p = format_p(c.p_value).lstrip("= ")
            lines.append(
                f"{c.name:<{width}} {c.estimate:>10.5f} {c.std_error:>10.5f} {c.t:>8.3f} {p:>10} {_stars(c.p_value)}".rstrip()
            )
        lines += [
            "---",
            "Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1",
            "",
            f"Residual standard error: {self.residual_std_error:.4g} on {self.df_residual} degrees of freedom",
            f"Multiple R-squared:  {self.r_squared:.4g},\tAdjusted R-squared:  {self.adj_r_squared:.4g} ",
        ]
        if self.f_statistic is not None:
            k = len(self.predictors)
            lines.append(
                f"F-statistic: {self.f_statistic:.4g} on {k} and {self.df_residual} DF,  p-value: {format_p(self.f_p_value).lstrip('= ')}"
            )
        return "\n".join(lines)


def regression_test(
    y: Sequence[float],
    predictors: Mapping[str, Sequence[float]],
    y_name: str = "y",
) -> RegressionResult:
    """Ordinary least squares of y on the given predictors (plus an intercept)."""
    y = as_vector(y, y_name)
    names = list(predictors)
    if INTERCEPT in names:
        raise ValueError(f"{INTERCEPT!r} is reserved for the intercept term.")
    cols = [as_vector(predictors[k], k) for k in names]
    for k, c in zip(names, cols):
        if len(c) != len(y):
            raise ValueError(f"Predictor {k!r} has length {len(c)}, expected {len(y)}.")
    n = len(y)
    if n <= len(names) + 1:
        raise ValueError(f"Need more than {len(names) + 1} observations to fit {len(names)} predictors.")

    X = np.column_stack([np.ones(n)] + cols)
    if np.linalg.matrix_rank(X) < X.shape[1]:
        # collinear terms (e.g. a variable held constant by do()) have no unique estimate
        raise ValueError(f"Predictors {names} are collinear with each other or with the intercept.")
    fit = sm.OLS(y, X).fit()

    coefs = [
        Coefficient(name=name, estimate=float(b), std_error=float(se), t=float(t), p_value=float(p))
        for name, b, se, t, p in zip([INTERCEPT] + names, fit.params, fit.bse, fit.tvalues, fit.pvalues)
    ]
    has_predictors = len(names) > 0
    logger.debug("fit %s ~ %s (n=%d, R2=%.3f)", y_name, " + ".join(names) or "1", n, fit.rsquared)
    return RegressionResult(
        outcome=y_name,
        coefficients=coefs,
        residual_std_error=float(np.sqrt(fit.scale)),
        df_residual=int(fit.df_resid),
        r_squared=float(fit.rsquared) if has_predictors else 0.0,
        adj_r_squared=float(fit.rsquared_adj) if has_predictors else 0.0,
        f_statistic=float(fit.fvalue) if has_predictors else None,
        f_p_value=float(fit.f_pvalue) if has_predictors else None,
        n=n,
    )


def correlate(realization, a: str, b: str, confidence: float = 0.95) -> CorrelationResult:
    """correlation_test between two variables of a Realization."""
    return correlation_test(realization[a], realization[b], confidence=confidence, x_name=a, y_name=b)


def regress(realization, outcome: str, on: Sequence[str]) -> RegressionResult:
    """regression_test of one variable of a Realization on others."""
    return regression_test(realization[outcome], {k: realization[k] for k in on}, y_name=outcome)
