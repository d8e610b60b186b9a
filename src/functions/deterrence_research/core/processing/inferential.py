"""
Inferential statistics for the report exporter.

Thin wrappers over ``scipy.stats`` that return plain result objects and
degrade to a neutral result (statistic 0, p = 1, not significant) when the
input is too small or degenerate to test.
"""

from __future__ import annotations

from dataclasses import dataclass, field, asdict
from typing import Any, Dict, List, Sequence
import logging
import math

import numpy as np
from scipy import stats

from .summary_statistics import mean as _mean, population_std_dev as _sd

logger = logging.getLogger(__name__)

ALPHA = 0.05


@dataclass
class TTestResult:
    t_statistic: float = 0.0
    degrees_of_freedom: int = 0
    p_value: float = 1.0
    mean1: float = 0.0
    mean2: float = 0.0
    sd1: float = 0.0
    sd2: float = 0.0
    n1: int = 0
    n2: int = 0
    cohens_d: float = 0.0
    significant: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GroupMean:
    group: str
    mean: float
    sd: float
    n: int


@dataclass
class ANOVAResult:
    f_statistic: float = 0.0
    p_value: float = 1.0
    between_groups_df: int = 0
    within_groups_df: int = 0
    between_groups_ss: float = 0.0
    within_groups_ss: float = 0.0
    total_ss: float = 0.0
    eta_squared: float = 0.0
    significant: bool = False
    group_means: List[GroupMean] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class CorrelationResult:
    coefficient: float = 0.0
    p_value: float = 1.0
    n: int = 0
    significant: bool = False
    interpretation: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class RegressionResult:
    slope: float = 0.0
    intercept: float = 0.0
    r_squared: float = 0.0
    f_statistic: float = 0.0
    p_value: float = 1.0
    standard_error: float = 0.0
    n: int = 0
    significant: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def calculate_t_test(group1: Sequence[float], group2: Sequence[float]) -> TTestResult:
    """
    Student's two-sample t-test (pooled variance) with Cohen's d.

    Both groups need at least 2 values; otherwise only means and sizes are
    reported.
    """
    n1, n2 = len(group1), len(group2)
    if n1 < 2 or n2 < 2:
        return TTestResult(mean1=_mean(group1), mean2=_mean(group2), n1=n1, n2=n2)

    mean1, mean2 = _mean(group1), _mean(group2)
    sd1, sd2 = _sd(group1), _sd(group2)

    t_statistic, p_value = stats.ttest_ind(group1, group2, equal_var=True)
    t_statistic, p_value = float(t_statistic), float(p_value)
    if math.isnan(t_statistic) or math.isnan(p_value):
        # Both groups constant
        t_statistic, p_value = 0.0, 1.0

    pooled_sd = math.sqrt(((n1 - 1) * sd1 ** 2 + (n2 - 1) * sd2 ** 2) / (n1 + n2 - 2))
    cohens_d = abs(mean1 - mean2) / pooled_sd if pooled_sd > 0 else 0.0

    return TTestResult(
        t_statistic=t_statistic,
        degrees_of_freedom=n1 + n2 - 2,
        p_value=p_value,
        mean1=mean1,
        mean2=mean2,
        sd1=sd1,
        sd2=sd2,
        n1=n1,
        n2=n2,
        cohens_d=cohens_d,
        significant=p_value < ALPHA,
    )


def calculate_anova(groups: Dict[str, Sequence[float]]) -> ANOVAResult:
    """
    One-way ANOVA over named groups.

    Groups with fewer than 2 values are dropped from the test; when fewer
    than 2 groups remain only per-group descriptives are reported.
    """
    valid = {name: values for name, values in groups.items() if len(values) >= 2}
    if len(valid) < 2:
        return ANOVAResult(
            group_means=[
                GroupMean(group=name, mean=_mean(values), sd=_sd(values), n=len(values))
                for name, values in groups.items()
            ]
        )

    all_values = np.concatenate([np.asarray(values, dtype=float) for values in valid.values()])
    grand_mean = float(all_values.mean())

    between_ss = 0.0
    within_ss = 0.0
    group_means = []
    for name, values in valid.items():
        arr = np.asarray(values, dtype=float)
        group_mean = float(arr.mean())
        between_ss += len(arr) * (group_mean - grand_mean) ** 2
        within_ss += float(((arr - group_mean) ** 2).sum())
        group_means.append(GroupMean(group=name, mean=group_mean, sd=_sd(values), n=len(arr)))

    total_ss = between_ss + within_ss
    between_df = len(valid) - 1
    within_df = len(all_values) - len(valid)

    between_ms = between_ss / between_df
    within_ms = within_ss / within_df if within_df > 0 else 0.0

    if within_ms > 0:
        f_statistic = between_ms / within_ms
        p_value = float(stats.f.sf(f_statistic, between_df, within_df))
    elif between_ms > 0:
        f_statistic, p_value = math.inf, 0.0
    else:
        f_statistic, p_value = 0.0, 1.0

    return ANOVAResult(
        f_statistic=f_statistic,
        p_value=p_value,
        between_groups_df=between_df,
        within_groups_df=within_df,
        between_groups_ss=between_ss,
        within_groups_ss=within_ss,
        total_ss=total_ss,
        eta_squared=between_ss / total_ss if total_ss > 0 else 0.0,
        significant=p_value < ALPHA,
        group_means=group_means,
    )


def describe_correlation(r: float) -> str:
    """Strength and direction wording, e.g. 'moderate negative'."""
    strength = abs(r)
    if strength < 0.3:
        label = "weak"
    elif strength < 0.7:
        label = "moderate"
    else:
        label = "strong"
    return f"{label} {'negative' if r < 0 else 'positive'}"


def calculate_correlation(x: Sequence[float], y: Sequence[float]) -> CorrelationResult:
    """Pearson correlation with a two-sided p-value; needs 3+ paired values."""
    n = len(x)
    if n != len(y) or n < 3:
        return CorrelationResult(
            n=n,
            interpretation="Insufficient data (need at least 3 data points)",
        )

    if np.ptp(x) == 0 or np.ptp(y) == 0:
        logger.debug("Correlation input is constant, reporting r = 0")
        return CorrelationResult(n=n, interpretation=describe_correlation(0.0))

    r, p_value = stats.pearsonr(x, y)
    r, p_value = float(r), float(p_value)
    return CorrelationResult(
        coefficient=r,
        p_value=p_value,
        n=n,
        significant=p_value < ALPHA,
        interpretation=describe_correlation(r),
    )


def calculate_regression(x: Sequence[float], y: Sequence[float]) -> RegressionResult:
    """Simple linear regression of ``y`` on ``x``; needs 3+ paired values."""
    n = len(x)
    if n != len(y) or n < 3 or np.ptp(x) == 0:
        return RegressionResult(n=n)

    fit = stats.linregress(x, y)
    x_arr = np.asarray(x, dtype=float)
    y_arr = np.asarray(y, dtype=float)

    predicted = fit.slope * x_arr + fit.intercept
    sst = float(((y_arr - y_arr.mean()) ** 2).sum())
    sse = float(((y_arr - predicted) ** 2).sum())
    mse = sse / (n - 2)

    r_squared = 1 - sse / sst if sst > 0 else 0.0
    if mse > 0:
        f_statistic = (sst - sse) / mse
        p_value = float(stats.f.sf(f_statistic, 1, n - 2))
    elif sst > 0:
        # Perfect fit
        f_statistic, p_value = math.inf, 0.0
    else:
        f_statistic, p_value = 0.0, 1.0

    return RegressionResult(
        slope=float(fit.slope),
        intercept=float(fit.intercept),
        r_squared=r_squared,
        f_statistic=f_statistic,
        p_value=p_value,
        standard_error=math.sqrt(mse),
        n=n,
        significant=p_value < ALPHA,
    )
