"""Ratio arithmetic and status classification.

Pure functions over ``RatioDefinition`` snapshots: no I/O, no session.
"""

import math

from finratio.models.evaluation import EvaluationStatus
from finratio.models.ratio import RatioPolicy
from finratio.services.ratio_catalog import RatioDefinition

UNIT_MONTHS = " Bulan"
UNDEFINED_RANGE_TEXT = "Tidak ditentukan"
SOLVENCY_RANGE_TEXT = "-"
PLACEHOLDER_IDEAL_TEXTS = frozenset({"", "-", "n/a", "na", "tbd"})


def calculate_value(ratio: RatioDefinition, numerator: float, denominator: float) -> float:
    """Divide the side totals and apply the ratio's multiplier.

    A zero denominator never raises. LIQUIDITY maps it to 0 (nothing held,
    nothing spent) or +inf (assets against no expenses); every other case
    yields NaN.
    """
    if denominator == 0:
        if ratio.policy is RatioPolicy.LIQUIDITY:
            if numerator == 0:
                return 0.0
            if numerator > 0:
                return math.inf
        return math.nan
    return (numerator / denominator) * (ratio.multiplier or 1)


def _meets_lower(value: float, ratio: RatioDefinition) -> bool:
    if ratio.lower_bound is None:
        return True
    if ratio.is_lower_bound_inclusive:
        return value >= ratio.lower_bound
    return value > ratio.lower_bound


def _meets_upper(value: float, ratio: RatioDefinition) -> bool:
    if ratio.upper_bound is None:
        return True
    if ratio.is_upper_bound_inclusive:
        return value <= ratio.upper_bound
    return value < ratio.upper_bound


def classify_status(value: float, ratio: RatioDefinition) -> EvaluationStatus:
    """Map a raw (unclamped) ratio value to IDEAL / NOT_IDEAL / INCOMPLETE.

    Policy-specific rules run first; the generic double-bound check is the
    fallback. LIQUIDITY is evaluated before the finiteness check so that an
    unbounded liquidity value is judged against its lower bound.
    """
    if math.isnan(value):
        return EvaluationStatus.INCOMPLETE

    if ratio.policy is RatioPolicy.LIQUIDITY:
        if ratio.lower_bound is not None and value >= ratio.lower_bound:
            return EvaluationStatus.IDEAL
        return EvaluationStatus.NOT_IDEAL

    if not math.isfinite(value):
        return EvaluationStatus.INCOMPLETE

    if ratio.policy is RatioPolicy.SOLVENCY:
        if ratio.lower_bound is not None and value > ratio.lower_bound:
            return EvaluationStatus.IDEAL
        return EvaluationStatus.NOT_IDEAL

    has_lower = ratio.lower_bound is not None
    has_upper = ratio.upper_bound is not None
    if has_lower or has_upper:
        ok = _meets_lower(value, ratio) and _meets_upper(value, ratio)
        return EvaluationStatus.IDEAL if ok else EvaluationStatus.NOT_IDEAL

    # Legacy rule for a solvency ratio stored without bounds or policy
    if ratio.code == "SOLVENCY_RATIO" and value > 0:
        return EvaluationStatus.IDEAL
    return EvaluationStatus.NOT_IDEAL


def clamp_for_storage(value: float, status: EvaluationStatus) -> tuple[float, bool]:
    """Return ``(storable_value, is_unbounded)``.

    NaN and infinities never reach the store: they become 0. ``is_unbounded``
    marks a +inf that still carries a real status, so a stored 0 can be told
    apart from a genuine zero.
    """
    if status is EvaluationStatus.INCOMPLETE or not math.isfinite(value):
        unbounded = status is not EvaluationStatus.INCOMPLETE and value == math.inf
        return 0.0, unbounded
    return round(value, 6), False


def _fmt(bound: float) -> str:
    return f"{bound:g}"


def ideal_range_display(ratio: RatioDefinition) -> str:
    """Human-readable ideal range, e.g. ``≥ 3 Bulan`` or ``≤ 50%``."""
    if ratio.ideal_text and ratio.ideal_text.strip().lower() not in PLACEHOLDER_IDEAL_TEXTS:
        return ratio.ideal_text

    if ratio.policy is RatioPolicy.SOLVENCY:
        return SOLVENCY_RANGE_TEXT

    if ratio.policy is RatioPolicy.LIQUIDITY:
        unit = UNIT_MONTHS
    elif ratio.multiplier == 100:
        unit = "%"
    else:
        unit = ""

    lower, upper = ratio.lower_bound, ratio.upper_bound
    if lower is not None and upper is not None:
        return f"{_fmt(lower)}{unit} – {_fmt(upper)}{unit}"
    if lower is not None:
        op = "≥" if ratio.is_lower_bound_inclusive else ">"
        return f"{op} {_fmt(lower)}{unit}"
    if upper is not None:
        op = "≤" if ratio.is_upper_bound_inclusive else "<"
        return f"{op} {_fmt(upper)}{unit}"
    return UNDEFINED_RANGE_TEXT
