# strategies/conditions.py - Declarative entry/exit rules.
"""
Condition model for rule-based strategies.

A condition compares one indicator either against another series
(SMA/EMA, by reference key such as "SMA_50") or against a fixed
threshold (every other indicator). The shape is chosen by indicator
identity, never by which optional field happens to be filled in.

Usage:
    entry = [condition_from_dict({"indicator": "RSI", "period": 14,
                                  "comparison": "<", "value": 30})]
    requests = derive_indicator_requests(entry, exits)
"""

from typing import Any, Iterable, Sequence

from models import Condition, IndicatorRequest, SelfReferencing, Thresholded


# Indicators that compare against another series instead of a number
SELF_REFERENCING_INDICATORS = {"SMA", "EMA"}

# Choices offered by the condition editor
KNOWN_INDICATORS = {
    "SMA": "Simple Moving Average (SMA)",
    "EMA": "Exponential Moving Average (EMA)",
    "RSI": "Relative Strength Index (RSI)",
    "ATR": "Average True Range (ATR)",
    "CMF": "Chaikin Money Flow (CMF)",
    "Williams %R": "Williams %R",
    "CCI": "Commodity Channel Index (CCI)",
}

COMPARISONS = (">", "<", "=")


def is_self_referencing(indicator: str) -> bool:
    """True if the indicator compares against another series."""
    return indicator in SELF_REFERENCING_INDICATORS


def _to_float(value: Any) -> float | None:
    if value is None or value == "":
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def condition_from_dict(data: dict) -> Condition:
    """Build a Condition from its wire shape.

    Malformed fields are tolerated (empty name, zero period); the fetch
    stage rejects those requests later.
    """
    indicator = str(data.get("indicator") or "")
    if is_self_referencing(indicator):
        target = SelfReferencing(reference=str(data.get("reference") or ""))
    else:
        target = Thresholded(value=_to_float(data.get("value")))

    return Condition(
        indicator=indicator,
        period=_to_int(data.get("period")),
        comparison=str(data.get("comparison") or ""),
        target=target,
    )


def condition_to_dict(condition: Condition) -> dict:
    """Wire shape used by /run-backtest."""
    data: dict[str, Any] = {
        "indicator": condition.indicator,
        "period": condition.period,
        "comparison": condition.comparison,
    }
    if isinstance(condition.target, SelfReferencing):
        data["reference"] = condition.target.reference
    elif condition.target.value is not None:
        data["value"] = condition.target.value
    return data


def blank_condition() -> Condition:
    """Empty row appended by the editor."""
    return Condition(indicator="", period=0, comparison="", target=SelfReferencing())


def with_indicator(condition: Condition, indicator: str) -> Condition:
    """Change the indicator, re-selecting the target shape if needed."""
    if is_self_referencing(indicator):
        target = condition.target if isinstance(condition.target, SelfReferencing) else SelfReferencing()
    else:
        target = condition.target if isinstance(condition.target, Thresholded) else Thresholded()
    return Condition(
        indicator=indicator,
        period=condition.period,
        comparison=condition.comparison,
        target=target,
    )


def derive_indicator_requests(
    entry_conditions: Iterable[Condition],
    exit_conditions: Iterable[Condition],
) -> list[IndicatorRequest]:
    """
    Derive the distinct indicator series needed to chart a strategy.

    Deduplicates on (indicator, period) across entries and exits.
    The list keeps first-seen order so fetches run in a fixed order;
    compare results as sets.
    """
    seen: dict[IndicatorRequest, None] = {}
    for conditions in (entry_conditions, exit_conditions):
        for condition in conditions:
            seen.setdefault(IndicatorRequest(condition.indicator, condition.period), None)
    return list(seen)


def is_submittable(
    entry_conditions: Sequence[Condition],
    exit_conditions: Sequence[Condition],
) -> bool:
    """A strategy needs at least one entry and one exit condition."""
    return len(entry_conditions) > 0 and len(exit_conditions) > 0
