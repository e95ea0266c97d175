# strategies/__init__.py
"""
strategies/ - Declarative rule-based strategies.

A strategy is two ordered lists of conditions (entries and exits). The
backtest itself runs on the analytics service; this package only models
the rules and derives which indicator series a chart needs.

Usage:
    from strategies import derive_indicator_requests

    requests = derive_indicator_requests(config.entry_conditions, config.exit_conditions)
"""

from strategies.conditions import (
    COMPARISONS,
    KNOWN_INDICATORS,
    SELF_REFERENCING_INDICATORS,
    blank_condition,
    condition_from_dict,
    condition_to_dict,
    derive_indicator_requests,
    is_self_referencing,
    is_submittable,
    with_indicator,
)

__all__ = [
    "COMPARISONS",
    "KNOWN_INDICATORS",
    "SELF_REFERENCING_INDICATORS",
    "blank_condition",
    "condition_from_dict",
    "condition_to_dict",
    "derive_indicator_requests",
    "is_self_referencing",
    "is_submittable",
    "with_indicator",
]
