"""
Alert engine: LSI drop and control-limit alerts.

Converts a new LSI total and its prior history into explainable alerts
(narrative drift, out of control) for the scoring pipeline.
"""

from reputeos_lsi.alerts.engine import (
    AlertConfig,
    AlertSeverity,
    AlertType,
    LSIAlert,
    evaluate_control_limits,
    evaluate_lsi_drop,
    evaluate_run_alerts,
)

__all__ = [
    "AlertConfig",
    "AlertSeverity",
    "AlertType",
    "LSIAlert",
    "evaluate_control_limits",
    "evaluate_lsi_drop",
    "evaluate_run_alerts",
]
