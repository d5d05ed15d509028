"""
ReputeOS LSI: Leadership/Legitimacy Sentiment Index scoring engine.

Converts classified discovery-scan signals into six bounded component scores,
a 0-100 composite, control-limit statistics, gap analysis against targets, and
before/after significance metrics. The scoring core is pure; persistence and
HTTP live in the database and api_server packages.
"""

__version__ = "0.1.0"
