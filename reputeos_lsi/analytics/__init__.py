"""
Analytics package: LSI scoring pipeline (score, history, alerts, append).
"""

from reputeos_lsi.analytics.lsi_pipeline import score_and_record, score_only

__all__ = ["score_and_record", "score_only"]
