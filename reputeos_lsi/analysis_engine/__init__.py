"""
Analysis engine package: LSI scoring core.

Consumes classified discovery snapshots (or direct component inputs), applies
the six rule-based component scorers, and produces the LSI total,
classification, control statistics, significance and gap analysis. Pure and
synchronous; persistence lives in reputeos_lsi.database.
"""

from reputeos_lsi.analysis_engine.components import (
    SCORERS,
    ComponentInputs,
    CrisisMoatInput,
    EliteDiscourseInput,
    MediaFramingInput,
    SearchReputationInput,
    SocialBacklashInput,
    ThirdPartyValidationInput,
    score_c1,
    score_c2,
    score_c3,
    score_c4,
    score_c5,
    score_c6,
)
from reputeos_lsi.analysis_engine.gaps import calculate_gaps
from reputeos_lsi.analysis_engine.historical import (
    DEFAULT_STATS,
    Trend,
    ValidationReport,
    build_validation_report,
    calculate_stats,
    calculate_trend,
)
from reputeos_lsi.analysis_engine.models import (
    COMPONENT_CONFIG,
    COMPONENT_KEYS,
    DiscoverRunSnapshot,
    FrameDistribution,
    LSIComponents,
    LSIGap,
    LSIRun,
    LSIStats,
    Mention,
    SentimentDistribution,
    default_target,
)
from reputeos_lsi.analysis_engine.scorer import (
    LSI_CLASSIFICATIONS,
    Classification,
    LSIResult,
    calculate_component_percentage,
    calculate_lsi,
    calculate_lsi_from_snapshot,
    calculate_lsi_percentage,
    get_lsi_classification,
)
from reputeos_lsi.analysis_engine.signals import (
    SignalSummary,
    build_signal_summary,
    extract_component_inputs,
)
from reputeos_lsi.analysis_engine.statistics import (
    cohens_d,
    effect_band,
    p_value,
    sample_stddev,
)

__all__ = [
    "SCORERS",
    "ComponentInputs",
    "CrisisMoatInput",
    "EliteDiscourseInput",
    "MediaFramingInput",
    "SearchReputationInput",
    "SocialBacklashInput",
    "ThirdPartyValidationInput",
    "score_c1",
    "score_c2",
    "score_c3",
    "score_c4",
    "score_c5",
    "score_c6",
    "calculate_gaps",
    "DEFAULT_STATS",
    "Trend",
    "ValidationReport",
    "build_validation_report",
    "calculate_stats",
    "calculate_trend",
    "COMPONENT_CONFIG",
    "COMPONENT_KEYS",
    "DiscoverRunSnapshot",
    "FrameDistribution",
    "LSIComponents",
    "LSIGap",
    "LSIRun",
    "LSIStats",
    "Mention",
    "SentimentDistribution",
    "default_target",
    "LSI_CLASSIFICATIONS",
    "Classification",
    "LSIResult",
    "calculate_component_percentage",
    "calculate_lsi",
    "calculate_lsi_from_snapshot",
    "calculate_lsi_percentage",
    "get_lsi_classification",
    "SignalSummary",
    "build_signal_summary",
    "extract_component_inputs",
    "cohens_d",
    "effect_band",
    "p_value",
    "sample_stddev",
]
