# ==============================================
# ANALYSIS: aggregate → classify → select
# ==============================================
#
# Three-step process:
#   Step 1 (Aggregation):    raw samples → SlotSummary per bucket
#   Step 2 (Classification): thresholds → Wi-Fi / mobile slot lists
#   Step 3 (Selection):      slot lists + now → Recommendation
#
# Modules:
# --------
# - slot_summary.py → SlotSummary, ClassifiedSlot
# - aggregator.py   → SampleAggregator, AggregationResult
# - classifier.py   → SlotClassifier
# - selector.py     → SlotSelector, select_by_coarse_window
# - decision.py     → Recommendation, SlotThresholds, enums
# - analyzer.py     → Analyzer interface + DefaultAnalyzer
#
# ==============================================

from .aggregator import AggregationResult, SampleAggregator
from .analyzer import Analyzer, DefaultAnalyzer
from .classifier import SlotClassifier
from .decision import Channel, Recommendation, RecommendationStatus, SlotThresholds
from .selector import SlotSelector, select_by_coarse_window
from .slot_summary import ClassifiedSlot, SlotSummary

__all__ = [
    "AggregationResult",
    "Analyzer",
    "Channel",
    "ClassifiedSlot",
    "DefaultAnalyzer",
    "Recommendation",
    "RecommendationStatus",
    "SampleAggregator",
    "SlotClassifier",
    "SlotSelector",
    "SlotSummary",
    "SlotThresholds",
    "select_by_coarse_window",
]
