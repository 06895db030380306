# ==============================================
# Decision (Data Classes)
# ==============================================
#
# PURPOSE:
#   Data classes that represent the OUTPUT of slot selection, and the
#   thresholds that control how slots are classified.
#
# ENUMS:
# ------
# - Channel(Enum): WIFI, MOBILE
#     Which radio a recommended slot is expected to use.
#
# - RecommendationStatus(Enum): FOUND, NONE_TODAY, NOT_READY
#     FOUND       → a slot was selected
#     NONE_TODAY  → nothing usable remains today (valid outcome)
#     NOT_READY   → the session has not completed an analysis yet
#
# CLASSES:
# --------
# - Recommendation (dataclass)
#     - status: RecommendationStatus
#     - slot: ClassifiedSlot | None
#     - channel: Channel | None
#     - reason: str                  → Which policy step matched
#     - error: FetchWindowError | None  → Set for NOT_READY results
#
# - SlotThresholds (dataclass)
#     Policy constants used by the SlotClassifier.
#
# ==============================================

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional

from fetchwindow.errors import FetchWindowError
from .slot_summary import ClassifiedSlot


class Channel(Enum):
    """Radio a recommended slot is expected to use."""
    WIFI = "wifi"
    MOBILE = "mobile"


class RecommendationStatus(Enum):
    """
    Outcome of a selection query.

    - FOUND: a slot was chosen
    - NONE_TODAY: no usable slot remains today
    - NOT_READY: no analysis has completed, so there is nothing to choose from
    """
    FOUND = "found"
    NONE_TODAY = "none_today"
    NOT_READY = "not_ready"


@dataclass(frozen=True)
class Recommendation:
    """
    Result of `SlotSelector.select_next()`.

    A Recommendation is never ambiguous: `slot` is only set when
    `status` is FOUND.
    """

    status: RecommendationStatus
    slot: Optional[ClassifiedSlot] = None
    channel: Optional[Channel] = None
    reason: str = ""
    error: Optional[FetchWindowError] = None

    @property
    def found(self) -> bool:
        return self.status is RecommendationStatus.FOUND

    @property
    def time(self) -> Optional[datetime]:
        """The recommended instant, or None when nothing was found."""
        return self.slot.time_of_day if self.slot else None

    @classmethod
    def none_today(cls, reason: str = "No usable slots remain today") -> "Recommendation":
        return cls(status=RecommendationStatus.NONE_TODAY, reason=reason)

    @classmethod
    def not_ready(cls, error: FetchWindowError) -> "Recommendation":
        return cls(
            status=RecommendationStatus.NOT_READY,
            reason=str(error),
            error=error,
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "status": self.status.value,
            "time": self.time.isoformat() if self.time else None,
            "channel": self.channel.value if self.channel else None,
            "reason": self.reason,
            "error_code": self.error.code if self.error else None,
            "slot": self.slot.to_dict() if self.slot else None,
        }


@dataclass
class SlotThresholds:
    """
    Configurable thresholds that decide whether a bucket is usable.

    Wi-Fi usable iff link speed, throughput and signal all pass;
    mobile usable iff throughput and signal pass.
    """

    # --- Wi-Fi ---
    wifi_min_link_speed: float = 4
    wifi_min_bytes_per_second: float = 200
    wifi_max_bytes_per_second: float = 30000
    wifi_min_signal_strength: float = 25

    # --- Mobile ---
    mobile_min_bytes_per_second: float = 100
    mobile_max_bytes_per_second: float = 10000
    mobile_min_signal_strength: float = 25
