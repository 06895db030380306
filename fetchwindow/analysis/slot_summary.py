# ==============================================
# SlotSummary / ClassifiedSlot
# ==============================================
#
# PURPOSE:
#   Data classes that hold the per-bucket averages computed by the
#   SampleAggregator, and the same averages once the SlotClassifier
#   has labelled them. This is the "evidence" the selector works on.
#
# CLASS: SlotSummary (dataclass)
# ------------------------------
#   Attributes:
#   -----------
#   - bucket_index: int                  → Position of the bucket in the day
#   - time_of_day: datetime              → Bucket time anchored to the analysis day
#   - avg_wifi_bytes_per_second: float   → Σ bytes / Σ elapsed seconds
#   - avg_wifi_link_speed: float         → Σ bandwidth / sample count
#   - avg_wifi_signal_strength: float    → Σ signal / sample count
#   - avg_mobile_bytes_per_second: float → Σ bytes / Σ elapsed seconds
#   - avg_mobile_signal_strength: float  → Σ signal / sample count
#   - sample_count: int                  → Weeks observed in the bucket
#
#   Throughput is a rate, so it is averaged over elapsed time; link
#   speed and signal strength are point readings, so they are averaged
#   over the number of samples.
#
# CLASS: ClassifiedSlot (dataclass)
# ---------------------------------
#   - summary: SlotSummary
#   - wifi_usable: bool
#   - mobile_usable: bool
#   Proxies the summary's fields as read-only properties.
#
# ==============================================

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class SlotSummary:
    """Averaged link quality for one time-of-day bucket."""

    bucket_index: int
    time_of_day: datetime
    avg_wifi_bytes_per_second: float = 0.0
    avg_wifi_link_speed: float = 0.0
    avg_wifi_signal_strength: float = 0.0
    avg_mobile_bytes_per_second: float = 0.0
    avg_mobile_signal_strength: float = 0.0
    sample_count: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bucket_index": self.bucket_index,
            "time_of_day": self.time_of_day.isoformat(),
            "avg_wifi_bytes_per_second": self.avg_wifi_bytes_per_second,
            "avg_wifi_link_speed": self.avg_wifi_link_speed,
            "avg_wifi_signal_strength": self.avg_wifi_signal_strength,
            "avg_mobile_bytes_per_second": self.avg_mobile_bytes_per_second,
            "avg_mobile_signal_strength": self.avg_mobile_signal_strength,
            "sample_count": self.sample_count,
        }


@dataclass(frozen=True)
class ClassifiedSlot:
    """A SlotSummary labelled with Wi-Fi / mobile usability."""

    summary: SlotSummary
    wifi_usable: bool = False
    mobile_usable: bool = False

    @property
    def bucket_index(self) -> int:
        return self.summary.bucket_index

    @property
    def time_of_day(self) -> datetime:
        return self.summary.time_of_day

    @property
    def avg_wifi_link_speed(self) -> float:
        return self.summary.avg_wifi_link_speed

    @property
    def avg_wifi_bytes_per_second(self) -> float:
        return self.summary.avg_wifi_bytes_per_second

    @property
    def avg_wifi_signal_strength(self) -> float:
        return self.summary.avg_wifi_signal_strength

    @property
    def avg_mobile_bytes_per_second(self) -> float:
        return self.summary.avg_mobile_bytes_per_second

    @property
    def avg_mobile_signal_strength(self) -> float:
        return self.summary.avg_mobile_signal_strength

    def to_dict(self) -> Dict[str, Any]:
        data = self.summary.to_dict()
        data["wifi_usable"] = self.wifi_usable
        data["mobile_usable"] = self.mobile_usable
        return data
