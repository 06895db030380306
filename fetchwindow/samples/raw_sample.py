# ==============================================
# RawSample
# ==============================================
#
# PURPOSE:
#   One measurement interval recorded by the network statistics
#   collector: what the Wi-Fi and mobile radios saw between `start`
#   and `end`. Samples are immutable once recorded and owned by the
#   sample store; the analysis code only reads them.
#
# CLASSES:
# --------
# - WifiReading (frozen dataclass)
#     connected, data_sent, data_received, bandwidth, signal_strength
#
# - MobileReading (frozen dataclass)
#     connected, metered, roaming, data_sent, data_received,
#     signal_strength
#
# - RawSample (frozen dataclass)
#     start, end, wifi, mobile
#
#     Properties:
#     -----------
#     - elapsed_seconds -> float
#     - is_mobile_candidate -> bool
#
#     Methods:
#     --------
#     - to_dict() -> dict          → JSON-serializable form for stores
#     - from_dict(data) -> RawSample  (classmethod)
#
# ==============================================

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict


@dataclass(frozen=True)
class WifiReading:
    """Wi-Fi radio state for one interval."""
    connected: bool = False
    data_sent: int = 0  # bytes
    data_received: int = 0  # bytes
    bandwidth: float = 0.0  # link speed reported by the radio (Mbps)
    signal_strength: float = 0.0  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "data_sent": self.data_sent,
            "data_received": self.data_received,
            "bandwidth": self.bandwidth,
            "signal_strength": self.signal_strength,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "WifiReading":
        return cls(
            connected=bool(data.get("connected", False)),
            data_sent=data.get("data_sent", 0),
            data_received=data.get("data_received", 0),
            bandwidth=data.get("bandwidth", 0.0),
            signal_strength=data.get("signal_strength", 0.0),
        )


@dataclass(frozen=True)
class MobileReading:
    """Mobile radio state for one interval."""
    connected: bool = False
    metered: bool = False
    roaming: bool = False
    data_sent: int = 0  # bytes
    data_received: int = 0  # bytes
    signal_strength: float = 0.0  # 0-100

    def to_dict(self) -> Dict[str, Any]:
        return {
            "connected": self.connected,
            "metered": self.metered,
            "roaming": self.roaming,
            "data_sent": self.data_sent,
            "data_received": self.data_received,
            "signal_strength": self.signal_strength,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "MobileReading":
        return cls(
            connected=bool(data.get("connected", False)),
            metered=bool(data.get("metered", False)),
            roaming=bool(data.get("roaming", False)),
            data_sent=data.get("data_sent", 0),
            data_received=data.get("data_received", 0),
            signal_strength=data.get("signal_strength", 0.0),
        )


@dataclass(frozen=True)
class RawSample:
    """
    A single measurement interval.

    `start` and `end` are naive local datetimes; the time-of-day of
    `end` is what the aggregator uses to label the bucket.
    """

    start: datetime
    end: datetime
    wifi: WifiReading = field(default_factory=WifiReading)
    mobile: MobileReading = field(default_factory=MobileReading)

    @property
    def elapsed_seconds(self) -> float:
        """Length of the interval in seconds."""
        return (self.end - self.start).total_seconds()

    @property
    def is_mobile_candidate(self) -> bool:
        """
        Whether this sample's mobile data may be used for averaging.

        Metered or roaming connections are never candidates, regardless
        of how good the link looked.
        """
        return (
            self.mobile.connected
            and not self.mobile.metered
            and not self.mobile.roaming
        )

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize the sample for a store.

        Returns:
            A JSON-serializable dictionary (datetimes as ISO-8601 strings)
        """
        return {
            "start": self.start.isoformat(),
            "end": self.end.isoformat(),
            "wifi": self.wifi.to_dict(),
            "mobile": self.mobile.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "RawSample":
        """
        Rebuild a sample from its stored form.

        Args:
            data: Dictionary produced by `to_dict()` (datetimes may be
                  ISO strings or already-decoded datetime objects)

        Returns:
            A RawSample instance
        """
        start = data["start"]
        end = data["end"]
        if isinstance(start, str):
            start = datetime.fromisoformat(start)
        if isinstance(end, str):
            end = datetime.fromisoformat(end)
        return cls(
            start=start,
            end=end,
            wifi=WifiReading.from_dict(data.get("wifi", {})),
            mobile=MobileReading.from_dict(data.get("mobile", {})),
        )
