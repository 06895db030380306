# ==============================================
# Live Link Probes
# ==============================================
#
# PURPOSE:
#   Report the instantaneous link state used by the "is right now
#   fetchable?" check.
#
# CLASSES:
# --------
# - LiveLinkInfo (dataclass)   → connected, link_speed, signal_strength
# - LinkProbe (ABC)            → get_current_link_info() -> LiveLinkInfo
# - StaticLinkProbe            → always returns the reading it was given
# - HttpLinkProbe              → GETs a JSON status endpoint
#
# HTTP payload accepted by HttpLinkProbe:
#   {"connected": true, "linkSpeed": 54, "signalStrength": 70}
#   (snake_case keys are accepted as well)
#
# ==============================================

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, Optional

import requests

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LiveLinkInfo:
    """Instantaneous Wi-Fi link reading."""
    connected: bool = False
    link_speed: float = 0.0
    signal_strength: float = 0.0

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "LiveLinkInfo":
        return cls(
            connected=bool(data.get("connected", False)),
            link_speed=float(data.get("linkSpeed", data.get("link_speed", 0.0)) or 0.0),
            signal_strength=float(
                data.get("signalStrength", data.get("signal_strength", 0.0)) or 0.0
            ),
        )


DISCONNECTED = LiveLinkInfo()


class LinkProbe(ABC):
    """Source of live link readings."""

    @abstractmethod
    def get_current_link_info(self) -> LiveLinkInfo:
        raise NotImplementedError


class StaticLinkProbe(LinkProbe):
    """Probe that always reports the same reading."""

    def __init__(self, info: LiveLinkInfo = DISCONNECTED):
        self.info = info

    def get_current_link_info(self) -> LiveLinkInfo:
        return self.info


class HttpLinkProbe(LinkProbe):
    """
    Reads the link state from an HTTP status endpoint.

    Network or decoding failures are logged and reported as a
    disconnected reading, which the fetch gate always rejects.
    """

    def __init__(self, url: str, timeout: float = 5.0, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self._session = session or requests.Session()

    def get_current_link_info(self) -> LiveLinkInfo:
        try:
            response = self._session.get(self.url, timeout=self.timeout)
            response.raise_for_status()
            return LiveLinkInfo.from_dict(response.json())
        except requests.exceptions.RequestException as e:
            logger.warning("Failed to read link status from %s: %s", self.url, e)
        except (ValueError, TypeError, AttributeError) as e:
            logger.warning("Malformed link status from %s: %s", self.url, e)
        return DISCONNECTED
