# ==============================================
# FetchGate
# ==============================================
#
# PURPOSE:
#   Stateless admission check: is the live connection good enough to
#   fetch right this instant? Independent of the scheduling pipeline;
#   no history is involved.
#
#   Fetchable iff connected AND link_speed > 4 AND signal_strength > 24
#
# ==============================================

from dataclasses import dataclass

from .probe import LiveLinkInfo


@dataclass(frozen=True)
class GateThresholds:
    min_link_speed: float = 4  # exclusive
    min_signal_strength: float = 24  # exclusive


def is_fetchable_now(info: LiveLinkInfo, thresholds: GateThresholds = GateThresholds()) -> bool:
    """
    Decide whether a live link reading is good enough to fetch on.

    Args:
        info: Reading from a LinkProbe
        thresholds: Exclusive lower bounds for link speed and signal

    Returns:
        True if the link is connected and both readings clear their bounds
    """
    return (
        info.connected
        and info.link_speed > thresholds.min_link_speed
        and info.signal_strength > thresholds.min_signal_strength
    )
