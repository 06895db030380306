# ==============================================
# Tests for the fetch gate and live link probes
# ==============================================

from unittest.mock import MagicMock

import pytest
import requests

from fetchwindow.gate import GateThresholds, is_fetchable_now
from fetchwindow.probe import DISCONNECTED, HttpLinkProbe, LiveLinkInfo, StaticLinkProbe


class TestFetchGate:

    def test_good_link_is_fetchable(self):
        assert is_fetchable_now(LiveLinkInfo(True, 54, 70))

    @pytest.mark.parametrize("info", [
        LiveLinkInfo(False, 54, 70),
        LiveLinkInfo(True, 4, 70),
        LiveLinkInfo(True, 54, 24),
        DISCONNECTED,
    ])
    def test_bounds_are_exclusive(self, info):
        assert not is_fetchable_now(info)

    def test_just_above_bounds(self):
        assert is_fetchable_now(LiveLinkInfo(True, 4.5, 25))

    def test_custom_thresholds(self):
        strict = GateThresholds(min_link_speed=10, min_signal_strength=50)

        assert not is_fetchable_now(LiveLinkInfo(True, 6, 70), strict)
        assert is_fetchable_now(LiveLinkInfo(True, 11, 51), strict)


class TestLiveLinkInfo:

    def test_from_camel_case(self):
        info = LiveLinkInfo.from_dict({"connected": True, "linkSpeed": 54, "signalStrength": 70})

        assert info == LiveLinkInfo(True, 54.0, 70.0)

    def test_from_snake_case(self):
        info = LiveLinkInfo.from_dict({"connected": True, "link_speed": 11, "signal_strength": 40})

        assert info == LiveLinkInfo(True, 11.0, 40.0)

    def test_missing_fields_default_to_disconnected(self):
        assert LiveLinkInfo.from_dict({}) == DISCONNECTED


class TestProbes:

    def test_static_probe(self):
        info = LiveLinkInfo(True, 24, 80)

        assert StaticLinkProbe(info).get_current_link_info() is info
        assert StaticLinkProbe().get_current_link_info() == DISCONNECTED

    def test_http_probe_reads_json(self):
        response = MagicMock()
        response.json.return_value = {"connected": True, "linkSpeed": 36, "signalStrength": 55}
        session = MagicMock()
        session.get.return_value = response

        probe = HttpLinkProbe("http://router.local/status", timeout=2.0, session=session)
        info = probe.get_current_link_info()

        session.get.assert_called_once_with("http://router.local/status", timeout=2.0)
        response.raise_for_status.assert_called_once()
        assert info == LiveLinkInfo(True, 36.0, 55.0)

    def test_http_probe_network_failure_is_disconnected(self):
        session = MagicMock()
        session.get.side_effect = requests.exceptions.ConnectionError("unreachable")

        probe = HttpLinkProbe("http://router.local/status", session=session)

        assert probe.get_current_link_info() == DISCONNECTED

    def test_http_probe_http_error_is_disconnected(self):
        response = MagicMock()
        response.raise_for_status.side_effect = requests.exceptions.HTTPError("503")
        session = MagicMock()
        session.get.return_value = response

        probe = HttpLinkProbe("http://router.local/status", session=session)

        assert probe.get_current_link_info() == DISCONNECTED

    def test_http_probe_malformed_body_is_disconnected(self):
        response = MagicMock()
        response.json.side_effect = ValueError("not json")
        session = MagicMock()
        session.get.return_value = response

        probe = HttpLinkProbe("http://router.local/status", session=session)

        assert probe.get_current_link_info() == DISCONNECTED
