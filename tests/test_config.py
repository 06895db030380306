# ==============================================
# Tests for environment configuration and the CLI
# ==============================================

import json
import logging

import pytest

from fetchwindow import cli
from fetchwindow.config import build_probe, build_store, get_config
from fetchwindow.logging_utils import resolve_level, setup_logging
from fetchwindow.probe import HttpLinkProbe
from fetchwindow.storage import JsonSampleStore, MemorySampleStore, MongoSampleStore

ENV_VARS = [
    "FETCHWINDOW_STORE", "FETCHWINDOW_JSON_PATH", "FETCHWINDOW_LOG_DIR",
    "MONGO_HOST", "MONGO_PORT", "MONGO_USER", "MONGO_PASSWORD",
    "BUCKET_MINUTES", "MAX_WEEKS", "LOOKAHEAD_MINUTES", "STORE_TIMEOUT_SECONDS",
    "SEED_WEEKS", "SEED", "LINK_STATUS_URL", "LINK_STATUS_TIMEOUT",
    "WIFI_MIN_LINK_SPEED", "MOBILE_MIN_SIGNAL_STRENGTH", "FETCHWINDOW_LOG_LEVEL",
]


@pytest.fixture
def clean_env(monkeypatch):
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr("fetchwindow.config._config_instance", None)
    return monkeypatch


class TestGetConfig:

    def test_defaults(self, clean_env):
        config = get_config(reload=True)

        assert config.store.backend == "json"
        assert config.analysis.bucket_minutes == 15
        assert config.analysis.lookahead_minutes == 60
        assert config.analysis.seed is None
        assert config.probe.status_url is None
        assert config.thresholds.wifi_min_link_speed == 4

    def test_environment_overrides(self, clean_env):
        clean_env.setenv("FETCHWINDOW_STORE", "Memory")
        clean_env.setenv("BUCKET_MINUTES", "30")
        clean_env.setenv("SEED", "11")
        clean_env.setenv("WIFI_MIN_LINK_SPEED", "6.5")
        clean_env.setenv("MOBILE_MIN_SIGNAL_STRENGTH", "40")

        config = get_config(reload=True)

        assert config.store.backend == "memory"
        assert config.analysis.bucket_minutes == 30
        assert config.analysis.seed == 11
        assert config.thresholds.wifi_min_link_speed == 6.5
        assert config.thresholds.mobile_min_signal_strength == 40

    def test_log_level(self, clean_env):
        assert get_config(reload=True).log_level == "INFO"

        clean_env.setenv("FETCHWINDOW_LOG_LEVEL", "debug")

        assert get_config(reload=True).log_level == "debug"

    def test_singleton(self, clean_env):
        assert get_config(reload=True) is get_config()

    def test_unknown_backend(self, clean_env):
        clean_env.setenv("FETCHWINDOW_STORE", "redis")

        with pytest.raises(ValueError):
            get_config(reload=True)


class TestBuilders:

    def test_build_store_per_backend(self, clean_env, tmp_path):
        clean_env.setenv("FETCHWINDOW_JSON_PATH", str(tmp_path / "samples.json"))
        clean_env.setenv("MAX_WEEKS", "3")

        for backend, expected in [
            ("memory", MemorySampleStore),
            ("json", JsonSampleStore),
            ("mongo", MongoSampleStore),
        ]:
            clean_env.setenv("FETCHWINDOW_STORE", backend)
            store = build_store(get_config(reload=True))
            assert isinstance(store, expected)
            assert store.max_weeks == 3

    def test_build_probe(self, clean_env):
        assert build_probe(get_config(reload=True)) is None

        clean_env.setenv("LINK_STATUS_URL", "http://router.local/status")
        clean_env.setenv("LINK_STATUS_TIMEOUT", "1.5")
        probe = build_probe(get_config(reload=True))

        assert isinstance(probe, HttpLinkProbe)
        assert probe.timeout == 1.5


class TestCli:

    @pytest.fixture
    def json_env(self, clean_env, tmp_path):
        clean_env.setenv("FETCHWINDOW_STORE", "json")
        clean_env.setenv("FETCHWINDOW_JSON_PATH", str(tmp_path / "samples.json"))
        clean_env.setenv("FETCHWINDOW_LOG_DIR", str(tmp_path / "logs"))
        get_config(reload=True)
        return tmp_path

    def test_seed_then_next(self, json_env, capsys):
        assert cli.main(["seed", "--weeks", "1", "--seed", "3"]) == 0
        assert (json_env / "samples.json").exists()
        assert "Seeded 672 samples" in capsys.readouterr().out

        assert cli.main(["next", "--json"]) == 0
        payload = json.loads(capsys.readouterr().out)
        assert payload["status"] in ("found", "none_today")

    def test_seed_refuses_populated_store(self, json_env):
        assert cli.main(["seed", "--weeks", "1", "--seed", "3"]) == 0
        assert cli.main(["seed", "--weeks", "1"]) == 1

    def test_status(self, json_env, capsys):
        cli.main(["seed", "--weeks", "1", "--seed", "3"])
        capsys.readouterr()

        assert cli.main(["status"]) == 0
        status = json.loads(capsys.readouterr().out)
        assert status["state"] == "ready"
        assert status["corrupt_buckets"] == []

    def test_fetchable_without_probe(self, json_env):
        assert cli.main(["fetchable"]) == 1


class TestLogging:

    @pytest.fixture
    def package_logger(self):
        logger = logging.getLogger("fetchwindow")
        level, saved = logger.level, list(logger.handlers)
        for handler in saved:
            logger.removeHandler(handler)
        yield logger
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
        for handler in saved:
            logger.addHandler(handler)
        logger.setLevel(level)

    def test_resolve_level(self):
        assert resolve_level("debug") == logging.DEBUG
        assert resolve_level(" Warning ") == logging.WARNING
        assert resolve_level(logging.ERROR) == logging.ERROR
        with pytest.raises(ValueError):
            resolve_level("loud")

    def test_level_and_file(self, package_logger, tmp_path):
        log_path = setup_logging(tmp_path / "logs", "WARNING")

        logging.getLogger("fetchwindow.session").warning("store slow")
        logging.getLogger("fetchwindow.session").info("not written")
        for handler in package_logger.handlers:
            handler.flush()

        assert package_logger.level == logging.WARNING
        text = log_path.read_text(encoding="utf-8")
        assert "[WARNING] fetchwindow.session: store slow" in text
        assert "not written" not in text

    def test_repeat_setup_replaces_handlers(self, package_logger, tmp_path):
        setup_logging(tmp_path, "INFO")
        setup_logging(tmp_path, "INFO", verbose=True)

        added = package_logger.handlers
        assert len(added) == 2
        assert any(
            type(h) is logging.StreamHandler and h.level == logging.WARNING for h in added
        )
