# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load all configuration from environment variables / .env file.
#   Provides typed config objects to all other modules.
#
# CLASSES:
# --------
# - StoreConfig (dataclass)
#     backend: str            (default "json"; one of memory|json|mongo)
#     json_path: str          (default "data/samples.json")
#     mongo_host: str         (default "localhost")
#     mongo_port: int         (default 27017)
#     mongo_user: str | None  (default None)
#     mongo_password: str | None (default None)
#     mongo_database: str     (default "fetchwindow")
#     mongo_collection: str   (default "samples")
#
# - AnalysisConfig (dataclass)
#     bucket_minutes: int          (default 15)
#     max_weeks: int               (default 4)
#     lookahead_minutes: int       (default 60)
#     store_timeout_seconds: float (default 30.0)
#     seed_weeks: int              (default 4)
#     seed: int | None             (default None)
#
# - ProbeConfig (dataclass)
#     status_url: str | None   (default None → no live probe)
#     timeout_seconds: float   (default 5.0)
#
# - AppConfig (dataclass)
#     store, analysis, probe, thresholds (SlotThresholds), log_dir, log_level
#
# FUNCTIONS:
# ----------
# - get_config(reload: bool = False) -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# - build_store(config) -> SampleStore
# - build_probe(config) -> LinkProbe | None
#
# USAGE:
# ------
#   from fetchwindow.config import get_config
#   config = get_config()
#   print(config.store.backend)
#   print(config.thresholds.wifi_min_link_speed)
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from fetchwindow.analysis.decision import SlotThresholds
from fetchwindow.probe import HttpLinkProbe, LinkProbe
from fetchwindow.storage import (
    JsonSampleStore,
    MemorySampleStore,
    MongoSampleStore,
    SampleStore,
)

STORE_BACKENDS = ("memory", "json", "mongo")


@dataclass
class StoreConfig:
    """Historical sample store configuration."""
    backend: str = "json"
    json_path: str = "data/samples.json"
    mongo_host: str = "localhost"
    mongo_port: int = 27017
    mongo_user: Optional[str] = None
    mongo_password: Optional[str] = None
    mongo_database: str = "fetchwindow"
    mongo_collection: str = "samples"


@dataclass
class AnalysisConfig:
    """Bucketing, look-ahead and store wait settings."""
    bucket_minutes: int = 15
    max_weeks: int = 4
    lookahead_minutes: int = 60
    store_timeout_seconds: float = 30.0
    seed_weeks: int = 4
    seed: Optional[int] = None


@dataclass
class ProbeConfig:
    """Live link probe configuration."""
    status_url: Optional[str] = None
    timeout_seconds: float = 5.0


@dataclass
class AppConfig:
    """Main application configuration."""
    store: StoreConfig = field(default_factory=StoreConfig)
    analysis: AnalysisConfig = field(default_factory=AnalysisConfig)
    probe: ProbeConfig = field(default_factory=ProbeConfig)
    thresholds: SlotThresholds = field(default_factory=SlotThresholds)
    log_dir: str = "logs"
    log_level: str = "INFO"


# Singleton instance
_config_instance: Optional[AppConfig] = None


def _optional_int(value: Optional[str]) -> Optional[int]:
    return int(value) if value not in (None, "") else None


def get_config(reload: bool = False) -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Args:
        reload: Rebuild the configuration even if one is cached

    Returns:
        AppConfig: Application configuration

    Raises:
        ValueError: if FETCHWINDOW_STORE names an unknown backend
    """
    global _config_instance

    if _config_instance is not None and not reload:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    backend = os.getenv("FETCHWINDOW_STORE", "json").lower()
    if backend not in STORE_BACKENDS:
        raise ValueError(
            f"FETCHWINDOW_STORE must be one of {', '.join(STORE_BACKENDS)}, got {backend!r}"
        )

    # Build store configuration
    store_config = StoreConfig(
        backend=backend,
        json_path=os.getenv("FETCHWINDOW_JSON_PATH", "data/samples.json"),
        mongo_host=os.getenv("MONGO_HOST", "localhost"),
        mongo_port=int(os.getenv("MONGO_PORT", "27017")),
        mongo_user=os.getenv("MONGO_USER") or None,
        mongo_password=os.getenv("MONGO_PASSWORD") or None,
        mongo_database=os.getenv("MONGO_DATABASE", "fetchwindow"),
        mongo_collection=os.getenv("MONGO_COLLECTION", "samples"),
    )

    # Build analysis configuration
    analysis_config = AnalysisConfig(
        bucket_minutes=int(os.getenv("BUCKET_MINUTES", "15")),
        max_weeks=int(os.getenv("MAX_WEEKS", "4")),
        lookahead_minutes=int(os.getenv("LOOKAHEAD_MINUTES", "60")),
        store_timeout_seconds=float(os.getenv("STORE_TIMEOUT_SECONDS", "30.0")),
        seed_weeks=int(os.getenv("SEED_WEEKS", "4")),
        seed=_optional_int(os.getenv("SEED")),
    )

    # Build probe configuration
    probe_config = ProbeConfig(
        status_url=os.getenv("LINK_STATUS_URL") or None,
        timeout_seconds=float(os.getenv("LINK_STATUS_TIMEOUT", "5.0")),
    )

    # Threshold overrides
    defaults = SlotThresholds()
    thresholds = SlotThresholds(
        wifi_min_link_speed=float(os.getenv("WIFI_MIN_LINK_SPEED", defaults.wifi_min_link_speed)),
        wifi_min_bytes_per_second=float(
            os.getenv("WIFI_MIN_BYTES_PER_SECOND", defaults.wifi_min_bytes_per_second)
        ),
        wifi_max_bytes_per_second=float(
            os.getenv("WIFI_MAX_BYTES_PER_SECOND", defaults.wifi_max_bytes_per_second)
        ),
        wifi_min_signal_strength=float(
            os.getenv("WIFI_MIN_SIGNAL_STRENGTH", defaults.wifi_min_signal_strength)
        ),
        mobile_min_bytes_per_second=float(
            os.getenv("MOBILE_MIN_BYTES_PER_SECOND", defaults.mobile_min_bytes_per_second)
        ),
        mobile_max_bytes_per_second=float(
            os.getenv("MOBILE_MAX_BYTES_PER_SECOND", defaults.mobile_max_bytes_per_second)
        ),
        mobile_min_signal_strength=float(
            os.getenv("MOBILE_MIN_SIGNAL_STRENGTH", defaults.mobile_min_signal_strength)
        ),
    )

    # Build main application configuration
    _config_instance = AppConfig(
        store=store_config,
        analysis=analysis_config,
        probe=probe_config,
        thresholds=thresholds,
        log_dir=os.getenv("FETCHWINDOW_LOG_DIR", "logs"),
        log_level=os.getenv("FETCHWINDOW_LOG_LEVEL", "INFO"),
    )

    return _config_instance


def build_store(config: AppConfig) -> SampleStore:
    """Instantiate the sample store named by the configuration."""
    store = config.store
    bucket_minutes = config.analysis.bucket_minutes
    max_weeks = config.analysis.max_weeks

    if store.backend == "memory":
        return MemorySampleStore(bucket_minutes, max_weeks)
    if store.backend == "mongo":
        return MongoSampleStore(
            host=store.mongo_host,
            port=store.mongo_port,
            database=store.mongo_database,
            collection=store.mongo_collection,
            user=store.mongo_user,
            password=store.mongo_password,
            bucket_minutes=bucket_minutes,
            max_weeks=max_weeks,
        )
    return JsonSampleStore(store.json_path, bucket_minutes, max_weeks)


def build_probe(config: AppConfig) -> Optional[LinkProbe]:
    """Instantiate the live probe, or None when no status URL is set."""
    if not config.probe.status_url:
        return None
    return HttpLinkProbe(config.probe.status_url, timeout=config.probe.timeout_seconds)
