# ==============================================
# STORAGE: historical sample stores
# ==============================================
#
# This package holds the sample history the analysis reads from:
# a store interface, three adapters, and the seed generator used
# when a store is empty.
#
# Modules:
# --------
# - base.py          → SampleStore interface, StoreStatus
# - memory_store.py  → In-process dict store
# - json_store.py    → Single JSON file on disk
# - mongo_store.py   → MongoDB collection
# - generator.py     → Synthetic history for seeding
#
# ==============================================

from .base import SampleStore, StoreStatus
from .generator import SampleGenerator
from .json_store import JsonSampleStore
from .memory_store import MemorySampleStore
from .mongo_store import MongoSampleStore

__all__ = [
    "JsonSampleStore",
    "MemorySampleStore",
    "MongoSampleStore",
    "SampleGenerator",
    "SampleStore",
    "StoreStatus",
]
