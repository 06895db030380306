# ==============================================
# fetchwindow — Transfer Window Scheduling
# ==============================================
#
# Package Structure:
#
# fetchwindow/
# ├── samples/          # Raw measurement data model
# ├── analysis/         # Aggregate, classify & select time slots
# ├── storage/          # Historical sample stores + seed generator
# ├── probe.py          # Live link-quality probes
# ├── gate.py           # "Is right now fetchable?" check
# ├── session.py        # AnalysisSession orchestrator
# ├── errors.py         # Error kinds
# ├── config.py         # Configuration management
# ├── logging_utils.py  # Logging setup
# └── cli.py            # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
