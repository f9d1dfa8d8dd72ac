# ==============================================
# MongoDB Schema Scanner
# ==============================================
#
# Package Structure:
#
# schema_scanner/
# ├── analysis/      # Classify values, aggregate field stats, build schema tree
# ├── scanning/      # Sampling policy, bounded fan-out, scan orchestrator
# ├── storage/       # Document source interface + pymongo backend
# ├── config.py      # Configuration management
# ├── errors.py      # Error taxonomy
# ├── log.py         # Logging setup
# └── cli.py         # Command line entry point
#
# ==============================================

__version__ = "0.1.0"
