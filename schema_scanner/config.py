# ==============================================
# Configuration Management
# ==============================================
#
# PURPOSE:
#   Load and validate all configuration from environment
#   variables / .env file. Provides typed config objects
#   to the scanner and the CLI.
#
# CLASSES:
# --------
# - MongoConfig (dataclass)
#     uri: str                 (default "mongodb://localhost:27017")
#     connect_timeout_ms: int  (default 30000)
#
# - ScanConfig (dataclass)
#     timeout_seconds: float   (default 300)
#     max_docs: int            (default 75000)
#     concurrency: int         (default 5)
#     db_filter: list[str]     (default [])
#
# - LogConfig (dataclass)
#     level: str               (default "INFO")
#     verbose: bool            (default False)
#
# - AppConfig (dataclass)
#     mongo: MongoConfig
#     scan: ScanConfig
#     log: LogConfig
#     output_path: str         (default "./schema.json")
#
# - ScanOptions (dataclass)
#     Everything one scan invocation needs. The URI is opaque
#     to the scanner; it is only handed to the document source.
#
# FUNCTION:
# ---------
# - get_config() -> AppConfig
#     Load .env using python-dotenv, construct AppConfig.
#     Returns the same singleton on repeated calls.
#
# USAGE:
# ------
#   from schema_scanner.config import get_config
#   config = get_config()
#   options = config.to_scan_options()
#
# ==============================================

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional

from dotenv import load_dotenv

DEFAULT_MAX_DOCS = 75000
DEFAULT_CONCURRENCY = 5
DEFAULT_TIMEOUT_SECONDS = 300.0
DEFAULT_CONNECT_TIMEOUT_MS = 30000


@dataclass
class MongoConfig:
    """MongoDB connection configuration."""
    uri: str = "mongodb://localhost:27017"
    connect_timeout_ms: int = DEFAULT_CONNECT_TIMEOUT_MS


@dataclass
class ScanConfig:
    """Sampling and concurrency settings for one scan."""
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_docs: int = DEFAULT_MAX_DOCS
    concurrency: int = DEFAULT_CONCURRENCY
    db_filter: List[str] = field(default_factory=list)


@dataclass
class LogConfig:
    level: str = "INFO"
    verbose: bool = False


@dataclass
class ScanOptions:
    """Options for a single scan invocation."""
    uri: str = "mongodb://localhost:27017"
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    max_docs: int = DEFAULT_MAX_DOCS
    db_filter: List[str] = field(default_factory=list)
    concurrency: int = DEFAULT_CONCURRENCY
    connect_timeout_ms: int = DEFAULT_CONNECT_TIMEOUT_MS

    def __post_init__(self):
        if self.concurrency < 1:
            raise ValueError(f"concurrency must be at least 1, got {self.concurrency}")
        if self.timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {self.timeout_seconds}")


@dataclass
class AppConfig:
    """Main application configuration."""
    mongo: MongoConfig
    scan: ScanConfig
    log: LogConfig
    output_path: str = "./schema.json"

    def to_scan_options(self) -> ScanOptions:
        return ScanOptions(
            uri=self.mongo.uri,
            timeout_seconds=self.scan.timeout_seconds,
            max_docs=self.scan.max_docs,
            db_filter=list(self.scan.db_filter),
            concurrency=self.scan.concurrency,
            connect_timeout_ms=self.mongo.connect_timeout_ms,
        )


def parse_patterns(raw: Optional[str]) -> List[str]:
    """
    Split a comma-separated pattern list, dropping blanks.

    Examples:
        parse_patterns("prod_.*, analytics") → ["prod_.*", "analytics"]
        parse_patterns("") → []
    """
    if not raw:
        return []
    return [part.strip() for part in raw.split(",") if part.strip()]


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in {"1", "true", "yes"}


# Singleton instance
_config_instance: Optional[AppConfig] = None


def get_config() -> AppConfig:
    """
    Load configuration from environment variables / .env file.
    Returns the same singleton instance on repeated calls.

    Returns:
        AppConfig: Application configuration
    """
    global _config_instance

    if _config_instance is not None:
        return _config_instance

    # Load .env file from project root
    env_path = Path(__file__).parent.parent / ".env"
    load_dotenv(dotenv_path=env_path)

    mongo_config = MongoConfig(
        uri=os.getenv("MONGO_URI", "mongodb://localhost:27017"),
        connect_timeout_ms=int(os.getenv("MONGO_CONNECT_TIMEOUT_MS", str(DEFAULT_CONNECT_TIMEOUT_MS))),
    )

    scan_config = ScanConfig(
        timeout_seconds=float(os.getenv("SCAN_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS))),
        max_docs=int(os.getenv("SCAN_MAX_DOCS", str(DEFAULT_MAX_DOCS))),
        concurrency=int(os.getenv("SCAN_CONCURRENCY", str(DEFAULT_CONCURRENCY))),
        db_filter=parse_patterns(os.getenv("SCAN_DB_FILTER")),
    )

    log_config = LogConfig(
        level=os.getenv("LOG_LEVEL", "INFO").upper(),
        verbose=_env_flag("SCAN_VERBOSE"),
    )

    _config_instance = AppConfig(
        mongo=mongo_config,
        scan=scan_config,
        log=log_config,
        output_path=os.getenv("SCAN_OUTPUT", "./schema.json"),
    )

    return _config_instance


def reset_config() -> None:
    """Drop the cached singleton so the next get_config() re-reads the environment."""
    global _config_instance
    _config_instance = None
