# ==============================================
# Error Taxonomy
# ==============================================
#
# - ConnectivityError   → The cluster cannot be reached at all. Fatal:
#                         the scan is aborted before any unit is attempted.
# - PerUnitError        → One database or collection failed mid-scan.
#                         Logged, the unit is dropped, siblings continue.
# - ScanTimeoutError    → The scan deadline expired before an I/O call.
#                         Treated as a PerUnitError.
# - DegradedDataError   → A non-critical sub-operation failed (index
#                         listing, size stats). Logged as a warning and a
#                         default value is substituted.
#
# ==============================================


class ScannerError(Exception):
    """Base class for all scanner errors."""


class ConnectivityError(ScannerError):
    """Raised when the document source cannot be reached."""


class PerUnitError(ScannerError):
    """Raised when a single database or collection cannot be scanned."""

    def __init__(self, unit: str, message: str):
        super().__init__(f"{unit}: {message}")
        self.unit = unit


class ScanTimeoutError(PerUnitError):
    """Raised when the scan deadline has already passed."""


class DegradedDataError(ScannerError):
    """Raised when a best-effort sub-operation fails."""
