# ==============================================
# SCANNING: CLUSTER TRAVERSAL
# ==============================================
#
# Modules:
# --------
# - sampling.py → How many documents to sample per collection
# - deadline.py → One timeout shared by every worker of a scan
# - fan_out.py  → Bounded worker pool with a join barrier
# - scanner.py  → Cluster → databases → collections orchestration
#
# ==============================================

from .sampling import plan_sample_size
from .deadline import Deadline
from .fan_out import BoundedFanOut, FanOutResult
from .scanner import Scanner, scan

__all__ = [
    "plan_sample_size",
    "Deadline",
    "BoundedFanOut",
    "FanOutResult",
    "Scanner",
    "scan",
]
