# ==============================================
# Sampling Planner
# ==============================================
#
# Decides how many documents to pull from one collection.
#
#   count < 50,000            → every document
#   50,000 <= count < 200,000 → 50,000
#   count >= 200,000          → 75,000
#
# The configured cap always wins: the request is min(tier, cap).
#
# ==============================================

from typing import Optional

from ..config import DEFAULT_MAX_DOCS

FULL_SCAN_LIMIT = 50000
LARGE_COLLECTION_THRESHOLD = 200000
MEDIUM_SAMPLE_SIZE = 50000
LARGE_SAMPLE_SIZE = 75000


def effective_cap(max_docs: int) -> int:
    """A non-positive cap means "use the default"."""
    if max_docs <= 0:
        return DEFAULT_MAX_DOCS
    return max_docs


def plan_sample_size(document_count: Optional[int], max_docs: int = DEFAULT_MAX_DOCS) -> int:
    """
    Number of documents to request for a collection.

    Args:
        document_count: Estimated document count, or None when the
                        estimate could not be obtained
        max_docs: Configured per-collection cap

    Returns:
        The sample size, never above the cap

    Examples:
        plan_sample_size(49999) → 49999
        plan_sample_size(50000) → 50000
        plan_sample_size(200000) → 75000
        plan_sample_size(200000, max_docs=10000) → 10000
    """
    cap = effective_cap(max_docs)

    if document_count is None:
        return cap

    document_count = max(document_count, 0)

    if document_count < FULL_SCAN_LIMIT:
        target = document_count
    elif document_count < LARGE_COLLECTION_THRESHOLD:
        target = MEDIUM_SAMPLE_SIZE
    else:
        target = LARGE_SAMPLE_SIZE

    return min(target, cap)
