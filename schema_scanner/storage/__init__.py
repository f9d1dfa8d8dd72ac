# ==============================================
# STORAGE: DOCUMENT SOURCES
# ==============================================
#
# This package handles all database reads:
# connecting, listing, counting and sampling.
#
# Modules:
# --------
# - document_source.py → Abstract interface the scanner depends on
# - mongo_source.py    → pymongo implementation
#
# ==============================================

from .document_source import DocumentSource
from .mongo_source import MongoDocumentSource, extract_cluster_name

__all__ = [
    "DocumentSource",
    "MongoDocumentSource",
    "extract_cluster_name",
]
