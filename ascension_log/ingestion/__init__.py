"""
Ingestion Layer

JSON log records into store calls. Data-quality errors are collected and
returned next to the store, never raised.
"""

from .records import RECORD_TYPES, LogRecord
from .loader import LoadResult, RecordLoader, document_records, load_records, read_document

__all__ = [
    "RECORD_TYPES", "LogRecord",
    "LoadResult", "RecordLoader", "document_records", "load_records", "read_document",
]
