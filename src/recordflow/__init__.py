"""
recordflow

A small ETL pipeline toolkit built around a record envelope that can be read
and written as arbitrary typed views of the same logical record.
"""

from .envelope import RecordEnvelope

__version__ = "1.0.0"

__all__ = [
    "RecordEnvelope",
    "__version__",
]
