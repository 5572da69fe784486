"""
Function Log Read API

Read-only access to the function log table:

- Instance volume histogram (full range scan reduced to N buckets)
- Function definitions, container activation timeline, per-function
  aggregates and recent executions, one page per call
- Point lookup of a full execution record

Usage:
    from .queries import LogReader

    reader = LogReader(config)
    segment = reader.get_function_definitions()
"""

from .queries import LogReader
from .histogram import bucket_index, reduce_volume
from .mapper import RowMapper, decode_as, decode_row, derive_status

__all__ = [
    "LogReader",
    "RowMapper",
    "bucket_index",
    "decode_as",
    "decode_row",
    "derive_status",
    "reduce_volume",
]
