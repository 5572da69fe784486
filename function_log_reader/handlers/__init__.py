"""
Handler Layer for the Function Log Reader

The handler layer:
- Validates caller arguments before any storage round trip
- Builds scan descriptors from the table's key layout
- Maps stored rows to read views
- Handles timezone conversion at the API boundary

Architecture:
handlers/ (this layer) -> core/ (infrastructure) -> DynamoDB
handlers/ (this layer) <- models/ (rows and views)
"""

from .log_reader.queries import LogReader

__all__ = [
    "LogReader",
]
