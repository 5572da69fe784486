"""
Caller-supplied query parameters.

These shape scan descriptors only; they are never persisted.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from .base import DateTimeMixin
from .domain_models import FunctionInstanceStatus

DEFAULT_MAX_RESULTS = 100


class RecentFunctionQuery(DateTimeMixin, BaseModel):
    """
    Filter for listing recent executions of one function, newest first.

    Range checks (empty name, start after end) are enforced by the scan
    builder so they surface as InvalidArgumentError before any I/O.
    """

    function_name: Optional[str] = Field(None, description="Function whose executions to list")
    start: datetime = Field(..., description="Earliest start time (inclusive)")
    end: datetime = Field(..., description="Latest start time (exclusive)")
    max_results: int = Field(DEFAULT_MAX_RESULTS, description="Rows to read per round trip")
    status: Optional[FunctionInstanceStatus] = Field(None, description="Only executions with this status")

    model_config = ConfigDict(frozen=True)
