"""
Read Views Returned by the Log Reader

These are the normalized, read-only shapes callers see. Stored row layout
(keys, padding, partition naming) never leaks past the mapper; views carry
only what a dashboard or API needs.
"""

from datetime import datetime
from typing import Dict, Generic, List, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, Field

from .base import DateTimeMixin
from .domain_models import FunctionInstanceStatus

T = TypeVar("T")


class VolumeSample(DateTimeMixin, BaseModel):
    """One histogram cell: bucket start time and aggregated instance volume."""

    time: datetime = Field(..., description="Start of the bucket")
    value: int = Field(0, description="Sum of count * size for rows in the bucket")

    model_config = ConfigDict(frozen=True)


class ActivationEvent(DateTimeMixin, BaseModel):
    """A container activation on the timeline."""

    container_name: str = Field(..., description="Activated container (interned per page)")
    start_time_bucket: int = Field(..., description="Time bucket the activation started in")
    start_time: datetime = Field(..., description="Start of that time bucket")
    length: int = Field(..., description="Activation length in buckets")

    model_config = ConfigDict(frozen=True)


class FunctionDefinitionView(DateTimeMixin, BaseModel):
    """A function known to the host."""

    function_id: str = Field(..., description="Host-assigned function identifier")
    function_name: str = Field(..., description="Display name of the function")
    last_modified: Optional[datetime] = Field(None, description="Last write time of the definition")

    model_config = ConfigDict(frozen=True)


class AggregateEntry(DateTimeMixin, BaseModel):
    """Execution totals for one function in one time bucket."""

    function_name: str = Field(..., description="Function the totals belong to")
    time_bucket: int = Field(..., description="Time bucket of the totals")
    time: datetime = Field(..., description="Start of the time bucket")
    total_pass: int = Field(0, description="Executions that succeeded")
    total_fail: int = Field(0, description="Executions that failed")
    total_run: int = Field(0, description="Executions started")

    model_config = ConfigDict(frozen=True)


class RecentInstanceEntry(DateTimeMixin, BaseModel):
    """Summary of one recent execution of a function."""

    function_instance_id: str = Field(..., description="Execution identifier")
    function_name: str = Field(..., description="Function that executed")
    display_name: Optional[str] = Field(None, description="Display name of the execution")
    start_time: datetime = Field(..., description="Execution start time")
    end_time: Optional[datetime] = Field(None, description="Execution end time")
    status: FunctionInstanceStatus = Field(FunctionInstanceStatus.UNKNOWN, description="Execution status")
    has_error: bool = Field(False, description="Whether the execution reported an error")

    model_config = ConfigDict(frozen=True)


class FunctionInstanceLogItem(DateTimeMixin, BaseModel):
    """
    Full record of a single execution.

    `status` is derived from the stored fields: no end time means the
    execution is still running; an end time with error details means it
    failed; otherwise it succeeded.
    """

    function_instance_id: str = Field(..., description="Execution identifier")
    function_name: str = Field(..., description="Function that executed")
    function_id: Optional[str] = Field(None, description="Host-assigned function identifier")
    parent_id: Optional[str] = Field(None, description="Execution that caused this one")
    trigger_reason: Optional[str] = Field(None, description="Why the execution was triggered")
    arguments: Dict[str, str] = Field(default_factory=dict, description="Bound argument values")
    start_time: datetime = Field(..., description="Execution start time")
    end_time: Optional[datetime] = Field(None, description="Execution end time")
    error_details: Optional[str] = Field(None, description="Error summary if the execution failed")
    log_output: Optional[str] = Field(None, description="Captured log output")
    container_name: Optional[str] = Field(None, description="Container that ran the execution")
    status: FunctionInstanceStatus = Field(..., description="Derived execution status")

    model_config = ConfigDict(frozen=True)


class Segment(BaseModel, Generic[T]):
    """
    One page of results plus the token that resumes after it.

    An absent token means there are no further pages. A present token means
    more rows may exist; the next page can still come back empty.
    """

    results: List[T] = Field(default_factory=list, description="Rows of this page, in scan order")
    continuation_token: Optional[str] = Field(None, description="Opaque token for the next page")
    last_modified: Optional[datetime] = Field(None, description="Latest row write time seen on this page, when tracked")

    model_config = ConfigDict(frozen=True)

    @property
    def has_more(self) -> bool:
        return self.continuation_token is not None
