"""
Instance volume histogram.

Splits [start, end) into N equal buckets and sums count * size of every
instance count sample into the bucket its tick falls in. Bucket width is a
float, so bucket edges need not land on whole ticks.
"""

import logging
from datetime import datetime
from typing import Iterable, List

from ...core.time_bucket import from_ticks, to_ticks
from ...models import InstanceCountRow, VolumeSample

logger = logging.getLogger(__name__)


def bucket_index(ticks: int, start_ticks: int, bucket_width: float, number_of_buckets: int) -> int:
    """
    Histogram cell for a tick inside [start, end).

    Float division can put a tick just below `end` at index N; that lands
    in the last bucket instead.
    """
    index = int((ticks - start_ticks) / bucket_width)
    return min(index, number_of_buckets - 1)


def reduce_volume(
    rows: Iterable[InstanceCountRow],
    start: datetime,
    end: datetime,
    number_of_buckets: int
) -> List[VolumeSample]:
    """
    Reduce instance count samples to exactly `number_of_buckets` samples.

    Rows are consumed in scan order; rows with identical ticks add into the
    same bucket. Rows outside [start, end) are skipped with a warning since
    the scan should never return them.

    Args:
        rows: Instance count rows from the range scan
        start: Inclusive start of the window (caller guarantees start < end)
        end: Exclusive end of the window
        number_of_buckets: N > 0

    Returns:
        N samples ordered by bucket; sample i starts at start + i * (end - start) / N
    """
    start_ticks = to_ticks(start)
    end_ticks = to_ticks(end)
    bucket_width = (end_ticks - start_ticks) / number_of_buckets

    values = [0] * number_of_buckets
    skipped = 0
    for row in rows:
        ticks = row.get_ticks()
        if ticks < start_ticks or ticks >= end_ticks:
            skipped += 1
            continue
        values[bucket_index(ticks, start_ticks, bucket_width, number_of_buckets)] += row.count * row.size

    if skipped:
        logger.warning(f"Dropped {skipped} instance count row(s) outside [{start.isoformat()}, {end.isoformat()})")

    return [
        VolumeSample(time=from_ticks(start_ticks + int(i * bucket_width)), value=values[i])
        for i in range(number_of_buckets)
    ]
