"""Rendering helpers: row decimation and hover lookup by time.

Nothing here is used for analysis; probe ranges and notes always work on the
full row list.
"""

from __future__ import annotations

import math
from typing import List, NamedTuple, Optional, Sequence

from timeline_row import TimelineRow

# Exports are sampled every 5 seconds.
SAMPLE_GRID_SECONDS = 5
PERFORMANCE_SAMPLE_EVERY = 5


class TimelinePosition(NamedTuple):
    """Where the chart or a note is hovered and the row shown there."""

    x: float
    row: TimelineRow


def decimate(rows: Sequence[TimelineRow], every_n: int) -> List[TimelineRow]:
    """Return the rows whose sequence number is a multiple of ``every_n``."""

    if every_n <= 0:
        raise ValueError(f"every_n must be positive, got {every_n}")
    return [row for row in rows if row.sequence_number % every_n == 0]


def display_rows(rows: Sequence[TimelineRow], performance_mode: bool) -> List[TimelineRow]:
    if not performance_mode:
        return list(rows)
    return decimate(rows, PERFORMANCE_SAMPLE_EVERY)


def _round_half_away_from_zero(value: float) -> float:
    return math.copysign(math.floor(abs(value) + 0.5), value)


def snap_to_grid(time: float) -> float:
    return float(_round_half_away_from_zero(time / SAMPLE_GRID_SECONDS) * SAMPLE_GRID_SECONDS)


def nearest_row(rows: Sequence[TimelineRow], time: float) -> Optional[TimelineRow]:
    """Return the first row stamped at ``time`` snapped to the 5 second grid.

    Data recorded on another interval gives ``None``; there is no fallback
    search for the closest timestamp.
    """

    target = snap_to_grid(time)
    for row in rows:
        if row.timestamp == target:
            return row
    return None


def timeline_position(rows: Sequence[TimelineRow], x: float) -> Optional[TimelinePosition]:
    row = nearest_row(rows, x)
    if row is None:
        return None
    return TimelinePosition(x=x, row=row)


__all__ = [
    "PERFORMANCE_SAMPLE_EVERY",
    "TimelinePosition",
    "decimate",
    "display_rows",
    "nearest_row",
    "timeline_position",
]
