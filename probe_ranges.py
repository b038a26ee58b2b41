"""Intervals during which the probe was out of the food."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List

import pandas as pd

from timeline_row import PredictionState, TimelineRow


@dataclass(frozen=True)
class ProbeNotInsertedRange:
    lower: float
    upper: float

    @property
    def id(self) -> str:
        return f"{self.lower}_{self.upper}"

    @property
    def duration(self) -> float:
        return self.upper - self.lower


def probe_not_inserted_ranges(rows: Iterable[TimelineRow]) -> List[ProbeNotInsertedRange]:
    """Group consecutive "Probe Not Inserted" rows into time ranges.

    ``rows`` must already be in time order. A run of one row yields a range
    with ``lower == upper``; a run still open at the end of the data is kept.
    """

    # Working entries are [lower, upper, is_closed].
    runs: List[list] = []
    for row in rows:
        if row.prediction_state is not PredictionState.PROBE_NOT_INSERTED:
            if runs and not runs[-1][2]:
                runs[-1][2] = True
            continue

        if not runs or runs[-1][2]:
            runs.append([row.timestamp, row.timestamp, False])
        else:
            runs[-1][1] = row.timestamp

    return [ProbeNotInsertedRange(lower, upper) for lower, upper, _ in runs]


def probe_removed_events(rows: Iterable[TimelineRow]) -> pd.DataFrame:
    """Return probe-removed ranges as a ``Start``/``End``/``Duration(s)`` table."""

    columns = ["Start", "End", "Duration(s)"]
    ranges = probe_not_inserted_ranges(rows)
    if not ranges:
        return pd.DataFrame(columns=columns)

    events = [
        {
            "Start": item.lower,
            "End": item.upper,
            "Duration(s)": round(float(item.duration), 2),
        }
        for item in ranges
    ]
    return pd.DataFrame(events, columns=columns)


__all__ = ["ProbeNotInsertedRange", "probe_not_inserted_ranges", "probe_removed_events"]
