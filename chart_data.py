"""Tidy pandas frames for the altair chart in ``app.py``."""

from __future__ import annotations

from typing import Dict, Iterable, List, NamedTuple, Optional

import pandas as pd

from probe_ranges import ProbeNotInsertedRange
from settings import EnabledCurves
from temperature import TemperatureUnit
from timeline_row import TimelineRow


class Curve(NamedTuple):
    label: str
    color: str
    attribute: Optional[str]


# Legend order matches the order curves are listed in the settings panel.
CURVES: Dict[str, Curve] = {
    "core": Curve("Core Temperature", "#1f77b4", "virtual_core"),
    "surface": Curve("Surface Temperature", "#f2c400", "virtual_surface"),
    "ambient": Curve("Ambient Temperature", "#d62728", "virtual_ambient"),
    "t1": Curve("T1 (Tip)", "#ff7f0e", "t1"),
    "t2": Curve("T2", "#9467bd", "t2"),
    "t3": Curve("T3", "#17becf", "t3"),
    "t4": Curve("T4", "#008080", "t4"),
    "t5": Curve("T5", "#98df8a", "t5"),
    "t6": Curve("T6", "#e377c2", "t6"),
    "t7": Curve("T7", "#8c564b", "t7"),
    "t8": Curve("T8 (Handle)", "#000000", "t8"),
    "probe_not_inserted": Curve("Probe removed", "#7f7f7f", None),
}


def unit_suffix(unit: TemperatureUnit) -> str:
    return "°F" if unit is TemperatureUnit.FAHRENHEIT else "°C"


def curve_frame(
    rows: Iterable[TimelineRow],
    unit: TemperatureUnit = TemperatureUnit.CELSIUS,
    curves: Optional[EnabledCurves] = None,
) -> pd.DataFrame:
    """Return enabled curves as ``Timestamp``/``Series``/``Temperature`` rows."""

    columns = ["Timestamp", "Series", "Temperature"]
    curves = curves or EnabledCurves()
    selected = [CURVES[key] for key in curves.enabled_keys()]
    if not selected:
        return pd.DataFrame(columns=columns)

    records: List[Dict[str, object]] = []
    for row in rows:
        for curve in selected:
            value = getattr(row, curve.attribute).value_for(unit)
            records.append(
                {
                    "Timestamp": row.timestamp,
                    "Series": curve.label,
                    "Temperature": float(value),
                }
            )

    df = pd.DataFrame(records, columns=columns)
    df["Temperature"] = pd.to_numeric(df["Temperature"], errors="coerce")
    return df


def ranges_frame(ranges: Iterable[ProbeNotInsertedRange]) -> pd.DataFrame:
    columns = ["Start", "End", "Series"]
    label = CURVES["probe_not_inserted"].label
    records = [{"Start": item.lower, "End": item.upper, "Series": label} for item in ranges]
    return pd.DataFrame(records, columns=columns)


def color_scale_entries(curves: EnabledCurves, include_ranges: bool = False):
    """Return ``(domain, range)`` lists for an altair colour scale."""

    keys = curves.enabled_keys()
    if include_ranges:
        keys = keys + ["probe_not_inserted"]
    domain = [CURVES[key].label for key in keys]
    colors = [CURVES[key].color for key in keys]
    return domain, colors


__all__ = ["CURVES", "color_scale_entries", "curve_frame", "ranges_frame", "unit_suffix"]
