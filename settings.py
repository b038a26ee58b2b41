"""Viewer configuration and debug switches.

Settings are plain values handed to the analysis helpers by the UI layer; the
timeline core never stores them. The flat key names match what the viewer
keeps in its key/value store (``st.session_state`` in ``app.py``).
"""

from __future__ import annotations

import json
import os
from dataclasses import asdict, dataclass, field, fields
from typing import Mapping, Optional

from temperature import TemperatureUnit

# Debug toggler: set COOK_DEBUG=1 to enable verbose parse logs
DEBUG = os.getenv("COOK_DEBUG", "0") == "1"


def dprint(*args, **kwargs):
    if DEBUG:
        print(*args, **kwargs)


KEY_GRAPHS_NOTES = "graphs.notes"
KEY_GRAPHS_PROBE_NOT_INSERTED = "graphs.probeNotInserted"
KEY_ENABLED_CURVES = "graphs.enabled"
KEY_PERFORMANCE_MODE = "performance.mode"
KEY_TEMPERATURE_UNIT = "temperatureUnit"


@dataclass
class EnabledCurves:
    """Which of the eleven temperature curves are drawn."""

    core: bool = True
    surface: bool = True
    ambient: bool = True

    t1: bool = False
    t2: bool = False
    t3: bool = False
    t4: bool = False
    t5: bool = False
    t6: bool = False
    t7: bool = False
    t8: bool = False

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, text: Optional[str]) -> "EnabledCurves":
        """Decode a stored curve selection, falling back to defaults per key."""

        if not text:
            return cls()
        try:
            payload = json.loads(text)
        except ValueError:
            dprint(f"[settings] invalid enabled curves payload: {text!r}")
            return cls()
        if not isinstance(payload, dict):
            return cls()

        values = {}
        for item in fields(cls):
            value = payload.get(item.name)
            if isinstance(value, bool):
                values[item.name] = value
        return cls(**values)

    def enabled_keys(self):
        return [item.name for item in fields(self) if getattr(self, item.name)]


def _as_bool(value: object, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    text = str(value).strip().lower()
    if text in {"1", "true", "yes", "on"}:
        return True
    if text in {"0", "false", "no", "off"}:
        return False
    return default


@dataclass
class ViewerSettings:
    show_notes: bool = True
    show_probe_not_inserted: bool = True
    performance_mode: bool = True
    temperature_unit: TemperatureUnit = TemperatureUnit.CELSIUS
    enabled_curves: EnabledCurves = field(default_factory=EnabledCurves)

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> "ViewerSettings":
        """Build settings from a flat key/value store, ignoring bad entries."""

        defaults = cls()

        unit = defaults.temperature_unit
        raw_unit = values.get(KEY_TEMPERATURE_UNIT)
        if isinstance(raw_unit, TemperatureUnit):
            unit = raw_unit
        elif raw_unit is not None:
            try:
                unit = TemperatureUnit(str(raw_unit).strip().lower())
            except ValueError:
                dprint(f"[settings] unknown temperature unit: {raw_unit!r}")

        curves = values.get(KEY_ENABLED_CURVES)
        if not isinstance(curves, EnabledCurves):
            curves = EnabledCurves.from_json(curves if isinstance(curves, str) else None)

        return cls(
            show_notes=_as_bool(values.get(KEY_GRAPHS_NOTES), defaults.show_notes),
            show_probe_not_inserted=_as_bool(
                values.get(KEY_GRAPHS_PROBE_NOT_INSERTED), defaults.show_probe_not_inserted
            ),
            performance_mode=_as_bool(values.get(KEY_PERFORMANCE_MODE), defaults.performance_mode),
            temperature_unit=unit,
            enabled_curves=curves,
        )

    def to_mapping(self) -> dict:
        return {
            KEY_GRAPHS_NOTES: self.show_notes,
            KEY_GRAPHS_PROBE_NOT_INSERTED: self.show_probe_not_inserted,
            KEY_PERFORMANCE_MODE: self.performance_mode,
            KEY_TEMPERATURE_UNIT: self.temperature_unit.value,
            KEY_ENABLED_CURVES: self.enabled_curves.to_json(),
        }


__all__ = [
    "DEBUG",
    "EnabledCurves",
    "ViewerSettings",
    "dprint",
]
