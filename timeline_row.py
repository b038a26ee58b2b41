"""Typed model of one cook timeline CSV record.

Each record is decoded through ``FIELD_TABLE``, an ordered list of
``(header, attribute, parser, formatter)`` entries. Parsers return ``None``
when a value cannot be decoded so that a bad row can be skipped with a plain
early return instead of an exception path.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Callable, Dict, List, Mapping, NamedTuple, Optional

import numpy as np

from temperature import TemperatureValue


class Sensor(Enum):
    T1 = "T1"
    T2 = "T2"
    T3 = "T3"
    T4 = "T4"
    T5 = "T5"
    T6 = "T6"
    T7 = "T7"
    T8 = "T8"


class PredictionState(Enum):
    PROBE_NOT_INSERTED = "Probe Not Inserted"
    PROBE_INSERTED = "Probe Inserted"
    COOKING = "Cooking"
    PREDICTING = "Predicting"
    REMOVAL_PREDICTION_DONE = "Removal Prediction Done"


class PredictionMode(Enum):
    NONE = "None"
    TIME_TO_REMOVAL = "Time to Removal"


class PredictionType(Enum):
    NONE = "None"
    REMOVAL = "Removal"


NOTES_HEADER = "Notes"


@dataclass(frozen=True)
class TimelineRow:
    timestamp: float
    session_id: str
    sequence_number: int

    t1: TemperatureValue
    t2: TemperatureValue
    t3: TemperatureValue
    t4: TemperatureValue
    t5: TemperatureValue
    t6: TemperatureValue
    t7: TemperatureValue
    t8: TemperatureValue

    virtual_core: TemperatureValue
    virtual_surface: TemperatureValue
    virtual_ambient: TemperatureValue
    estimated_core: TemperatureValue
    prediction_set_point: np.float32

    virtual_core_sensor: Sensor
    virtual_surface_sensor: Sensor
    virtual_ambient_sensor: Sensor

    prediction_state: PredictionState
    prediction_mode: PredictionMode
    prediction_type: PredictionType
    prediction_value_seconds: int

    note: Optional[str] = None
    # Raw text of columns outside the field table, written back untouched.
    extras: Dict[str, str] = field(default_factory=dict, hash=False)

    @property
    def has_note(self) -> bool:
        return bool(self.note)

    def with_note(self, note: Optional[str]) -> "TimelineRow":
        return replace(self, note=note or None, extras=dict(self.extras))

    def to_fields(self) -> Dict[str, str]:
        """Return the header -> wire text mapping used when writing CSV."""

        values = dict(self.extras)
        for spec in FIELD_TABLE:
            values[spec.header] = spec.format(getattr(self, spec.attribute))
        if self.note:
            values[NOTES_HEADER] = self.note
        return values


# Strict numeric grammar: no surrounding whitespace, no ``_`` separators,
# no ``inf``/``nan`` words.
_FLOAT_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")
_INT_RE = re.compile(r"[+-]?\d+")


def parse_float(text: str) -> Optional[float]:
    if not _FLOAT_RE.fullmatch(text):
        return None
    return float(text)


def parse_float32(text: str) -> Optional[np.float32]:
    value = parse_float(text)
    if value is None:
        return None
    return np.float32(value)


def parse_int(text: str) -> Optional[int]:
    if not _INT_RE.fullmatch(text):
        return None
    return int(text)


def parse_temperature(text: str) -> Optional[TemperatureValue]:
    value = parse_float32(text)
    if value is None:
        return None
    return TemperatureValue.from_celsius(value)


def _enum_parser(enum_cls) -> Callable[[str], Optional[Enum]]:
    by_label = {member.value: member for member in enum_cls}

    def parse(text: str):
        return by_label.get(text)

    return parse


def format_float(value: float) -> str:
    return repr(float(value))


def format_float32(value) -> str:
    return str(np.float32(value))


def format_int(value: int) -> str:
    return str(int(value))


def format_temperature(value: TemperatureValue) -> str:
    return value.to_wire()


def format_enum(value: Enum) -> str:
    return value.value


class FieldSpec(NamedTuple):
    header: str
    attribute: str
    parse: Callable[[str], object]
    format: Callable[[object], str]


_TEMPERATURE_FIELDS = [
    ("T1", "t1"),
    ("T2", "t2"),
    ("T3", "t3"),
    ("T4", "t4"),
    ("T5", "t5"),
    ("T6", "t6"),
    ("T7", "t7"),
    ("T8", "t8"),
    ("VirtualCoreTemperature", "virtual_core"),
    ("VirtualSurfaceTemperature", "virtual_surface"),
    ("VirtualAmbientTemperature", "virtual_ambient"),
    ("EstimatedCoreTemperature", "estimated_core"),
]

FIELD_TABLE: List[FieldSpec] = [
    FieldSpec("Timestamp", "timestamp", parse_float, format_float),
    FieldSpec("SessionID", "session_id", lambda text: text, str),
    FieldSpec("SequenceNumber", "sequence_number", parse_int, format_int),
    *[
        FieldSpec(header, attribute, parse_temperature, format_temperature)
        for header, attribute in _TEMPERATURE_FIELDS
    ],
    FieldSpec("PredictionSetPoint", "prediction_set_point", parse_float32, format_float32),
    FieldSpec("VirtualCoreSensor", "virtual_core_sensor", _enum_parser(Sensor), format_enum),
    FieldSpec("VirtualSurfaceSensor", "virtual_surface_sensor", _enum_parser(Sensor), format_enum),
    FieldSpec("VirtualAmbientSensor", "virtual_ambient_sensor", _enum_parser(Sensor), format_enum),
    FieldSpec("PredictionState", "prediction_state", _enum_parser(PredictionState), format_enum),
    FieldSpec("PredictionMode", "prediction_mode", _enum_parser(PredictionMode), format_enum),
    FieldSpec("PredictionType", "prediction_type", _enum_parser(PredictionType), format_enum),
    FieldSpec("PredictionValueSeconds", "prediction_value_seconds", parse_int, format_int),
]

KNOWN_HEADERS = frozenset([spec.header for spec in FIELD_TABLE] + [NOTES_HEADER])


class RowDecodeFailure(NamedTuple):
    header: str
    value: Optional[str]


def decode_row(values: Mapping[str, Optional[str]]):
    """Decode a header -> text mapping.

    Returns ``(row, None)`` on success or ``(None, RowDecodeFailure)`` naming
    the first required header that is missing or does not parse.
    """

    decoded = {}
    for spec in FIELD_TABLE:
        text = values.get(spec.header)
        if text is None:
            return None, RowDecodeFailure(spec.header, None)
        value = spec.parse(text)
        if value is None:
            return None, RowDecodeFailure(spec.header, text)
        decoded[spec.attribute] = value

    note = values.get(NOTES_HEADER)
    extras = {
        header: text
        for header, text in values.items()
        if header not in KNOWN_HEADERS and text is not None
    }
    return TimelineRow(note=note or None, extras=extras, **decoded), None


__all__ = [
    "FIELD_TABLE",
    "NOTES_HEADER",
    "PredictionMode",
    "PredictionState",
    "PredictionType",
    "Sensor",
    "TimelineRow",
    "decode_row",
]
