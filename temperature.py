"""Dual-scale temperature values backed by float32 Celsius."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

import numpy as np


class TemperatureUnit(Enum):
    CELSIUS = "celsius"
    FAHRENHEIT = "fahrenheit"


_NINE = np.float32(9)
_FIVE = np.float32(5)
_THIRTY_TWO = np.float32(32)


def celsius_to_fahrenheit(celsius) -> np.float32:
    return np.float32(np.float32(celsius) * _NINE / _FIVE + _THIRTY_TWO)


def fahrenheit_to_celsius(fahrenheit) -> np.float32:
    return np.float32((np.float32(fahrenheit) - _THIRTY_TWO) * _FIVE / _NINE)


@dataclass(frozen=True)
class TemperatureValue:
    """A reading available in both scales.

    Celsius is the only stored value and the only one written to CSV;
    Fahrenheit is always derived from it. Build values with
    :meth:`from_celsius` or :meth:`from_fahrenheit`.
    """

    celsius: np.float32

    def __post_init__(self) -> None:
        object.__setattr__(self, "celsius", np.float32(self.celsius))

    @classmethod
    def from_celsius(cls, celsius) -> "TemperatureValue":
        return cls(np.float32(celsius))

    @classmethod
    def from_fahrenheit(cls, fahrenheit) -> "TemperatureValue":
        return cls(fahrenheit_to_celsius(fahrenheit))

    @property
    def fahrenheit(self) -> np.float32:
        return celsius_to_fahrenheit(self.celsius)

    def value_for(self, unit: TemperatureUnit) -> np.float32:
        if unit is TemperatureUnit.FAHRENHEIT:
            return self.fahrenheit
        return self.celsius

    def to_wire(self) -> str:
        return str(self.celsius)


__all__ = [
    "TemperatureUnit",
    "TemperatureValue",
    "celsius_to_fahrenheit",
    "fahrenheit_to_celsius",
]
