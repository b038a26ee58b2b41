import dataclasses
import sys
from pathlib import Path

import numpy as np
import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))

from temperature import (
    TemperatureUnit,
    TemperatureValue,
    celsius_to_fahrenheit,
    fahrenheit_to_celsius,
)
from timeline_row import parse_temperature


def test_from_celsius_derives_fahrenheit():
    value = TemperatureValue.from_celsius(100.0)

    assert value.celsius == 100.0
    assert value.fahrenheit == 212.0
    assert isinstance(value.celsius, np.float32)
    assert isinstance(value.fahrenheit, np.float32)


def test_from_fahrenheit_derives_celsius():
    value = TemperatureValue.from_fahrenheit(-40.0)

    assert value.celsius == -40.0
    assert value.fahrenheit == -40.0


def test_conversion_functions_are_inverse_within_float32_precision():
    for celsius in (-18.0, 0.0, 21.5, 63.0, 250.0):
        assert fahrenheit_to_celsius(celsius_to_fahrenheit(celsius)) == pytest.approx(celsius, abs=1e-4)


def test_value_for_selects_scale():
    value = TemperatureValue.from_celsius(37.0)

    assert value.value_for(TemperatureUnit.CELSIUS) == 37.0
    assert value.value_for(TemperatureUnit.FAHRENHEIT) == pytest.approx(98.6)


def test_wire_form_is_celsius_only_and_stable():
    value = TemperatureValue.from_fahrenheit(74.3)

    reparsed = parse_temperature(value.to_wire())

    assert reparsed is not None
    assert reparsed.celsius == value.celsius
    assert reparsed == value


def test_equality_is_based_on_celsius():
    assert TemperatureValue.from_celsius(21.5) == TemperatureValue.from_celsius(21.5)
    assert TemperatureValue.from_celsius(21.5) != TemperatureValue.from_celsius(21.6)


@pytest.mark.parametrize(
    "value",
    [
        TemperatureValue.from_celsius(10.0),
        TemperatureValue.from_celsius(63.7),
        TemperatureValue.from_fahrenheit(99.0),
        TemperatureValue.from_fahrenheit(-3.5),
    ],
)
def test_fahrenheit_always_follows_celsius(value):
    assert value.fahrenheit == celsius_to_fahrenheit(value.celsius)
    assert isinstance(value.celsius, np.float32)


def test_values_cannot_be_reassigned():
    value = TemperatureValue.from_celsius(10.0)

    with pytest.raises(dataclasses.FrozenInstanceError):
        value.celsius = 50.0
    with pytest.raises(AttributeError):
        value.fahrenheit = 99.0

    assert value.celsius == 10.0
    assert value.fahrenheit == 50.0
