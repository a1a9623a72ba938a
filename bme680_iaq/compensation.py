# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.compensation`
================================================================================

Humidity compensation of metal-oxide gas resistance, plus the Magnus based
temperature, humidity and dew point conversions that go with it.

Implementation Notes
--------------------

Gas resistance depends exponentially on absolute humidity. The correction
``exp(slope * absolute_humidity)`` uses an empirically fitted slope (0.03 by
default); it is not derived from first principles and depends on the heater
profile, so treat it as a tuning constant.

None of these functions raise on bad numbers. Overflow, division by zero or a
logarithm of zero produce ``nan`` and the caller decides what to discard.

* https://github.com/thstielow/raspi-bme680-iaq
* https://en.wikipedia.org/wiki/Dew_point#Calculating_the_dew_point
"""

import math

try:
    from typing import Tuple
except ImportError:
    pass

_MAGNUS_A = 6.112  # hPa
_MAGNUS_B = 17.625
_MAGNUS_C = 243.04  # degrees C
_WATER_VAPOR_GAS_CONSTANT = 461.52  # J/(kg K)
_KELVIN = 273.15

DEFAULT_SLOPE_FACTOR = 0.03


def _saturation_vapor_pressure(temperature: float) -> float:
    return _MAGNUS_A * math.exp(_MAGNUS_B * temperature / (_MAGNUS_C + temperature))


def saturation_vapor_density(temperature: float) -> float:
    """
    Water vapor density of saturated air (100% RH) at the given temperature.

    :param temperature: Temperature in degrees Celsius
    :return: Saturation vapor density in kg/m^3, or ``nan``
    """
    try:
        return (_saturation_vapor_pressure(temperature) * 100.0) / (
            _WATER_VAPOR_GAS_CONSTANT * (temperature + _KELVIN)
        )
    except (OverflowError, ZeroDivisionError):
        return math.nan


def absolute_humidity(temperature: float, humidity: float) -> float:
    """
    Absolute humidity scaled the same way as the slope factor expects.

    :param temperature: Temperature in degrees Celsius
    :param humidity: Relative humidity in percent (0-100)
    :return: Absolute humidity in g/m^3
    """
    return humidity * 10.0 * saturation_vapor_density(temperature)


def humidity_factor(temperature: float, humidity: float, slope: float) -> float:
    """Multiplier that removes the humidity dependence of gas resistance."""
    try:
        return math.exp(slope * absolute_humidity(temperature, humidity))
    except OverflowError:
        return math.inf


def compensate_gas_resistance(
    temperature: float,
    humidity: float,
    gas_resistance: float,
    floor: float,
    slope: float = DEFAULT_SLOPE_FACTOR,
) -> Tuple[float, float]:
    """
    Apply the humidity correction to a gas reading and to the resistance floor.

    The floor is raised by the same factor so that it tracks humid conditions.

    :param temperature: Temperature in degrees Celsius
    :param humidity: Relative humidity in percent (0-100)
    :param gas_resistance: Gas resistance in ohms
    :param floor: Minimum meaningful gas resistance in ohms
    :param slope: Humidity compensation slope
    :return: Tuple of (compensated_gas, compensated_floor). Either may be non-finite.
    """
    factor = humidity_factor(temperature, humidity, slope)
    return gas_resistance * factor, floor * factor


def dew_point(temperature: float, humidity: float) -> float:
    """
    Dew point from the Magnus formula.

    The dew point is the same whether raw or offset-compensated temperature and
    humidity are used, since both go through the same Magnus transformation.

    :param temperature: Temperature in degrees Celsius
    :param humidity: Relative humidity in percent (0-100)
    :return: Dew point in degrees Celsius, ``nan`` when humidity is not positive
    """
    if not humidity > 0:
        return math.nan
    try:
        gamma = math.log(humidity / 100.0) + _MAGNUS_B * temperature / (
            _MAGNUS_C + temperature
        )
        return _MAGNUS_C * gamma / (_MAGNUS_B - gamma)
    except (OverflowError, ZeroDivisionError):
        return math.nan


def compensate_temperature(temperature: float, offset: float) -> float:
    """Apply a fixed offset (degrees Celsius) to a temperature reading."""
    return temperature + offset


def compensate_humidity(temperature: float, humidity: float, offset: float) -> float:
    """
    Re-express relative humidity at the offset-compensated temperature.

    The actual vapor pressure is kept, only the saturation pressure changes.

    :param temperature: Measured temperature in degrees Celsius
    :param humidity: Measured relative humidity in percent
    :param offset: Temperature offset in degrees Celsius
    :return: Relative humidity in percent at ``temperature + offset``
    """
    try:
        actual = humidity / 100.0 * _saturation_vapor_pressure(temperature)
        saturated = _saturation_vapor_pressure(
            compensate_temperature(temperature, offset)
        )
        return actual / saturated * 100.0
    except (OverflowError, ZeroDivisionError):
        return math.nan
