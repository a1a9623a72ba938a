# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.engine`
================================================================================

Indoor air quality from a BME680 style gas sensor.

The engine takes one temperature, humidity and gas resistance reading per cycle
and keeps an adaptive clean-air ceiling to score the gas reading against. It
owns no hardware: pass in readings from any driver, or hand it a driver object
through :meth:`IAQEngine.update_from_sensor`.

Implementation Notes
--------------------

**Software and Dependencies:**

* Adafruit CircuitPython firmware for the supported boards:
  https://circuitpython.org/downloads

* Adafruit Blinka on Linux single board computers and desktop Python:
  https://github.com/adafruit/Adafruit_Blinka

* A gas sensor driver, for example:
  https://github.com/adafruit/Adafruit_CircuitPython_BME680
"""

import logging
import math
import time

from bme680_iaq.calibration import CalibrationStateMachine
from bme680_iaq.compensation import (
    compensate_gas_resistance,
    compensate_humidity,
    compensate_temperature,
    dew_point,
)
from bme680_iaq.config import IAQConfig
from bme680_iaq.range_tracker import RangeTracker
from bme680_iaq.scoring import (
    ACCURACY_UNRELIABLE,
    NEUTRAL_SCORE,
    air_quality_score,
    confidence_grade,
)

try:
    from typing import Any, Callable, Optional, Tuple
except ImportError:
    pass

logger = logging.getLogger(__name__)


def _monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


def _usable(compensated: float, floor: float) -> bool:
    return 0 < compensated < math.inf and 0 < floor < math.inf


class IAQEngine:
    """
    Adaptive indoor air quality estimator.

    Call :meth:`update` about once per second. The phase timings in the
    configuration assume that cadence.

    :param config: Settings to use. A default :class:`IAQConfig` if None.
    :param clock: Zero-argument callable returning milliseconds from a monotonic clock
    """

    def __init__(
        self,
        config: Optional[IAQConfig] = None,
        clock: Optional[Callable[[], int]] = None,
    ) -> None:
        self.config = config if config is not None else IAQConfig()
        self._clock = clock if clock is not None else _monotonic_ms
        self._calibration = CalibrationStateMachine(self.config, self._clock())
        self._trackers = None
        self._smoothing = None

        self.iaq = NEUTRAL_SCORE
        self.accuracy = ACCURACY_UNRELIABLE

        self.temperature = 0.0
        self.humidity = 0.0
        self.gas_resistance = 0.0
        self.gas_compensated = 0.0
        self.temperature_compensated = 0.0
        self.humidity_compensated = 0.0
        self.dew_point = 0.0

        self.reconfigure()

    @property
    def phase(self) -> int:
        """Calibration phase: 0 = init, 1 = burn-in, 2 = normal operation."""
        return self._calibration.phase

    @property
    def uptime(self) -> int:
        """Decay intervals survived in normal operation."""
        return self._calibration.uptime

    @property
    def gas_ceiling(self) -> float:
        """Estimated compensated gas resistance of clean air, 0 until seeded."""
        return self._calibration.buffer.ceiling

    @property
    def calibration_accuracy(self) -> float:
        """How settled the gas ceiling is, in percent."""
        return self._calibration.buffer.accuracy

    @property
    def calibration(self) -> CalibrationStateMachine:
        """The calibration state machine."""
        return self._calibration

    def _smoothing_settings(self) -> Optional[Tuple[int, float, float, float]]:
        config = self.config
        if not config.smoothing:
            return None
        return (
            config.smoothing_window,
            config.temperature_range,
            config.humidity_range,
            config.gas_range,
        )

    def reconfigure(self) -> None:
        """
        Rebuild the input smoothers from the current smoothing settings.

        :meth:`update` does this by itself when the settings have changed.
        """
        config = self.config
        self._smoothing = self._smoothing_settings()
        if self._smoothing is None:
            self._trackers = None
            return
        self._trackers = (
            RangeTracker(config.smoothing_window, config.temperature_range),
            RangeTracker(config.smoothing_window, config.humidity_range),
            RangeTracker(config.smoothing_window, config.gas_range),
        )
        logger.debug(f"Smoothing inputs over {config.smoothing_window} readings")

    def reset(self) -> None:
        """Restart calibration from scratch, as after power on."""
        self._calibration.reset(self._clock())
        if self._trackers is not None:
            for tracker in self._trackers:
                tracker.reset()
        self.iaq = NEUTRAL_SCORE
        self.accuracy = ACCURACY_UNRELIABLE
        logger.info("Gas calibration reset")

    def update(
        self, temperature: float, humidity: float, gas_resistance: float
    ) -> Tuple[float, int]:
        """
        Process one set of readings.

        Glitch readings and readings that cannot be compensated leave every
        output at its previous value.

        :param temperature: Temperature in degrees Celsius
        :param humidity: Relative humidity in percent (0-100)
        :param gas_resistance: Gas resistance in ohms
        :return: Tuple of (iaq, accuracy)
        """
        now = self._clock()
        config = self.config
        if self._smoothing != self._smoothing_settings():
            self.reconfigure()

        if not (
            math.isfinite(temperature)
            and math.isfinite(humidity)
            and math.isfinite(gas_resistance)
        ):
            logger.debug("Discarding reading with non-finite input")
            return self.iaq, self.accuracy

        # Documented range tops out well below the limit; higher values are spurious
        if gas_resistance > config.gas_limit_max:
            self._calibration.penalize()
            return self.iaq, self.accuracy

        probe, probe_floor = compensate_gas_resistance(
            temperature,
            humidity,
            max(gas_resistance, config.gas_limit_min),
            config.gas_limit_min,
            config.slope_factor,
        )
        if not _usable(probe, probe_floor):
            logger.debug(f"Discarding reading, cannot compensate at {temperature} C")
            return self.iaq, self.accuracy

        if self._trackers is not None:
            temperature = self._trackers[0].track(temperature)[3]
            humidity = self._trackers[1].track(humidity)[3]
            gas_resistance = self._trackers[2].track(gas_resistance)[3]

        compensated, floor = compensate_gas_resistance(
            temperature,
            humidity,
            max(gas_resistance, config.gas_limit_min),
            config.gas_limit_min,
            config.slope_factor,
        )
        if not _usable(compensated, floor):
            logger.debug("Discarding reading, smoothed inputs cannot be compensated")
            return self.iaq, self.accuracy

        self.temperature = temperature
        self.humidity = humidity
        self.gas_resistance = gas_resistance
        self.gas_compensated = compensated
        self.temperature_compensated = compensate_temperature(
            temperature, config.temperature_offset
        )
        self.humidity_compensated = compensate_humidity(
            temperature, humidity, config.temperature_offset
        )
        self.dew_point = dew_point(temperature, humidity)

        calibration = self._calibration
        calibration.advance(gas_resistance, compensated, floor, now)

        self.iaq = air_quality_score(compensated, calibration.buffer.ceiling, self.iaq)
        self.accuracy = confidence_grade(
            calibration.phase,
            calibration.buffer.spread,
            calibration.uptime,
            config.spread_moderate,
            config.spread_high,
            config.spread_very_high,
            config.uptime_high,
            config.uptime_very_high,
        )
        return self.iaq, self.accuracy

    def update_from_sensor(self, sensor: Any) -> Tuple[float, int]:
        """
        Read a sensor driver and process the result.

        :param sensor: Object with ``temperature``, ``relative_humidity`` and ``gas``
            attributes, such as ``adafruit_bme680.Adafruit_BME680_I2C``
        :return: Tuple of (iaq, accuracy)
        """
        return self.update(sensor.temperature, sensor.relative_humidity, sensor.gas)
