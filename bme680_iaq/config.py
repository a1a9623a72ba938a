# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.config`
================================================================================

Tunable settings for the IAQ engine.

Every setter validates its arguments as a whole and returns ``True`` when
applied. On ``False`` nothing was changed. Timings are in milliseconds and are
calibrated for roughly one reading per second.
"""

import logging
import math

from micropython import const

from bme680_iaq.compensation import DEFAULT_SLOPE_FACTOR

try:
    from typing import Optional
except ImportError:
    pass

logger = logging.getLogger(__name__)

# Sanity bounds for the gas resistance limits, in ohms
GAS_LIMIT_MIN_FLOOR = const(30000)
GAS_LIMIT_MAX_CEILING = const(2000000)

DEFAULT_GAS_LIMIT_MIN = const(100000)
DEFAULT_GAS_LIMIT_MAX = const(200000)

DEFAULT_INIT_TIME = const(30 * 1000)
DEFAULT_BURN_IN_TIME = const(5 * 60 * 1000)
DEFAULT_DECAY_TIME = const(30 * 60 * 1000)
DEFAULT_GLITCH_PENALTY = const(1000)

# Burn-in must outlast init, and decay must outlast burn-in, by at least this much
_MIN_BURN_IN_MARGIN = const(1000)
_MIN_DECAY_MARGIN = const(60 * 1000)

# How a reading above the ceiling enters the calibration buffer in normal operation
CEILING_REPLACE_SMALLEST = const(0)
CEILING_ROTATE = const(1)


class IAQConfig:
    """Configuration for :class:`bme680_iaq.engine.IAQEngine`."""

    def __init__(self) -> None:
        # Humidity compensation slope, empirically fitted
        self.slope_factor = DEFAULT_SLOPE_FACTOR

        # Readings below the minimum are clamped to it, readings above the maximum are glitches
        self.gas_limit_min = DEFAULT_GAS_LIMIT_MIN
        self.gas_limit_max = DEFAULT_GAS_LIMIT_MAX

        self.init_time = DEFAULT_INIT_TIME
        self.burn_in_time = DEFAULT_BURN_IN_TIME
        self.decay_time = DEFAULT_DECAY_TIME
        self.glitch_penalty = DEFAULT_GLITCH_PENALTY

        self.ceiling_policy = CEILING_REPLACE_SMALLEST

        # Added to the raw temperature for the compensated temperature and humidity outputs
        self.temperature_offset = -1.5

        self.smoothing = False
        self.smoothing_window = 0
        self.temperature_range = 0.0
        self.humidity_range = 0.0
        self.gas_range = 0.0

        # Calibration spread limits for accuracy grades 2, 3 and 4
        self.spread_moderate = 0.075
        self.spread_high = 0.035
        self.spread_very_high = 0.02
        # Decay intervals survived in normal operation for grades 3 and 4
        self.uptime_high = 2
        self.uptime_very_high = 100

    def set_slope_factor(self, slope: float) -> bool:
        """
        Set the humidity compensation slope.

        :param slope: Non-negative slope. 0 turns humidity compensation off.
        """
        if not (math.isfinite(slope) and slope >= 0):
            logger.warning(f"Rejected humidity slope factor {slope}")
            return False
        self.slope_factor = slope
        return True

    def set_gas_resistance_limits(self, minimum: int, maximum: int) -> bool:
        """
        Set the usable gas resistance range.

        :param minimum: Floor in ohms, at least 30000
        :param maximum: Glitch limit in ohms, at most 2000000
        """
        if not (
            math.isfinite(minimum)
            and math.isfinite(maximum)
            and GAS_LIMIT_MIN_FLOOR <= minimum <= maximum <= GAS_LIMIT_MAX_CEILING
        ):
            logger.warning(f"Rejected gas resistance limits {minimum}..{maximum}")
            return False
        self.gas_limit_min = minimum
        self.gas_limit_max = maximum
        return True

    def set_calibration_timings(
        self,
        init_time: int,
        burn_in_time: int,
        decay_time: int,
        glitch_penalty: Optional[int] = None,
    ) -> bool:
        """
        Set the calibration phase durations.

        Burn-in is raised to at least ``init_time + 1000`` and decay to at least
        ``burn_in_time + 60000`` rather than rejected.

        :param init_time: Minimum init phase duration in milliseconds
        :param burn_in_time: Minimum burn-in phase duration in milliseconds
        :param decay_time: Decay interval in milliseconds
        :param glitch_penalty: Timer push-back per glitch reading. Unchanged if None.
        """
        if glitch_penalty is None:
            glitch_penalty = self.glitch_penalty
        timings = (init_time, burn_in_time, decay_time, glitch_penalty)
        if (
            not all(math.isfinite(t) for t in timings)
            or init_time < 0
            or glitch_penalty < 0
        ):
            logger.warning(
                f"Rejected calibration timings {init_time}/{burn_in_time}/{decay_time}"
            )
            return False
        burn_in_time = max(burn_in_time, init_time + _MIN_BURN_IN_MARGIN)
        decay_time = max(decay_time, burn_in_time + _MIN_DECAY_MARGIN)
        self.init_time = init_time
        self.burn_in_time = burn_in_time
        self.decay_time = decay_time
        self.glitch_penalty = glitch_penalty
        return True

    def set_ceiling_policy(self, policy: int) -> bool:
        """
        Choose how readings above the ceiling enter the buffer in normal operation.

        :param policy: ``CEILING_REPLACE_SMALLEST`` or ``CEILING_ROTATE``
        """
        if policy not in (CEILING_REPLACE_SMALLEST, CEILING_ROTATE):
            logger.warning(f"Rejected ceiling policy {policy}")
            return False
        self.ceiling_policy = policy
        return True

    def enable_smoothing(
        self,
        window: int,
        temperature_range: float = 0.0,
        humidity_range: float = 0.0,
        gas_range: float = 0.0,
    ) -> bool:
        """
        Smooth the inputs with a min/max range tracker per channel.

        :param window: Lookback window in readings, at least 2
        :param temperature_range: Range cap in degrees Celsius, 0 for none
        :param humidity_range: Range cap in percent RH, 0 for none
        :param gas_range: Range cap in ohms, 0 for none
        """
        caps = (temperature_range, humidity_range, gas_range)
        if window < 2 or not all(0 <= cap < math.inf for cap in caps):
            logger.warning(f"Rejected smoothing window {window}")
            return False
        self.smoothing = True
        self.smoothing_window = window
        self.temperature_range = temperature_range
        self.humidity_range = humidity_range
        self.gas_range = gas_range
        return True

    def disable_smoothing(self) -> bool:
        """Feed raw inputs straight to the compensator."""
        self.smoothing = False
        return True

    def set_temperature_offset(self, degrees_c: float) -> bool:
        """Set the temperature offset in degrees Celsius."""
        if not math.isfinite(degrees_c):
            logger.warning(f"Rejected temperature offset {degrees_c}")
            return False
        self.temperature_offset = degrees_c
        return True

    def set_temperature_offset_f(self, degrees_f: float) -> bool:
        """Set the temperature offset as a Fahrenheit difference."""
        return self.set_temperature_offset(degrees_f * 5.0 / 9.0)

    def set_confidence_thresholds(
        self,
        spread_moderate: float,
        spread_high: float,
        spread_very_high: float,
        uptime_high: int,
        uptime_very_high: int,
    ) -> bool:
        """
        Tune the accuracy grade thresholds.

        Spreads must tighten and uptimes grow from one grade to the next.
        """
        if not (
            0 < spread_very_high <= spread_high <= spread_moderate <= 1
            and 0 <= uptime_high <= uptime_very_high
        ):
            logger.warning("Rejected confidence thresholds")
            return False
        self.spread_moderate = spread_moderate
        self.spread_high = spread_high
        self.spread_very_high = spread_very_high
        self.uptime_high = uptime_high
        self.uptime_very_high = uptime_very_high
        return True
