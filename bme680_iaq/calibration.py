# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.calibration`
================================================================================

Adaptive gas resistance ceiling for a metal-oxide gas sensor.

The ceiling is the running mean of the highest compensated gas readings seen
recently. It is the sensor's estimated resistance in clean air and the
denominator of the air quality score.

Implementation Notes
--------------------

Calibration runs through three phases:

* **Init** right after power on. Resistance falls sharply and is unusable. After
  the init time has passed, the raw resistance is watched until it posts three
  consecutive readings above its latest low, which starts burn-in.
* **Burn-in** greedily collects the highest compensated readings until both the
  burn-in time has passed and the calibration buffer is full.
* **Normal** folds in any reading above the ceiling, and once per decay interval
  folds in an ordinary reading so the ceiling cannot go stale.

Timings assume roughly one reading per second.

* https://forums.pimoroni.com/t/bme680-observed-gas-ohms-readings/6608/18
"""

import logging
import math

from micropython import const

from bme680_iaq.config import CEILING_REPLACE_SMALLEST, IAQConfig
from bme680_iaq.ring import RingBuffer

logger = logging.getLogger(__name__)

GAS_CALIBRATION_DATA_POINTS = const(100)

PHASE_INIT = const(0)
PHASE_BURN_IN = const(1)
PHASE_NORMAL = const(2)

PHASE_NAMES = ("init", "burn-in", "normal")

_INIT_HIGHER_LOWS = const(3)


class CalibrationBuffer:
    """Bounded collection of high compensated gas readings."""

    def __init__(self, capacity: int = GAS_CALIBRATION_DATA_POINTS) -> None:
        self._data = RingBuffer(capacity)
        self.ceiling = 0.0
        self.spread = 1.0

    @property
    def capacity(self) -> int:
        """Number of slots."""
        return self._data.capacity

    @property
    def full(self) -> bool:
        """True once every slot holds a reading."""
        return self._data.full

    @property
    def accuracy(self) -> float:
        """Calibration spread expressed as a percentage, 100 meaning a perfectly settled ceiling."""
        return (1.0 - self.spread) * 100.0

    def __len__(self) -> int:
        return len(self._data)

    def __iter__(self):
        return iter(self._data)

    def update(self, value: float, replace_smallest: bool = False) -> bool:
        """
        Fold a compensated gas reading into the buffer.

        :param value: Compensated gas resistance, must be positive and finite
        :param replace_smallest: When the buffer is full, overwrite the smallest
            entry if ``value`` is larger, instead of evicting the oldest entry
        :return: True if the buffer changed
        """
        if not (value > 0 and math.isfinite(value)):
            raise ValueError("Calibration values must be positive and finite")

        if replace_smallest and self._data.full:
            smallest = 0
            for i in range(1, len(self._data)):
                if self._data[i] < self._data[smallest]:
                    smallest = i
            if value <= self._data[smallest]:
                return False
            self._data[smallest] = value
        else:
            self._data.push(value)

        self._recompute()
        return True

    def _recompute(self) -> None:
        count = len(self._data)
        if not count:
            self.ceiling = 0.0
            self.spread = 1.0
            return
        low = high = self._data[0]
        total = 0.0
        for value in self._data:
            total += value
            if value < low:
                low = value
            elif value > high:
                high = value
        self.ceiling = total / count
        self.spread = (high - low) / high

    def reset(self) -> None:
        """Empty the buffer."""
        self._data.clear()
        self.ceiling = 0.0
        self.spread = 1.0


class CalibrationStateMachine:
    """
    Drives the calibration buffer through the init, burn-in and normal phases.

    :param config: Active configuration, read on every call
    :param now: Current clock reading in milliseconds
    """

    def __init__(self, config: IAQConfig, now: int) -> None:
        self._config = config
        self.buffer = CalibrationBuffer()
        self.phase = PHASE_INIT
        self.uptime = 0
        self._timer = now
        self._last_low = None
        self._higher_lows = 0

    def elapsed(self, now: int) -> int:
        """Milliseconds spent in the current phase (or decay period)."""
        return now - self._timer

    def reset(self, now: int) -> None:
        """Restart calibration from the init phase with an empty buffer."""
        self.buffer.reset()
        self.phase = PHASE_INIT
        self.uptime = 0
        self._timer = now
        self._last_low = None
        self._higher_lows = 0

    def penalize(self) -> None:
        """Push the phase timer back after a glitch reading, while still stabilizing."""
        if self.phase < PHASE_NORMAL:
            self._timer += self._config.glitch_penalty
            logger.debug(
                f"Gas glitch during {PHASE_NAMES[self.phase]}, "
                f"timer pushed back {self._config.glitch_penalty} ms"
            )

    def _enter(self, phase: int, now: int) -> None:
        logger.info(
            f"Gas calibration {PHASE_NAMES[self.phase]} -> {PHASE_NAMES[phase]} "
            f"after {self.elapsed(now)} ms"
        )
        self.phase = phase
        self._timer = now

    def advance(
        self,
        raw_gas: float,
        compensated_gas: float,
        compensated_floor: float,
        now: int,
    ) -> None:
        """
        Process one reading. Glitch and validity checks happen before this call.

        :param raw_gas: Gas resistance in ohms, used only while in the init phase
        :param compensated_gas: Humidity compensated gas resistance
        :param compensated_floor: Humidity compensated minimum gas resistance
        :param now: Current clock reading in milliseconds
        """
        config = self._config
        if self.phase == PHASE_INIT:
            self._track_settling(raw_gas, now)

        elif self.phase == PHASE_BURN_IN:
            if self.elapsed(now) >= config.burn_in_time and self.buffer.full:
                self._enter(PHASE_NORMAL, now)
            else:
                self.buffer.update(max(compensated_gas, compensated_floor), True)

        elif compensated_gas > compensated_floor:
            if compensated_gas > self.buffer.ceiling:
                self.buffer.update(
                    compensated_gas,
                    config.ceiling_policy == CEILING_REPLACE_SMALLEST,
                )
            elif self.elapsed(now) >= config.decay_time:
                self.buffer.update(compensated_gas, False)
                self._timer = now
                self.uptime += 1
                logger.debug(
                    f"Gas ceiling decayed to {self.buffer.ceiling:.0f}, uptime {self.uptime}"
                )

    def _track_settling(self, raw_gas: float, now: int) -> None:
        if self.elapsed(now) < self._config.init_time:
            return
        if self._last_low is None:
            self._last_low = raw_gas
            self._higher_lows = 0
        elif raw_gas < self._last_low:
            self._last_low = raw_gas
            self._higher_lows = 0
        elif raw_gas > self._last_low:
            self._higher_lows += 1
            if self._higher_lows >= _INIT_HIGHER_LOWS:
                self._last_low = None
                self._higher_lows = 0
                self._enter(PHASE_BURN_IN, now)
