# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.range_tracker`
================================================================================

Smooths a sensor channel by tracking the midpoint of its min/max range over a
lookback window (a Donchian channel midpoint). This removes oscillations caused
by air conditioners, heaters and similar cycling equipment without adding the
phase lag of a moving average.

Implementation Notes
--------------------

When a range cap is set, the backward walk stops as soon as the window would
exceed the cap, so a step change shortens the effective lookback instead of
reporting a stale, overly wide range.

* https://www.investopedia.com/terms/d/donchianchannels.asp
"""

from bme680_iaq.ring import RingBuffer

try:
    from typing import Tuple
except ImportError:
    pass


class RangeTracker:
    """Donchian midpoint smoother over a fixed window."""

    def __init__(self, capacity: int, range_cap: float = 0.0) -> None:
        """
        :param capacity: Lookback window length in samples (at least 2)
        :param range_cap: Largest allowed ``max - min`` spread. 0 disables the cap.
        """
        if capacity < 2:
            raise ValueError("RangeTracker capacity must be at least 2")
        if range_cap < 0:
            raise ValueError("RangeTracker range cap must not be negative")
        self._samples = RingBuffer(capacity)
        self.range_cap = range_cap
        self.current = 0.0
        self.min = 0.0
        self.max = 0.0
        self.average = 0.0

    @property
    def full(self) -> bool:
        """True once the window has been filled."""
        return self._samples.full

    def track(self, sample: float) -> Tuple[float, float, float, float]:
        """
        Add a sample and recompute the window statistics.

        :param sample: The newest reading
        :return: Tuple of (current, min, max, average)
        """
        self.current = sample
        self._samples.push(sample)

        low = sample
        high = sample
        cap = self.range_cap
        for value in self._samples.newest():
            if value < low:
                low = value
            elif value > high:
                high = value
            if cap > 0 and high - low > cap:
                if high - sample < sample - low:
                    low = high - cap
                else:
                    high = low + cap
                break

        self.min = low
        self.max = high
        self.average = (low + high) / 2.0
        return self.current, self.min, self.max, self.average

    def reset(self) -> None:
        """Drop all samples, keeping the window allocation."""
        self._samples.clear()
        self.current = 0.0
        self.min = 0.0
        self.max = 0.0
        self.average = 0.0
