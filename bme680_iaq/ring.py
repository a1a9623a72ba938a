# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.ring`
================================================================================

Fixed-capacity circular buffer shared by the range trackers and the gas
calibration buffer. All slots are allocated once; the populated count is
tracked explicitly so that no sample value has to double as an "empty" marker.
"""

try:
    from typing import Iterator, List
except ImportError:
    pass


class RingBuffer:
    """Fixed-size circular sequence of floats."""

    def __init__(self, capacity: int) -> None:
        """
        :param capacity: Number of slots, allocated up front
        """
        if capacity < 1:
            raise ValueError("RingBuffer capacity must be at least 1")
        self._data: List[float] = [0.0] * capacity
        self._capacity = capacity
        self._cursor = 0
        self._count = 0

    @property
    def capacity(self) -> int:
        """Number of slots."""
        return self._capacity

    @property
    def full(self) -> bool:
        """True once every slot has been written at least once."""
        return self._count == self._capacity

    def _wrap(self, index: int) -> int:
        return index % self._capacity

    def push(self, value: float) -> None:
        """Write ``value`` at the cursor and advance, evicting the oldest slot when full."""
        self._data[self._cursor] = value
        self._cursor = self._wrap(self._cursor + 1)
        if self._count < self._capacity:
            self._count += 1

    def newest(self, count: int = None) -> Iterator[float]:
        """
        Walk backward from the most recently written slot.

        :param count: Maximum number of slots to visit. Defaults to all populated slots.
        """
        if count is None or count > self._count:
            count = self._count
        for step in range(1, count + 1):
            yield self._data[self._wrap(self._cursor - step)]

    def clear(self) -> None:
        """Forget every sample. Slots stay allocated."""
        for i in range(self._capacity):
            self._data[i] = 0.0
        self._cursor = 0
        self._count = 0

    def __len__(self) -> int:
        return self._count

    def __iter__(self) -> Iterator[float]:
        for i in range(self._count):
            yield self._data[i]

    def __getitem__(self, index: int) -> float:
        if not 0 <= index < self._count:
            raise IndexError("RingBuffer index out of range")
        return self._data[index]

    def __setitem__(self, index: int, value: float) -> None:
        if not 0 <= index < self._count:
            raise IndexError("RingBuffer index out of range")
        self._data[index] = value
