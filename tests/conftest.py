# SPDX-FileCopyrightText: 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT

import pytest

from bme680_iaq import IAQEngine


class FakeClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, ms=1000):
        self.now += ms


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def engine(clock):
    return IAQEngine(clock=clock)


def feed(engine, clock, readings, temperature=25.0, humidity=40.0, step=1000):
    """Run one cycle per gas reading, moving the clock on by ``step`` after each."""
    results = []
    for gas in readings:
        results.append(engine.update(temperature, humidity, gas))
        clock.advance(step)
    return results


def run_to_normal(engine, clock, gas=150000):
    """Drive a fresh engine through init and burn-in on steady air at 1 s cadence."""
    # A slowly rising resistance lets init finish right after its 30 s
    results = feed(engine, clock, [gas - 40 + i for i in range(40)])
    while engine.phase != 2:
        results += feed(engine, clock, [gas])
    return results
