# SPDX-FileCopyrightText: 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT

import pytest

from bme680_iaq.calibration import (
    PHASE_BURN_IN,
    PHASE_INIT,
    PHASE_NORMAL,
    CalibrationStateMachine,
)
from bme680_iaq.config import CEILING_ROTATE, IAQConfig

FLOOR = 100.0


@pytest.fixture
def config():
    return IAQConfig()


@pytest.fixture
def fast_config():
    config = IAQConfig()
    # init 0 s, burn-in 1 s, decay 61 s
    assert config.set_calibration_timings(0, 0, 0)
    return config


def to_normal(machine, values):
    """Take a machine built with ``fast_config`` through init and burn-in at t=0..1s."""
    for raw in (1, 2, 3, 4):
        machine.advance(raw, values[0], FLOOR, 0)
    assert machine.phase == PHASE_BURN_IN
    for value in values:
        machine.advance(5, value, FLOOR, 0)
    machine.advance(5, values[0], FLOOR, 1000)
    assert machine.phase == PHASE_NORMAL
    return machine


def test_init_waits_for_minimum_time(config):
    machine = CalibrationStateMachine(config, 0)
    for second in range(30):
        machine.advance(100000 + second * 1000, 0.0, FLOOR, second * 1000)
    assert machine.phase == PHASE_INIT


def test_init_needs_three_higher_readings(config):
    machine = CalibrationStateMachine(config, 0)
    now = 30000
    for raw in (90000, 91000, 92000):
        machine.advance(raw, 0.0, FLOOR, now)
        now += 1000
    assert machine.phase == PHASE_INIT

    machine.advance(93000, 0.0, FLOOR, now)
    assert machine.phase == PHASE_BURN_IN
    assert machine.elapsed(now) == 0


def test_init_new_low_restarts_count(config):
    machine = CalibrationStateMachine(config, 0)
    now = 30000
    for raw in (90000, 91000, 92000, 85000, 86000, 85000, 87000):
        machine.advance(raw, 0.0, FLOOR, now)
        now += 1000
    # 85000 is the new low; 86000 and 87000 count, the repeated low does not
    assert machine.phase == PHASE_INIT

    machine.advance(88000, 0.0, FLOOR, now)
    assert machine.phase == PHASE_BURN_IN


def test_init_ignores_gas_buffer(config):
    machine = CalibrationStateMachine(config, 0)
    machine.advance(90000, 5000.0, FLOOR, 40000)
    assert len(machine.buffer) == 0


def test_penalty_delays_init(config):
    machine = CalibrationStateMachine(config, 0)
    machine.penalize()
    assert machine.elapsed(0) == -config.glitch_penalty

    for raw in (1, 2, 3, 4):
        machine.advance(raw, 0.0, FLOOR, 30000)
    assert machine.phase == PHASE_INIT


def test_penalty_ignored_in_normal(fast_config):
    machine = to_normal(CalibrationStateMachine(fast_config, 0), [1000.0] * 100)
    machine.penalize()
    assert machine.elapsed(1000) == 0


def test_burn_in_clamps_to_floor(fast_config):
    machine = CalibrationStateMachine(fast_config, 0)
    for raw in (1, 2, 3, 4):
        machine.advance(raw, 0.0, FLOOR, 0)
    machine.advance(5, 40.0, FLOOR, 0)
    assert list(machine.buffer) == [FLOOR]


def test_burn_in_keeps_highest_readings(fast_config):
    machine = CalibrationStateMachine(fast_config, 0)
    for raw in (1, 2, 3, 4):
        machine.advance(raw, 0.0, FLOOR, 0)
    for value in [500.0] * 100 + [800.0, 300.0]:
        machine.advance(5, value, FLOOR, 0)
    assert machine.phase == PHASE_BURN_IN
    assert max(machine.buffer) == 800.0
    assert min(machine.buffer) == 500.0
    assert len(machine.buffer) == 100


def test_burn_in_waits_for_full_buffer(fast_config):
    machine = CalibrationStateMachine(fast_config, 0)
    for raw in (1, 2, 3, 4):
        machine.advance(raw, 0.0, FLOOR, 0)
    for second in range(1, 100):
        machine.advance(5, 1000.0, FLOOR, second * 1000)
    assert machine.phase == PHASE_BURN_IN
    assert len(machine.buffer) == 99

    machine.advance(5, 1000.0, FLOOR, 100000)
    assert machine.buffer.full
    assert machine.phase == PHASE_BURN_IN

    machine.advance(5, 1000.0, FLOOR, 101000)
    assert machine.phase == PHASE_NORMAL


def test_burn_in_waits_for_minimum_time(config):
    machine = CalibrationStateMachine(config, 0)
    for raw in (1, 2, 3, 4):
        machine.advance(raw, 0.0, FLOOR, 30000)
    for _ in range(150):
        machine.advance(5, 1000.0, FLOOR, 31000)
    assert machine.phase == PHASE_BURN_IN

    machine.advance(5, 1000.0, FLOOR, 30000 + config.burn_in_time)
    assert machine.phase == PHASE_NORMAL


def test_normal_raises_ceiling_replacing_smallest(fast_config):
    machine = to_normal(
        CalibrationStateMachine(fast_config, 0), [1100.0 - i for i in range(100)]
    )
    before = machine.buffer.ceiling
    machine.advance(5, 2000.0, FLOOR, 2000)
    assert machine.buffer.ceiling > before
    assert min(machine.buffer) == 1002.0
    assert 1100.0 in list(machine.buffer)


def test_normal_raises_ceiling_by_rotation(fast_config):
    assert fast_config.set_ceiling_policy(CEILING_ROTATE)
    machine = to_normal(
        CalibrationStateMachine(fast_config, 0), [1100.0 - i for i in range(100)]
    )
    machine.advance(5, 2000.0, FLOOR, 2000)
    assert min(machine.buffer) == 1001.0
    assert 1100.0 not in list(machine.buffer)


def test_normal_decays_ceiling(fast_config):
    machine = to_normal(CalibrationStateMachine(fast_config, 0), [1000.0] * 100)
    assert machine.buffer.ceiling == 1000.0

    machine.advance(5, 900.0, FLOOR, 1000 + fast_config.decay_time - 1)
    assert machine.buffer.ceiling == 1000.0
    assert machine.uptime == 0

    now = 1000 + fast_config.decay_time
    machine.advance(5, 900.0, FLOOR, now)
    assert machine.buffer.ceiling == pytest.approx(999.0)
    assert machine.uptime == 1
    assert machine.elapsed(now) == 0

    machine.advance(5, 900.0, FLOOR, now + 1)
    assert machine.uptime == 1


def test_normal_ignores_readings_at_floor(fast_config):
    machine = to_normal(CalibrationStateMachine(fast_config, 0), [1000.0] * 100)
    machine.advance(5, FLOOR, FLOOR, 10 ** 9)
    assert machine.uptime == 0
    assert machine.buffer.ceiling == 1000.0


def test_phase_never_regresses(fast_config):
    machine = CalibrationStateMachine(fast_config, 0)
    seen = []
    for step in range(400):
        raw = 50000 + (step % 7) * 1000
        machine.advance(raw, 500.0 + (step % 11) * 10, FLOOR, step * 1000)
        seen.append(machine.phase)
    assert seen == sorted(seen)
    assert seen[-1] == PHASE_NORMAL


def test_reset(fast_config):
    machine = to_normal(CalibrationStateMachine(fast_config, 0), [1000.0] * 100)
    machine.advance(5, 900.0, FLOOR, 1000 + fast_config.decay_time)
    assert machine.uptime == 1

    machine.reset(5000000)
    assert machine.phase == PHASE_INIT
    assert machine.uptime == 0
    assert len(machine.buffer) == 0
    assert machine.elapsed(5000000) == 0
