# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq.scoring`
================================================================================

Relative air quality score and its confidence grade.

The score is ``(gas / ceiling) ** 2 * 100`` clipped at 100. The square gives
steeper scaling near the ceiling: air close to the clean-air resistance reads
near 100 and moderate drops fall off quickly.

* https://github.com/thstielow/raspi-bme680-iaq
"""

from micropython import const

from bme680_iaq.calibration import PHASE_BURN_IN, PHASE_INIT

NEUTRAL_SCORE = 50.0

ACCURACY_UNRELIABLE = const(0)
ACCURACY_LOW = const(1)
ACCURACY_MODERATE = const(2)
ACCURACY_HIGH = const(3)
ACCURACY_VERY_HIGH = const(4)


def air_quality_score(gas: float, ceiling: float, previous: float = NEUTRAL_SCORE) -> float:
    """
    Score compensated gas resistance against the calibration ceiling.

    :param gas: Compensated gas resistance in ohms
    :param ceiling: Current gas ceiling. Not yet seeded when 0.
    :param previous: Score to hold while there is no ceiling
    :return: Air quality from 0 (bad) to 100 (good)
    """
    if ceiling <= 0:
        return previous
    return min((gas / ceiling) ** 2 * 100.0, 100.0)


def confidence_grade(
    phase: int,
    spread: float,
    uptime: int,
    spread_moderate: float = 0.075,
    spread_high: float = 0.035,
    spread_very_high: float = 0.02,
    uptime_high: int = 2,
    uptime_very_high: int = 100,
) -> int:
    """
    Grade how far the score can be trusted, from 0 (unreliable) to 4 (very high).

    :param phase: Calibration phase
    :param spread: Normalized range of the calibration buffer
    :param uptime: Decay intervals survived in normal operation
    """
    if phase == PHASE_INIT:
        return ACCURACY_UNRELIABLE
    if phase == PHASE_BURN_IN or spread >= spread_moderate:
        return ACCURACY_LOW

    grade = ACCURACY_MODERATE
    if spread < spread_high and uptime >= uptime_high:
        grade = ACCURACY_HIGH
    if spread < spread_very_high and uptime >= uptime_very_high:
        grade = ACCURACY_VERY_HIGH
    return grade
