# SPDX-FileCopyrightText: Copyright (c) 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT
"""
`bme680_iaq`
================================================================================

Adaptive indoor air quality (IAQ) score for metal-oxide gas sensors such as the
Bosch BME680 and BME688.

The score is relative, 0 (bad) to 100 (good), measured against a continuously
recalibrated clean-air gas resistance. It is not a concentration of any gas.

Implementation Notes
--------------------

**Hardware:**

* `Adafruit BME680 Temperature, Humidity, Pressure and Gas Sensor <https://www.adafruit.com/product/3660>`_

**Software and Dependencies:**

* Adafruit CircuitPython firmware for the supported boards:
  https://circuitpython.org/downloads

* Adafruit Blinka for ``micropython.const`` on desktop Python:
  https://github.com/adafruit/Adafruit_Blinka
"""

from bme680_iaq.calibration import PHASE_BURN_IN, PHASE_INIT, PHASE_NORMAL
from bme680_iaq.config import CEILING_REPLACE_SMALLEST, CEILING_ROTATE, IAQConfig
from bme680_iaq.engine import IAQEngine
from bme680_iaq.range_tracker import RangeTracker

__version__ = "0.0.0+auto.0"
