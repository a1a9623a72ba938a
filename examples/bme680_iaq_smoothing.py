# SPDX-FileCopyrightText: 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT

"""Smooth heater and air conditioner cycling out of the IAQ inputs"""

import logging
import time

import adafruit_bme680
import board

from bme680_iaq import IAQConfig, IAQEngine

logging.basicConfig(level=logging.INFO)

i2c = board.I2C()
sensor = adafruit_bme680.Adafruit_BME680_I2C(i2c)
sensor.temperature_oversample = 2
sensor.humidity_oversample = 2

config = IAQConfig()
# 5 minute window, never wider than 1 C, 5 %RH or 10 kohm
config.enable_smoothing(300, temperature_range=1.0, humidity_range=5.0, gas_range=10000)
config.set_temperature_offset(-2.0)

engine = IAQEngine(config)

while True:
    iaq, accuracy = engine.update_from_sensor(sensor)
    print(
        f"{engine.temperature_compensated:.1f} C  {engine.humidity_compensated:.1f} %RH  "
        f"dew point {engine.dew_point:.1f} C  IAQ {iaq:.1f}% ({accuracy})"
    )
    time.sleep(1)
