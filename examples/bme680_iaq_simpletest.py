# SPDX-FileCopyrightText: 2026 bme680_iaq contributors
#
# SPDX-License-Identifier: MIT

"""Simple test for the IAQ engine with a BME680 sensor"""

import time

import adafruit_bme680
import board

from bme680_iaq import IAQEngine

i2c = board.I2C()
sensor = adafruit_bme680.Adafruit_BME680_I2C(i2c)

engine = IAQEngine()
# raise the limits for sensors that read high in clean air
# engine.config.set_gas_resistance_limits(100000, 400000)

print("Calibrating, the first score appears after burn-in starts..")
print()

while True:
    iaq, accuracy = engine.update_from_sensor(sensor)
    print(f"IAQ: {iaq:.1f}%  accuracy: {accuracy}  phase: {engine.phase}")
    print(f"Gas: {engine.gas_resistance:.0f} ohm  ceiling: {engine.gas_ceiling:.0f}")
    print(f"Calibration: {engine.calibration_accuracy:.1f}%")
    print()
    time.sleep(1)
