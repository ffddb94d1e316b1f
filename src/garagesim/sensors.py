# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Limit sensor signals derived from the door position.

LS1 sits at the top of the door frame and reads ON once the door is nearly
fully open. LS2 sits at the bottom and reads ON while the door is nearly
shut. There is no hysteresis, so a door parked exactly on a threshold may
flicker between readings.
"""

from .const import BOTTOM_SENSOR_THRESHOLD, TOP_SENSOR_THRESHOLD
from .state import SensorSignals


def top_sensor(position: float) -> bool:
    """LS1: door is (nearly) fully open."""
    return position > TOP_SENSOR_THRESHOLD


def bottom_sensor(position: float) -> bool:
    """LS2: door is (nearly) fully shut."""
    return position < BOTTOM_SENSOR_THRESHOLD


def read_sensors(position: float) -> SensorSignals:
    """Read both limit sensors for a door position."""
    return SensorSignals(top=top_sensor(position), bottom=bottom_sensor(position))
