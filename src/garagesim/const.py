# Copyright (c) 2025 Preston Elder
#
# This software is released under the MIT License.
# https://opensource.org/licenses/MIT

"""Constants for the garage door simulator."""

# Door states (commanded target labels)
DOOR_STATE_SHUT = "SHUT"
DOOR_STATE_OPEN = "OPEN"

# Vehicle states
VEHICLE_STATE_OUTSIDE = "OUTSIDE"
VEHICLE_STATE_ENTERING = "ENTERING"
VEHICLE_STATE_INSIDE = "INSIDE"

# Commands accepted by the interlock controller
CMD_OPEN = "open"
CMD_CLOSE = "close"
CMD_STOP = "stop"
CMD_RESET = "reset"

# Door travel is normalized: 0 = fully shut, 1 = fully open
DOOR_POSITION_SHUT = 0.0
DOOR_POSITION_OPEN = 1.0

# Position units per tick. 200 ticks at 16ms gives a ~3.2s full traversal.
DOOR_SPEED = 0.005
VEHICLE_SPEED = 3.0

# Tick cadence in seconds (~60Hz)
TICK_INTERVAL = 0.016

# Vehicle parks at viewport_width / 2 - VEHICLE_STOP_OFFSET
VEHICLE_STOP_OFFSET = 50.0

# Off-screen x position of a vehicle that is not in the scene
VEHICLE_SENTINEL = -200.0

# Limit sensors: LS1 (top) and LS2 (bottom)
TOP_SENSOR_THRESHOLD = 0.9
BOTTOM_SENSOR_THRESHOLD = 0.1
TOP_SENSOR_NAME = "LS1"
BOTTOM_SENSOR_NAME = "LS2"

# Default render surface, matching the original canvas
DEFAULT_VIEWPORT_WIDTH = 800.0
DEFAULT_VIEWPORT_HEIGHT = 400.0
