"""
Core constants for the Gallant spin bike telemetry link.
"""

# Indoor Bike Data characteristic; the bike pushes its proprietary frames here
INDOOR_BIKE_DATA_UUID = "00002ad2-0000-1000-8000-00805f9b34fb"

# Advertised name fragments used by the bike (GLT-xxxx, Gallant ...)
DEVICE_NAME_FILTERS = ("GLT", "Gallant")

# Scan budget
SCAN_ATTEMPTS = 15
SCAN_INTERVAL = 1.0

# Frame lengths, the only thing telling the two packet shapes apart
PERFORMANCE_FRAME_LENGTH = 18
CADENCE_FRAME_LENGTH = 6

# Calibration for this bike model (not FTMS scaling)
SPEED_FACTOR = 0.168  # raw speed -> km/h
POWER_FACTOR = 0.83  # raw power -> W
PULSES_PER_REVOLUTION = 42.7  # magnet pulses per crank turn
