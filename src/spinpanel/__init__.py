"""
SpinPanel - Gallant Spin Bike Dashboard

A Python library and console dashboard for live telemetry from Gallant BLE
spin bikes.
"""

__version__ = "0.1.0"
__description__ = "Live console dashboard for Gallant BLE spin bikes"

from .decoder import (
    CadenceReading,
    Calibration,
    PerformanceReading,
    Unrecognized,
    decode,
)
from .display import DisplayManager
from .locator import DeviceLocator
from .session import TelemetrySession
from .workout import WorkoutSnapshot, WorkoutState

__all__ = [
    "CadenceReading",
    "Calibration",
    "DeviceLocator",
    "DisplayManager",
    "PerformanceReading",
    "TelemetrySession",
    "Unrecognized",
    "WorkoutSnapshot",
    "WorkoutState",
    "decode",
]
