"""
Running workout state fed by decoded telemetry.
"""

import logging
from dataclasses import dataclass

from .decoder import CadenceReading, DecodedReading, PerformanceReading

logger = logging.getLogger(__name__)

# m/s -> km/h factor
MS_TO_KMH = 3.6


@dataclass(frozen=True)
class WorkoutSnapshot:
    """Read-only copy of the workout state handed to the display."""

    speed_kmh: float
    power_w: float
    rpm: float
    elapsed_time_seconds: int
    total_distance_m: float


class WorkoutState:
    """Latest readings plus distance integrated over wall-clock time."""

    def __init__(self, now: float) -> None:
        """Initialize an empty workout.

        Args:
            now: Start timestamp in seconds (monotonic clock)
        """
        self.current_speed_kmh = 0.0
        self.current_power_w = 0.0
        self.current_rpm = 0.0
        self.elapsed_time_seconds = 0
        self.total_distance_m = 0.0
        self.last_update = now

    def apply(self, reading: DecodedReading, now: float) -> bool:
        """Fold one decoded reading into the state.

        Performance readings set speed/power and integrate distance over the
        time since the previous performance reading, using the new speed for
        the whole interval. Cadence readings only set rpm and bike time.

        Args:
            reading: Output of decoder.decode()
            now: Current timestamp in seconds, same clock as the constructor

        Returns:
            True if the state changed, False for unrecognized frames
        """
        if isinstance(reading, PerformanceReading):
            self.current_speed_kmh = reading.speed_kmh
            self.current_power_w = reading.power_w
            self._update_distance(now)
            return True

        if isinstance(reading, CadenceReading):
            self.current_rpm = reading.rpm
            self.elapsed_time_seconds = reading.elapsed_seconds
            return True

        logger.debug(f"Skipping unrecognized frame: {reading}")
        return False

    def _update_distance(self, now: float) -> None:
        duration = now - self.last_update
        self.total_distance_m += (self.current_speed_kmh / MS_TO_KMH) * duration
        self.last_update = now

    def snapshot(self) -> WorkoutSnapshot:
        """Get an immutable copy of the current values."""
        return WorkoutSnapshot(
            speed_kmh=self.current_speed_kmh,
            power_w=self.current_power_w,
            rpm=self.current_rpm,
            elapsed_time_seconds=self.elapsed_time_seconds,
            total_distance_m=self.total_distance_m,
        )
