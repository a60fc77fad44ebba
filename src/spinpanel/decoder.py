"""
Decoder for the bike's proprietary telemetry frames.

The bike sends two frame shapes on the same characteristic and the only way
to tell them apart is the length:

    18 bytes  performance frame, u16 speed at [2:4], i16 power at [9:11]
     6 bytes  cadence frame, u16 pulse count at [2:4], u16 elapsed s at [4:6]

Anything else is returned as Unrecognized and should be skipped by the caller.
"""

import struct
from dataclasses import dataclass
from typing import Union

from .core import (
    CADENCE_FRAME_LENGTH,
    PERFORMANCE_FRAME_LENGTH,
    POWER_FACTOR,
    PULSES_PER_REVOLUTION,
    SPEED_FACTOR,
)


@dataclass(frozen=True)
class Calibration:
    """Scale factors turning raw frame fields into physical units."""

    speed_factor: float = SPEED_FACTOR
    power_factor: float = POWER_FACTOR
    pulses_per_revolution: float = PULSES_PER_REVOLUTION


DEFAULT_CALIBRATION = Calibration()


@dataclass(frozen=True)
class PerformanceReading:
    speed_kmh: float
    power_w: float


@dataclass(frozen=True)
class CadenceReading:
    rpm: float
    elapsed_seconds: int


@dataclass(frozen=True)
class Unrecognized:
    length: int


DecodedReading = Union[PerformanceReading, CadenceReading, Unrecognized]


def decode(
    payload: bytes, calibration: Calibration = DEFAULT_CALIBRATION
) -> DecodedReading:
    """Decode one notification payload.

    Args:
        payload: Raw notification bytes
        calibration: Scale factors for this bike

    Returns:
        PerformanceReading, CadenceReading or Unrecognized
    """
    length = len(payload)

    if length == PERFORMANCE_FRAME_LENGTH:
        raw_speed = struct.unpack_from("<H", payload, 2)[0]
        raw_power = struct.unpack_from("<h", payload, 9)[0]
        return PerformanceReading(
            speed_kmh=raw_speed * calibration.speed_factor,
            power_w=raw_power * calibration.power_factor,
        )

    if length == CADENCE_FRAME_LENGTH:
        raw_pulses, elapsed = struct.unpack_from("<HH", payload, 2)
        return CadenceReading(
            rpm=raw_pulses / calibration.pulses_per_revolution,
            elapsed_seconds=elapsed,
        )

    return Unrecognized(length=length)
