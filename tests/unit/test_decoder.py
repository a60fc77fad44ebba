#!/usr/bin/env python
"""Decoder tests for the two bike frame shapes."""

import pytest
from spinpanel.decoder import (
    CadenceReading,
    Calibration,
    PerformanceReading,
    Unrecognized,
    decode,
)


def performance_frame(raw_speed: int, raw_power: int) -> bytes:
    frame = bytearray(18)
    frame[2:4] = raw_speed.to_bytes(2, "little")
    frame[9:11] = raw_power.to_bytes(2, "little", signed=True)
    return bytes(frame)


def test_performance_frame():
    """Raw speed 100 and raw power 10 scale to km/h and watts."""
    payload = bytes([0xAA, 0xBB, 0x64, 0x00, 1, 2, 3, 4, 5, 0x0A, 0x00]) + bytes(7)
    assert len(payload) == 18

    reading = decode(payload)

    assert isinstance(reading, PerformanceReading)
    assert reading.speed_kmh == pytest.approx(16.8)
    assert reading.power_w == pytest.approx(8.3)


def test_performance_frame_negative_power():
    """Power is a signed field."""
    reading = decode(performance_frame(0, -10))
    assert reading.power_w == pytest.approx(-8.3)
    assert reading.speed_kmh == 0.0


def test_performance_frame_full_scale_speed():
    """Speed is unsigned, 0xFFFF is not negative."""
    reading = decode(performance_frame(0xFFFF, 0))
    assert reading.speed_kmh == pytest.approx(0xFFFF * 0.168)


def test_cadence_frame():
    """Raw pulses 43 and 5 s of bike time."""
    reading = decode(bytes([0x00, 0x00, 0x2B, 0x00, 0x05, 0x00]))

    assert isinstance(reading, CadenceReading)
    assert reading.rpm == pytest.approx(1.007, abs=1e-3)
    assert reading.elapsed_seconds == 5


def test_cadence_frame_elapsed_is_unsigned():
    reading = decode(bytes([0, 0, 0, 0, 0xFF, 0xFF]))
    assert reading.elapsed_seconds == 65535


@pytest.mark.parametrize("length", [0, 1, 5, 7, 17, 19, 20])
def test_other_lengths_unrecognized(length):
    reading = decode(bytes(length))
    assert reading == Unrecognized(length=length)


def test_known_lengths_never_unrecognized():
    assert not isinstance(decode(bytes(18)), Unrecognized)
    assert not isinstance(decode(bytes(6)), Unrecognized)
    assert not isinstance(decode(b"\xff" * 18), Unrecognized)


def test_decode_is_deterministic():
    payload = performance_frame(250, 180)
    assert decode(payload) == decode(payload)
    assert decode(bytearray(payload)) == decode(payload)


def test_custom_calibration():
    """Another unit of the same model can be recalibrated."""
    calibration = Calibration(
        speed_factor=0.2, power_factor=1.0, pulses_per_revolution=40.0
    )

    performance = decode(performance_frame(100, 10), calibration)
    cadence = decode(bytes([0, 0, 80, 0, 0, 0]), calibration)

    assert performance.speed_kmh == pytest.approx(20.0)
    assert performance.power_w == pytest.approx(10.0)
    assert cadence.rpm == pytest.approx(2.0)
