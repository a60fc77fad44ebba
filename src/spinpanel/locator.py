"""
Bounded BLE scan for the spin bike.
"""

import asyncio
import logging
from typing import Callable, Optional, Sequence

from bleak import BleakScanner
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

from .core import DEVICE_NAME_FILTERS, SCAN_ATTEMPTS, SCAN_INTERVAL
from .errors import AdapterNotFound, DeviceNotFound

logger = logging.getLogger(__name__)


class DeviceLocator:
    """Finds the first advertising peripheral whose name matches a filter."""

    def __init__(
        self,
        name_filters: Sequence[str] = DEVICE_NAME_FILTERS,
        attempts: int = SCAN_ATTEMPTS,
        interval: float = SCAN_INTERVAL,
        scanner_factory: Callable[[], BleakScanner] = BleakScanner,
    ) -> None:
        """Initialize locator.

        Args:
            name_filters: Substrings to look for in the advertised name
            attempts: Number of passes over the discovered devices
            interval: Seconds to wait between passes
            scanner_factory: Builds the scanner (swapped out in tests)
        """
        self.name_filters = tuple(name_filters)
        self.attempts = attempts
        self.interval = interval
        self._scanner_factory = scanner_factory

    def matches(self, name: Optional[str]) -> bool:
        """Check an advertised name against the filters."""
        name = name or ""
        return any(fragment in name for fragment in self.name_filters)

    async def locate(self) -> BLEDevice:
        """Scan until a matching device shows up.

        Returns:
            The first matching BLEDevice

        Raises:
            AdapterNotFound: The scanner could not be started
            DeviceNotFound: Nothing matched within the attempt budget
        """
        try:
            scanner = self._scanner_factory()
            await scanner.start()
        except (BleakError, OSError) as e:
            raise AdapterNotFound(f"Bluetooth adapter not available: {e}") from e

        logger.info(f"Scanning for {' / '.join(self.name_filters)}...")
        try:
            for attempt in range(1, self.attempts + 1):
                for device in scanner.discovered_devices:
                    if self.matches(device.name):
                        logger.info(f"Found bike: {device.name} ({device.address})")
                        return device

                logger.debug(f"Scan attempt {attempt}/{self.attempts}: no match")
                if attempt < self.attempts:
                    await asyncio.sleep(self.interval)
        finally:
            try:
                await scanner.stop()
            except (BleakError, OSError) as e:
                logger.warning(f"Failed to stop scanner: {e}")

        raise DeviceNotFound(
            "Bike not found. Pedal to wake it up and make sure it is in range."
        )
