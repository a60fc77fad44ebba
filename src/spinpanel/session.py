"""
GATT session with the spin bike.

Connects to a located device, finds the telemetry characteristic, enables
notifications and hands the raw payloads out as an async stream in arrival
order. Every setup step fails with its own SetupError subclass and nothing is
retried.
"""

import asyncio
import logging
from typing import Any, AsyncIterator, Callable, Optional

from bleak import BleakClient
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError

from .core import INDOOR_BIKE_DATA_UUID
from .errors import (
    CharacteristicNotFound,
    ConnectFailed,
    DiscoveryFailed,
    SubscribeFailed,
)

logger = logging.getLogger(__name__)

# Queued by the disconnect callback to end the stream
_END_OF_STREAM = None


class TelemetrySession:
    """Owns the connection to one bike for the lifetime of a ride."""

    def __init__(
        self,
        device: BLEDevice,
        characteristic_uuid: str = INDOOR_BIKE_DATA_UUID,
        client_factory: Callable[..., Any] = BleakClient,
    ) -> None:
        """Initialize session with no connection.

        Args:
            device: Device returned by DeviceLocator.locate()
            characteristic_uuid: UUID of the telemetry characteristic
            client_factory: Builds the GATT client (swapped out in tests)
        """
        self.device = device
        self.characteristic_uuid = characteristic_uuid
        self._client_factory = client_factory
        self._client: Optional[BleakClient] = None
        self._characteristic: Optional[BleakGATTCharacteristic] = None
        self._queue: asyncio.Queue = asyncio.Queue()

    @property
    def is_connected(self) -> bool:
        """Check if currently connected to the bike."""
        return self._client is not None and self._client.is_connected

    @property
    def is_subscribed(self) -> bool:
        return self._characteristic is not None

    async def run(self) -> AsyncIterator[bytes]:
        """Set up the link and return the notification stream.

        Returns:
            Async iterator of raw payloads, ending when the bike disconnects

        Raises:
            ConnectFailed, DiscoveryFailed, CharacteristicNotFound,
            SubscribeFailed
        """
        await self._connect()
        try:
            characteristic = self._find_characteristic()
            await self._subscribe(characteristic)
        except BaseException:
            await self.close()
            raise
        return self.notifications()

    async def notifications(self) -> AsyncIterator[bytes]:
        """Yield payloads one at a time until the stream ends.

        Closing the generator (or cancelling the task consuming it) tears
        down the subscription.
        """
        try:
            while True:
                payload = await self._queue.get()
                if payload is _END_OF_STREAM:
                    logger.info("Notification stream ended")
                    return
                yield payload
        finally:
            await self.close()

    async def close(self) -> None:
        """Stop notifications and disconnect. Errors are logged, not raised."""
        client = self._client
        if client is None:
            return
        self._client = None

        characteristic = self._characteristic
        self._characteristic = None
        try:
            if characteristic is not None and client.is_connected:
                await client.stop_notify(characteristic)
        except (BleakError, OSError) as e:
            logger.warning(f"Failed to stop notifications: {e}")

        try:
            await client.disconnect()
            logger.info("Disconnected")
        except (BleakError, OSError) as e:
            logger.warning(f"Disconnect failed: {e}")

    async def __aenter__(self) -> "TelemetrySession":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    async def _connect(self) -> None:
        logger.info(f"Connecting to {self.device.name or self.device.address}...")
        client = self._client_factory(
            self.device, disconnected_callback=self._on_disconnect
        )
        try:
            await client.connect()
        except (BleakError, asyncio.TimeoutError, OSError) as e:
            raise ConnectFailed(f"Connection failed: {e}") from e
        self._client = client
        logger.info("Connected")

    def _find_characteristic(self) -> BleakGATTCharacteristic:
        assert self._client is not None
        try:
            services = self._client.services
        except BleakError as e:
            raise DiscoveryFailed(f"Service discovery failed: {e}") from e

        characteristic = services.get_characteristic(self.characteristic_uuid)
        if characteristic is None:
            raise CharacteristicNotFound(
                f"Characteristic {self.characteristic_uuid} not available; "
                "this device does not look like a supported bike."
            )
        logger.debug(f"Telemetry characteristic: {characteristic}")
        return characteristic

    async def _subscribe(self, characteristic: BleakGATTCharacteristic) -> None:
        assert self._client is not None
        try:
            await self._client.start_notify(characteristic, self._on_notification)
        except (BleakError, OSError) as e:
            raise SubscribeFailed(f"Subscribe failed: {e}") from e
        self._characteristic = characteristic
        logger.info("Subscribed to telemetry")

    def _on_notification(
        self, sender: BleakGATTCharacteristic, data: bytearray
    ) -> None:
        """Handle a notification. Runs on the event loop; must not block."""
        self._queue.put_nowait(bytes(data))

    def _on_disconnect(self, client: BleakClient) -> None:
        logger.warning("Bike disconnected")
        self._queue.put_nowait(_END_OF_STREAM)
