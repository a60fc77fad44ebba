"""
Exception types for the telemetry pipeline.

Every failure while acquiring the bike is a SetupError and is fatal to the run.
Unknown frame lengths are not errors at all, see decoder.Unrecognized.
"""


class SpinPanelError(Exception):
    """Base class for all spinpanel errors."""


class SetupError(SpinPanelError):
    """Fatal failure while locating, connecting or subscribing to the bike."""


class AdapterNotFound(SetupError):
    """No usable Bluetooth adapter."""


class DeviceNotFound(SetupError):
    """No peripheral with a matching name showed up within the scan budget."""


class ConnectFailed(SetupError):
    """The GATT connection could not be established."""


class DiscoveryFailed(SetupError):
    """Service/characteristic discovery failed after connecting."""


class CharacteristicNotFound(SetupError):
    """The peripheral does not expose the telemetry characteristic."""


class SubscribeFailed(SetupError):
    """Enabling notifications on the telemetry characteristic failed."""
