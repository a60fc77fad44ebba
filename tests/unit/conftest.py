"""Stand-ins for the bleak scanner and client."""

import io
from types import SimpleNamespace

import pytest
from bleak.exc import BleakError
from rich.console import Console

from spinpanel.core import INDOOR_BIKE_DATA_UUID


def make_device(name, address="AA:BB:CC:DD:EE:FF"):
    return SimpleNamespace(name=name, address=address)


class FakeScanner:
    """Serves a scripted list of discovered devices per scan pass."""

    def __init__(self, passes, fail_start=False, fail_stop=False):
        self._passes = list(passes)
        self.fail_start = fail_start
        self.fail_stop = fail_stop
        self.started = False
        self.stopped = False
        self.reads = 0

    async def start(self):
        if self.fail_start:
            raise BleakError("Bluetooth device is turned off")
        self.started = True

    async def stop(self):
        self.stopped = True
        if self.fail_stop:
            raise OSError("adapter removed")

    @property
    def discovered_devices(self):
        index = min(self.reads, len(self._passes) - 1)
        self.reads += 1
        return self._passes[index] if self._passes else []


class FakeServices:
    def __init__(self, uuids):
        self._chars = {uuid: SimpleNamespace(uuid=uuid) for uuid in uuids}

    def get_characteristic(self, uuid):
        return self._chars.get(uuid)


class FakeClient:
    """Records calls and lets tests push notifications."""

    def __init__(
        self,
        device,
        disconnected_callback=None,
        uuids=(INDOOR_BIKE_DATA_UUID,),
        fail_on=None,
        script=(),
    ):
        self.device = device
        self.disconnected_callback = disconnected_callback
        self._uuids = uuids
        self.fail_on = fail_on
        self.script = list(script)
        self.calls = []
        self.is_connected = False
        self._notify_callback = None

    async def connect(self):
        self.calls.append("connect")
        if self.fail_on == "connect":
            raise BleakError("Device with address not found")
        self.is_connected = True

    @property
    def services(self):
        self.calls.append("services")
        if self.fail_on == "services":
            raise BleakError("Service Discovery has not been performed yet")
        return FakeServices(self._uuids)

    async def start_notify(self, characteristic, callback):
        self.calls.append("start_notify")
        if self.fail_on == "start_notify":
            raise BleakError("Notify not supported")
        self._notify_callback = callback
        if self.script:
            for data in self.script:
                self.push(data)
            self.drop_link()

    async def stop_notify(self, characteristic):
        self.calls.append("stop_notify")

    async def disconnect(self):
        self.calls.append("disconnect")
        self.is_connected = False

    def push(self, data):
        self._notify_callback(None, bytearray(data))

    def drop_link(self):
        self.is_connected = False
        self.disconnected_callback(self)


@pytest.fixture
def fake_device():
    return make_device


@pytest.fixture
def fake_scanner():
    return FakeScanner


@pytest.fixture
def client_factory():
    """Builds FakeClients and remembers the last one."""

    class Factory:
        def __init__(self):
            self.options = {}
            self.client = None

        def configure(self, **options):
            self.options = options
            return self

        def __call__(self, device, disconnected_callback=None):
            self.client = FakeClient(
                device, disconnected_callback=disconnected_callback, **self.options
            )
            return self.client

    return Factory()


class BrokenTerminal(io.StringIO):
    """Output stream that fails on every write."""

    def write(self, text):
        raise OSError("terminal gone")


@pytest.fixture
def broken_console():
    return Console(file=BrokenTerminal(), width=80)
