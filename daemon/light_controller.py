"""
Light controller module for the BLE nightlight fixture.
Handles discovery, connection and the two-command wire protocol.
"""

import asyncio
import logging
from abc import ABC, abstractmethod

from bleak import BleakClient, BleakScanner
from bleak.backends.characteristic import BleakGATTCharacteristic
from bleak.backends.device import BLEDevice
from bleak.exc import BleakError
from bleak_retry_connector import establish_connection

from config import FixtureConfig, MAGIC_NUMBER

logger = logging.getLogger(__name__)

OPCODE_POWER_OFF = 0x01
OPCODE_COLOR = 0x02

CONNECT_ATTEMPTS = 3


class FixtureNotFound(ConnectionError):
    """No advertising device matched the name filter within the scan window."""


class FixtureConnectionError(ConnectionError):
    """The adapter or the BLE connection to the fixture failed."""


class EndpointNotFound(LookupError):
    """The command characteristic is missing after service discovery."""


def build_color_frame(r: int, g: int, b: int, magic: int = MAGIC_NUMBER) -> bytes:
    """Color command: [magic, 0x02, R, G, B]."""
    for channel in (r, g, b):
        if not 0 <= channel <= 255:
            raise ValueError(f"Color channel out of range: {channel}")
    return bytes((magic, OPCODE_COLOR, r, g, b))


def build_power_off_frame(magic: int = MAGIC_NUMBER) -> bytes:
    """Power-off command: [magic, 0x01]."""
    return bytes((magic, OPCODE_POWER_OFF))


class LightController(ABC):
    """Abstract base class for fixture controllers.

    Subclasses provide the transport through ``write_frame``; the command
    helpers here encode frames and deliberately discard transport failures.
    A dropped power-off frame is not retried.
    """

    def __init__(self, config: FixtureConfig):
        self.config = config

    @abstractmethod
    async def write_frame(self, frame: bytes) -> bool:
        """Send one frame without waiting for a response.

        Returns False on a transport error instead of raising.
        """

    async def send_color(self, r: int, g: int, b: int) -> bool:
        frame = build_color_frame(r, g, b, self.config.magic)
        ok = await self.write_frame(frame)
        if not ok:
            logger.debug(f"Dropped color frame {frame.hex()}")
        return ok

    async def send_power_off(self) -> bool:
        frame = build_power_off_frame(self.config.magic)
        ok = await self.write_frame(frame)
        if not ok:
            logger.debug(f"Dropped power-off frame {frame.hex()}")
        return ok

    async def disconnect(self) -> None:
        """Release the transport (no-op by default)."""


class BleLightController(LightController):
    """Controller writing frames to the fixture over a bleak connection."""

    def __init__(
        self,
        config: FixtureConfig,
        client: BleakClient,
        characteristic: BleakGATTCharacteristic,
    ):
        super().__init__(config)
        self.client = client
        self.characteristic = characteristic
        self._lock = asyncio.Lock()

    async def write_frame(self, frame: bytes) -> bool:
        async with self._lock:
            try:
                await self.client.write_gatt_char(self.characteristic, frame, response=False)
                return True
            except (BleakError, asyncio.TimeoutError, EOFError) as e:
                logger.debug(f"Write failed: {e!r}")
                return False

    async def disconnect(self) -> None:
        try:
            await self.client.disconnect()
            logger.info("Disconnected from light")
        except BleakError as e:
            logger.warning(f"Error while disconnecting: {e}")


async def discover_fixture(config: FixtureConfig) -> BLEDevice:
    """Scan for ``scan_timeout`` seconds and return the first matching device."""
    logger.info(f"Starting scan for BLE devices ({config.scan_timeout:.1f}s)")
    try:
        devices = await BleakScanner.discover(timeout=config.scan_timeout)
    except (BleakError, OSError) as e:
        raise FixtureConnectionError(f"Unable to scan for devices: {e}") from e

    for device in devices:
        if device.name and config.name_filter in device.name:
            logger.info(f"Found light: {device.name} ({device.address})")
            return device

    raise FixtureNotFound(
        f"No device with '{config.name_filter}' in its name found among {len(devices)} devices"
    )


async def connect(config: FixtureConfig) -> BleakClient:
    """Discover the fixture and open a connection to it.

    Raises:
        FixtureNotFound: No matching device advertised within the scan window
        FixtureConnectionError: The adapter or the connection failed
    """
    device = await discover_fixture(config)
    try:
        client = await establish_connection(
            BleakClient,
            device,
            device.name or device.address,
            max_attempts=CONNECT_ATTEMPTS,
        )
    except (BleakError, asyncio.TimeoutError) as e:
        raise FixtureConnectionError(f"Connection to {device.address} failed: {e}") from e

    logger.info("Connected to light")
    return client


def resolve_command_endpoint(client: BleakClient, uuid: str) -> BleakGATTCharacteristic:
    """Look up the command characteristic on a connected client.

    Raises:
        EndpointNotFound: If the characteristic is absent
    """
    characteristic = client.services.get_characteristic(uuid)
    if characteristic is None:
        raise EndpointNotFound(f"Unable to find characteristic {uuid}")
    logger.info(f"Found characteristic: {uuid}")
    return characteristic


async def create_light_controller(config: FixtureConfig) -> BleLightController:
    """Connect to the fixture and return a ready controller."""
    client = await connect(config)
    try:
        characteristic = resolve_command_endpoint(client, config.characteristic_uuid)
    except EndpointNotFound:
        await client.disconnect()
        raise
    return BleLightController(config, client, characteristic)
