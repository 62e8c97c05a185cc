"""Runtime configuration for the BLE nightlight daemon.

Everything the daemon needs to know about its fixture and location is
collected into a single immutable ``FixtureConfig`` that is built once at
startup (from environment variables) and handed to each component.
"""

import logging
import os
from dataclasses import dataclass, field
from datetime import timedelta
from typing import Optional

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

DEFAULT_LATITUDE = 47.552922
DEFAULT_LONGITUDE = 19.254477

# Substring matched against advertised BLE names during discovery
DEFAULT_NAME_FILTER = "Light"

# 16-bit 0x1001 expanded on the Bluetooth base UUID
LIGHT_CHARACTERISTIC_UUID = "00001001-0000-1000-8000-00805f9b34fb"

MAGIC_NUMBER = 0x3C

DEFAULT_SCAN_TIMEOUT = 2.0       # seconds
DEFAULT_CYCLE_INTERVAL_MS = 10   # animation cadence while lit
DEFAULT_IDLE_INTERVAL = 60.0     # seconds between wake-ups while suppressed

# Fixed daylight re-check cadence, not configurable
DAYLIGHT_CHECK_INTERVAL = timedelta(minutes=2)

DEFAULT_START_HUE = 1.0
DEFAULT_HUE_STEP = 1.0


@dataclass(frozen=True)
class FixtureConfig:
    """Immutable settings injected into the daemon components."""
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    name_filter: str = DEFAULT_NAME_FILTER
    characteristic_uuid: str = LIGHT_CHARACTERISTIC_UUID
    magic: int = MAGIC_NUMBER
    scan_timeout: float = DEFAULT_SCAN_TIMEOUT
    cycle_interval: float = DEFAULT_CYCLE_INTERVAL_MS / 1000.0
    idle_interval: float = DEFAULT_IDLE_INTERVAL
    check_interval: timedelta = field(default=DAYLIGHT_CHECK_INTERVAL)
    start_hue: float = DEFAULT_START_HUE
    hue_step: float = DEFAULT_HUE_STEP

    def __post_init__(self):
        if not -90.0 <= self.latitude <= 90.0:
            raise ValueError(f"Latitude out of range: {self.latitude}")
        if not -180.0 <= self.longitude <= 180.0:
            raise ValueError(f"Longitude out of range: {self.longitude}")
        if not 0 <= self.magic <= 0xFF:
            raise ValueError(f"Magic byte out of range: {self.magic}")
        if self.scan_timeout <= 0 or self.cycle_interval <= 0 or self.idle_interval <= 0:
            raise ValueError("Scan timeout and loop intervals must be positive")
        if self.check_interval <= timedelta(0):
            raise ValueError("Daylight check interval must be positive")
        if not self.name_filter:
            raise ValueError("Device name filter must not be empty")


def _env_float(names, default: float) -> float:
    """Read the first set env var in ``names`` as a float."""
    for name in names:
        raw = os.getenv(name, "").strip()
        if raw:
            try:
                return float(raw)
            except ValueError:
                raise ValueError(f"{name} must be numeric, got '{raw}'") from None
    return default


def load_config(overrides: Optional[dict] = None) -> FixtureConfig:
    """Build the daemon configuration from environment variables.

    Supported variables:
        LATITUDE / HASS_LATITUDE, LONGITUDE / HASS_LONGITUDE,
        LIGHT_NAME_FILTER, SCAN_TIMEOUT, CYCLE_INTERVAL_MS, IDLE_INTERVAL

    Args:
        overrides: Optional field values that take precedence over the env

    Raises:
        ValueError: If a value is malformed or out of range
    """
    values = {
        "latitude": _env_float(("LATITUDE", "HASS_LATITUDE"), DEFAULT_LATITUDE),
        "longitude": _env_float(("LONGITUDE", "HASS_LONGITUDE"), DEFAULT_LONGITUDE),
        "name_filter": os.getenv("LIGHT_NAME_FILTER", DEFAULT_NAME_FILTER),
        "scan_timeout": _env_float(("SCAN_TIMEOUT",), DEFAULT_SCAN_TIMEOUT),
        "cycle_interval": _env_float(("CYCLE_INTERVAL_MS",), DEFAULT_CYCLE_INTERVAL_MS) / 1000.0,
        "idle_interval": _env_float(("IDLE_INTERVAL",), DEFAULT_IDLE_INTERVAL),
    }
    if overrides:
        values.update(overrides)

    config = FixtureConfig(**values)
    logger.debug(f"Loaded configuration: {config}")
    return config
