#!/usr/bin/env python3
"""BLE nightlight daemon - cycles a fixture's color at night."""

import asyncio
import logging
import os
import sys
from datetime import datetime, timezone
from typing import Awaitable, Callable, Optional

from color_cycle import HueCycle
from config import FixtureConfig, load_config
from day_night import DayNightCoordinator, LightPhase
from light_controller import (
    EndpointNotFound,
    LightController,
    create_light_controller,
)

# Configure logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NightlightClient:
    """Control loop driving a single fixture."""

    def __init__(
        self,
        config: FixtureConfig,
        controller: LightController,
        animator: Optional[HueCycle] = None,
        coordinator: Optional[DayNightCoordinator] = None,
        clock: Callable[[], datetime] = utc_now,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        """Initialize the client.

        Args:
            config: Fixture and location settings
            controller: Connected light controller
            animator: Hue cursor (defaults to one starting at config.start_hue)
            coordinator: Day/night gate (defaults to one for config's location)
            clock: Returns the current time, timezone-aware
            sleep: Coroutine used for the pauses between iterations
        """
        self.config = config
        self.controller = controller
        self.animator = animator or HueCycle(config.start_hue, config.hue_step)
        self.coordinator = coordinator or DayNightCoordinator(
            controller,
            config.latitude,
            config.longitude,
            interval=config.check_interval,
        )
        self.clock = clock
        self.sleep = sleep

    async def run_once(self) -> LightPhase:
        """Run one loop iteration and return the phase it acted on."""
        # Any transition (and its power-off write) completes before the phase is read
        await self.coordinator.run_pending(self.clock())

        phase = self.coordinator.phase
        if phase is LightPhase.LIT:
            r, g, b = self.animator.tick()
            await self.controller.send_color(r, g, b)
            await self.sleep(self.config.cycle_interval)
        else:
            await self.sleep(self.config.idle_interval)
        return phase

    async def run(self):
        """Run the control loop until cancelled."""
        logger.info(
            f"Starting color cycle at hue {self.animator.hue:.1f}° "
            f"(daylight check every {int(self.config.check_interval.total_seconds())}s)"
        )
        try:
            while True:
                await self.run_once()
        finally:
            await self.controller.disconnect()


async def start(config: FixtureConfig):
    """Connect to the fixture and run the control loop."""
    controller = await create_light_controller(config)
    logger.info("✓ Light ready")
    client = NightlightClient(config, controller)
    await client.run()


def main():
    """Main entry point."""
    try:
        config = load_config()
    except ValueError as e:
        logger.error(f"Invalid configuration: {e}")
        sys.exit(1)

    logger.info(
        f"Using location {config.latitude:.6f}, {config.longitude:.6f}; "
        f"looking for devices named '*{config.name_filter}*'"
    )

    try:
        asyncio.run(start(config))
    except (ConnectionError, EndpointNotFound) as e:
        logger.error(f"Startup failed: {e}")
        sys.exit(1)
    except KeyboardInterrupt:
        logger.info("Shutting down...")


if __name__ == "__main__":
    main()
