"""Day/night coordination for the nightlight.

The fixture animates at night and is switched off during the day. A check
runs every ``check_interval``; power-off is sent only on the edge where the
gate turns to daytime, and the light is re-enabled (without a command) on
the edge back to night.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Callable, Optional

import sun_gate
from config import DAYLIGHT_CHECK_INTERVAL
from light_controller import LightController

logger = logging.getLogger(__name__)


class LightPhase(Enum):
    """Whether the animation is running."""
    LIT = "lit"
    SUPPRESSED = "suppressed"


class DayNightCoordinator:
    """Edge-triggered on/off state driven by sunrise and sunset."""

    def __init__(
        self,
        controller: LightController,
        latitude: float,
        longitude: float,
        interval: timedelta = DAYLIGHT_CHECK_INTERVAL,
        is_daytime: Optional[Callable[[datetime, float, float], bool]] = None,
    ):
        self.controller = controller
        self.latitude = latitude
        self.longitude = longitude
        self.interval = interval
        self._is_daytime = is_daytime or sun_gate.is_daytime
        self._phase = LightPhase.LIT
        self.next_check: Optional[datetime] = None

    @property
    def phase(self) -> LightPhase:
        return self._phase

    @property
    def is_suppressed(self) -> bool:
        return self._phase is LightPhase.SUPPRESSED

    async def run_pending(self, now: datetime) -> bool:
        """Run the daylight check if it is due.

        The first check is scheduled one interval after the first call.
        Late checks are not caught up: one evaluation runs and the next is
        scheduled one interval from ``now``.

        Returns:
            True if a check ran
        """
        if self.next_check is None:
            self.next_check = now + self.interval
            return False
        if now < self.next_check:
            return False

        self.next_check = now + self.interval
        await self.evaluate(now)
        return True

    async def evaluate(self, now: datetime) -> Optional[LightPhase]:
        """Apply one gate evaluation at ``now``.

        Returns:
            The new phase if a transition happened, otherwise None
        """
        daytime = self._is_daytime(now, self.latitude, self.longitude)

        if daytime and self._phase is LightPhase.LIT:
            self._phase = LightPhase.SUPPRESSED
            logger.info("Turning off lights")
            await self.controller.send_power_off()
            logger.info("Turned off lights")
            return self._phase

        if not daytime and self._phase is LightPhase.SUPPRESSED:
            self._phase = LightPhase.LIT
            logger.info("Turned on lights!")
            return self._phase

        logger.debug(f"Daylight check at {now.isoformat()}: daytime={daytime}, phase={self._phase.value}")
        return None
