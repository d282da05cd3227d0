import logging
import threading
from datetime import datetime, timedelta
from typing import Callable, Optional

from metar_wallpaper.errors import PipelineError

logger = logging.getLogger(__name__)

def next_run_time(now: datetime, interval_minutes: int = 15) -> datetime:
    """Next wall-clock boundary strictly after `now` (e.g. :00, :15, :30, :45)."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    step = timedelta(minutes=interval_minutes)
    return midnight + ((now - midnight) // step + 1) * step

def run_forever(
    job: Callable[[], object],
    interval_minutes: int = 15,
    stop_event: Optional[threading.Event] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> None:
    """Run `job` at every interval boundary until `stop_event` is set.

    A job failing with PipelineError only costs that cycle; the next one is
    attempted at the following boundary.
    """
    stop_event = stop_event or threading.Event()

    while not stop_event.is_set():
        now = clock()
        wait = (next_run_time(now, interval_minutes) - now).total_seconds()
        logger.info(f"⏰ Next update in: {timedelta(seconds=round(wait))}")

        if stop_event.wait(wait):
            break

        try:
            job()
        except PipelineError as e:
            logger.error(f"❌ Update failed, retrying next cycle: {e}")

    logger.info("🛑 Scheduler stopped")
