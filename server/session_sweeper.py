"""Background task that drops abandoned chunked upload sessions."""

import asyncio
import logging

from server.services.upload_manager import UploadManager

logger = logging.getLogger(__name__)


class SessionSweeper:
    """
    Background task that periodically expires idle chunk sessions so their
    buffers are released.
    """

    def __init__(self, manager: UploadManager, ttl_seconds: float, interval_seconds: float):
        """
        Initialize sweeper task.

        Args:
            manager: Upload manager owning the sessions
            ttl_seconds: Idle time after which a session is dropped
            interval_seconds: Time between sweeps
        """
        self.manager = manager
        self.ttl_seconds = ttl_seconds
        self.interval_seconds = interval_seconds
        self._running = False
        self._task = None

    async def start(self) -> None:
        """Start the background sweep task."""
        if self._running:
            logger.warning("Session sweeper already running")
            return

        self._running = True
        self._task = asyncio.create_task(self._run())
        logger.info(
            f"Started session sweeper (ttl: {self.ttl_seconds}s, interval: {self.interval_seconds}s)"
        )

    async def stop(self) -> None:
        """Stop the background sweep task."""
        if not self._running:
            return

        self._running = False
        if self._task:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass

        logger.info("Stopped session sweeper")

    async def _run(self) -> None:
        """Main loop for the sweep task."""
        while self._running:
            try:
                await asyncio.sleep(self.interval_seconds)

                if not self._running:
                    break

                await self.sweep()

            except asyncio.CancelledError:
                break
            except Exception as e:
                logger.error(f"Error in session sweeper: {e}", exc_info=True)

    async def sweep(self) -> int:
        """
        Execute one sweep.

        Returns:
            Number of sessions dropped
        """
        expired = await self.manager.expire_idle_sessions(self.ttl_seconds)
        if expired:
            logger.info(f"Sweep complete: {len(expired)} idle sessions dropped")
        else:
            logger.debug("Sweep complete: no idle sessions")
        return len(expired)
