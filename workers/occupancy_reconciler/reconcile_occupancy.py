#!/usr/bin/env python3
"""
Habitat Occupancy Reconciliation Worker

Periodically recounts the animals assigned to every habitat and rewrites
any stored ``current_occupancy`` that has drifted from the real count.
Drift can come from a write that failed halfway through an animal
create/move/delete, or from manual edits to the database.

Usage:
    python reconcile_occupancy.py            # run forever
    python reconcile_occupancy.py --once     # single pass, then exit

Environment Variables:
    MONGO_URI: MongoDB connection string
    RECONCILE_INTERVAL_MINUTES: Minutes between passes (default: 15)
    LOG_LEVEL: Logging level (default: INFO)
"""
import asyncio
import logging
import signal
import sys
from typing import Optional

from motor.motor_asyncio import AsyncIOMotorClient
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict
from pymongo.errors import PyMongoError

from zoo_api.database.databases import zoo_db
from zoo_api.schemas.habitat import ReconcileResponse
from zoo_api.services.occupancy_service import OccupancyCoordinator


# ==================== Configuration ====================

class ReconcileConfig(BaseSettings):
    """Worker configuration from environment."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    # MongoDB
    mongo_uri: str = Field(default="mongodb://mongodb:27017")

    # Schedule
    reconcile_interval_minutes: int = Field(default=15)
    retry_delay_seconds: int = Field(default=60)

    # Logging
    log_level: str = Field(default="INFO")


config = ReconcileConfig()


# ==================== Logging Setup ====================

logging.basicConfig(
    level=getattr(logging, config.log_level.upper()),
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)
logger = logging.getLogger("occupancy_reconciler")


# ==================== Worker ====================

class OccupancyReconcileWorker:
    """Runs occupancy reconciliation on a fixed interval."""

    def __init__(self, interval_minutes: int = config.reconcile_interval_minutes):
        self.interval_seconds = interval_minutes * 60
        self.mongo_client: Optional[AsyncIOMotorClient] = None
        self.coordinator: Optional[OccupancyCoordinator] = None
        self.passes = 0
        self._stop = asyncio.Event()

    async def connect(self, client: Optional[AsyncIOMotorClient] = None):
        """Connect to MongoDB (or adopt an existing client)."""
        self.mongo_client = client or AsyncIOMotorClient(config.mongo_uri)
        await self.mongo_client.admin.command("ping")
        logger.info("Connected to MongoDB")
        self.coordinator = OccupancyCoordinator(self.mongo_client[zoo_db.DB_NAME])

    async def disconnect(self):
        """Disconnect from MongoDB."""
        if self.mongo_client:
            self.mongo_client.close()
            self.mongo_client = None
        logger.info("Disconnected")

    async def reconcile_once(self) -> ReconcileResponse:
        """Run a single reconciliation pass and log a summary."""
        report = await self.coordinator.reconcile()
        self.passes += 1
        logger.info(
            f"Pass {self.passes}: checked={report.checked} corrected={report.corrected} "
            f"skipped={report.skipped} "
            f"over_capacity={report.over_capacity} dangling={report.dangling_animals}"
        )
        return report

    async def run(self):
        """Main worker loop."""
        while not self._stop.is_set():
            delay = self.interval_seconds
            try:
                await self.reconcile_once()
            except PyMongoError as e:
                logger.error(f"Reconciliation pass failed: {e}")
                delay = config.retry_delay_seconds

            try:
                await asyncio.wait_for(self._stop.wait(), timeout=delay)
            except asyncio.TimeoutError:
                continue

    def stop(self):
        """Stop the worker gracefully."""
        logger.info("Stopping worker...")
        self._stop.set()


# ==================== Main Entry Point ====================

async def main(once: bool = False):
    """Main entry point."""
    worker = OccupancyReconcileWorker()

    loop = asyncio.get_running_loop()

    def shutdown_handler(sig):
        logger.info(f"Received signal {sig.name}")
        worker.stop()

    for sig in (signal.SIGINT, signal.SIGTERM):
        loop.add_signal_handler(sig, lambda s=sig: shutdown_handler(s))

    try:
        await worker.connect()
        if once:
            await worker.reconcile_once()
        else:
            await worker.run()
    except PyMongoError as e:
        logger.error(f"Worker error: {e}")
        sys.exit(1)
    finally:
        await worker.disconnect()
        logger.info("Worker shutdown complete")


if __name__ == "__main__":
    logger.info("=" * 60)
    logger.info("Habitat Occupancy Reconciliation Worker")
    logger.info(f"Interval: {config.reconcile_interval_minutes} minutes")
    logger.info("=" * 60)

    asyncio.run(main(once="--once" in sys.argv[1:]))
