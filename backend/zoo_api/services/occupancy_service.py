"""
Habitat occupancy coordination.

Every habitat stores ``current_occupancy`` next to its ``capacity``. The
stored counter must equal the number of animals whose ``habitat`` field
references the habitat and must never exceed the capacity. The counter is
maintained incrementally by the animal service through this coordinator:

- ``reserve_slot`` increments only while there is room (conditional update,
  so two concurrent requests cannot both take the last slot)
- ``release_slot`` decrements only while the counter is positive
- ``reconcile`` recomputes counters from the animal collection and is
  the recovery path for any drift (partial writes, manual edits)
"""
import asyncio
import logging
from datetime import datetime, timezone

from bson import ObjectId
from motor.motor_asyncio import AsyncIOMotorDatabase

from zoo_api.config import get_settings
from zoo_api.core.errors import CapacityExceeded, ReferenceNotFound
from zoo_api.database.databases import zoo_db
from zoo_api.schemas.habitat import HabitatOccupancyReport, ReconcileResponse

logger = logging.getLogger(__name__)


class OccupancyCoordinator:
    """Keeps habitat occupancy counters in step with animal assignments."""

    def __init__(self, db: AsyncIOMotorDatabase):
        """Initialize with the zoo database."""
        self.habitats = db[zoo_db.Collections.HABITATS]
        self.animals = db[zoo_db.Collections.ANIMALS]
        self.settings = get_settings()

    async def reserve_slot(self, habitat_id: ObjectId, label: str = "Habitat") -> None:
        """
        Take one slot in a habitat.

        Args:
            habitat_id: Habitat to occupy
            label: Noun used in error messages ("Habitat", "New habitat")

        Raises:
            ReferenceNotFound: If the habitat does not exist
            CapacityExceeded: If the habitat has no free slot
        """
        attempts = max(1, self.settings.occupancy_reserve_attempts)

        for attempt in range(1, attempts + 1):
            habitat = await self.habitats.find_one(
                {"_id": habitat_id},
                {"capacity": 1, "current_occupancy": 1},
            )
            if habitat is None:
                raise ReferenceNotFound(f"{label} not found")

            capacity = habitat.get("capacity", 0)
            if habitat.get("current_occupancy", 0) >= capacity:
                raise CapacityExceeded(f"{label} is at full capacity")

            # Increment only if capacity is unchanged and a slot is still free
            result = await self.habitats.update_one(
                {
                    "_id": habitat_id,
                    "capacity": capacity,
                    "current_occupancy": {"$lt": capacity},
                },
                {
                    "$inc": {"current_occupancy": 1},
                    "$set": {"updated_at": datetime.now(timezone.utc)},
                },
            )
            if result.modified_count == 1:
                logger.debug(f"Reserved slot in habitat {habitat_id}")
                return

            logger.debug(
                f"Slot reservation in habitat {habitat_id} lost a race "
                f"(attempt {attempt}/{attempts})"
            )

        raise CapacityExceeded(f"{label} is at full capacity")

    async def release_slot(self, habitat_id: ObjectId) -> bool:
        """
        Give back one slot in a habitat.

        The counter is never taken below zero. A release that finds the
        counter already at zero (or the habitat gone) means the stored value
        has drifted; it is logged and left for reconciliation.

        Returns:
            True if the counter was decremented
        """
        result = await self.habitats.update_one(
            {"_id": habitat_id, "current_occupancy": {"$gt": 0}},
            {
                "$inc": {"current_occupancy": -1},
                "$set": {"updated_at": datetime.now(timezone.utc)},
            },
        )
        if result.modified_count == 1:
            logger.debug(f"Released slot in habitat {habitat_id}")
            return True

        habitat = await self.habitats.find_one({"_id": habitat_id}, {"_id": 1})
        if habitat is None:
            logger.warning(f"Habitat {habitat_id} no longer exists; occupancy release skipped")
        else:
            logger.warning(
                f"Habitat {habitat_id} occupancy already at zero; "
                "counter has drifted, run reconciliation"
            )
        return False

    async def count_animals(self, habitat_id: ObjectId) -> int:
        """Number of animals currently referencing a habitat."""
        return await self.animals.count_documents({"habitat": habitat_id})

    async def reconcile(self) -> ReconcileResponse:
        """
        Recompute every habitat's occupancy from the animal collection.

        Two snapshots of (stored counter, referencing animals) are taken a
        short settle interval apart. A habitat is corrected only when both
        snapshots agree on a mismatch, and the write is conditional on the
        counter still holding the value that was read. A create or delete in
        flight moves the counter or the count between snapshots, so its
        habitat is skipped and left for the next run instead of having its
        reservation erased.

        Habitats holding more animals than their capacity and animals that
        point to a missing habitat are reported, not changed.
        """
        first = await self._snapshot()
        await asyncio.sleep(max(0.0, self.settings.occupancy_reconcile_settle_seconds))
        second = await self._snapshot()

        reports: list[HabitatOccupancyReport] = []
        corrected = 0
        skipped = 0
        over_capacity = 0

        for habitat_id, habitat in second["habitats"].items():
            recorded = habitat.get("current_occupancy", 0)
            actual = second["counts"].get(habitat_id, 0)
            capacity = habitat.get("capacity", 0)

            earlier = first["habitats"].get(habitat_id)
            settled = (
                earlier is not None
                and earlier.get("current_occupancy", 0) == recorded
                and first["counts"].get(habitat_id, 0) == actual
            )

            was_corrected = False
            was_skipped = False
            if recorded != actual:
                if settled:
                    was_corrected = await self._correct(habitat_id, recorded, actual)
                was_skipped = not was_corrected

            if was_corrected:
                corrected += 1
                logger.warning(
                    f"Habitat {habitat_id} occupancy corrected: {recorded} -> {actual}"
                )
            elif was_skipped:
                skipped += 1
                logger.info(
                    f"Habitat {habitat_id} occupancy changed during reconciliation; "
                    "left for the next run"
                )

            is_over = actual > capacity
            if is_over:
                over_capacity += 1
                logger.warning(
                    f"Habitat {habitat_id} holds {actual} animals but capacity is {capacity}"
                )

            reports.append(HabitatOccupancyReport(
                habitat_id=str(habitat_id),
                name=habitat.get("name", ""),
                capacity=capacity,
                recorded_occupancy=recorded,
                actual_occupancy=actual,
                corrected=was_corrected,
                skipped=was_skipped,
                over_capacity=is_over,
            ))

        # Whatever is left references habitats that no longer exist
        missing = {
            habitat_id: count
            for habitat_id, count in second["counts"].items()
            if habitat_id not in second["habitats"]
        }
        dangling = sum(missing.values())
        if dangling:
            logger.warning(
                f"{dangling} animal(s) reference missing habitats: "
                f"{', '.join(str(k) for k in missing)}"
            )

        return ReconcileResponse(
            checked=len(reports),
            corrected=corrected,
            skipped=skipped,
            over_capacity=over_capacity,
            dangling_animals=dangling,
            habitats=reports,
        )

    async def _snapshot(self) -> dict:
        """Stored counters first, then the animal counts they should match."""
        habitats_cursor = self.habitats.find(
            {}, {"name": 1, "capacity": 1, "current_occupancy": 1}
        )
        habitats = {h["_id"]: h for h in await habitats_cursor.to_list(length=None)}

        pipeline = [
            {"$match": {"habitat": {"$ne": None}}},
            {"$group": {"_id": "$habitat", "count": {"$sum": 1}}},
        ]
        cursor = self.animals.aggregate(pipeline)
        counts = {row["_id"]: row["count"] for row in await cursor.to_list(length=None)}
        return {"habitats": habitats, "counts": counts}

    async def _correct(self, habitat_id: ObjectId, recorded: int, actual: int) -> bool:
        """Overwrite the counter only if it still holds the value that was read."""
        result = await self.habitats.update_one(
            {"_id": habitat_id, "current_occupancy": recorded},
            {
                "$set": {
                    "current_occupancy": actual,
                    "updated_at": datetime.now(timezone.utc),
                }
            },
        )
        return result.modified_count == 1
