#!/usr/bin/env python3
"""
Seed the zoo database with demo staff, habitats, animals and visitor records.

Existing data is wiped first. Animals go through the animal service, so
every habitat's occupancy matches the animals placed in it.

Usage:
    python scripts/seed_db.py

Environment Variables:
    MONGO_URI: MongoDB connection string
"""
import asyncio
import logging
import sys
from datetime import datetime, timedelta, timezone

from pymongo.errors import PyMongoError

from zoo_api.config import get_settings
from zoo_api.core.errors import ZooError
from zoo_api.core.logging import configure_logging
from zoo_api.database.connections import (
    close_connections,
    get_auth_db,
    get_mongo_client,
    get_zoo_db,
)
from zoo_api.database.databases import auth_db, zoo_db
from zoo_api.database.indexes import create_indexes
from zoo_api.schemas.animal import AnimalCreate
from zoo_api.schemas.habitat import HabitatCreate
from zoo_api.schemas.staff import StaffCreate
from zoo_api.schemas.visitor import VisitorRecordCreate
from zoo_api.services.animal_service import AnimalService
from zoo_api.services.habitat_service import HabitatService
from zoo_api.services.staff_service import StaffService
from zoo_api.services.visitor_service import VisitorService

logger = logging.getLogger("seed_db")

DEMO_PASSWORD = "password123"

STAFF = [
    {"username": "admin", "email": "admin@zoo.com", "role": "admin"},
    {"username": "john_keeper", "email": "john@zoo.com", "role": "keeper"},
    {"username": "dr_smith", "email": "smith@zoo.com", "role": "veterinarian"},
    {"username": "mary_keeper", "email": "mary@zoo.com", "role": "keeper"},
]

# (name, type, capacity, description, staff username)
HABITATS = [
    ("African Savanna", "outdoor", 15, "Large outdoor habitat for African mammals", "john_keeper"),
    ("Tropical Rainforest", "indoor", 25, "Climate-controlled environment for tropical species", "mary_keeper"),
    ("Arctic Tundra", "outdoor", 8, "Cold climate habitat for polar animals", "john_keeper"),
    ("Reptile House", "indoor", 30, "Temperature-controlled facility for reptiles", "mary_keeper"),
    ("Aviary", "outdoor", 50, "Large flight enclosure for birds", "john_keeper"),
    ("Aquarium", "indoor", 100, "Aquatic environment for fish and marine life", "mary_keeper"),
]

# (name, species, category, age, gender, habitat, keeper username, notes)
ANIMALS = [
    ("Simba", "African Lion", "mammals", 5, "male", "African Savanna", "john_keeper", "Alpha male of the pride"),
    ("Nala", "African Lion", "mammals", 4, "female", "African Savanna", "john_keeper", "Pregnant female"),
    ("Koko", "Western Lowland Gorilla", "mammals", 12, "female", "Tropical Rainforest", "mary_keeper", "Very intelligent, knows sign language"),
    ("Frost", "Polar Bear", "mammals", 8, "male", "Arctic Tundra", "john_keeper", "Loves swimming"),
    ("Slither", "Burmese Python", "reptiles", 3, "female", "Reptile House", "mary_keeper", "Recently shed skin"),
    ("Rainbow", "Scarlet Macaw", "birds", 6, "male", "Aviary", "john_keeper", "Very vocal and colorful"),
    ("Nemo", "Clownfish", "fish", 1, "unknown", "Aquarium", "mary_keeper", "Popular with children"),
]

# (days ago, adult, child, revenue, notes)
VISITS = [
    (3, 150, 75, 3375.00, "Busy weekend day"),
    (2, 200, 100, 4500.00, "School group visit"),
    (1, 80, 40, 1800.00, "Quiet weekday"),
]


async def seed() -> None:
    auth = await get_auth_db()
    zoo = await get_zoo_db()

    await auth[auth_db.Collections.USERS].delete_many({})
    for collection in (
        zoo_db.Collections.ANIMALS,
        zoo_db.Collections.HABITATS,
        zoo_db.Collections.VISITOR_RECORDS,
    ):
        await zoo[collection].delete_many({})
    logger.info("Cleared existing data")

    await create_indexes(await get_mongo_client())

    staff_service = StaffService(auth, zoo)
    staff_ids = {}
    for member in STAFF:
        created = await staff_service.create_staff(
            StaffCreate(password=DEMO_PASSWORD, **member)
        )
        staff_ids[created.username] = created.id
    logger.info(f"Created {len(staff_ids)} staff members")

    habitat_service = HabitatService(zoo, auth)
    habitat_ids = {}
    for name, habitat_type, capacity, description, keeper in HABITATS:
        created = await habitat_service.create_habitat(HabitatCreate(
            name=name,
            type=habitat_type,
            capacity=capacity,
            description=description,
            assigned_staff=[staff_ids[keeper]],
        ))
        habitat_ids[name] = created.id
    logger.info(f"Created {len(habitat_ids)} habitats")

    animal_service = AnimalService(zoo, auth)
    for name, species, category, age, gender, habitat, keeper, notes in ANIMALS:
        await animal_service.create_animal(AnimalCreate(
            name=name,
            species=species,
            category=category,
            age=age,
            gender=gender,
            habitat=habitat_ids[habitat],
            assigned_keeper=staff_ids[keeper],
            notes=notes,
        ))
    logger.info(f"Created {len(ANIMALS)} animals")

    visitor_service = VisitorService(zoo)
    today = datetime.now(timezone.utc).replace(hour=0, minute=0, second=0, microsecond=0)
    for days_ago, adult, child, revenue, notes in VISITS:
        await visitor_service.create_record(VisitorRecordCreate(
            visit_date=today - timedelta(days=days_ago),
            adult_tickets=adult,
            child_tickets=child,
            total_revenue=revenue,
            notes=notes,
        ))
    logger.info(f"Created {len(VISITS)} visitor records")


async def main() -> int:
    configure_logging(get_settings().log_level)
    try:
        await seed()
    except (PyMongoError, ZooError) as e:
        logger.error(f"Error seeding database: {e}")
        return 1
    finally:
        await close_connections()

    logger.info("Database seeded successfully!")
    return 0


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
