"""
Enumerations used by animal records.
"""
from enum import Enum


class AnimalCategory(str, Enum):
    MAMMALS = "mammals"
    BIRDS = "birds"
    REPTILES = "reptiles"
    AMPHIBIANS = "amphibians"
    FISH = "fish"
    INVERTEBRATES = "invertebrates"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    UNKNOWN = "unknown"


class HealthStatus(str, Enum):
    HEALTHY = "healthy"
    SICK = "sick"
    INJURED = "injured"
    QUARANTINE = "quarantine"
