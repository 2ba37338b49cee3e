"""
Zoo database configuration.

Structure:
- animals: animal records, each optionally referencing a habitat and a keeper
- habitats: enclosures with capacity and stored current_occupancy
- visitor_records: daily ticket and revenue tallies
"""

DB_NAME = "zoo_db"


class Collections:
    """Collection names in zoo_db."""
    ANIMALS = "animals"
    HABITATS = "habitats"
    VISITOR_RECORDS = "visitor_records"

    INDEXES = {
        "animals": [
            {"keys": [("habitat", 1)]},
            {"keys": [("assigned_keeper", 1)]},
            {"keys": [("category", 1)]},
        ],
        "habitats": [
            {"keys": [("name", 1)]},
            {"keys": [("assigned_staff", 1)]},
        ],
        "visitor_records": [
            {"keys": [("visit_date", -1)]},
        ],
    }
