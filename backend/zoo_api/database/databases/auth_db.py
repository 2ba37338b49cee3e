"""
Auth database configuration.
Stores staff accounts used for login.
"""

DB_NAME = "auth_db"


class Collections:
    """Collection names in auth_db."""
    USERS = "users"

    INDEXES = {
        "users": [
            {"keys": [("email", 1)], "unique": True},
            {"keys": [("username", 1)], "unique": True},
            {"keys": [("google_id", 1)]},
        ],
    }
