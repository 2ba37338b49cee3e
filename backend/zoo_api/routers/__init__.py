"""
API Routers module.
"""
from zoo_api.routers import animals, auth, habitats, health, staff, visitors

__all__ = ["animals", "auth", "habitats", "health", "staff", "visitors"]
