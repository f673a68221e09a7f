"""Storage layer for the menu order service."""

from menuorder.storage.database import Database, get_db
from menuorder.storage.repositories import (
    OrderedRepository,
    OwnerRepository,
    PackageRepository,
    SectionRepository,
    ServiceRepository,
)

__all__ = [
    "Database",
    "get_db",
    "OwnerRepository",
    "OrderedRepository",
    "SectionRepository",
    "ServiceRepository",
    "PackageRepository",
]
