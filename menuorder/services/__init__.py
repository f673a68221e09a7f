"""Service layer for business logic and validation."""

from menuorder.services.menu_service import MenuService
from menuorder.services.owner_service import OwnerService

__all__ = ["MenuService", "OwnerService"]
