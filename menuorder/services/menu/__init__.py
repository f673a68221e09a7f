"""Menu ordering components: validation, two-phase renumbering and the read model."""

from menuorder.services.menu.read_model import (
    MenuReadModel,
    PackageEntry,
    SectionEntry,
    ServiceEntry,
)
from menuorder.services.menu.renumbering import RenumberResult, Renumberer
from menuorder.services.menu.validation import MenuValidator

__all__ = [
    "MenuValidator",
    "Renumberer",
    "RenumberResult",
    "MenuReadModel",
    "SectionEntry",
    "ServiceEntry",
    "PackageEntry",
]
