"""Menu serialization for HTTP responses."""

from typing import Any

from menuorder.models.owner import Owner
from menuorder.services.menu.read_model import PackageEntry, SectionEntry, ServiceEntry


def cents_to_dollars(cents: int) -> float:
    """Convert integer cents to a dollar amount with two decimals."""
    return round(cents / 100.0, 2)


def serialize_service(service: ServiceEntry) -> dict[str, Any]:
    return {
        "id": service.id,
        "name": service.name,
        "description": service.description,
        "duration": service.duration_minutes,
        "price": cents_to_dollars(service.price_cents),
        "order": service.position,
    }


def serialize_package(package: PackageEntry) -> dict[str, Any]:
    return {
        "id": package.id,
        "name": package.name,
        "description": package.description,
        "totalPrice": cents_to_dollars(package.total_price_cents),
        "duration": package.total_duration_minutes,
        "order": package.position,
        "services": list(package.service_ids),
    }


def serialize_section(section: SectionEntry) -> dict[str, Any]:
    """
    Serialize a section with its nested services and packages.

    Args:
        section: Section entry from the menu read model

    Returns:
        Dictionary in the shape the mobile client renders
    """
    return {
        "id": section.id,
        "name": section.name,
        "description": section.description,
        "order": section.position,
        "services": [serialize_service(service) for service in section.services],
        "packages": [serialize_package(package) for package in section.packages],
    }


def serialize_owner(owner: Owner) -> dict[str, Any]:
    return {
        "id": owner.id,
        "email": owner.email,
        "business_name": owner.business_name,
    }
