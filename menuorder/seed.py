"""Load the demo salon menu.

Usage:
    python -m menuorder.seed            # uses DATABASE_URL
"""

import logging

from sqlalchemy.orm import Session

from menuorder.config import get_settings
from menuorder.logging_config import setup_logging
from menuorder.models.owner import Owner
from menuorder.services.menu_service import MenuService
from menuorder.services.owner_service import OwnerService
from menuorder.storage.database import get_db

logger = logging.getLogger(__name__)

DEMO_EMAIL = "demo@bbysalon.com"
DEMO_BUSINESS_NAME = "BBY Beauty Salon"

# (name, description, [(service name, description, minutes, cents)])
DEMO_SECTIONS = [
    (
        "Hair Services",
        "Professional hair styling and treatments",
        [
            ("Haircut & Style", "Professional haircut with styling and blowout", 60, 7500),
            ("Hair Color", "Full hair coloring service", 120, 15000),
            ("Highlights", "Partial or full highlights", 90, 12000),
            ("Hair Treatment", "Deep conditioning and repair treatment", 45, 6500),
        ],
    ),
    (
        "Facial Treatments",
        "Rejuvenating facial care services",
        [
            ("Classic Facial", "Deep cleansing and moisturizing facial", 60, 8500),
            ("Anti-Aging Facial", "Advanced anti-aging treatment", 75, 11000),
            ("Acne Treatment", "Specialized acne clearing facial", 45, 7000),
            ("Hydrating Facial", "Intensive hydration treatment", 60, 9000),
        ],
    ),
    (
        "Nail Care",
        "Beautiful nails with professional care",
        [
            ("Manicure", "Classic manicure with polish", 45, 3500),
            ("Pedicure", "Relaxing pedicure treatment", 60, 4500),
            ("Gel Manicure", "Long-lasting gel polish", 60, 5000),
            ("Nail Art", "Creative nail design", 30, 2500),
        ],
    ),
]

# (section name, package name, description, cents, minutes, [service names])
DEMO_PACKAGES = [
    ("Hair Services", "Bridal Glam Package", "Complete bridal hair styling package", 20000, 105,
     ["Haircut & Style", "Hair Treatment"]),
    ("Hair Services", "Color & Style Combo", "Hair coloring with styling service", 19000, 180,
     ["Hair Color", "Haircut & Style"]),
    ("Facial Treatments", "Glow & Hydrate Package", "Facial treatment with hydration boost", 15000, 120,
     ["Classic Facial", "Hydrating Facial"]),
    ("Nail Care", "Hand & Foot Combo", "Manicure and pedicure together", 7000, 105,
     ["Manicure", "Pedicure"]),
]


def seed_demo_menu(session: Session) -> Owner:
    """
    Create the demo owner and its menu.

    Does nothing beyond returning the owner if the demo owner already has sections.

    Args:
        session: SQLAlchemy database session

    Returns:
        The demo owner
    """
    owner = OwnerService(session).get_or_create(DEMO_EMAIL, DEMO_BUSINESS_NAME)
    menu = MenuService(session)

    if menu.section_repo.list_active(owner.id):
        logger.info("Demo menu already present for %s", owner.id)
        return owner

    section_ids = {}
    service_ids = {}
    for position, (name, description, services) in enumerate(DEMO_SECTIONS, start=1):
        section = menu.create_section(owner.id, name, position=position, description=description)
        section_ids[name] = section.id
        for service_position, (service_name, service_description, minutes, cents) in enumerate(
            services, start=1
        ):
            service = menu.create_service(
                section.id,
                service_name,
                duration_minutes=minutes,
                price_cents=cents,
                position=service_position,
                description=service_description,
            )
            service_ids[service_name] = service.id

    for section_name, name, description, cents, minutes, members in DEMO_PACKAGES:
        menu.create_package(
            section_ids[section_name],
            name,
            total_price_cents=cents,
            total_duration_minutes=minutes,
            service_ids=[service_ids[member] for member in members],
            description=description,
        )

    logger.info("Seeded demo menu for owner %s", owner.id)
    return owner


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = get_db()
    db.create_tables()
    with db.session() as session:
        owner = seed_demo_menu(session)
        logger.info("Demo owner id: %s", owner.id)


if __name__ == "__main__":
    main()
