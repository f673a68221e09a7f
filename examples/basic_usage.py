"""Basic usage example for the menu order service layer."""

from menuorder.services import MenuService, OwnerService
from menuorder.storage import Database


def main():
    """Build a small menu, then drag the last section to the top."""
    # Initialize database (uses SQLite by default)
    db = Database()

    # Create tables
    db.create_tables()

    with db.session() as session:
        owner = OwnerService(session).get_or_create("example@salon.test", "Example Salon")
        menu = MenuService(session)
        print(f"Owner: {owner.business_name} (ID: {owner.id})")

        # Sections append after the last one when no position is given
        if not menu.get_menu(owner.id):
            hair = menu.create_section(owner.id, "Hair", description="Cuts and color")
            nails = menu.create_section(owner.id, "Nails")
            menu.create_section(owner.id, "Waxing")

            cut = menu.create_service(hair.id, "Haircut", duration_minutes=45, price_cents=4500)
            manicure = menu.create_service(nails.id, "Manicure", duration_minutes=30, price_cents=3000)

            # Package members may live in other sections
            menu.create_package(
                hair.id,
                "Cut & Mani",
                total_price_cents=7000,
                total_duration_minutes=75,
                service_ids=[cut.id, manicure.id],
            )

        sections = menu.get_menu(owner.id)
        print("Before:", [(s.name, s.position) for s in sections])

        # The array index decides the new position
        reordered = [sections[-1]] + sections[:-1]
        result = menu.reorder_sections(
            owner.id,
            [{"id": s.id, "order": rank} for rank, s in enumerate(reordered, start=1)],
        )
        print(f"Updated {len(result.updated)} sections")

        print("After:", [(s.name, s.position) for s in menu.get_menu(owner.id)])
        for section in menu.get_menu(owner.id):
            for package in section.packages:
                print(f"  {section.name} / {package.name}: {package.service_ids}")


if __name__ == "__main__":
    main()
