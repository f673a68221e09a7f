"""Tests for the demo menu seed."""

import pytest

pytestmark = pytest.mark.unit

from menuorder.seed import DEMO_EMAIL, DEMO_PACKAGES, DEMO_SECTIONS, seed_demo_menu
from menuorder.services.menu_service import MenuService


def test_seed_builds_ordered_menu(temp_db):
    with temp_db.session() as session:
        owner = seed_demo_menu(session)
        assert owner.email == DEMO_EMAIL

        menu = MenuService(session).get_menu(owner.id)

    assert [section.name for section in menu] == [name for name, _, _ in DEMO_SECTIONS]
    assert [section.position for section in menu] == [1, 2, 3]
    for section, (_, _, services) in zip(menu, DEMO_SECTIONS):
        assert [service.name for service in section.services] == [name for name, _, _, _ in services]
        assert [service.position for service in section.services] == [1, 2, 3, 4]
    assert sum(len(section.packages) for section in menu) == len(DEMO_PACKAGES)

    by_id = {service.id: service.name for section in menu for service in section.services}
    bridal = menu[0].packages[0]
    assert bridal.name == "Bridal Glam Package"
    assert sorted(by_id[service_id] for service_id in bridal.service_ids) == [
        "Hair Treatment",
        "Haircut & Style",
    ]


def test_seed_is_idempotent(temp_db):
    with temp_db.session() as session:
        first_id = seed_demo_menu(session).id
    with temp_db.session() as session:
        second = seed_demo_menu(session)
        assert second.id == first_id
        assert len(MenuService(session).get_menu(second.id)) == len(DEMO_SECTIONS)
