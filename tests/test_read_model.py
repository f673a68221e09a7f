"""Tests for the ordered menu snapshot."""

import uuid

import pytest

pytestmark = pytest.mark.unit

from menuorder.services.menu.read_model import MenuReadModel, SectionEntry
from menuorder.storage.repositories import (
    PackageRepository,
    SectionRepository,
    ServiceRepository,
)


@pytest.fixture
def read_model(db_session):
    return MenuReadModel(
        SectionRepository(db_session),
        ServiceRepository(db_session),
        PackageRepository(db_session),
    )


def test_unknown_owner_has_empty_menu(read_model):
    assert read_model.build(str(uuid.uuid4())) == []


def test_nested_collections_in_position_order(read_model, sample_menu):
    menu = read_model.build(sample_menu.owner_id)

    assert [section.name for section in menu] == ["X", "Y", "Z"]
    assert all(isinstance(section, SectionEntry) for section in menu)

    first = menu[0]
    assert [service.id for service in first.services] == sample_menu.service_ids
    assert [service.position for service in first.services] == [1, 2, 3]
    assert [package.id for package in first.packages] == sample_menu.package_ids
    assert sorted(first.packages[0].service_ids) == sorted(sample_menu.service_ids[:2])

    assert menu[1].services == []
    assert menu[1].packages == []


def test_reflects_reorder(temp_db, menu_service, sample_menu):
    desired = [sample_menu.service_ids[i] for i in (2, 0, 1)]
    menu_service.reorder_services(
        sample_menu.section_ids[0],
        [{"id": service_id, "order": rank} for rank, service_id in enumerate(desired, start=1)],
    )

    menu = menu_service.get_menu(sample_menu.owner_id)
    assert [service.id for service in menu[0].services] == desired


def test_inactive_rows_hidden(menu_service, sample_menu):
    menu_service.delete_section(sample_menu.section_ids[1])
    menu_service.delete_package(sample_menu.package_ids[0])

    menu = menu_service.get_menu(sample_menu.owner_id)

    assert [section.name for section in menu] == ["X", "Z"]
    assert [section.position for section in menu] == [1, 3]
    assert [package.id for package in menu[0].packages] == [sample_menu.package_ids[1]]


def test_package_members_across_sections(menu_service, sample_menu):
    """A package lists members from other sections and each section lists only its own services."""
    nails = menu_service.create_service(
        sample_menu.section_ids[1], "Manicure", duration_minutes=45, price_cents=3500
    )
    menu_service.create_package(
        sample_menu.section_ids[2],
        "Hand & Hair",
        total_price_cents=6000,
        total_duration_minutes=75,
        service_ids=[nails.id, sample_menu.service_ids[0]],
    )

    menu = menu_service.get_menu(sample_menu.owner_id)
    by_name = {section.name: section for section in menu}

    assert [service.name for service in by_name["Y"].services] == ["Manicure"]
    assert by_name["Z"].services == []
    assert [package.name for package in by_name["Z"].packages] == ["Hand & Hair"]
    assert set(by_name["Z"].packages[0].service_ids) == {nails.id, sample_menu.service_ids[0]}
