"""Tests for two-phase renumbering within a parent scope."""

import logging
import uuid

import pytest

pytestmark = pytest.mark.unit

from menuorder.exceptions import ConstraintViolationError
from menuorder.models.package import Package
from menuorder.models.section import Section
from menuorder.models.service import Service
from menuorder.services.menu.renumbering import Renumberer, RenumberResult
from menuorder.storage.repositories import (
    PackageRepository,
    SectionRepository,
    ServiceRepository,
)


class TestDisplacementOffset:
    """Tests for choosing the displacement band."""

    def test_floor_applies_to_small_menus(self, temp_db, sample_menu):
        with temp_db.session() as session:
            renumberer = Renumberer(session, SectionRepository(session))
            assert renumberer.displacement_offset(sample_menu.owner_id, 3) == 1000

    def test_band_clears_high_positions(self, temp_db, sample_menu):
        with temp_db.session() as session:
            repo = SectionRepository(session)
            repo.set_position(sample_menu.section_ids[2], sample_menu.owner_id, 5000)
            renumberer = Renumberer(session, repo)
            assert renumberer.displacement_offset(sample_menu.owner_id, 3) == 5004

    def test_inactive_rows_count_toward_band(self, temp_db, sample_menu):
        with temp_db.session() as session:
            repo = SectionRepository(session)
            repo.set_position(sample_menu.section_ids[2], sample_menu.owner_id, 2000)
            repo.deactivate(sample_menu.section_ids[2])
            renumberer = Renumberer(session, repo, offset_floor=10)
            assert renumberer.displacement_offset(sample_menu.owner_id, 2) == 2003


class TestRenumber:
    """Tests for full renumbering."""

    @pytest.mark.parametrize(
        "permutation",
        [[2, 0, 1], [2, 1, 0], [1, 0, 2], [0, 1, 2]],
    )
    def test_positions_follow_submitted_order(self, temp_db, sample_menu, assertion_helpers, permutation):
        desired = [sample_menu.section_ids[i] for i in permutation]
        with temp_db.session() as session:
            result = Renumberer(session, SectionRepository(session)).renumber(
                sample_menu.owner_id, desired
            )

        assert result.updated == desired
        assert result.complete
        assertion_helpers.assert_order(temp_db, Section, sample_menu.owner_id, desired)

    def test_idempotent(self, temp_db, sample_menu, assertion_helpers):
        desired = list(reversed(sample_menu.service_ids))
        parent = sample_menu.section_ids[0]
        for _ in range(2):
            with temp_db.session() as session:
                Renumberer(session, ServiceRepository(session)).renumber(parent, desired)
            assertion_helpers.assert_order(temp_db, Service, parent, desired)

    def test_overlapping_orders_leave_unique_positions(self, temp_db, sample_menu, assertion_helpers):
        """Back-to-back conflicting orders end in the last order with no shared positions."""
        first = [sample_menu.section_ids[i] for i in (2, 0, 1)]
        second = [sample_menu.section_ids[i] for i in (1, 2, 0)]
        for desired in (first, second):
            with temp_db.session() as session:
                Renumberer(session, SectionRepository(session)).renumber(sample_menu.owner_id, desired)
            assertion_helpers.assert_unique_positions(temp_db, Section, sample_menu.owner_id)

        assertion_helpers.assert_order(temp_db, Section, sample_menu.owner_id, second)

    def test_phases_stay_collision_free(self, temp_db, sample_menu, assertion_helpers):
        """Between the two phases every listed row sits in the displacement band."""
        desired = [sample_menu.package_ids[1], sample_menu.package_ids[0]]
        parent = sample_menu.section_ids[0]
        with temp_db.session() as session:
            repo = PackageRepository(session)
            renumberer = Renumberer(session, repo)
            offset = renumberer.displacement_offset(parent, len(desired))

            assert renumberer.displace(parent, desired, offset) == []
            between = {package.id: package.position for package in repo.list_active(parent)}
            assert between == {desired[0]: offset, desired[1]: offset + 1}

            assert renumberer.settle(parent, desired) == []
            session.commit()

        assertion_helpers.assert_order(temp_db, Package, parent, desired)

    def test_unknown_ids_skipped(self, temp_db, sample_menu, caplog):
        stranger = str(uuid.uuid4())
        desired = [sample_menu.section_ids[1], sample_menu.section_ids[0], sample_menu.section_ids[2], stranger]
        with caplog.at_level(logging.WARNING, logger="menuorder.services.menu.renumbering"):
            with temp_db.session() as session:
                result = Renumberer(session, SectionRepository(session)).renumber(
                    sample_menu.owner_id, desired
                )

        assert result.skipped == [stranger]
        assert result.updated == desired[:3]
        assert not result.complete
        assert stranger in caplog.text

    def test_foreign_parent_ids_skipped(self, temp_db, sample_menu):
        """An ID that lives under another parent is never moved."""
        other_section = sample_menu.section_ids[1]
        with temp_db.session() as session:
            result = Renumberer(session, ServiceRepository(session)).renumber(
                other_section, [sample_menu.service_ids[0]]
            )
            assert result.skipped == [sample_menu.service_ids[0]]
            assert ServiceRepository(session).get_by_id(sample_menu.service_ids[0]).position == 1

    def test_collision_with_unlisted_sibling_rolls_back(self, temp_db, sample_menu, assertion_helpers):
        """A partial list that lands on an unlisted row fails and changes nothing."""
        with temp_db.session() as session:
            renumberer = Renumberer(session, SectionRepository(session))
            with pytest.raises(ConstraintViolationError):
                renumberer.renumber(
                    sample_menu.owner_id, [sample_menu.section_ids[2], sample_menu.section_ids[0]]
                )

        assertion_helpers.assert_order(temp_db, Section, sample_menu.owner_id, sample_menu.section_ids)

    def test_large_positions_renumbered(self, temp_db, sample_menu, assertion_helpers):
        with temp_db.session() as session:
            repo = SectionRepository(session)
            for position, section_id in zip((1500, 1000, 999), sample_menu.section_ids):
                repo.set_position(section_id, sample_menu.owner_id, position)
            session.commit()

        desired = list(sample_menu.section_ids)
        with temp_db.session() as session:
            Renumberer(session, SectionRepository(session)).renumber(sample_menu.owner_id, desired)

        assertion_helpers.assert_order(temp_db, Section, sample_menu.owner_id, desired)

    def test_empty_list_is_noop(self, temp_db, sample_menu, assertion_helpers):
        with temp_db.session() as session:
            result = Renumberer(session, SectionRepository(session)).renumber(sample_menu.owner_id, [])
        assert result == RenumberResult(parent_id=sample_menu.owner_id)
        assertion_helpers.assert_order(temp_db, Section, sample_menu.owner_id, sample_menu.section_ids)
