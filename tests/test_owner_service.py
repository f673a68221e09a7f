"""Tests for owner lookup and registration."""

import uuid

import pytest

pytestmark = pytest.mark.unit

from menuorder.exceptions import DuplicateError, NotFoundError, ValidationError
from menuorder.models.owner import Owner
from menuorder.services.owner_service import OwnerService


@pytest.fixture
def owner_service(temp_db):
    with temp_db.session() as session:
        yield OwnerService(session)


def test_create_then_reuse(owner_service):
    created = owner_service.get_or_create("salon@example.com", "Salon")
    again = owner_service.get_or_create("salon@example.com", "Renamed Salon")

    assert again.id == created.id
    assert again.business_name == "Salon"


def test_get_owner(owner_service, owner_id):
    assert owner_service.get_owner(owner_id).email == "owner@example.com"

    with pytest.raises(NotFoundError):
        owner_service.get_owner(str(uuid.uuid4()))


@pytest.mark.parametrize(
    "email,business_name",
    [("", "Salon"), ("no-at-sign", "Salon"), ("salon@example.com", "  ")],
)
def test_invalid_input(owner_service, email, business_name):
    with pytest.raises(ValidationError):
        owner_service.get_or_create(email, business_name)


def test_deactivated_email_is_duplicate(temp_db, owner_service):
    with temp_db.session() as session:
        session.add(
            Owner(
                id=str(uuid.uuid4()),
                email="gone@example.com",
                business_name="Closed Salon",
                is_active=False,
            )
        )

    with pytest.raises(DuplicateError):
        owner_service.get_or_create("gone@example.com", "New Salon")
