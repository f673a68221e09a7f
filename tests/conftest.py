"""Shared pytest fixtures and test utilities for menu order tests."""

import os
import tempfile
from dataclasses import dataclass, field
from typing import Generator

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import select

from menuorder.config import Settings
from menuorder.http_api import create_app, get_database
from menuorder.models.section import Section
from menuorder.services.menu_service import MenuService
from menuorder.services.owner_service import OwnerService
from menuorder.storage.database import Database, reset_db


@pytest.fixture(scope="function")
def temp_db() -> Generator[Database, None, None]:
    """
    Create a temporary SQLite database for testing.

    Yields:
        Database instance with tables created
    """
    # Create temporary database file
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    # Reset global database instance
    reset_db()

    # Create database
    database = Database(f"sqlite:///{db_path}")
    database.create_tables()

    yield database

    # Cleanup
    database.drop_tables()
    database.dispose()
    reset_db()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def db_session(temp_db):
    """Get a database session from temp_db."""
    with temp_db.session() as session:
        yield session


@pytest.fixture
def menu_service(temp_db):
    """Create a menu service instance."""
    with temp_db.session() as session:
        yield MenuService(session)


@pytest.fixture
def owner_id(temp_db) -> str:
    """Create an owner and return its ID."""
    with temp_db.session() as session:
        owner = OwnerService(session).get_or_create("owner@example.com", "Test Salon")
        return owner.id


@dataclass
class SampleMenu:
    """IDs of a small menu: three sections, three services and two packages in the first."""

    owner_id: str
    section_ids: list[str] = field(default_factory=list)
    service_ids: list[str] = field(default_factory=list)
    package_ids: list[str] = field(default_factory=list)


@pytest.fixture
def sample_menu(temp_db, owner_id) -> SampleMenu:
    """Create a menu with sections X, Y, Z; services a, b, c and packages p1, p2 in X."""
    menu = SampleMenu(owner_id=owner_id)
    with temp_db.session() as session:
        service = MenuService(session)
        for position, name in enumerate(["X", "Y", "Z"], start=1):
            section = service.create_section(owner_id, name, position=position)
            menu.section_ids.append(section.id)

        first = menu.section_ids[0]
        for position, name in enumerate(["a", "b", "c"], start=1):
            created = service.create_service(
                first, name, duration_minutes=30 * position, price_cents=1000 * position, position=position
            )
            menu.service_ids.append(created.id)

        for position, name in enumerate(["p1", "p2"], start=1):
            package = service.create_package(
                first,
                name,
                total_price_cents=2500,
                total_duration_minutes=60,
                service_ids=menu.service_ids[:2],
                position=position,
            )
            menu.package_ids.append(package.id)
    return menu


@pytest.fixture
def client(temp_db) -> Generator[TestClient, None, None]:
    """HTTP client against an app bound to the temporary database."""
    app = create_app(Settings(create_tables_on_startup=False))
    app.dependency_overrides[get_database] = lambda: temp_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


class AssertionHelpers:
    """Helper functions for test assertions."""

    @staticmethod
    def positions(db: Database, model, parent_id: str, active_only: bool = True) -> dict[str, int]:
        """Map entity ID to stored position for every row under a parent."""
        parent_column = model.owner_id if model is Section else model.section_id
        stmt = select(model.id, model.position).where(parent_column == parent_id)
        if active_only:
            stmt = stmt.where(model.is_active.is_(True))
        with db.session() as session:
            return {entity_id: position for entity_id, position in session.execute(stmt)}

    @staticmethod
    def assert_order(db: Database, model, parent_id: str, expected_ids: list[str]):
        """Assert active rows under a parent sit at 1..n in the expected order."""
        positions = AssertionHelpers.positions(db, model, parent_id)
        assert positions == {entity_id: rank for rank, entity_id in enumerate(expected_ids, start=1)}

    @staticmethod
    def assert_unique_positions(db: Database, model, parent_id: str):
        """Assert no two active rows under a parent share a position."""
        positions = list(AssertionHelpers.positions(db, model, parent_id).values())
        assert len(positions) == len(set(positions)), f"Duplicate positions: {sorted(positions)}"


# Make utilities available as fixtures
@pytest.fixture
def assertion_helpers():
    """Provide AssertionHelpers instance."""
    return AssertionHelpers

