"""Repository pattern implementation for the ordered menu collections."""

from __future__ import annotations

from typing import Any, Optional

from sqlalchemy import delete, func, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from menuorder.exceptions import ConstraintViolationError, NotFoundError
from menuorder.models.owner import Owner
from menuorder.models.package import Package, package_memberships
from menuorder.models.section import Section
from menuorder.models.service import Service


class OwnerRepository:
    """Repository for owner operations."""

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    def create(self, owner: Owner) -> Owner:
        """Create a new owner."""
        self.session.add(owner)
        self.session.flush()
        return owner

    def get_by_id(self, owner_id: str) -> Optional[Owner]:
        """Get owner by ID."""
        return self.session.get(Owner, owner_id)

    def get_active(self, owner_id: str) -> Optional[Owner]:
        """Get owner by ID if it is active."""
        stmt = select(Owner).where(Owner.id == owner_id, Owner.is_active.is_(True))
        return self.session.scalar(stmt)

    def get_by_email(self, email: str) -> Optional[Owner]:
        """Get the active owner registered with an email address."""
        stmt = select(Owner).where(Owner.email == email, Owner.is_active.is_(True))
        return self.session.scalar(stmt)


class OrderedRepository:
    """Shared storage operations for a collection ordered within a parent scope.

    Subclasses name the model, the attribute holding the parent reference and
    the parent model. Positions are unique per parent among active rows; the
    database enforces it with a partial unique index and every write here
    surfaces a violation as ConstraintViolationError.
    """

    model: Any = None
    parent_attr: str = ""
    parent_model: Any = None

    def __init__(self, session: Session):
        """Initialize repository with a database session."""
        self.session = session

    @property
    def parent_column(self):
        return getattr(self.model, self.parent_attr)

    @property
    def resource_type(self) -> str:
        return self.model.__name__

    def get_by_id(self, entity_id: str):
        """Get entity by ID regardless of its active flag."""
        return self.session.get(self.model, entity_id)

    def get_active(self, entity_id: str, parent_id: str | None = None):
        """Get an active entity, optionally requiring it to belong to parent_id."""
        stmt = select(self.model).where(
            self.model.id == entity_id, self.model.is_active.is_(True)
        )
        if parent_id is not None:
            stmt = stmt.where(self.parent_column == parent_id)
        return self.session.scalar(stmt)

    def list_active(self, parent_id: str) -> list:
        """List active children of a parent ascending by position.

        Unknown parents yield an empty list.
        """
        stmt = (
            select(self.model)
            .where(self.parent_column == parent_id, self.model.is_active.is_(True))
            .order_by(self.model.position)
        )
        return list(self.session.scalars(stmt))

    def active_ids(self, parent_id: str) -> list[str]:
        """IDs of the active children of a parent, in position order."""
        stmt = (
            select(self.model.id)
            .where(self.parent_column == parent_id, self.model.is_active.is_(True))
            .order_by(self.model.position)
        )
        return list(self.session.scalars(stmt))

    def max_position(self, parent_id: str, active_only: bool = False) -> int:
        """Highest stored position under a parent, 0 when there are no rows."""
        stmt = select(func.max(self.model.position)).where(self.parent_column == parent_id)
        if active_only:
            stmt = stmt.where(self.model.is_active.is_(True))
        return self.session.scalar(stmt) or 0

    def position_holder(self, parent_id: str, position: int):
        """Return the active entity occupying a position, if any."""
        stmt = select(self.model).where(
            self.parent_column == parent_id,
            self.model.position == position,
            self.model.is_active.is_(True),
        )
        return self.session.scalar(stmt)

    def name_taken(self, parent_id: str, name: str) -> bool:
        """Check whether an active sibling already uses a name."""
        stmt = select(func.count(self.model.id)).where(
            self.parent_column == parent_id,
            self.model.name == name,
            self.model.is_active.is_(True),
        )
        return (self.session.scalar(stmt) or 0) > 0

    def parent_is_active(self, parent_id: str) -> bool:
        """Check that the parent row exists and is active."""
        stmt = select(func.count(self.parent_model.id)).where(
            self.parent_model.id == parent_id, self.parent_model.is_active.is_(True)
        )
        return (self.session.scalar(stmt) or 0) > 0

    def create(self, entity):
        """
        Insert an entity at its desired position.

        Raises:
            NotFoundError: If the parent does not exist or is inactive
            ConstraintViolationError: If an active sibling already holds the position
        """
        parent_id = getattr(entity, self.parent_attr)
        if not self.parent_is_active(parent_id):
            raise NotFoundError(self.parent_model.__name__, parent_id)

        if self.position_holder(parent_id, entity.position) is not None:
            raise ConstraintViolationError(
                f"{self.resource_type} position {entity.position} is already taken "
                f"under {self.parent_model.__name__} '{parent_id}'"
            )

        self.session.add(entity)
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConstraintViolationError(
                f"Failed to insert {self.resource_type}: {str(e.orig)}", e
            ) from e
        return entity

    def set_position(self, entity_id: str, parent_id: str, new_position: int) -> bool:
        """
        Write one entity's position, scoped to its parent.

        Returns:
            True if an active row under parent_id was updated, False if none matched

        Raises:
            ConstraintViolationError: If another active sibling holds new_position
        """
        entity = self.get_active(entity_id, parent_id)
        if entity is None:
            return False

        entity.position = new_position
        try:
            self.session.flush()
        except IntegrityError as e:
            raise ConstraintViolationError(
                f"{self.resource_type} position {new_position} is already taken "
                f"under {self.parent_model.__name__} '{parent_id}'",
                e,
            ) from e
        return True

    def deactivate(self, entity_id: str) -> bool:
        """
        Soft-delete an entity. Idempotent; siblings keep their positions.

        Returns:
            True if the entity exists (active or not), False otherwise
        """
        entity = self.get_by_id(entity_id)
        if entity is None:
            return False
        if entity.is_active:
            entity.is_active = False
            self._after_deactivate(entity)
            self.session.flush()
        return True

    def _after_deactivate(self, entity) -> None:
        """Hook for collection-specific cleanup."""
        pass


class SectionRepository(OrderedRepository):
    """Sections ordered per owner."""

    model = Section
    parent_attr = "owner_id"
    parent_model = Owner

    def _after_deactivate(self, entity: Section) -> None:
        # Services of a removed section leave every package that referenced them
        section_services = select(Service.id).where(Service.section_id == entity.id)
        self.session.execute(
            delete(package_memberships).where(
                package_memberships.c.service_id.in_(section_services)
            )
        )


class ServiceRepository(OrderedRepository):
    """Services ordered per section."""

    model = Service
    parent_attr = "section_id"
    parent_model = Section

    def get_active_many(self, service_ids: list[str]) -> list[Service]:
        """Active services among the given IDs, from any active section."""
        if not service_ids:
            return []
        stmt = (
            select(Service)
            .join(Section, Service.section_id == Section.id)
            .where(
                Service.id.in_(service_ids),
                Service.is_active.is_(True),
                Section.is_active.is_(True),
            )
        )
        return list(self.session.scalars(stmt))

    def _after_deactivate(self, entity: Service) -> None:
        # A removed service leaves the packages that referenced it
        self.session.execute(
            delete(package_memberships).where(package_memberships.c.service_id == entity.id)
        )
        self.session.expire(entity, ["packages"])


class PackageRepository(OrderedRepository):
    """Packages ordered per section."""

    model = Package
    parent_attr = "section_id"
    parent_model = Section

    def add_members(self, package: Package, service_ids: list[str]) -> None:
        """Insert one membership row per service. Membership is a set; no order is kept."""
        for service_id in service_ids:
            self.session.execute(
                package_memberships.insert().values(
                    package_id=package.id, service_id=service_id
                )
            )
        self.session.expire(package, ["services"])

    def member_ids(self, package_ids: list[str]) -> dict[str, list[str]]:
        """Map each package ID to the IDs of its visible member services, sorted by ID.

        Members that are inactive or sit in an inactive section are left out.
        """
        members: dict[str, list[str]] = {package_id: [] for package_id in package_ids}
        if not package_ids:
            return members
        stmt = (
            select(package_memberships.c.package_id, package_memberships.c.service_id)
            .join(Service, package_memberships.c.service_id == Service.id)
            .join(Section, Service.section_id == Section.id)
            .where(
                package_memberships.c.package_id.in_(package_ids),
                Service.is_active.is_(True),
                Section.is_active.is_(True),
            )
            .order_by(package_memberships.c.package_id, package_memberships.c.service_id)
        )
        for package_id, service_id in self.session.execute(stmt):
            members[package_id].append(service_id)
        return members
