"""Menu service layer: catalogue writes, reorders and the menu snapshot."""

import logging
import uuid
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from menuorder.config import get_settings
from menuorder.exceptions import (
    DatabaseError,
    DuplicateError,
    MenuServiceError,
    NotFoundError,
    TransientStoreError,
)
from menuorder.models.package import Package
from menuorder.models.section import Section
from menuorder.models.service import Service
from menuorder.services.menu.read_model import MenuReadModel, SectionEntry
from menuorder.services.menu.renumbering import Renumberer, RenumberResult
from menuorder.services.menu.validation import MenuValidator
from menuorder.storage.repositories import (
    OrderedRepository,
    OwnerRepository,
    PackageRepository,
    SectionRepository,
    ServiceRepository,
)

logger = logging.getLogger(__name__)


class MenuService:
    """Service layer for the ordered menu with validation and error handling."""

    def __init__(
        self,
        session: Session,
        require_complete_order: bool | None = None,
        offset_floor: int | None = None,
    ):
        """
        Initialize menu service with database session.

        Args:
            session: SQLAlchemy database session
            require_complete_order: Reject reorders that omit active children.
                                    Defaults to the configured value.
            offset_floor: Lowest displacement position. Defaults to the configured value.
        """
        settings = get_settings()
        self.session = session
        self.owner_repo = OwnerRepository(session)
        self.section_repo = SectionRepository(session)
        self.service_repo = ServiceRepository(session)
        self.package_repo = PackageRepository(session)
        self.validator = MenuValidator()
        self.read_model = MenuReadModel(self.section_repo, self.service_repo, self.package_repo)
        self.require_complete_order = (
            settings.require_complete_order
            if require_complete_order is None
            else require_complete_order
        )
        self.offset_floor = settings.reorder_offset_floor if offset_floor is None else offset_floor

    @contextmanager
    def _write(self, action: str) -> Iterator[None]:
        """Commit on success; roll back and translate storage errors otherwise."""
        try:
            yield
            self.session.commit()
        except MenuServiceError:
            self.session.rollback()
            raise
        except OperationalError as e:
            self.session.rollback()
            raise TransientStoreError(f"Failed to {action}: {str(e)}", e) from e
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to {action}: {str(e)}", e) from e

    def _get_section(self, section_id: str, owner_id: str | None = None) -> Section:
        self.validator.validate_id(section_id, "section_id")
        if owner_id is not None:
            self.validator.validate_id(owner_id, "owner_id")
        section = self.section_repo.get_active(section_id, owner_id)
        if section is None:
            raise NotFoundError("Section", section_id)
        return section

    def _next_position(self, repo: OrderedRepository, parent_id: str, position: int | None) -> int:
        if position is None:
            return repo.max_position(parent_id, active_only=True) + 1
        self.validator.validate_position(position)
        return position

    # Menu snapshot

    def get_menu(self, owner_id: str) -> list[SectionEntry]:
        """
        Get the owner's full menu, every collection in position order.

        Unknown owners, whatever the ID length, yield an empty menu.

        Raises:
            ValidationError: If owner_id is not a non-empty string
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(owner_id, "owner_id", max_length=None)
        try:
            return self.read_model.build(owner_id)
        except OperationalError as e:
            raise TransientStoreError(f"Failed to fetch menu data: {str(e)}", e) from e
        except SQLAlchemyError as e:
            raise DatabaseError(f"Failed to fetch menu data: {str(e)}", e) from e

    # Creation

    def create_section(
        self,
        owner_id: str,
        name: str,
        position: int | None = None,
        description: str | None = None,
    ) -> Section:
        """
        Create a section in an owner's menu.

        Args:
            owner_id: Owning account
            name: Section name, unique among the owner's active sections
            position: Desired position; appended after the last section if omitted
            description: Optional description

        Returns:
            Created section

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the owner does not exist or is inactive
            DuplicateError: If an active section already uses the name
            ConstraintViolationError: If the position is already taken
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(owner_id, "owner_id")
        self.validator.validate_name(name)
        self.validator.validate_description(description)

        with self._write("create section"):
            if self.owner_repo.get_active(owner_id) is None:
                raise NotFoundError("Owner", owner_id)
            if self.section_repo.name_taken(owner_id, name):
                raise DuplicateError("Section", "name", name)

            section = Section(
                id=str(uuid.uuid4()),
                owner_id=owner_id,
                name=name,
                description=description,
                position=self._next_position(self.section_repo, owner_id, position),
                is_active=True,
            )
            self.section_repo.create(section)

        logger.info("Created section %s at position %d for owner %s", section.id, section.position, owner_id)
        return section

    def create_service(
        self,
        section_id: str,
        name: str,
        duration_minutes: int,
        price_cents: int,
        position: int | None = None,
        description: str | None = None,
        owner_id: str | None = None,
    ) -> Service:
        """
        Create a service in a section.

        Raises:
            ValidationError: If any field is invalid
            NotFoundError: If the section is missing, inactive or not owned by owner_id
            DuplicateError: If an active service in the section already uses the name
            ConstraintViolationError: If the position is already taken
            DatabaseError: If database operation fails
        """
        self.validator.validate_name(name)
        self.validator.validate_description(description)
        self.validator.validate_duration(duration_minutes)
        self.validator.validate_price_cents(price_cents)

        with self._write("create service"):
            self._get_section(section_id, owner_id)
            if self.service_repo.name_taken(section_id, name):
                raise DuplicateError("Service", "name", name)

            service = Service(
                id=str(uuid.uuid4()),
                section_id=section_id,
                name=name,
                description=description,
                duration_minutes=duration_minutes,
                price_cents=price_cents,
                position=self._next_position(self.service_repo, section_id, position),
                is_active=True,
            )
            self.service_repo.create(service)

        logger.info("Created service %s at position %d in section %s", service.id, service.position, section_id)
        return service

    def create_package(
        self,
        section_id: str,
        name: str,
        total_price_cents: int,
        total_duration_minutes: int,
        service_ids: list[str],
        position: int | None = None,
        description: str | None = None,
        owner_id: str | None = None,
    ) -> Package:
        """
        Create a package bundling existing services.

        Member services may live in any section.

        Raises:
            ValidationError: If any field is invalid or service_ids is empty
            NotFoundError: If the section or any member service is missing or inactive
            DuplicateError: If an active package in the section already uses the name
            ConstraintViolationError: If the position is already taken
            DatabaseError: If database operation fails
        """
        self.validator.validate_name(name)
        self.validator.validate_description(description)
        self.validator.validate_price_cents(total_price_cents, "totalPrice")
        self.validator.validate_duration(total_duration_minutes)
        member_ids = self.validator.validate_service_ids(service_ids)

        with self._write("create package"):
            self._get_section(section_id, owner_id)
            if self.package_repo.name_taken(section_id, name):
                raise DuplicateError("Package", "name", name)

            found = {service.id for service in self.service_repo.get_active_many(member_ids)}
            for service_id in member_ids:
                if service_id not in found:
                    raise NotFoundError("Service", service_id)

            package = Package(
                id=str(uuid.uuid4()),
                section_id=section_id,
                name=name,
                description=description,
                total_price_cents=total_price_cents,
                total_duration_minutes=total_duration_minutes,
                position=self._next_position(self.package_repo, section_id, position),
                is_active=True,
            )
            self.package_repo.create(package)
            self.package_repo.add_members(package, member_ids)

        logger.info(
            "Created package %s with %d services in section %s",
            package.id,
            len(member_ids),
            section_id,
        )
        return package

    # Deletion (soft; siblings keep their positions)

    def delete_section(self, section_id: str, owner_id: str | None = None) -> bool:
        """
        Deactivate a section.

        Raises:
            NotFoundError: If the section is missing, already inactive or not owned by owner_id
            DatabaseError: If database operation fails
        """
        with self._write("delete section"):
            section = self._get_section(section_id, owner_id)
            self.section_repo.deactivate(section.id)
        logger.info("Deactivated section %s", section_id)
        return True

    def delete_service(
        self, service_id: str, section_id: str | None = None, owner_id: str | None = None
    ) -> bool:
        """
        Deactivate a service and drop it from every package that referenced it.

        Raises:
            NotFoundError: If the service (or its scoping section) is missing or inactive
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(service_id, "service_id")
        with self._write("delete service"):
            if section_id is not None:
                self._get_section(section_id, owner_id)
            if self.service_repo.get_active(service_id, section_id) is None:
                raise NotFoundError("Service", service_id)
            self.service_repo.deactivate(service_id)
        logger.info("Deactivated service %s", service_id)
        return True

    def delete_package(
        self, package_id: str, section_id: str | None = None, owner_id: str | None = None
    ) -> bool:
        """
        Deactivate a package.

        Raises:
            NotFoundError: If the package (or its scoping section) is missing or inactive
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(package_id, "package_id")
        with self._write("delete package"):
            if section_id is not None:
                self._get_section(section_id, owner_id)
            if self.package_repo.get_active(package_id, section_id) is None:
                raise NotFoundError("Package", package_id)
            self.package_repo.deactivate(package_id)
        logger.info("Deactivated package %s", package_id)
        return True

    # Reordering

    def reorder_sections(self, owner_id: str, entries: Any) -> RenumberResult:
        """
        Reorder an owner's sections.

        Args:
            owner_id: Parent scope
            entries: List of {id, order} mappings in the desired order

        Returns:
            RenumberResult with updated and skipped IDs

        Raises:
            ValidationError: If entries are malformed or (when complete orders are
                             required) do not list exactly the active sections
            ConstraintViolationError: If a write collides with an unlisted section
            DatabaseError: If database operation fails
        """
        self.validator.validate_id(owner_id, "owner_id")
        pairs = self.validator.validate_order_entries(entries, "sections")
        return self._reorder(self.section_repo, owner_id, pairs, "sections")

    def reorder_services(
        self, section_id: str, entries: Any, owner_id: str | None = None
    ) -> RenumberResult:
        """Reorder the services of one section. See reorder_sections."""
        self.validator.validate_id(section_id, "section_id")
        pairs = self.validator.validate_order_entries(entries, "services")
        if owner_id is not None:
            self._get_section(section_id, owner_id)
        return self._reorder(self.service_repo, section_id, pairs, "services")

    def reorder_packages(
        self, section_id: str, entries: Any, owner_id: str | None = None
    ) -> RenumberResult:
        """Reorder the packages of one section. See reorder_sections."""
        self.validator.validate_id(section_id, "section_id")
        pairs = self.validator.validate_order_entries(entries, "packages")
        if owner_id is not None:
            self._get_section(section_id, owner_id)
        return self._reorder(self.package_repo, section_id, pairs, "packages")

    def _reorder(
        self,
        repo: OrderedRepository,
        parent_id: str,
        pairs: list[tuple[str, Any]],
        field: str,
    ) -> RenumberResult:
        entity_ids = [entity_id for entity_id, _ in pairs]
        if not entity_ids:
            logger.info("Empty %s order for %s; nothing to do", field, parent_id)
            return RenumberResult(parent_id=parent_id)

        if self.require_complete_order:
            try:
                active_ids = repo.active_ids(parent_id)
            except OperationalError as e:
                self.session.rollback()
                raise TransientStoreError(f"Failed to read {field}: {str(e)}", e) from e
            except SQLAlchemyError as e:
                self.session.rollback()
                raise DatabaseError(f"Failed to read {field}: {str(e)}", e) from e
            self.validator.validate_complete_order(entity_ids, active_ids, field)

        # Rank comes from the array index; submitted order values only get logged
        for rank, (entity_id, order) in enumerate(pairs, start=1):
            if order != rank:
                logger.debug(
                    "Ignoring submitted order %s for %s %s; using rank %d",
                    order,
                    field,
                    entity_id,
                    rank,
                )

        renumberer = Renumberer(self.session, repo, offset_floor=self.offset_floor)
        return renumberer.renumber(parent_id, entity_ids)
