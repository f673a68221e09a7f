"""Owner service layer: get-or-create of the account that scopes a menu."""

import logging
import uuid

from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.orm import Session

from menuorder.exceptions import (
    DatabaseError,
    DuplicateError,
    NotFoundError,
    TransientStoreError,
    ValidationError,
)
from menuorder.models.owner import Owner
from menuorder.services.menu.validation import MenuValidator
from menuorder.storage.repositories import OwnerRepository

logger = logging.getLogger(__name__)


class OwnerService:
    """Service layer for owner lookups and registration."""

    def __init__(self, session: Session):
        """
        Initialize owner service with database session.

        Args:
            session: SQLAlchemy database session
        """
        self.session = session
        self.owner_repo = OwnerRepository(session)
        self.validator = MenuValidator()

    def get_owner(self, owner_id: str) -> Owner:
        """
        Get an active owner by ID.

        Raises:
            ValidationError: If owner_id is invalid
            NotFoundError: If the owner is missing or inactive
        """
        self.validator.validate_id(owner_id, "owner_id")
        owner = self.owner_repo.get_active(owner_id)
        if owner is None:
            raise NotFoundError("Owner", owner_id)
        return owner

    def get_or_create(self, email: str, business_name: str) -> Owner:
        """
        Return the active owner registered with email, creating it if needed.

        An existing owner is returned unchanged even if business_name differs.

        Raises:
            ValidationError: If email or business_name is invalid
            DuplicateError: If the email belongs to a deactivated owner
            DatabaseError: If database operation fails
        """
        self.validator.validate_email(email)
        if not isinstance(business_name, str) or not business_name.strip():
            raise ValidationError("Business name is required", "businessName")

        try:
            owner = self.owner_repo.get_by_email(email)
            if owner is not None:
                return owner

            owner = Owner(
                id=str(uuid.uuid4()),
                email=email,
                business_name=business_name,
                is_active=True,
            )
            self.owner_repo.create(owner)
            self.session.commit()
            logger.info("Created owner %s for %s", owner.id, email)
            return owner

        except IntegrityError as e:
            self.session.rollback()
            raise DuplicateError("Owner", "email", email) from e
        except OperationalError as e:
            self.session.rollback()
            raise TransientStoreError(f"Failed to handle owner: {str(e)}", e) from e
        except Exception as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to handle owner: {str(e)}", e) from e
