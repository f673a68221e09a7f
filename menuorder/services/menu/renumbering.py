"""Two-phase renumbering of positions within one parent scope."""

import logging
from dataclasses import dataclass, field

from sqlalchemy.exc import OperationalError, SQLAlchemyError
from sqlalchemy.orm import Session

from menuorder.exceptions import (
    ConstraintViolationError,
    DatabaseError,
    TransientStoreError,
)
from menuorder.storage.repositories import OrderedRepository

logger = logging.getLogger(__name__)

DEFAULT_OFFSET_FLOOR = 1000


@dataclass
class RenumberResult:
    """Outcome of a renumber: IDs whose position was written and IDs skipped."""

    parent_id: str
    updated: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def complete(self) -> bool:
        return not self.skipped


class Renumberer:
    """Rewrites stored positions to match a supplied order.

    Phase A (displace) moves every listed row into a band above all stored
    positions; phase B (settle) writes the final 1-based ranks. No write ever
    targets a position held by another active sibling, so the per-parent
    unique index is never violated for a list of active children. Both
    phases share one transaction.
    """

    def __init__(
        self,
        session: Session,
        repo: OrderedRepository,
        offset_floor: int = DEFAULT_OFFSET_FLOOR,
    ):
        """
        Initialize renumberer with session and repository.

        Args:
            session: SQLAlchemy database session
            repo: Repository of the collection being renumbered
            offset_floor: Lowest position used for the displacement band
        """
        self.session = session
        self.repo = repo
        self.offset_floor = offset_floor

    def displacement_offset(self, parent_id: str, count: int) -> int:
        """First position of a band disjoint from every stored position."""
        return max(self.offset_floor, self.repo.max_position(parent_id) + count + 1)

    def displace(self, parent_id: str, entity_ids: list[str], offset: int) -> list[str]:
        """Phase A: write offset + index for each ID. Returns skipped IDs."""
        skipped = []
        for index, entity_id in enumerate(entity_ids):
            if not self.repo.set_position(entity_id, parent_id, offset + index):
                logger.warning(
                    "No active %s %s under %s; skipping displacement",
                    self.repo.resource_type,
                    entity_id,
                    parent_id,
                )
                skipped.append(entity_id)
            else:
                logger.debug(
                    "Displaced %s %s to %d", self.repo.resource_type, entity_id, offset + index
                )
        return skipped

    def settle(self, parent_id: str, entity_ids: list[str]) -> list[str]:
        """Phase B: write index + 1 for each ID. Returns skipped IDs."""
        skipped = []
        for index, entity_id in enumerate(entity_ids):
            if not self.repo.set_position(entity_id, parent_id, index + 1):
                logger.warning(
                    "No active %s %s under %s; skipping final position",
                    self.repo.resource_type,
                    entity_id,
                    parent_id,
                )
                skipped.append(entity_id)
            else:
                logger.debug(
                    "Settled %s %s at %d", self.repo.resource_type, entity_id, index + 1
                )
        return skipped

    def renumber(self, parent_id: str, entity_ids: list[str]) -> RenumberResult:
        """
        Make stored positions follow entity_ids (position = 1-based index).

        Args:
            parent_id: Parent scope (owner for sections, section for services/packages)
            entity_ids: IDs in the desired order

        Returns:
            RenumberResult listing updated and skipped IDs

        Raises:
            ConstraintViolationError: If a write collides with an unlisted active sibling
            TransientStoreError: On connection or timeout failures
            DatabaseError: On any other database failure
        """
        result = RenumberResult(parent_id=parent_id)
        if not entity_ids:
            return result

        logger.info(
            "Renumbering %d %s rows under %s",
            len(entity_ids),
            self.repo.resource_type,
            parent_id,
        )

        try:
            offset = self.displacement_offset(parent_id, len(entity_ids))
            skipped = self.displace(parent_id, entity_ids, offset)
            for entity_id in self.settle(parent_id, entity_ids):
                if entity_id not in skipped:
                    skipped.append(entity_id)
            self.session.commit()
        except ConstraintViolationError:
            self.session.rollback()
            raise
        except OperationalError as e:
            self.session.rollback()
            raise TransientStoreError(f"Failed to renumber: {str(e)}", e) from e
        except SQLAlchemyError as e:
            self.session.rollback()
            raise DatabaseError(f"Failed to renumber: {str(e)}", e) from e

        result.skipped = skipped
        result.updated = [entity_id for entity_id in entity_ids if entity_id not in skipped]
        logger.info(
            "Renumbered %d %s rows under %s (%d skipped)",
            len(result.updated),
            self.repo.resource_type,
            parent_id,
            len(result.skipped),
        )
        return result
