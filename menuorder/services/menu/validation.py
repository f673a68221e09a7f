"""Menu validation logic."""

from collections.abc import Mapping
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any

from menuorder.exceptions import ValidationError


class MenuValidator:
    """Validates menu data according to business rules."""

    # Validation constants
    NAME_MIN_LENGTH = 1
    NAME_MAX_LENGTH = 255
    ID_MAX_LENGTH = 36
    EMAIL_MAX_LENGTH = 255

    @staticmethod
    def validate_id(entity_id: Any, field: str = "id", max_length: int | None = ID_MAX_LENGTH) -> None:
        """
        Validate an entity ID.

        Read paths pass max_length=None so an unknown ID of any length finds nothing.

        Raises:
            ValidationError: If the ID is not a non-empty string of acceptable length
        """
        if not isinstance(entity_id, str):
            raise ValidationError("ID must be a string", field)
        if not entity_id.strip():
            raise ValidationError("ID cannot be empty", field)
        if max_length is not None and len(entity_id) > max_length:
            raise ValidationError(f"ID must be at most {max_length} characters", field)

    @staticmethod
    def validate_name(name: Any) -> None:
        """
        Validate a section, service or package name.

        Raises:
            ValidationError: If name is invalid
        """
        if not isinstance(name, str):
            raise ValidationError("Name must be a string", "name")
        if not name.strip():
            raise ValidationError("Name is required and cannot be empty", "name")
        if len(name) > MenuValidator.NAME_MAX_LENGTH:
            raise ValidationError(
                f"Name must be at most {MenuValidator.NAME_MAX_LENGTH} characters", "name"
            )

    @staticmethod
    def validate_description(description: Any) -> None:
        """Descriptions are optional free text."""
        if description is not None and not isinstance(description, str):
            raise ValidationError("Description must be a string", "description")

    @staticmethod
    def validate_position(position: Any, field: str = "order") -> None:
        """
        Validate a 1-based position.

        Raises:
            ValidationError: If position is not an integer >= 1
        """
        if isinstance(position, bool) or not isinstance(position, int):
            raise ValidationError("Position must be an integer", field)
        if position < 1:
            raise ValidationError("Position must be at least 1", field)

    @staticmethod
    def validate_duration(minutes: Any, field: str = "duration") -> None:
        """Durations are positive whole minutes."""
        if isinstance(minutes, bool) or not isinstance(minutes, int):
            raise ValidationError("Duration must be an integer number of minutes", field)
        if minutes <= 0:
            raise ValidationError("Duration must be greater than 0", field)

    @staticmethod
    def validate_price_cents(cents: Any, field: str = "price") -> None:
        """Prices are non-negative integer cents."""
        if isinstance(cents, bool) or not isinstance(cents, int):
            raise ValidationError("Price must be an integer number of cents", field)
        if cents < 0:
            raise ValidationError("Price cannot be negative", field)

    @staticmethod
    def dollars_to_cents(amount: Any, field: str = "price") -> int:
        """
        Convert a dollar amount to integer cents, rounding half up.

        Raises:
            ValidationError: If amount is not a non-negative number
        """
        if isinstance(amount, bool) or not isinstance(amount, (int, float, Decimal)):
            raise ValidationError("Price must be a number", field)
        try:
            cents = (Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        except InvalidOperation as e:
            raise ValidationError("Price must be a finite number", field) from e
        if cents < 0:
            raise ValidationError("Price cannot be negative", field)
        return int(cents)

    @staticmethod
    def validate_email(email: Any) -> None:
        """Light email sanity check; identity is owned elsewhere."""
        if not isinstance(email, str) or not email.strip():
            raise ValidationError("Email is required", "email")
        if "@" not in email or len(email) > MenuValidator.EMAIL_MAX_LENGTH:
            raise ValidationError("Email is not valid", "email")

    @staticmethod
    def validate_service_ids(service_ids: Any) -> list[str]:
        """
        Validate package member IDs.

        Returns:
            The IDs with duplicates removed, first occurrence kept

        Raises:
            ValidationError: If service_ids is not a non-empty list of IDs
        """
        if not isinstance(service_ids, list) or not service_ids:
            raise ValidationError("serviceIds must be a non-empty list", "serviceIds")
        unique_ids = []
        for service_id in service_ids:
            MenuValidator.validate_id(service_id, "serviceIds")
            if service_id not in unique_ids:
                unique_ids.append(service_id)
        return unique_ids

    @staticmethod
    def validate_order_entries(entries: Any, field: str) -> list[tuple[str, Any]]:
        """
        Validate a submitted reorder list of {id, order} entries.

        "position" is accepted in place of "order".

        Returns:
            (id, order) pairs in submitted order

        Raises:
            ValidationError: If the list or any entry is malformed, or an ID repeats
        """
        if not isinstance(entries, list):
            raise ValidationError(f"{field} must be an array", field)

        pairs = []
        seen = set()
        for entry in entries:
            if not isinstance(entry, Mapping):
                raise ValidationError(f"Each entry in {field} must be an object", field)
            entry_id = entry.get("id")
            MenuValidator.validate_id(entry_id, field)
            order = entry.get("order", entry.get("position"))
            if isinstance(order, bool) or not isinstance(order, (int, float)):
                raise ValidationError(
                    f"Entry '{entry_id}' in {field} must carry a numeric order", field
                )
            if entry_id in seen:
                raise ValidationError(f"Entry '{entry_id}' appears more than once", field)
            seen.add(entry_id)
            pairs.append((entry_id, order))
        return pairs

    @staticmethod
    def validate_complete_order(submitted_ids: list[str], active_ids: list[str], field: str) -> None:
        """
        Require the submitted IDs to be exactly the parent's active children.

        Raises:
            ValidationError: If IDs are missing from or foreign to the active set
        """
        submitted = set(submitted_ids)
        active = set(active_ids)
        if submitted == active:
            return
        missing = sorted(active - submitted)
        unknown = sorted(submitted - active)
        details = []
        if missing:
            details.append(f"missing {', '.join(missing)}")
        if unknown:
            details.append(f"unknown {', '.join(unknown)}")
        raise ValidationError(
            f"{field} must list every active item exactly once ({'; '.join(details)})",
            field,
        )
