"""Owner model: the account that owns a service menu."""

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from menuorder.models.base import Base, TimestampMixin


class Owner(Base, TimestampMixin):
    """Owner (business account) holding an ordered list of sections."""

    __tablename__ = "owners"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    business_name: Mapped[str] = mapped_column(String(255), nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    sections: Mapped[list["Section"]] = relationship(
        "Section",
        back_populates="owner",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Owner(id={self.id!r}, email={self.email!r})>"
