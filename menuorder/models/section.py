"""Section model: a named, ordered grouping of services and packages."""

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from menuorder.models.base import Base, TimestampMixin


class Section(Base, TimestampMixin):
    """Section owned by exactly one owner, positioned within that owner's menu."""

    __tablename__ = "sections"
    __table_args__ = (
        CheckConstraint("position >= 1", name="ck_sections_position_positive"),
        # Position and name are unique per owner among active rows only
        Index(
            "uq_sections_owner_position_active",
            "owner_id",
            "position",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index(
            "uq_sections_owner_name_active",
            "owner_id",
            "name",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index("ix_sections_owner_position", "owner_id", "position"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    owner_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("owners.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    owner: Mapped["Owner"] = relationship("Owner", back_populates="sections")
    services: Mapped[list["Service"]] = relationship(
        "Service",
        back_populates="section",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    packages: Mapped[list["Package"]] = relationship(
        "Package",
        back_populates="section",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Section(id={self.id!r}, name={self.name!r}, position={self.position!r})>"
