"""Service model: a sellable unit inside a section."""

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
from menuorder.models.package import package_memberships


class Service(Base, TimestampMixin):
    """Service with a duration in minutes and a price in integer cents."""

    __tablename__ = "services"
    __table_args__ = (
        CheckConstraint("position >= 1", name="ck_services_position_positive"),
        CheckConstraint("duration_minutes > 0", name="ck_services_duration_positive"),
        CheckConstraint("price_cents >= 0", name="ck_services_price_non_negative"),
        Index(
            "uq_services_section_position_active",
            "section_id",
            "position",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index(
            "uq_services_section_name_active",
            "section_id",
            "name",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index("ix_services_section_position", "section_id", "position"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    section_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    section: Mapped["Section"] = relationship("Section", back_populates="services")
    packages: Mapped[list["Package"]] = relationship(
        "Package",
        secondary=package_memberships,
        back_populates="services",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Service(id={self.id!r}, name={self.name!r}, position={self.position!r})>"
