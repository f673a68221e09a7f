"""Package model and the package/service membership table."""

from typing import Optional

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Table,
    Text,
    func,
    text,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from menuorder.models.base import Base, TimestampMixin

# Non-owning association: removing either side removes the row, never the other side
package_memberships = Table(
    "package_memberships",
    Base.metadata,
    Column(
        "package_id",
        String(36),
        ForeignKey("packages.id", ondelete="CASCADE"),
        primary_key=True,
    ),
    Column(
        "service_id",
        String(36),
        ForeignKey("services.id", ondelete="CASCADE"),
        primary_key=True,
        index=True,
    ),
    Column("created_at", DateTime(timezone=True), server_default=func.now(), nullable=False),
)


class Package(Base, TimestampMixin):
    """Bundle of services sold together at a total price and duration."""

    __tablename__ = "packages"
    __table_args__ = (
        CheckConstraint("position >= 1", name="ck_packages_position_positive"),
        CheckConstraint(
            "total_duration_minutes > 0", name="ck_packages_duration_positive"
        ),
        CheckConstraint(
            "total_price_cents >= 0", name="ck_packages_price_non_negative"
        ),
        Index(
            "uq_packages_section_position_active",
            "section_id",
            "position",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index(
            "uq_packages_section_name_active",
            "section_id",
            "name",
            unique=True,
            sqlite_where=text("is_active = 1"),
            postgresql_where=text("is_active"),
        ),
        Index("ix_packages_section_position", "section_id", "position"),
    )

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    section_id: Mapped[str] = mapped_column(
        String(36), ForeignKey("sections.id", ondelete="CASCADE"), nullable=False, index=True
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    total_price_cents: Mapped[int] = mapped_column(Integer, nullable=False)
    total_duration_minutes: Mapped[int] = mapped_column(Integer, nullable=False)
    position: Mapped[int] = mapped_column(Integer, nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    # Relationships
    section: Mapped["Section"] = relationship("Section", back_populates="packages")
    services: Mapped[list["Service"]] = relationship(
        "Service",
        secondary=package_memberships,
        back_populates="packages",
        passive_deletes=True,
    )

    def __repr__(self) -> str:
        return f"<Package(id={self.id!r}, name={self.name!r}, position={self.position!r})>"
