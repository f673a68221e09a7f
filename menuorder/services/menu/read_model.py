"""Ordered snapshot of an owner's menu."""

from dataclasses import dataclass, field
from typing import Optional

from menuorder.storage.repositories import (
    PackageRepository,
    SectionRepository,
    ServiceRepository,
)


@dataclass(frozen=True)
class ServiceEntry:
    id: str
    name: str
    description: Optional[str]
    duration_minutes: int
    price_cents: int
    position: int


@dataclass(frozen=True)
class PackageEntry:
    id: str
    name: str
    description: Optional[str]
    total_price_cents: int
    total_duration_minutes: int
    position: int
    service_ids: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class SectionEntry:
    id: str
    name: str
    description: Optional[str]
    position: int
    services: list[ServiceEntry] = field(default_factory=list)
    packages: list[PackageEntry] = field(default_factory=list)


class MenuReadModel:
    """Assembles sections with their services and packages, each in position order.

    Every parent scope is read independently; there is no snapshot isolation
    across sections.
    """

    def __init__(
        self,
        section_repo: SectionRepository,
        service_repo: ServiceRepository,
        package_repo: PackageRepository,
    ):
        self.section_repo = section_repo
        self.service_repo = service_repo
        self.package_repo = package_repo

    def build(self, owner_id: str) -> list[SectionEntry]:
        """Return the owner's active sections; an unknown owner yields an empty menu."""
        return [
            self.build_section(section)
            for section in self.section_repo.list_active(owner_id)
        ]

    def build_section(self, section) -> SectionEntry:
        services = [
            ServiceEntry(
                id=service.id,
                name=service.name,
                description=service.description,
                duration_minutes=service.duration_minutes,
                price_cents=service.price_cents,
                position=service.position,
            )
            for service in self.service_repo.list_active(section.id)
        ]

        packages = self.package_repo.list_active(section.id)
        members = self.package_repo.member_ids([package.id for package in packages])

        return SectionEntry(
            id=section.id,
            name=section.name,
            description=section.description,
            position=section.position,
            services=services,
            packages=[
                PackageEntry(
                    id=package.id,
                    name=package.name,
                    description=package.description,
                    total_price_cents=package.total_price_cents,
                    total_duration_minutes=package.total_duration_minutes,
                    position=package.position,
                    service_ids=members[package.id],
                )
                for package in packages
            ],
        )
