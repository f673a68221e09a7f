"""Database models for the menu order service."""

from menuorder.models.owner import Owner
from menuorder.models.section import Section
from menuorder.models.package import Package, package_memberships
from menuorder.models.service import Service

__all__ = ["Owner", "Section", "Service", "Package", "package_memberships"]
