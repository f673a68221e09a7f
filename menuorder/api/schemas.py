"""Request bodies accepted by the HTTP API, one model per endpoint."""

from typing import Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, StrictInt


class OrderEntry(BaseModel):
    """One element of a submitted order: the entity ID and the client's rank for it."""

    id: str = Field(..., min_length=1, description="Section, service or package ID")
    order: float = Field(
        ...,
        strict=True,
        validation_alias=AliasChoices("order", "position"),
        description="Client-side 1-based rank (array position decides placement)",
    )


class SectionOrderRequest(BaseModel):
    sections: list[OrderEntry]


class ServiceOrderRequest(BaseModel):
    services: list[OrderEntry]


class PackageOrderRequest(BaseModel):
    packages: list[OrderEntry]


class SectionCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Section name")
    description: Optional[str] = Field(None, description="Section description")
    order: StrictInt = Field(..., ge=1, description="Desired position")


class ServiceCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255, description="Service name")
    description: Optional[str] = Field(None, description="Service description")
    duration: StrictInt = Field(..., gt=0, description="Duration in minutes")
    price: float = Field(..., ge=0, strict=True, description="Price in dollars")
    order: StrictInt = Field(..., ge=1, description="Desired position")


class PackageCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=255, description="Package name")
    description: Optional[str] = Field(None, description="Package description")
    total_price: float = Field(..., ge=0, strict=True, alias="totalPrice", description="Total price in dollars")
    duration: StrictInt = Field(..., gt=0, description="Total duration in minutes")
    order: StrictInt = Field(..., ge=1, description="Desired position")
    service_ids: list[str] = Field(
        ..., min_length=1, alias="serviceIds", description="IDs of the bundled services"
    )


class OwnerRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    email: str = Field(..., min_length=3, max_length=255)
    business_name: str = Field(..., min_length=1, max_length=255, alias="businessName")
