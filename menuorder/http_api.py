"""HTTP API for the menu order service."""

import logging
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Any

from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.exceptions import HTTPException as StarletteHTTPException

from menuorder.api.errors import error_response
from menuorder.api.schemas import (
    OrderEntry,
    OwnerRequest,
    PackageCreate,
    PackageOrderRequest,
    SectionCreate,
    SectionOrderRequest,
    ServiceCreate,
    ServiceOrderRequest,
)
from menuorder.api.serializers import serialize_owner, serialize_section
from menuorder.config import Settings, get_settings
from menuorder.exceptions import MenuServiceError
from menuorder.logging_config import setup_logging
from menuorder.services.menu.validation import MenuValidator
from menuorder.services.menu_service import MenuService
from menuorder.services.owner_service import OwnerService
from menuorder.storage.database import Database, get_db

logger = logging.getLogger(__name__)

router = APIRouter()


def get_database() -> Database:
    """Request dependency returning the shared database (overridable in tests)."""
    return get_db()


def _entries(entries: list[OrderEntry]) -> list[dict[str, Any]]:
    return [entry.model_dump() for entry in entries]


def _timestamp() -> str:
    return datetime.now(timezone.utc).isoformat()


@router.get("/health")
def health_check(db: Database = Depends(get_database)):
    """Health check endpoint with a database round trip."""
    try:
        db.ping()
    except SQLAlchemyError:
        logger.exception("Database health check failed")
        return JSONResponse(
            status_code=500,
            content={"status": "unhealthy", "database": "disconnected", "timestamp": _timestamp()},
        )
    return {"status": "healthy", "database": "connected", "timestamp": _timestamp()}


@router.get("/menu/{owner_id}")
def get_menu(owner_id: str, db: Database = Depends(get_database)):
    """Full ordered menu for an owner."""
    try:
        with db.session() as session:
            sections = MenuService(session).get_menu(owner_id)
            payload = [serialize_section(section) for section in sections]
    except MenuServiceError as e:
        return error_response(e, "Failed to fetch menu data")
    return {"success": True, "data": {"sections": payload}}


@router.put("/menu/{owner_id}/sections/order")
def reorder_sections(owner_id: str, body: SectionOrderRequest, db: Database = Depends(get_database)):
    logger.info("Section order update for owner %s with %d sections", owner_id, len(body.sections))
    try:
        with db.session() as session:
            MenuService(session).reorder_sections(owner_id, _entries(body.sections))
    except MenuServiceError as e:
        return error_response(e, "Failed to update section order")
    return {"success": True, "message": "Section order updated successfully"}


@router.put("/menu/{owner_id}/sections/{section_id}/services/order")
def reorder_services(
    owner_id: str,
    section_id: str,
    body: ServiceOrderRequest,
    db: Database = Depends(get_database),
):
    logger.info("Service order update for section %s with %d services", section_id, len(body.services))
    try:
        with db.session() as session:
            MenuService(session).reorder_services(
                section_id, _entries(body.services), owner_id=owner_id
            )
    except MenuServiceError as e:
        return error_response(e, "Failed to update service order")
    return {"success": True, "message": "Service order updated successfully"}


@router.put("/menu/{owner_id}/sections/{section_id}/packages/order")
def reorder_packages(
    owner_id: str,
    section_id: str,
    body: PackageOrderRequest,
    db: Database = Depends(get_database),
):
    logger.info("Package order update for section %s with %d packages", section_id, len(body.packages))
    try:
        with db.session() as session:
            MenuService(session).reorder_packages(
                section_id, _entries(body.packages), owner_id=owner_id
            )
    except MenuServiceError as e:
        return error_response(e, "Failed to update package order")
    return {"success": True, "message": "Package order updated successfully"}


@router.post("/menu/{owner_id}/sections", status_code=201)
def create_section(owner_id: str, body: SectionCreate, db: Database = Depends(get_database)):
    try:
        with db.session() as session:
            section = MenuService(session).create_section(
                owner_id,
                name=body.name,
                position=body.order,
                description=body.description,
            )
            payload = {"success": True, "id": section.id, "message": "Section created successfully"}
    except MenuServiceError as e:
        return error_response(e, "Failed to create section")
    return payload


@router.post("/menu/{owner_id}/sections/{section_id}/services")
def create_service(
    owner_id: str,
    section_id: str,
    body: ServiceCreate,
    db: Database = Depends(get_database),
):
    try:
        with db.session() as session:
            service = MenuService(session).create_service(
                section_id,
                name=body.name,
                duration_minutes=body.duration,
                price_cents=MenuValidator.dollars_to_cents(body.price),
                position=body.order,
                description=body.description,
                owner_id=owner_id,
            )
            payload = {
                "success": True,
                "data": {"id": service.id},
                "message": "Service created successfully",
            }
    except MenuServiceError as e:
        return error_response(e, "Failed to create service")
    return payload


@router.post("/sections/{section_id}/packages", status_code=201)
def create_package(section_id: str, body: PackageCreate, db: Database = Depends(get_database)):
    try:
        with db.session() as session:
            package = MenuService(session).create_package(
                section_id,
                name=body.name,
                total_price_cents=MenuValidator.dollars_to_cents(body.total_price, "totalPrice"),
                total_duration_minutes=body.duration,
                service_ids=body.service_ids,
                position=body.order,
                description=body.description,
            )
            payload = {"success": True, "id": package.id, "message": "Package created successfully"}
    except MenuServiceError as e:
        return error_response(e, "Failed to create package")
    return payload


@router.delete("/menu/{owner_id}/sections/{section_id}")
def delete_section(owner_id: str, section_id: str, db: Database = Depends(get_database)):
    try:
        with db.session() as session:
            MenuService(session).delete_section(section_id, owner_id=owner_id)
    except MenuServiceError as e:
        return error_response(e, "Failed to delete section")
    return {"success": True, "message": "Section deleted successfully"}


@router.delete("/menu/{owner_id}/sections/{section_id}/services/{service_id}")
def delete_service(
    owner_id: str,
    section_id: str,
    service_id: str,
    db: Database = Depends(get_database),
):
    try:
        with db.session() as session:
            MenuService(session).delete_service(service_id, section_id=section_id, owner_id=owner_id)
    except MenuServiceError as e:
        return error_response(e, "Failed to delete service")
    return {"success": True, "message": "Service deleted successfully"}


@router.delete("/menu/{owner_id}/sections/{section_id}/packages/{package_id}")
def delete_package(
    owner_id: str,
    section_id: str,
    package_id: str,
    db: Database = Depends(get_database),
):
    try:
        with db.session() as session:
            MenuService(session).delete_package(package_id, section_id=section_id, owner_id=owner_id)
    except MenuServiceError as e:
        return error_response(e, "Failed to delete package")
    return {"success": True, "message": "Package deleted successfully"}


@router.post("/users")
def get_or_create_owner(body: OwnerRequest, db: Database = Depends(get_database)):
    """Return the owner registered with an email, creating it on first setup."""
    try:
        with db.session() as session:
            owner = OwnerService(session).get_or_create(body.email, body.business_name)
            payload = serialize_owner(owner)
    except MenuServiceError as e:
        return error_response(e, "Failed to handle user")
    return payload


async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors with a static message."""
    logger.warning("Rejected request to %s: %s", request.url.path, exc.errors())
    return JSONResponse(
        status_code=400,
        content={"success": False, "error": "Invalid request body", "details": jsonable_errors(exc)},
    )


def jsonable_errors(exc: RequestValidationError) -> list[dict[str, Any]]:
    return [
        {"loc": [str(part) for part in error.get("loc", ())], "msg": error.get("msg", "")}
        for error in exc.errors()
    ]


async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    if exc.status_code == 404:
        return JSONResponse(status_code=404, content={"success": False, "error": "Route not found"})
    return JSONResponse(
        status_code=exc.status_code, content={"success": False, "error": str(exc.detail)}
    )


async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.exception("Unhandled error on %s", request.url.path)
    return JSONResponse(status_code=500, content={"success": False, "error": "Internal server error"})


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        settings: Settings to use; defaults to the cached environment settings

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        setup_logging(settings.log_level, settings.log_format)
        if settings.create_tables_on_startup:
            db_factory = app.dependency_overrides.get(get_database, get_database)
            db_factory().create_tables()
        logger.info("Menu order API ready (prefix=%r)", settings.api_prefix)
        yield

    app = FastAPI(
        title="Menu Order Service",
        description="Ordered service menus with collision-free drag-and-drop reordering",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_origin_regex=settings.cors_origin_regex,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.include_router(router, prefix=settings.api_prefix)
    return app


app = create_app()


def main() -> None:
    """Run the API with uvicorn using configured host and port."""
    import uvicorn

    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    uvicorn.run(app, host=settings.host, port=settings.port)


if __name__ == "__main__":
    main()
