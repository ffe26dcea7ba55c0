"""
Property API endpoints: browsing with filters, and owner CRUD.
"""

from fastapi import APIRouter, Depends, Query, Response, status
from typing import List, Optional

from renthive.config import settings
from renthive.models.user import User
from renthive.models.property import PropertyCategory, PropertyStatus
from renthive.services.property import PropertyService
from renthive.services.error_handler import ERROR_RESPONSES
from renthive.schemas.property import (
    PropertyCreate,
    PropertyUpdate,
    PropertyStatusUpdate,
    PropertyResponse,
    PropertyFilters,
    SortOption,
    SuccessResponse,
)
from renthive.utils.dependencies import get_current_user, get_property_service
from renthive.utils.exceptions import PropertyNotFoundError


router = APIRouter(prefix="/properties", tags=["Properties"])


@router.get(
    "",
    response_model=List[PropertyResponse],
    summary="List properties",
    description=(
        "Page through listings. All filters are combined with AND; the total "
        "number of matches is returned in the X-Total-Count header."
    ),
    responses={400: ERROR_RESPONSES[400], 500: ERROR_RESPONSES[500]}
)
async def list_properties(
    response: Response,
    min_price: Optional[int] = Query(None, ge=0, description="Minimum price"),
    max_price: Optional[int] = Query(None, ge=0, description="Maximum price"),
    bedrooms: Optional[int] = Query(None, ge=0, description="Minimum number of bedrooms"),
    bathrooms: Optional[int] = Query(None, ge=0, description="Minimum number of bathrooms"),
    min_area: Optional[int] = Query(None, ge=0, description="Minimum area in square feet"),
    max_area: Optional[int] = Query(None, ge=0, description="Maximum area in square feet"),
    category: Optional[List[PropertyCategory]] = Query(None, description="Categories to include (repeatable)"),
    location: Optional[str] = Query(None, description="Substring of city, state or address"),
    amenities: Optional[List[str]] = Query(None, description="Required feature tags (repeatable)"),
    status_filter: Optional[PropertyStatus] = Query(PropertyStatus.AVAILABLE, alias="status", description="Listing status"),
    featured: Optional[bool] = Query(None, description="Only promoted (or only regular) listings"),
    sort_by: SortOption = Query(SortOption.NEWEST, description="Sort order"),
    page: int = Query(1, ge=1, description="Page number (starts from 1)"),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size, description="Page length"),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    """Public listing browse."""
    filters = PropertyFilters(
        min_price=min_price,
        max_price=max_price,
        bedrooms=bedrooms,
        bathrooms=bathrooms,
        min_area=min_area,
        max_area=max_area,
        category=category,
        location=location,
        amenities=amenities,
        status=status_filter,
        featured=featured,
    )

    properties, total = await property_service.list_properties(filters, page=page, limit=limit, sort_by=sort_by)
    response.headers["X-Total-Count"] = str(total)
    return [PropertyResponse.model_validate(p.to_dict()) for p in properties]


@router.post(
    "",
    response_model=PropertyResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create property",
    description="Create a listing owned by the signed-in user. New listings are available.",
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401]}
)
async def create_property(
    property_data: PropertyCreate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.create_property(property_data, current_user)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.get(
    "/mine",
    response_model=List[PropertyResponse],
    summary="List my properties",
    description="Every listing owned by the signed-in user, newest first, whatever its status.",
    responses={401: ERROR_RESPONSES[401]}
)
async def list_my_properties(
    response: Response,
    page: int = Query(1, ge=1),
    limit: int = Query(settings.default_page_size, ge=1, le=settings.max_page_size),
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> List[PropertyResponse]:
    properties, total = await property_service.list_user_properties(current_user, page=page, limit=limit)
    response.headers["X-Total-Count"] = str(total)
    return [PropertyResponse.model_validate(p.to_dict()) for p in properties]


@router.get(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Get property",
    responses={404: ERROR_RESPONSES[404], 500: ERROR_RESPONSES[500]}
)
async def get_property(
    property_id: str,
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    """
    Fetch one listing.

    A missing row is a 404; a failing backend is a 500.
    """
    property_obj = await property_service.get_property(property_id)
    if property_obj is None:
        raise PropertyNotFoundError()
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.put(
    "/{property_id}",
    response_model=PropertyResponse,
    summary="Update property",
    description="Update the supplied fields of a listing. Owner only.",
    responses={
        400: ERROR_RESPONSES[400],
        401: ERROR_RESPONSES[401],
        403: ERROR_RESPONSES[403],
        404: ERROR_RESPONSES[404],
    }
)
async def update_property(
    property_id: str,
    property_data: PropertyUpdate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.update_property(property_id, property_data, current_user)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.patch(
    "/{property_id}/status",
    response_model=PropertyResponse,
    summary="Change property status",
    description=(
        "Move a listing through its lifecycle. Allowed: available -> pending, rented, "
        "sold or maintenance; pending -> available, rented or sold; rented -> available "
        "or maintenance; maintenance -> available. Sold is final."
    ),
    responses={
        400: ERROR_RESPONSES[400],
        401: ERROR_RESPONSES[401],
        403: ERROR_RESPONSES[403],
        404: ERROR_RESPONSES[404],
    }
)
async def change_property_status(
    property_id: str,
    status_data: PropertyStatusUpdate,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> PropertyResponse:
    property_obj = await property_service.change_status(property_id, status_data.status, current_user)
    return PropertyResponse.model_validate(property_obj.to_dict())


@router.delete(
    "/{property_id}",
    response_model=SuccessResponse,
    summary="Delete property",
    description="Delete a listing and every favorite that points at it. Owner only.",
    responses={401: ERROR_RESPONSES[401], 403: ERROR_RESPONSES[403], 404: ERROR_RESPONSES[404]}
)
async def delete_property(
    property_id: str,
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service)
) -> SuccessResponse:
    await property_service.delete_property(property_id, current_user)
    return SuccessResponse(success=True)
