"""
Favorites API endpoints.
Every endpoint requires a session; unauthenticated calls never reach the database.
"""

from fastapi import APIRouter, Body, Depends, Query
from typing import List, Optional

from renthive.models.user import User
from renthive.services.favorite import FavoriteService
from renthive.services.error_handler import ERROR_RESPONSES
from renthive.schemas.favorite import FavoriteRequest, FavoriteToggleResponse
from renthive.schemas.property import PropertyResponse, SuccessResponse
from renthive.utils.dependencies import get_current_user, get_favorite_service


router = APIRouter(prefix="/favorites", tags=["Favorites"])


def _favorite_response(property_obj) -> PropertyResponse:
    return PropertyResponse.model_validate({**property_obj.to_dict(), "is_favorite": True})


@router.get(
    "",
    response_model=List[PropertyResponse],
    summary="List favorites",
    description="Favorited properties of the signed-in user, each with is_favorite set.",
    responses={401: ERROR_RESPONSES[401], 500: ERROR_RESPONSES[500]}
)
async def list_favorites(
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> List[PropertyResponse]:
    properties = await favorite_service.list_favorites(current_user)
    return [_favorite_response(p) for p in properties]


@router.post(
    "",
    response_model=PropertyResponse,
    summary="Add favorite",
    description="Favorite a property and return it.",
    responses={
        400: ERROR_RESPONSES[400],
        401: ERROR_RESPONSES[401],
        404: ERROR_RESPONSES[404],
        500: ERROR_RESPONSES[500],
    }
)
async def add_favorite(
    payload: Optional[FavoriteRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> PropertyResponse:
    property_id = payload.propertyId if payload else None
    property_obj = await favorite_service.add_favorite(current_user, property_id)
    return _favorite_response(property_obj)


@router.delete(
    "",
    response_model=SuccessResponse,
    summary="Remove favorite",
    description="Remove a favorite. Succeeds even when the property was not favorited.",
    responses={400: ERROR_RESPONSES[400], 401: ERROR_RESPONSES[401], 500: ERROR_RESPONSES[500]}
)
async def remove_favorite(
    propertyId: Optional[str] = Query(None, description="ID of the property to unfavorite"),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> SuccessResponse:
    await favorite_service.remove_favorite(current_user, propertyId)
    return SuccessResponse(success=True)


@router.post(
    "/toggle",
    response_model=FavoriteToggleResponse,
    summary="Toggle favorite",
    description="Flip favorite membership in a single transaction and report the new state.",
    responses={
        400: ERROR_RESPONSES[400],
        401: ERROR_RESPONSES[401],
        404: ERROR_RESPONSES[404],
    }
)
async def toggle_favorite(
    payload: Optional[FavoriteRequest] = Body(None),
    current_user: User = Depends(get_current_user),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> FavoriteToggleResponse:
    property_id = payload.propertyId if payload else None
    property_obj, is_favorite = await favorite_service.toggle_favorite(current_user, property_id)
    return FavoriteToggleResponse(
        propertyId=str(property_obj.id),
        isFavorite=is_favorite,
        property=_favorite_response(property_obj) if is_favorite else None,
    )
