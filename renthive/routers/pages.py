"""
Page endpoints behind the route guard.
They serve the JSON data a page needs; rendering is the client's job.
"""

from fastapi import APIRouter, Depends, Query
from typing import Any, Dict, Optional

from renthive.config import settings
from renthive.models.user import User
from renthive.services.favorite import FavoriteService
from renthive.services.property import PropertyService
from renthive.schemas.auth import UserResponse
from renthive.schemas.property import PropertyResponse
from renthive.utils.dependencies import (
    get_current_user,
    get_favorite_service,
    get_property_service,
)


router = APIRouter(tags=["Pages"])


@router.get("/dashboard", summary="Owner dashboard")
async def dashboard(
    current_user: User = Depends(get_current_user),
    property_service: PropertyService = Depends(get_property_service),
    favorite_service: FavoriteService = Depends(get_favorite_service)
) -> Dict[str, Any]:
    """The owner's listings, per-status counts and number of favorites."""
    properties, _total = await property_service.list_user_properties(
        current_user, page=1, limit=settings.max_page_size
    )
    statistics = await property_service.get_owner_statistics(current_user)
    favorites_count = await favorite_service.count_favorites(current_user)

    return {
        "user": UserResponse.model_validate(current_user.to_dict()).model_dump(mode="json"),
        "properties": [
            PropertyResponse.model_validate(p.to_dict()).model_dump(mode="json") for p in properties
        ],
        "statistics": {**statistics, "favorites": favorites_count},
    }


@router.get("/profile", summary="Profile page")
async def profile(current_user: User = Depends(get_current_user)) -> Dict[str, Any]:
    return {"user": UserResponse.model_validate(current_user.to_dict()).model_dump(mode="json")}


@router.get("/login", summary="Sign-in page")
async def login_page(
    redirected_from: Optional[str] = Query(None, alias="redirectedFrom")
) -> Dict[str, Any]:
    """Sign-in page data; ``redirectedFrom`` is where to go after signing in."""
    return {
        "page": "login",
        "redirectedFrom": redirected_from,
        "signInUrl": f"{settings.api_prefix}/auth/signin",
    }
