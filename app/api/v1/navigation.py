"""Panel navigation: sections the authenticated user is allowed to see."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.users import get_user_resource
from app.core.config import settings
from app.schemas.navigation import NavigationItem, NavigationResponse
from app.services.user_resource import RESOURCE_META, UserResource

router = APIRouter()


@router.get("", response_model=NavigationResponse)
def get_navigation(
    users: Annotated[UserResource, Depends(get_user_resource)],
) -> NavigationResponse:
    """Menu entries; a section is listed only when its resource registers navigation for the actor."""
    items: list[NavigationItem] = []
    if users.should_register_navigation():
        items.append(
            NavigationItem(
                label=RESOURCE_META.navigation_label,
                icon=RESOURCE_META.navigation_icon,
                path=f"{settings.API_V1_PREFIX}/users",
            )
        )
    return NavigationResponse(items=items)
