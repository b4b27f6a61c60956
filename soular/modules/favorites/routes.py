from fastapi import APIRouter, Depends
from soular.database.supabase_client import get_supabase
from soular.modules.favorites.schemas import FavoriteStatus
from soular.modules.favorites.service import FavoriteService
from soular.core.dependencies import get_current_user, get_optional_user
from supabase import Client
from typing import List, Optional, Dict, Any

router = APIRouter(tags=["favorites"])


def get_favorite_service(supabase: Client = Depends(get_supabase)) -> FavoriteService:
    return FavoriteService(supabase)


@router.get("/films/{film_id}/favorite", response_model=FavoriteStatus, response_model_exclude_none=True)
async def get_favorite_status(
    film_id: str,
    user_data: Optional[Dict] = Depends(get_optional_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    """Whether the caller has favourited the film; always false for guests"""
    if user_data is None:
        return FavoriteStatus(favorited=False)
    return service.is_favorited(user_data["id"], film_id)


@router.post("/films/{film_id}/favorite", response_model=FavoriteStatus)
async def add_favorite(
    film_id: str,
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    return service.add_favorite(user_data["id"], film_id)


@router.delete("/films/{film_id}/favorite", response_model=FavoriteStatus)
async def remove_favorite(
    film_id: str,
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    return service.remove_favorite(user_data["id"], film_id)


@router.get("/favorites", response_model=List[Dict[str, Any]])
async def list_favorites(
    user_data: Dict = Depends(get_current_user),
    service: FavoriteService = Depends(get_favorite_service)
):
    """The caller's favourite films, newest first"""
    return service.list_favorites(user_data["id"])
