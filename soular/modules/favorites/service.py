from supabase import Client
from soular.core.utils import row_or_none, rows, is_uuid, is_unique_violation
from soular.modules.favorites.schemas import FavoriteStatus
from soular.modules.films.service import FilmService
from typing import List
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class FavoriteService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def _find(self, user_id: str, film_id: str):
        return row_or_none(
            self.supabase.table("user_favorites")
            .select("id")
            .eq("user_id", user_id)
            .eq("film_id", film_id)
            .limit(1)
            .execute()
        )

    def is_favorited(self, user_id: str, film_id: str) -> FavoriteStatus:
        if not is_uuid(film_id):
            return FavoriteStatus(favorited=False)
        try:
            return FavoriteStatus(favorited=self._find(user_id, film_id) is not None)
        except Exception as e:
            logger.error(f"Error checking favorite status: {e}")
            raise HTTPException(status_code=500, detail="Failed to check favorite status")

    def add_favorite(self, user_id: str, film_id: str) -> FavoriteStatus:
        """Favourite a film. Adding an existing favourite is not an error."""
        if not FilmService(self.supabase).film_exists(film_id):
            raise HTTPException(status_code=404, detail="Film not found")
        try:
            if self._find(user_id, film_id):
                return FavoriteStatus(favorited=True, message="Film already favorited")
            self.supabase.table("user_favorites").insert({
                "user_id": user_id,
                "film_id": film_id,
            }).execute()
        except Exception as e:
            if is_unique_violation(e):
                return FavoriteStatus(favorited=True, message="Film already favorited")
            logger.error(f"Error adding favorite: {e}")
            raise HTTPException(status_code=500, detail="Failed to add favorite")
        return FavoriteStatus(favorited=True, message="Film added to favorites")

    def remove_favorite(self, user_id: str, film_id: str) -> FavoriteStatus:
        if is_uuid(film_id):
            try:
                self.supabase.table("user_favorites")\
                    .delete()\
                    .eq("user_id", user_id)\
                    .eq("film_id", film_id)\
                    .execute()
            except Exception as e:
                logger.error(f"Error removing favorite: {e}")
                raise HTTPException(status_code=500, detail="Failed to remove favorite")
        return FavoriteStatus(favorited=False, message="Film removed from favorites")

    def list_favorites(self, user_id: str) -> List[dict]:
        try:
            result = self.supabase.rpc("get_user_favorites", {"user_uuid": user_id}).execute()
            return rows(result)
        except Exception as e:
            logger.error(f"Error fetching favorites: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch favorites")
