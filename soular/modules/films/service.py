from supabase import Client
from soular.config.content_config import FILM_CATEGORIES
from soular.core.utils import (
    row_or_none, rows, result_count, clean_search, ilike_any, slugify, is_uuid, is_unique_violation, utc_now
)
from soular.modules.films.schemas import (
    FilmCreate, FilmResponse, FilmListResponse, FilmDetailResponse, FilmCreateResponse, Pagination
)
from typing import Optional
from fastapi import HTTPException
import logging

logger = logging.getLogger(__name__)


class FilmService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_films(
        self,
        category: Optional[str] = None,
        search: Optional[str] = None,
        limit: int = 10,
        offset: int = 0
    ) -> FilmListResponse:
        try:
            query = self.supabase.table("films")\
                .select("*", count="exact")\
                .order("created_at", desc=True)
            if category and category != "all":
                query = query.eq("category", category)
            term = clean_search(search)
            if term:
                query = query.or_(ilike_any(["title", "description"], term))
            result = query.range(offset, offset + limit - 1).execute()
            total = result_count(result)
            return FilmListResponse(
                films=[FilmResponse(**f) for f in rows(result)],
                pagination=Pagination(total=total, limit=limit, offset=offset, has_more=total > offset + limit)
            )
        except Exception as e:
            logger.error(f"Error fetching films: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch films")

    def film_exists(self, film_id: str) -> bool:
        if not is_uuid(film_id):
            return False
        try:
            result = self.supabase.table("films").select("id").eq("id", film_id).limit(1).execute()
            return row_or_none(result) is not None
        except Exception as e:
            logger.error(f"Error checking film {film_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch film")

    def get_film(self, film_id: str) -> FilmDetailResponse:
        if not is_uuid(film_id):
            raise HTTPException(status_code=404, detail="Film not found")
        try:
            film = row_or_none(
                self.supabase.table("films").select("*").eq("id", film_id).limit(1).execute()
            )
        except Exception as e:
            logger.error(f"Error fetching film {film_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch film")
        if not film:
            raise HTTPException(status_code=404, detail="Film not found")

        self.increment_views(film_id)
        return FilmDetailResponse(film=FilmResponse(**film))

    def increment_views(self, film_id: str) -> None:
        try:
            self.supabase.rpc("increment_film_views", {"p_film_id": film_id}).execute()
        except Exception as e:
            logger.warning(f"Failed to increment views for film {film_id}: {e}")

    def create_film(self, film_data: FilmCreate) -> FilmCreateResponse:
        title = (film_data.title or "").strip()
        director = (film_data.director or "").strip()
        youtube_url = (film_data.youtube_url or "").strip()
        if not title or not director or not film_data.category or not youtube_url:
            raise HTTPException(
                status_code=400,
                detail="Missing required fields: title, director, category, and youtube_url are required"
            )
        if film_data.category not in FILM_CATEGORIES:
            raise HTTPException(
                status_code=400,
                detail=f"Invalid category. Category must be one of: {', '.join(FILM_CATEGORIES)}"
            )

        slug = slugify(film_data.slug or title)
        if not slug:
            raise HTTPException(status_code=400, detail="Could not derive a slug from the title")

        try:
            existing = self.supabase.table("films").select("id").eq("slug", slug).limit(1).execute()
            if row_or_none(existing):
                raise HTTPException(
                    status_code=409,
                    detail="A film with this slug already exists. Please use a different title."
                )

            result = self.supabase.table("films").insert({
                "title": title,
                "slug": slug,
                "description": film_data.description or None,
                "director": director,
                "year": film_data.year or utc_now().year,
                "duration": film_data.duration or 0,
                "category": film_data.category,
                "youtube_url": youtube_url,
                "thumbnail": film_data.thumbnail or None,
                "is_premium": bool(film_data.is_premium),
                "is_published": film_data.is_published is not False,
            }).execute()
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(
                    status_code=409,
                    detail="A film with this slug already exists. Please use a different title."
                )
            logger.error(f"Error creating film: {e}")
            raise HTTPException(status_code=500, detail="Failed to create film")

        film = row_or_none(result)
        if not film:
            raise HTTPException(status_code=500, detail="Failed to create film")
        logger.info(f"Film created: {film.get('id')} ({slug})")
        return FilmCreateResponse(message="Film created successfully", film=FilmResponse(**film))
