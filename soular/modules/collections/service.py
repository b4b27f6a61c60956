from supabase import Client
from soular.core.utils import row_or_none, rows, result_count, slugify, is_uuid, is_unique_violation, utc_now_iso
from soular.modules.collections.schemas import (
    CollectionCreate, CollectionUpdate, CollectionResponse, CollectionDetailResponse,
    CollectionListResponse, CollectionPagination, CollectionFilmAdd, CollectionFilmResponse
)
from soular.modules.films.service import FilmService
from typing import List
from fastapi import HTTPException
import math
import logging

logger = logging.getLogger(__name__)

COLLECTION_COLUMNS = "id, title, slug, description, icon, color, film_count, is_published, created_at, updated_at"
COLLECTION_FILM_COLUMNS = (
    "display_order, "
    "film:films (id, title, slug, description, director, year, duration, category, "
    "thumbnail, is_premium, rating, view_count, created_at)"
)


def flatten_collection_films(film_collections: List[dict]) -> List[dict]:
    """Embedded film rows carrying their display_order; rows without a film are dropped."""
    films = []
    for entry in film_collections:
        film = entry.get("film")
        if isinstance(film, list):
            film = film[0] if film else None
        if not isinstance(film, dict) or not film.get("id"):
            continue
        films.append({**film, "display_order": entry.get("display_order", 0)})
    return films


class CollectionService:
    def __init__(self, supabase: Client):
        self.supabase = supabase

    def list_collections(self, page: int = 1, limit: int = 10) -> CollectionListResponse:
        start = (page - 1) * limit
        try:
            result = self.supabase.table("collections")\
                .select(COLLECTION_COLUMNS, count="exact")\
                .eq("is_published", True)\
                .order("created_at", desc=True)\
                .range(start, start + limit - 1)\
                .execute()
        except Exception as e:
            logger.error(f"Error fetching collections: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch collections")
        total = result_count(result)
        return CollectionListResponse(
            collections=[CollectionResponse(**c) for c in rows(result)],
            pagination=CollectionPagination(
                page=page,
                limit=limit,
                total=total,
                total_pages=math.ceil(total / limit)
            )
        )

    def get_collection(self, id_or_slug: str) -> CollectionDetailResponse:
        """Published collection by UUID or slug, with its films in display order"""
        try:
            query = self.supabase.table("collections")\
                .select(COLLECTION_COLUMNS)\
                .eq("is_published", True)
            if is_uuid(id_or_slug):
                query = query.eq("id", id_or_slug)
            else:
                query = query.eq("slug", id_or_slug)
            collection = row_or_none(query.limit(1).execute())
            if not collection:
                raise HTTPException(status_code=404, detail="Collection not found")

            film_collections = self.supabase.table("film_collections")\
                .select(COLLECTION_FILM_COLUMNS)\
                .eq("collection_id", collection["id"])\
                .order("display_order")\
                .execute()
        except HTTPException:
            raise
        except Exception as e:
            logger.error(f"Error fetching collection {id_or_slug}: {e}")
            raise HTTPException(status_code=500, detail="Failed to fetch collection")

        return CollectionDetailResponse(**collection, films=flatten_collection_films(rows(film_collections)))

    def _collection_exists(self, collection_id: str) -> bool:
        if not is_uuid(collection_id):
            return False
        result = self.supabase.table("collections").select("id").eq("id", collection_id).limit(1).execute()
        return row_or_none(result) is not None

    def create_collection(self, collection_data: CollectionCreate) -> CollectionResponse:
        title = (collection_data.title or "").strip()
        if not title:
            raise HTTPException(status_code=400, detail="Title is required")
        slug = slugify(collection_data.slug or title)
        if not slug:
            raise HTTPException(status_code=400, detail="Could not derive a slug from the title")

        try:
            collection = row_or_none(
                self.supabase.table("collections").insert({
                    "title": title,
                    "slug": slug,
                    "description": collection_data.description,
                    "icon": collection_data.icon or None,
                    "color": collection_data.color or None,
                    "is_published": collection_data.is_published,
                }).execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="A collection with this slug already exists")
            logger.error(f"Error creating collection: {e}")
            raise HTTPException(status_code=500, detail="Failed to create collection")
        if not collection:
            raise HTTPException(status_code=500, detail="Failed to create collection")
        return CollectionResponse(**collection)

    def update_collection(self, collection_id: str, collection_data: CollectionUpdate) -> CollectionResponse:
        fields = collection_data.model_dump(exclude_unset=True)
        update_data = {}
        # empty title, slug or description keep the stored value
        for key in ("title", "description", "slug"):
            if fields.get(key):
                update_data[key] = slugify(fields[key]) if key == "slug" else fields[key]
        for key in ("icon", "color", "is_published"):
            if key in fields:
                update_data[key] = fields[key]
        update_data["updated_at"] = utc_now_iso()

        if not is_uuid(collection_id):
            raise HTTPException(status_code=404, detail="Collection not found")
        try:
            collection = row_or_none(
                self.supabase.table("collections")
                .update(update_data)
                .eq("id", collection_id)
                .execute()
            )
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="A collection with this slug already exists")
            logger.error(f"Error updating collection {collection_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to update collection")
        if not collection:
            raise HTTPException(status_code=404, detail="Collection not found")
        return CollectionResponse(**collection)

    def delete_collection(self, collection_id: str) -> bool:
        if not is_uuid(collection_id):
            raise HTTPException(status_code=404, detail="Collection not found")
        try:
            self.supabase.table("collections").delete().eq("id", collection_id).execute()
            return True
        except Exception as e:
            logger.error(f"Error deleting collection {collection_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to delete collection")

    def add_film(self, collection_id: str, film_data: CollectionFilmAdd) -> CollectionFilmResponse:
        if not film_data.film_id:
            raise HTTPException(status_code=400, detail="film_id is required")
        try:
            if not self._collection_exists(collection_id):
                raise HTTPException(status_code=404, detail="Collection not found")
            if not FilmService(self.supabase).film_exists(film_data.film_id):
                raise HTTPException(status_code=404, detail="Film not found")

            entry = row_or_none(
                self.supabase.table("film_collections").insert({
                    "collection_id": collection_id,
                    "film_id": film_data.film_id,
                    "display_order": film_data.display_order or 0,
                }).execute()
            )
        except HTTPException:
            raise
        except Exception as e:
            if is_unique_violation(e):
                raise HTTPException(status_code=409, detail="Film already in collection")
            logger.error(f"Error adding film to collection {collection_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to add film to collection")
        if not entry:
            raise HTTPException(status_code=500, detail="Failed to add film to collection")
        return CollectionFilmResponse(**entry)

    def remove_film(self, collection_id: str, film_id: str) -> bool:
        if not film_id:
            raise HTTPException(status_code=400, detail="film_id query parameter is required")
        if not is_uuid(collection_id) or not is_uuid(film_id):
            return True
        try:
            self.supabase.table("film_collections")\
                .delete()\
                .eq("collection_id", collection_id)\
                .eq("film_id", film_id)\
                .execute()
            return True
        except Exception as e:
            logger.error(f"Error removing film from collection {collection_id}: {e}")
            raise HTTPException(status_code=500, detail="Failed to remove film from collection")
