from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.collections.schemas import (
    CollectionCreate, CollectionUpdate, CollectionResponse, CollectionDetailResponse,
    CollectionListResponse, CollectionFilmAdd, CollectionFilmResponse
)
from soular.modules.collections.service import CollectionService
from soular.core.dependencies import require_permission
from supabase import Client
from typing import Optional, Dict

router = APIRouter(prefix="/collections", tags=["collections"])


def get_collection_service(supabase: Client = Depends(get_supabase)) -> CollectionService:
    return CollectionService(supabase)


@router.get("", response_model=CollectionListResponse)
async def list_collections(
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    service: CollectionService = Depends(get_collection_service)
):
    """List published collections, newest first"""
    return service.list_collections(page=page, limit=limit)


@router.post("", response_model=CollectionResponse, status_code=201)
async def create_collection(
    collection_data: CollectionCreate,
    user_data: Dict = Depends(require_permission("collections:manage")),
    service: CollectionService = Depends(get_collection_service)
):
    return service.create_collection(collection_data)


@router.get("/{id_or_slug}", response_model=CollectionDetailResponse)
async def get_collection(
    id_or_slug: str,
    service: CollectionService = Depends(get_collection_service)
):
    """Get a published collection by ID or slug, with its films"""
    return service.get_collection(id_or_slug)


@router.put("/{collection_id}", response_model=CollectionResponse)
async def update_collection(
    collection_id: str,
    collection_data: CollectionUpdate,
    user_data: Dict = Depends(require_permission("collections:manage")),
    service: CollectionService = Depends(get_collection_service)
):
    return service.update_collection(collection_id, collection_data)


@router.delete("/{collection_id}")
async def delete_collection(
    collection_id: str,
    user_data: Dict = Depends(require_permission("collections:manage")),
    service: CollectionService = Depends(get_collection_service)
):
    service.delete_collection(collection_id)
    return {"success": True}


@router.post("/{collection_id}/films", response_model=CollectionFilmResponse, status_code=201)
async def add_film_to_collection(
    collection_id: str,
    film_data: CollectionFilmAdd,
    user_data: Dict = Depends(require_permission("collections:manage")),
    service: CollectionService = Depends(get_collection_service)
):
    return service.add_film(collection_id, film_data)


@router.delete("/{collection_id}/films")
async def remove_film_from_collection(
    collection_id: str,
    film_id: Optional[str] = None,
    user_data: Dict = Depends(require_permission("collections:manage")),
    service: CollectionService = Depends(get_collection_service)
):
    service.remove_film(collection_id, film_id)
    return {"success": True}
