from fastapi import APIRouter, Depends, Query
from soular.database.supabase_client import get_supabase
from soular.modules.films.schemas import FilmCreate, FilmListResponse, FilmDetailResponse, FilmCreateResponse
from soular.modules.films.service import FilmService
from soular.core.dependencies import require_permission
from supabase import Client
from typing import Optional, Dict

router = APIRouter(prefix="/films", tags=["films"])


def get_film_service(supabase: Client = Depends(get_supabase)) -> FilmService:
    return FilmService(supabase)


@router.get("", response_model=FilmListResponse)
async def list_films(
    category: Optional[str] = None,
    search: Optional[str] = None,
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    service: FilmService = Depends(get_film_service)
):
    """List films newest first, optionally filtered by category and search term"""
    return service.list_films(category=category, search=search, limit=limit, offset=offset)


@router.post("", response_model=FilmCreateResponse, status_code=201)
async def create_film(
    film_data: FilmCreate,
    user_data: Dict = Depends(require_permission("films:create")),
    service: FilmService = Depends(get_film_service)
):
    return service.create_film(film_data)


@router.get("/{film_id}", response_model=FilmDetailResponse)
async def get_film(
    film_id: str,
    service: FilmService = Depends(get_film_service)
):
    """Get a film by ID and count the view"""
    return service.get_film(film_id)
