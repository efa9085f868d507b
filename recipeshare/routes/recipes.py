from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Response

from ..deps import get_recipe_service
from ..errors import ErrorResponse
from ..models import ALL_CATEGORIES, RECIPE_CATEGORIES, Comment, Identity
from ..schemas import CommentCreate, RatingCreate, RecipeCreate, RecipeUpdate, RecipeView
from ..security import get_identity
from ..services.presentation import present, present_many
from ..services.query import RecipeQuery, SortOrder
from ..services.recipes import RecipeService

router = APIRouter(prefix="/recipes", tags=["recipes"])


@router.get(
    "",
    response_model=List[RecipeView],
    summary="Listar recetas (filtro por categoría, búsqueda y orden)",
)
def list_recipes(
    category: Optional[str] = Query(None, examples=["Dessert"]),
    search: Optional[str] = Query(None, examples=["pasta"]),
    sort: SortOrder = Query("newest"),
    favorites: List[str] = Query(default=[], description="Ids favoritos del cliente, para marcar isFavorite"),
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    recipes = service.list_recipes(RecipeQuery(category=category, search=search, sort=sort))
    return present_many(recipes, identity, frozenset(favorites))


@router.get("/categories", response_model=List[str], summary="Categorías disponibles")
def list_categories():
    return [ALL_CATEGORIES] + RECIPE_CATEGORIES


@router.get(
    "/{recipe_id}",
    response_model=RecipeView,
    summary="Obtener una receta por id",
    responses={404: {"model": ErrorResponse}},
)
def get_recipe(
    recipe_id: str,
    favorites: List[str] = Query(default=[]),
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    return present(service.get(recipe_id), identity, frozenset(favorites))


@router.post(
    "",
    response_model=RecipeView,
    status_code=201,
    summary="Crear receta (autor = usuario autenticado)",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}},
)
def create_recipe(
    data: RecipeCreate,
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    return present(service.create(data, identity), identity)


@router.put(
    "/{recipe_id}",
    response_model=RecipeView,
    summary="Actualizar receta (sólo el autor)",
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        403: {"model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
)
def update_recipe(
    recipe_id: str,
    data: RecipeUpdate,
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    return present(service.update(recipe_id, data, identity), identity)


@router.delete(
    "/{recipe_id}",
    status_code=204,
    summary="Eliminar receta (sólo el autor)",
    responses={401: {"model": ErrorResponse}, 403: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def delete_recipe(
    recipe_id: str,
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    service.delete(recipe_id, identity)
    return Response(status_code=204)


@router.post(
    "/{recipe_id}/comments",
    response_model=Comment,
    status_code=201,
    summary="Añadir comentario",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def add_comment(
    recipe_id: str,
    data: CommentCreate,
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    return service.add_comment(recipe_id, data.text, identity)


@router.post(
    "/{recipe_id}/ratings",
    response_model=RecipeView,
    summary="Valorar receta (1-5); una valoración por usuario, la segunda reemplaza",
    responses={400: {"model": ErrorResponse}, 401: {"model": ErrorResponse}, 404: {"model": ErrorResponse}},
)
def add_rating(
    recipe_id: str,
    data: RatingCreate,
    service: RecipeService = Depends(get_recipe_service),
    identity: Identity = Depends(get_identity),
):
    return present(service.add_rating(recipe_id, data.value, identity), identity)
