from __future__ import annotations

from typing import Iterable, List, Literal, Optional

from pydantic import BaseModel

from ..models import ALL_CATEGORIES, Recipe

SortOrder = Literal["newest", "oldest", "rating"]


class RecipeQuery(BaseModel):
    category: Optional[str] = None
    search: Optional[str] = None
    sort: SortOrder = "newest"


def _matches_search(recipe: Recipe, needle: str) -> bool:
    return (
        needle in recipe.title.lower()
        or needle in recipe.description.lower()
        or any(needle in tag.lower() for tag in recipe.tags)
    )


def query_recipes(recipes: Iterable[Recipe], query: RecipeQuery) -> List[Recipe]:
    """
    Filtra (categoría AND búsqueda) y ordena. No modifica la colección de entrada.
    Todas las ordenaciones son estables: los empates conservan el orden previo.
    """
    out = list(recipes)

    if query.category and query.category != ALL_CATEGORIES:
        out = [r for r in out if r.category == query.category]

    needle = (query.search or "").lower()
    if needle.strip():
        out = [r for r in out if _matches_search(r, needle)]

    if query.sort == "oldest":
        out.sort(key=lambda r: r.created_at)
    elif query.sort == "rating":
        out.sort(key=lambda r: r.mean_rating(), reverse=True)
    else:
        out.sort(key=lambda r: r.created_at, reverse=True)
    return out
