from __future__ import annotations

from typing import AbstractSet, Iterable, List

from ..models import AuthenticatedUser, Identity, Recipe
from ..schemas import RecipeView


def present(recipe: Recipe, identity: Identity, favorites: AbstractSet[str] = frozenset()) -> RecipeView:
    user_rating = None
    can_edit = False
    if isinstance(identity, AuthenticatedUser):
        mine = recipe.rating_for(identity.user_id)
        user_rating = mine.value if mine else None
        can_edit = recipe.author_id == identity.user_id
    return RecipeView(
        **recipe.model_dump(),
        average_rating=recipe.mean_rating(),
        rating_count=len(recipe.ratings),
        comment_count=len(recipe.comments),
        user_rating=user_rating,
        is_favorite=recipe.id in favorites,
        can_edit=can_edit,
    )


def present_many(
    recipes: Iterable[Recipe],
    identity: Identity,
    favorites: AbstractSet[str] = frozenset(),
) -> List[RecipeView]:
    return [present(r, identity, favorites) for r in recipes]
