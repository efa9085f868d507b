from __future__ import annotations

from typing import List, Literal, Optional, Union
from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


Difficulty = Literal["Easy", "Medium", "Hard"]

DIFFICULTIES = ("Easy", "Medium", "Hard")
RECIPE_CATEGORIES = ["Dinner", "Dessert", "Vegan", "Breakfast", "Soup"]
ALL_CATEGORIES = "All"


def now_utc() -> datetime:
    """Fecha/hora actual en UTC con tzinfo (aware)."""
    return datetime.now(timezone.utc)


class CamelModel(BaseModel):
    """El cliente web habla camelCase; internamente usamos snake_case."""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Comment(CamelModel):
    id: str
    author_id: str
    author_name: str
    author_avatar: Optional[str] = None
    text: str
    created_at: datetime = Field(default_factory=now_utc)


class Rating(CamelModel):
    user_id: str
    value: int


class Recipe(CamelModel):
    """
    Receta publicada. `comments` en orden de inserción (= orden de visualización),
    `ratings` con como mucho una entrada por usuario.
    """
    id: str = ""
    title: str
    description: str
    image_url: str
    ingredients: List[str]
    instructions: List[str]
    category: str
    prep_time: Optional[int] = None
    cook_time: Optional[int] = None
    servings: Optional[int] = None
    difficulty: Optional[Difficulty] = None
    author_id: str
    author_name: str
    author_avatar: Optional[str] = None
    created_at: datetime = Field(default_factory=now_utc)
    updated_at: datetime = Field(default_factory=now_utc)
    comments: List[Comment] = Field(default_factory=list)
    ratings: List[Rating] = Field(default_factory=list)
    tags: List[str] = Field(default_factory=list)

    def mean_rating(self) -> float:
        if not self.ratings:
            return 0.0
        return sum(r.value for r in self.ratings) / len(self.ratings)

    def rating_for(self, user_id: str) -> Optional[Rating]:
        for r in self.ratings:
            if r.user_id == user_id:
                return r
        return None


# --- Identidad del que hace la petición ---

class Anonymous(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["anonymous"] = "anonymous"


class AuthenticatedUser(BaseModel):
    model_config = ConfigDict(frozen=True)
    kind: Literal["user"] = "user"
    user_id: str
    display_name: str
    avatar: Optional[str] = None


Identity = Union[Anonymous, AuthenticatedUser]

ANONYMOUS = Anonymous()
