from __future__ import annotations

from typing import List, Optional

from pydantic import EmailStr, StrictInt

from .models import CamelModel, Recipe


# === Recetas ===
# Los límites de longitud/rango se validan en RecipeService para poder
# informar campo y restricción; aquí sólo tipos (enteros estrictos: true o 4.0 no cuentan).

class RecipeCreate(CamelModel):
    title: str = ""
    description: str = ""
    image_url: Optional[str] = None
    uploaded_image: Optional[str] = None  # referencia devuelta por POST /uploads/images
    ingredients: List[str] = []
    instructions: List[str] = []
    category: str = ""
    prep_time: Optional[StrictInt] = None
    cook_time: Optional[StrictInt] = None
    servings: Optional[StrictInt] = None
    difficulty: Optional[str] = None
    tags: Optional[List[str]] = None


class RecipeUpdate(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None
    image_url: Optional[str] = None
    uploaded_image: Optional[str] = None
    ingredients: Optional[List[str]] = None
    instructions: Optional[List[str]] = None
    category: Optional[str] = None
    prep_time: Optional[StrictInt] = None
    cook_time: Optional[StrictInt] = None
    servings: Optional[StrictInt] = None
    difficulty: Optional[str] = None
    tags: Optional[List[str]] = None


class CommentCreate(CamelModel):
    text: str = ""


class RatingCreate(CamelModel):
    value: StrictInt


class RecipeView(Recipe):
    average_rating: float = 0.0
    rating_count: int = 0
    comment_count: int = 0
    user_rating: Optional[int] = None
    is_favorite: bool = False
    can_edit: bool = False


class ImageUploadOut(CamelModel):
    image_url: str


# === Auth ===

class LoginRequest(CamelModel):
    email: EmailStr
    name: Optional[str] = None
    dev_pin: Optional[str] = None


class LoginResponse(CamelModel):
    access_token: str
    token_type: str = "bearer"
    user_id: str
