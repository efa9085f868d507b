from fastapi import Request

from .services.images import ImageStorage
from .services.recipes import RecipeService


def get_recipe_service(request: Request) -> RecipeService:
    return request.app.state.recipe_service


def get_image_storage(request: Request) -> ImageStorage:
    return request.app.state.images
