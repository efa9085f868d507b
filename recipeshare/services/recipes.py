from __future__ import annotations

import logging
import uuid
from typing import List, Optional

from ..errors import Forbidden, ImageMissing, Unauthorized, ValidationError
from ..models import DIFFICULTIES, AuthenticatedUser, Comment, Identity, Rating, Recipe, now_utc
from ..schemas import RecipeCreate, RecipeUpdate
from ..store import RecipeStore
from .images import ImageStorage
from .query import RecipeQuery, query_recipes

log = logging.getLogger(__name__)

TITLE_LEN = (3, 100)
DESCRIPTION_LEN = (10, 500)
COMMENT_LEN = (1, 500)
RATING_RANGE = (1, 5)


# ---------------------------
# Validación de campos
# ---------------------------

def _text(field: str, label: str, value: Optional[str], bounds: tuple[int, int]) -> str:
    lo, hi = bounds
    text = (value or "").strip()
    if not lo <= len(text) <= hi:
        raise ValidationError(field, f"length {lo}-{hi}", f"{label} must be between {lo} and {hi} characters")
    return text


def _lines(field: str, values: Optional[List[str]], message: str) -> List[str]:
    cleaned = [v.strip() for v in (values or []) if v and v.strip()]
    if not cleaned:
        raise ValidationError(field, "non-empty", message)
    return cleaned


def _category(value: Optional[str]) -> str:
    cat = (value or "").strip()
    if not cat:
        raise ValidationError("category", "non-empty", "Category is required")
    return cat


def _minutes(field: str, label: str, value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValidationError(field, "integer >= 0", f"{label} must be a positive number")
    return value


def _servings(value: Optional[int]) -> Optional[int]:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < 1:
        raise ValidationError("servings", "integer >= 1", "Servings must be at least 1")
    return value


def _difficulty(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    if value not in DIFFICULTIES:
        raise ValidationError("difficulty", "one of Easy, Medium, Hard", "Difficulty must be Easy, Medium, or Hard")
    return value


def _tags(values: Optional[List[str]]) -> List[str]:
    return [t.strip() for t in (values or []) if t and t.strip()]


def _require_user(identity: Identity) -> AuthenticatedUser:
    if not isinstance(identity, AuthenticatedUser):
        raise Unauthorized()
    return identity


class RecipeService:
    """
    Operaciones de escritura sobre la colección (crear, editar, borrar,
    comentar, valorar) y las lecturas que usa la capa HTTP.
    Sólo el autor puede editar o borrar; comentar y valorar, cualquiera autenticado.
    """

    def __init__(self, store: RecipeStore, images: Optional[ImageStorage] = None) -> None:
        self.store = store
        self.images = images

    # --- lecturas ---

    def get(self, recipe_id: str) -> Recipe:
        return self.store.get(recipe_id)

    def list_recipes(self, query: Optional[RecipeQuery] = None) -> List[Recipe]:
        return query_recipes(self.store.all(), query or RecipeQuery())

    # --- escrituras ---

    def _resolve_image(self, uploaded_image: Optional[str], image_url: Optional[str]) -> Optional[str]:
        # la subida tiene prioridad sobre la URL directa
        if uploaded_image:
            if self.images is not None and not self.images.exists(uploaded_image):
                raise ValidationError("uploadedImage", "reference to a stored upload", "Uploaded image not found")
            return uploaded_image
        url = (image_url or "").strip()
        return url or None

    def create(self, data: RecipeCreate, identity: Identity, uploaded_image: Optional[str] = None) -> Recipe:
        user = _require_user(identity)
        fields = dict(
            title=_text("title", "Title", data.title, TITLE_LEN),
            description=_text("description", "Description", data.description, DESCRIPTION_LEN),
            ingredients=_lines("ingredients", data.ingredients, "At least one ingredient is required"),
            instructions=_lines("instructions", data.instructions, "At least one instruction is required"),
            category=_category(data.category),
            prep_time=_minutes("prepTime", "Prep time", data.prep_time),
            cook_time=_minutes("cookTime", "Cook time", data.cook_time),
            servings=_servings(data.servings),
            difficulty=_difficulty(data.difficulty),
            tags=_tags(data.tags),
        )
        image = self._resolve_image(uploaded_image or data.uploaded_image, data.image_url)
        if image is None:
            raise ImageMissing()

        now = now_utc()
        recipe = Recipe(
            image_url=image,
            author_id=user.user_id,
            author_name=user.display_name or "Anonymous",
            author_avatar=user.avatar,
            created_at=now,
            updated_at=now,
            comments=[],
            ratings=[],
            **fields,
        )
        saved = self.store.insert(recipe)
        log.info("recipe %s created by %s", saved.id, user.user_id)
        return saved

    def _owned(self, recipe_id: str, identity: Identity, action: str) -> tuple[AuthenticatedUser, Recipe]:
        user = _require_user(identity)
        recipe = self.store.get(recipe_id)
        if recipe.author_id != user.user_id:
            log.warning("user %s tried to %s recipe %s owned by %s", user.user_id, action, recipe_id, recipe.author_id)
            raise Forbidden(f"Only the author can {action} this recipe", meta={"id": recipe_id})
        return user, recipe

    def update(
        self,
        recipe_id: str,
        patch: RecipeUpdate,
        identity: Identity,
        uploaded_image: Optional[str] = None,
    ) -> Recipe:
        user, _ = self._owned(recipe_id, identity, "edit")

        changes = {}
        if patch.title is not None:
            changes["title"] = _text("title", "Title", patch.title, TITLE_LEN)
        if patch.description is not None:
            changes["description"] = _text("description", "Description", patch.description, DESCRIPTION_LEN)
        if patch.ingredients is not None:
            changes["ingredients"] = _lines("ingredients", patch.ingredients, "At least one ingredient is required")
        if patch.instructions is not None:
            changes["instructions"] = _lines("instructions", patch.instructions, "At least one instruction is required")
        if patch.category is not None:
            changes["category"] = _category(patch.category)
        if patch.prep_time is not None:
            changes["prep_time"] = _minutes("prepTime", "Prep time", patch.prep_time)
        if patch.cook_time is not None:
            changes["cook_time"] = _minutes("cookTime", "Cook time", patch.cook_time)
        if patch.servings is not None:
            changes["servings"] = _servings(patch.servings)
        if patch.difficulty is not None:
            changes["difficulty"] = _difficulty(patch.difficulty)
        if patch.tags is not None:
            changes["tags"] = _tags(patch.tags)
        image = self._resolve_image(uploaded_image or patch.uploaded_image, patch.image_url)
        if image is not None:
            changes["image_url"] = image

        def _write_back(current: Recipe) -> Recipe:
            # se fusiona sobre el estado actual (bajo lock) para no perder comentarios/valoraciones concurrentes
            updated = current.model_copy(update={**changes, "updated_at": now_utc()})
            return self.store.replace(recipe_id, updated)

        saved = self.store.mutate(recipe_id, _write_back)
        log.info("recipe %s updated by %s (%s)", recipe_id, user.user_id, ", ".join(sorted(changes)) or "no fields")
        return saved

    def delete(self, recipe_id: str, identity: Identity) -> None:
        user, _ = self._owned(recipe_id, identity, "delete")
        self.store.delete(recipe_id)
        log.info("recipe %s deleted by %s", recipe_id, user.user_id)

    def add_comment(self, recipe_id: str, text: Optional[str], identity: Identity) -> Comment:
        user = _require_user(identity)
        self.store.get(recipe_id)
        body = _text("text", "Comment", text, COMMENT_LEN)

        def _append(recipe: Recipe) -> Comment:
            taken = {c.id for c in recipe.comments}
            cid = f"c{uuid.uuid4().hex}"
            while cid in taken:
                cid = f"c{uuid.uuid4().hex}"
            comment = Comment(
                id=cid,
                author_id=user.user_id,
                author_name=user.display_name or "Anonymous",
                author_avatar=user.avatar,
                text=body,
                created_at=now_utc(),
            )
            recipe.comments.append(comment)
            return comment

        comment = self.store.mutate(recipe_id, _append)
        log.info("comment %s added to recipe %s by %s", comment.id, recipe_id, user.user_id)
        return comment

    def add_rating(self, recipe_id: str, value: int, identity: Identity) -> Recipe:
        user = _require_user(identity)
        self.store.get(recipe_id)
        lo, hi = RATING_RANGE
        if isinstance(value, bool) or not isinstance(value, int) or not lo <= value <= hi:
            raise ValidationError("value", f"integer {lo}-{hi}", f"Rating must be between {lo} and {hi}")

        def _upsert(recipe: Recipe) -> Recipe:
            existing = recipe.rating_for(user.user_id)
            if existing is not None:
                existing.value = value
            else:
                recipe.ratings.append(Rating(user_id=user.user_id, value=value))
            # las valoraciones no tocan updated_at
            return recipe

        saved = self.store.mutate(recipe_id, _upsert)
        log.info("recipe %s rated %d by %s", recipe_id, value, user.user_id)
        return saved
