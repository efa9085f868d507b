from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import httpx

from .errors import Forbidden, ImageMissing, NotFound, RecipeShareError, Unauthorized, ValidationError
from .models import Comment
from .schemas import RecipeCreate, RecipeUpdate, RecipeView
from .services.favorites import FavoritesStore

log = logging.getLogger(__name__)


def _raise_for_error(resp: httpx.Response) -> None:
    """Convierte el sobre ErrorResponse de la API en la excepción de dominio correspondiente."""
    if resp.is_success:
        return
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    code = body.get("code")
    detail = body.get("detail") or f"HTTP error! status: {resp.status_code}"
    meta = body.get("meta") or {}
    if code == "not_found":
        raise NotFound(str(meta.get("id", "")))
    if code == "forbidden":
        raise Forbidden(detail, meta=meta)
    if code == "unauthorized":
        raise Unauthorized(detail)
    if code == "image_missing":
        raise ImageMissing(detail)
    if code == "validation_error" and "field" in meta:
        raise ValidationError(meta["field"], meta.get("constraint", ""), detail)
    err = RecipeShareError(detail, meta=meta or None)
    err.status_code = resp.status_code
    err.code = code or "error"
    raise err


class RecipeShareClient:
    """
    Cliente de la API. Los favoritos viven en local (FavoritesStore) y se
    envían en cada lectura para que la API marque isFavorite.
    """

    def __init__(
        self,
        http: httpx.Client,
        favorites: FavoritesStore,
        token: Optional[str] = None,
    ) -> None:
        self.http = http
        self.favorites = favorites
        self.token = token

    def _headers(self) -> Dict[str, str]:
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    def _request(self, method: str, url: str, **kwargs: Any) -> httpx.Response:
        resp = self.http.request(method, url, headers=self._headers(), **kwargs)
        _raise_for_error(resp)
        return resp

    # --- auth ---

    def login(self, email: str, dev_pin: str, name: Optional[str] = None) -> str:
        resp = self._request("POST", "/auth/login", json={"email": email, "devPin": dev_pin, "name": name})
        self.token = resp.json()["accessToken"]
        return self.token

    # --- recetas ---

    def list_recipes(self, category: Optional[str] = None, search: Optional[str] = None, sort: Optional[str] = None) -> List[RecipeView]:
        params: List[tuple[str, str]] = []
        if category and category != "All":
            params.append(("category", category))
        if search:
            params.append(("search", search))
        if sort:
            params.append(("sort", sort))
        params.extend(("favorites", fid) for fid in self.favorites.ids())
        resp = self._request("GET", "/recipes", params=params)
        return [RecipeView.model_validate(r) for r in resp.json()]

    def get_recipe(self, recipe_id: str) -> RecipeView:
        params = [("favorites", fid) for fid in self.favorites.ids()]
        resp = self._request("GET", f"/recipes/{recipe_id}", params=params)
        return RecipeView.model_validate(resp.json())

    def create_recipe(self, data: RecipeCreate) -> RecipeView:
        resp = self._request("POST", "/recipes", json=data.model_dump(by_alias=True, exclude_none=True))
        return RecipeView.model_validate(resp.json())

    def update_recipe(self, recipe_id: str, data: RecipeUpdate) -> RecipeView:
        resp = self._request("PUT", f"/recipes/{recipe_id}", json=data.model_dump(by_alias=True, exclude_none=True))
        return RecipeView.model_validate(resp.json())

    def delete_recipe(self, recipe_id: str) -> None:
        self._request("DELETE", f"/recipes/{recipe_id}")
        # una receta borrada deja de ser favorita
        if self.favorites.is_favorite(recipe_id):
            self.favorites.toggle(recipe_id)

    def add_comment(self, recipe_id: str, text: str) -> Comment:
        resp = self._request("POST", f"/recipes/{recipe_id}/comments", json={"text": text})
        return Comment.model_validate(resp.json())

    def rate_recipe(self, recipe_id: str, value: int) -> RecipeView:
        resp = self._request("POST", f"/recipes/{recipe_id}/ratings", json={"value": value})
        return RecipeView.model_validate(resp.json())

    def upload_image(self, filename: str, content: bytes, content_type: str) -> str:
        resp = self._request("POST", "/uploads/images", files={"image": (filename, content, content_type)})
        return resp.json()["imageUrl"]

    # --- favoritos (locales) ---

    def toggle_favorite(self, recipe_id: str) -> bool:
        return self.favorites.toggle(recipe_id)

    def favorite_recipes(self) -> List[RecipeView]:
        return self.favorites.filter(self.list_recipes())
