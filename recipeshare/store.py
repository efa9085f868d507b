from __future__ import annotations

import logging
import threading
import uuid
from typing import Callable, Dict, Iterable, List, Optional, Set, TypeVar

from pydantic import BaseModel

from .errors import NotFound
from .models import Recipe

log = logging.getLogger(__name__)

T = TypeVar("T")


class RecipeStore:
    """
    Colección en memoria de recetas, en orden de inserción.

    Un solo escritor a la vez (RLock); las lecturas devuelven copias profundas
    para que nadie fuera del store comparta estado mutable con él.
    """

    def __init__(self, recipes: Iterable[Recipe] = ()) -> None:
        self._lock = threading.RLock()
        self._items: Dict[str, Recipe] = {}
        self._issued: Set[str] = set()
        for r in recipes:
            self.insert(r)

    def _new_id(self) -> str:
        while True:
            rid = uuid.uuid4().hex
            if rid not in self._issued:
                self._issued.add(rid)
                return rid

    def insert(self, recipe: Recipe) -> Recipe:
        with self._lock:
            stored = recipe.model_copy(deep=True)
            stored.id = self._new_id()
            self._items[stored.id] = stored
            log.debug("recipe %s inserted", stored.id)
            return stored.model_copy(deep=True)

    def find(self, recipe_id: str) -> Optional[Recipe]:
        with self._lock:
            r = self._items.get(recipe_id)
            return r.model_copy(deep=True) if r is not None else None

    def get(self, recipe_id: str) -> Recipe:
        r = self.find(recipe_id)
        if r is None:
            raise NotFound(recipe_id)
        return r

    def replace(self, recipe_id: str, recipe: Recipe) -> Recipe:
        with self._lock:
            if recipe_id not in self._items:
                raise NotFound(recipe_id)
            stored = recipe.model_copy(deep=True)
            stored.id = recipe_id
            # dict conserva la posición original de la clave
            self._items[recipe_id] = stored
            return stored.model_copy(deep=True)

    def delete(self, recipe_id: str) -> None:
        with self._lock:
            if recipe_id not in self._items:
                raise NotFound(recipe_id)
            del self._items[recipe_id]

    def mutate(self, recipe_id: str, fn: Callable[[Recipe], T]) -> T:
        """Read-modify-write atómico sobre una receta; `fn` recibe la instancia almacenada."""
        with self._lock:
            r = self._items.get(recipe_id)
            if r is None:
                raise NotFound(recipe_id)
            result = fn(r)
            if isinstance(result, BaseModel):
                return result.model_copy(deep=True)
            return result

    def all(self) -> List[Recipe]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._items.values()]

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def __contains__(self, recipe_id: object) -> bool:
        with self._lock:
            return recipe_id in self._items
