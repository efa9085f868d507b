from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Iterable, List, Protocol, TypeVar

log = logging.getLogger(__name__)

T = TypeVar("T")


class FavoritesBackend(Protocol):
    def load(self) -> List[str]: ...

    def save(self, ids: List[str]) -> None: ...


class MemoryBackend:
    def __init__(self, ids: Iterable[str] = ()) -> None:
        self.ids = list(ids)

    def load(self) -> List[str]:
        return list(self.ids)

    def save(self, ids: List[str]) -> None:
        self.ids = list(ids)


class JsonFileBackend:
    """
    Lista de ids en un fichero JSON (equivalente al localStorage del navegador).
    Si el contenido no se puede leer se arranca con la lista vacía.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def load(self) -> List[str]:
        if not self.path.exists():
            return []
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            log.error("Failed to parse favorites from %s: %s", self.path, e)
            return []
        if not isinstance(data, list):
            log.error("Favorites file %s does not hold a list", self.path)
            return []
        return [str(x) for x in data]

    def save(self, ids: List[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(ids, ensure_ascii=False), encoding="utf-8")


class FavoritesStore:
    """Conjunto local de recetas favoritas; se guarda cada vez que cambia."""

    def __init__(self, backend: FavoritesBackend) -> None:
        self.backend = backend
        self._ids: List[str] = []
        self.load()

    def load(self) -> None:
        seen = set()
        self._ids = [i for i in self.backend.load() if not (i in seen or seen.add(i))]

    def save(self) -> None:
        self.backend.save(list(self._ids))

    def toggle(self, recipe_id: str) -> bool:
        """Devuelve True si la receta queda marcada como favorita."""
        if recipe_id in self._ids:
            self._ids.remove(recipe_id)
            added = False
        else:
            self._ids.append(recipe_id)
            added = True
        self.save()
        return added

    def is_favorite(self, recipe_id: str) -> bool:
        return recipe_id in self._ids

    def ids(self) -> List[str]:
        return list(self._ids)

    def as_set(self) -> frozenset[str]:
        return frozenset(self._ids)

    def filter(self, recipes: Iterable[T]) -> List[T]:
        # conserva el orden de la colección, no el de marcado
        return [r for r in recipes if getattr(r, "id", None) in self._ids]
