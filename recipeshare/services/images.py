from __future__ import annotations

import logging
import re
import secrets
import time
from pathlib import Path
from typing import Optional

from ..errors import ValidationError

log = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = re.compile(r"^\.(jpe?g|png|gif|webp)$")
ALLOWED_MIME = re.compile(r"^image/(jpe?g|png|gif|webp)$")
URL_PREFIX = "/uploads/"


class ImageStorage:
    """
    Guarda imágenes subidas en disco y devuelve una referencia estable
    (`/uploads/<fichero>`) para usar como imageUrl.
    """

    def __init__(self, upload_dir: str | Path, max_bytes: int = 5 * 1024 * 1024) -> None:
        self.root = Path(upload_dir)
        self.max_bytes = max_bytes

    def _check(self, filename: str, content_type: Optional[str], size: int) -> str:
        ext = Path(filename or "").suffix.lower()
        mime = (content_type or "").split(";", 1)[0].strip().lower()
        # extensión Y tipo MIME deben ser de imagen
        if not (ALLOWED_EXTENSIONS.match(ext) and ALLOWED_MIME.match(mime)):
            raise ValidationError("image", "image file (jpeg, png, gif, webp)", "Only image files are allowed!")
        if size > self.max_bytes:
            raise ValidationError("image", f"max {self.max_bytes} bytes", "Image file too large")
        return ext

    def save(self, filename: str, content_type: Optional[str], data: bytes) -> str:
        ext = self._check(filename, content_type, len(data))
        self.root.mkdir(parents=True, exist_ok=True)
        name = f"image-{int(time.time() * 1000)}-{secrets.randbelow(10**9)}{ext}"
        (self.root / name).write_bytes(data)
        log.info("stored upload %s (%d bytes)", name, len(data))
        return URL_PREFIX + name

    def path_for(self, ref: str) -> Optional[Path]:
        if not ref.startswith(URL_PREFIX):
            return None
        name = ref[len(URL_PREFIX):]
        # sólo nombres planos generados por save()
        if not name or "/" in name or "\\" in name or name.startswith("."):
            return None
        return self.root / name

    def exists(self, ref: str) -> bool:
        p = self.path_for(ref)
        return p is not None and p.is_file()
