import logging
from pathlib import Path
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import ORJSONResponse
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.utils import get_openapi
from fastapi.staticfiles import StaticFiles
from prometheus_client import CollectorRegistry
from prometheus_fastapi_instrumentator import Instrumentator

from .config import Settings, settings as default_settings
from .errors import install_exception_handlers
from .middleware.rate_limit import RateLimitMiddleware
from .middleware.size_limit import SizeLimitMiddleware
from .routes.auth import router as auth_router
from .routes.recipes import router as recipes_router
from .routes.uploads import router as uploads_router
from .services.images import ImageStorage
from .services.recipes import RecipeService
from .services.seed import seed_demo
from .store import RecipeStore

log = logging.getLogger(__name__)

TAGS_METADATA = [
    {"name": "recipes", "description": "Recetas: listado con filtros, detalle, CRUD del autor, comentarios y valoraciones."},
    {"name": "uploads", "description": "Subida de imágenes de recetas."},
    {"name": "auth", "description": "Autenticación JWT (modo dev con PIN)."},
    {"name": "admin", "description": "Healthcheck y métricas."},
]


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )


def create_app(settings: Optional[Settings] = None, store: Optional[RecipeStore] = None) -> FastAPI:
    settings = settings or default_settings
    configure_logging(settings.log_level)

    app = FastAPI(
        title="RecipeShare API",
        version="0.3.0",
        description="Backend de RecipeShare: recetas de la comunidad con comentarios, valoraciones e imágenes.",
        default_response_class=ORJSONResponse,
        openapi_tags=TAGS_METADATA,
        contact={"name": "Equipo RecipeShare", "email": "dev@recipeshare.local"},
        license_info={"name": "MIT", "url": "https://opensource.org/licenses/MIT"},
    )

    # Estado propio de esta instancia (nada global: cada app/test tiene su colección)
    if store is None:
        store = RecipeStore()
        if settings.seed_demo_data:
            n = seed_demo(store)
            log.info("seeded %d demo recipes", n)
    images = ImageStorage(settings.upload_dir, max_bytes=settings.max_upload_bytes)
    app.state.settings = settings
    app.state.store = store
    app.state.images = images
    app.state.recipe_service = RecipeService(store, images)

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.parsed_cors(settings.cors_allow_origins),
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=settings.parsed_cors(settings.cors_allow_methods),
        allow_headers=settings.parsed_cors(settings.cors_allow_headers),
    )

    # Middlewares
    app.add_middleware(SizeLimitMiddleware, max_bytes=settings.max_body_bytes)  # 413 si Content-Length excede
    app.add_middleware(RateLimitMiddleware, settings=settings)                  # 429 si exceso RPM

    # Prometheus (registro propio por app)
    instrumentator = Instrumentator(registry=CollectorRegistry()).instrument(app)
    instrumentator.expose(app, include_in_schema=False, endpoint="/metrics")

    # Exception handlers
    install_exception_handlers(app)

    # Routers
    app.include_router(auth_router)
    app.include_router(recipes_router)
    app.include_router(uploads_router)

    # Imágenes subidas (después de los routers: POST /uploads/images tiene prioridad)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir, check_dir=False), name="uploads")

    @app.on_event("startup")
    def ensure_upload_dir():
        Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)

    @app.get("/health", tags=["admin"], summary="Healthcheck simple")
    async def health(request: Request):
        return {"status": "ok", "recipes": len(request.app.state.store), "env": settings.service_env}

    # --- OpenAPI servers ---
    def custom_openapi():
        if app.openapi_schema:
            return app.openapi_schema
        schema = get_openapi(
            title=app.title,
            version=app.version,
            description=app.description,
            routes=app.routes,
            tags=TAGS_METADATA,
        )
        schema["servers"] = [{"url": settings.server_public_url, "description": f"{settings.service_env}"}]
        app.openapi_schema = schema
        return app.openapi_schema
    app.openapi = custom_openapi  # type: ignore

    return app


app = create_app()
