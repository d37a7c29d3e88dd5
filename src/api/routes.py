from aiohttp import web

from src.api.errors import error_middleware
from src.api.handlers import MovieHandlers
from src.api.helpers import MAX_BODY_BYTES
from src.application.movie_service import MovieService


def create_app(service: MovieService, environment: str = "development") -> web.Application:
    """Builds the aiohttp application with the /v1 routes wired to service."""
    app = web.Application(client_max_size=MAX_BODY_BYTES, middlewares=[error_middleware])
    handlers = MovieHandlers(service, environment=environment)

    app.router.add_get("/v1/healthcheck", handlers.healthcheck)
    app.router.add_post("/v1/movies", handlers.create_movie)
    app.router.add_get("/v1/movies/{id}", handlers.show_movie)
    app.router.add_patch("/v1/movies/{id}", handlers.update_movie)
    app.router.add_delete("/v1/movies/{id}", handlers.delete_movie)

    async def _close_repository(_: web.Application) -> None:
        await service.repository.close()

    app.on_cleanup.append(_close_repository)
    return app
