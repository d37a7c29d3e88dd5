from aiohttp import web

from src.api.helpers import read_id_param, read_json, write_json
from src.application.movie_service import MovieService
from src.domain.models import CreateMovieInput, UpdateMovieInput

VERSION = "1.0.0"


class MovieHandlers:
    """
    HTTP handlers for the /v1 routes.

    Handlers only translate between HTTP and the service; failures are raised
    and turned into responses by the error middleware.
    """

    def __init__(self, service: MovieService, environment: str = "development"):
        self.service = service
        self.environment = environment

    async def healthcheck(self, request: web.Request) -> web.Response:
        return write_json({
            "status": "available",
            "system_info": {
                "environment": self.environment,
                "version": VERSION,
            },
        })

    async def create_movie(self, request: web.Request) -> web.Response:
        data = await read_json(request, CreateMovieInput)
        movie = await self.service.create_movie(data)

        headers = {"Location": f"/v1/movies/{movie.id}"}
        return write_json({"movie": movie.model_dump(mode="json")}, status=201, headers=headers)

    async def show_movie(self, request: web.Request) -> web.Response:
        movie_id = read_id_param(request)
        movie = await self.service.get_movie(movie_id)
        return write_json({"movie": movie.model_dump(mode="json")})

    async def update_movie(self, request: web.Request) -> web.Response:
        movie_id = read_id_param(request)
        data = await read_json(request, UpdateMovieInput)

        movie = await self.service.update_movie(
            movie_id,
            data,
            expected_version=request.headers.get("X-Expected-Version") or None,
        )
        return write_json({"movie": movie.model_dump(mode="json")})

    async def delete_movie(self, request: web.Request) -> web.Response:
        movie_id = read_id_param(request)
        await self.service.delete_movie(movie_id)
        return write_json({"message": "movie successfully deleted"})
