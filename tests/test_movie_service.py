import unittest

from src.application.movie_service import MovieService
from src.domain.exceptions import (
    EditConflictException,
    RecordNotFoundException,
    ValidationFailedException,
)
from src.domain.models import CreateMovieInput, UpdateMovieInput
from src.infrastructure.memory import InMemoryMovieRepository


def _create_input(**overrides) -> CreateMovieInput:
    payload = {
        "title": "Casablanca",
        "year": 1942,
        "runtime": "102 mins",
        "genres": ["drama", "romance", "war"],
    }
    payload.update(overrides)
    return CreateMovieInput.model_validate(payload)


class _RecordingRepository(InMemoryMovieRepository):
    def __init__(self) -> None:
        super().__init__()
        self.inserted = 0

    async def insert(self, movie) -> None:
        self.inserted += 1
        await super().insert(movie)


class TestMovieService(unittest.IsolatedAsyncioTestCase):
    async def asyncSetUp(self) -> None:
        self.repository = _RecordingRepository()
        self.service = MovieService(repository=self.repository)

    async def test_create_movie_returns_stored_movie(self) -> None:
        movie = await self.service.create_movie(_create_input())

        self.assertEqual(movie.id, 1)
        self.assertEqual(movie.version, 1)
        self.assertEqual(movie.runtime, 102)

    async def test_invalid_movie_is_never_stored(self) -> None:
        with self.assertRaises(ValidationFailedException) as ctx:
            await self.service.create_movie(_create_input(title="", year=0, runtime="0 mins", genres=[]))

        self.assertEqual(set(ctx.exception.errors), {"title", "year", "runtime", "genres"})
        self.assertEqual(self.repository.inserted, 0)

    async def test_update_applies_partial_changes(self) -> None:
        created = await self.service.create_movie(_create_input())

        updated = await self.service.update_movie(created.id, UpdateMovieInput(title="Casablanca (1942)"))

        self.assertEqual(updated.title, "Casablanca (1942)")
        self.assertEqual(updated.year, 1942)
        self.assertEqual(updated.version, 2)

    async def test_update_validates_the_merged_movie(self) -> None:
        created = await self.service.create_movie(_create_input())

        with self.assertRaises(ValidationFailedException) as ctx:
            await self.service.update_movie(created.id, UpdateMovieInput(genres=["drama", "drama"]))

        self.assertEqual(dict(ctx.exception.errors), {"genres": "must not contain duplicate values"})
        self.assertEqual((await self.service.get_movie(created.id)).version, 1)

    async def test_expected_version_mismatch_conflicts(self) -> None:
        created = await self.service.create_movie(_create_input())

        with self.assertRaises(EditConflictException):
            await self.service.update_movie(created.id, UpdateMovieInput(year=1943), expected_version="7")

        await self.service.update_movie(created.id, UpdateMovieInput(year=1943), expected_version="1")
        self.assertEqual((await self.service.get_movie(created.id)).version, 2)

    async def test_delete_then_get_is_not_found(self) -> None:
        created = await self.service.create_movie(_create_input())

        await self.service.delete_movie(created.id)

        with self.assertRaises(RecordNotFoundException):
            await self.service.get_movie(created.id)
