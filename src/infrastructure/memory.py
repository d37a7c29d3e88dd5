import asyncio
from datetime import datetime, timezone
from typing import Dict

from src.domain.exceptions import EditConflictException, RecordNotFoundException
from src.domain.models import Movie


class InMemoryMovieRepository:
    """
    Process-local movie store used for tests and for running without a database.

    Movies are copied on the way in and out, so callers never share state
    with the store.
    """

    def __init__(self) -> None:
        self._movies: Dict[int, Movie] = {}
        self._next_id = 1
        self._lock = asyncio.Lock()

    async def insert(self, movie: Movie) -> None:
        async with self._lock:
            movie.id = self._next_id
            movie.created_at = datetime.now(timezone.utc)
            movie.version = 1
            self._next_id += 1
            self._movies[movie.id] = movie.model_copy(deep=True)

    async def get(self, movie_id: int) -> Movie:
        stored = self._movies.get(movie_id)
        if stored is None:
            raise RecordNotFoundException(movie_id)
        return stored.model_copy(deep=True)

    async def update(self, movie: Movie) -> None:
        async with self._lock:
            stored = self._movies.get(movie.id)
            if stored is None:
                raise RecordNotFoundException(movie.id)
            if stored.version != movie.version:
                raise EditConflictException(movie.id, movie.version)

            updated = movie.model_copy(deep=True)
            updated.created_at = stored.created_at
            updated.version = stored.version + 1
            self._movies[movie.id] = updated
            movie.version = updated.version

    async def delete(self, movie_id: int) -> None:
        async with self._lock:
            if self._movies.pop(movie_id, None) is None:
                raise RecordNotFoundException(movie_id)

    async def close(self) -> None:
        pass
