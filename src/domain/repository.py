from typing import Protocol

from src.domain.models import Movie


class MovieRepository(Protocol):
    """
    Storage contract for movies.

    Implementations write the store-owned fields (id, created_at, version)
    back into the Movie they are given rather than returning a copy.
    """

    async def insert(self, movie: Movie) -> None:
        """Stores a new movie and sets its id, created_at and version (1)."""
        ...

    async def get(self, movie_id: int) -> Movie:
        """Raises RecordNotFoundException if there is no such movie."""
        ...

    async def update(self, movie: Movie) -> None:
        """
        Saves movie if its version is still the stored one, then bumps the
        version on both sides.

        Raises:
            EditConflictException: If the stored version has moved on.
            RecordNotFoundException: If the movie no longer exists.
        """
        ...

    async def delete(self, movie_id: int) -> None:
        """Raises RecordNotFoundException if there is no such movie."""
        ...

    async def close(self) -> None:
        ...
