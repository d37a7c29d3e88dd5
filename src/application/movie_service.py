import logging
from typing import Optional

from src.domain.exceptions import EditConflictException, ValidationFailedException
from src.domain.models import CreateMovieInput, Movie, UpdateMovieInput, validate_movie
from src.domain.repository import MovieRepository
from src.domain.validator import Validator

logger = logging.getLogger(__name__)


class MovieService:
    """
    Service responsible for the movie use cases: it turns decoded input into
    movies, validates them and hands them to the repository.

    Validation failures are raised as ValidationFailedException carrying every
    broken rule, not just the first one.
    """

    def __init__(self, repository: MovieRepository):
        self.repository = repository

    @staticmethod
    def _validate(movie: Movie) -> None:
        v = Validator()
        validate_movie(v, movie)
        if not v.valid():
            raise ValidationFailedException(dict(v.errors))

    async def create_movie(self, data: CreateMovieInput) -> Movie:
        movie = data.to_domain()
        self._validate(movie)

        await self.repository.insert(movie)
        logger.info(f"Created movie {movie.id} ({movie.title!r}).")
        return movie

    async def get_movie(self, movie_id: int) -> Movie:
        return await self.repository.get(movie_id)

    async def update_movie(
        self,
        movie_id: int,
        data: UpdateMovieInput,
        expected_version: Optional[str] = None,
    ) -> Movie:
        """
        Applies a partial update to a stored movie.

        Args:
            movie_id (int): Id of the movie to change.
            data (UpdateMovieInput): Fields to change; None fields are kept.
            expected_version (Optional[str]): Version the client last saw, as
                sent in the X-Expected-Version header. Checked before any write.
        """
        movie = await self.repository.get(movie_id)

        if expected_version is not None and expected_version != str(movie.version):
            logger.warning(
                f"Movie {movie_id} is at version {movie.version}, "
                f"client expected {expected_version}."
            )
            raise EditConflictException(movie_id, movie.version)

        data.apply_to(movie)
        self._validate(movie)

        try:
            await self.repository.update(movie)
        except EditConflictException:
            logger.warning(f"Concurrent update lost the race on movie {movie_id} (version {movie.version}).")
            raise

        logger.info(f"Updated movie {movie_id} to version {movie.version}.")
        return movie

    async def delete_movie(self, movie_id: int) -> None:
        await self.repository.delete(movie_id)
        logger.info(f"Deleted movie {movie_id}.")
