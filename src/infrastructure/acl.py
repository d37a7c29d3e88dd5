from typing import Any, Mapping

from src.domain.models import Movie


class MovieRowTranslator:
    """
    Anti-corruption layer that translates rows of the movies table into Movie instances.
    """

    @staticmethod
    def to_domain(row: Mapping[str, Any]) -> Movie:
        """
        Transforms a movies table row into a Movie.

        Args:
            row (Mapping[str, Any]): Column name -> value mapping of a movies row.

        Returns:
            Movie: The domain model instance for the row.
        """
        created_at = row.get('created_at')
        if created_at is None:
            raise ValueError("created_at is required to build Movie.")

        # NULL genres come back as None; keep them that way so validation can tell.
        genres = row.get('genres')

        return Movie(
            id=row['id'],
            created_at=created_at,
            title=row.get('title') or '',
            year=row.get('year') or 0,
            runtime=row.get('runtime') or 0,
            genres=list(genres) if genres is not None else None,
            version=row['version'],
        )

    @staticmethod
    def to_row(movie: Movie) -> dict:
        """Column values written on insert and update."""
        return {
            'title': movie.title,
            'year': movie.year,
            'runtime': movie.runtime,
            'genres': list(movie.genres) if movie.genres is not None else None,
        }
