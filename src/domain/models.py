from datetime import datetime
from typing import Annotated, Any, Dict, List, Optional

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, SerializerFunctionWrapHandler, model_serializer

from src.domain.runtime import INT32_MAX, INT32_MIN, Runtime, RuntimeInput
from src.domain.validator import Validator, unique

EARLIEST_YEAR = 1888
# Ids are stored as BIGINT.
MAX_MOVIE_ID = 2 ** 63 - 1
MAX_TITLE_BYTES = 500
MAX_GENRES = 5

# Fields left out of the JSON output while they hold their zero value.
_OMIT_WHEN_EMPTY = ("year", "runtime", "genres")


def _null_as(zero: Any):
    # A JSON null leaves a create field at its zero value.
    return BeforeValidator(lambda value: zero if value is None else value)


# Years arrive as 32-bit integers; anything wider is malformed input.
YearInput = Annotated[int, Field(ge=INT32_MIN, le=INT32_MAX)]


class Movie(BaseModel):
    """
    Domain model representing one movie in the catalog.

    id, created_at and version are owned by the store: it fills them in on
    insert and bumps version on every successful update.
    """
    id: int = Field(default=0, description="Unique id assigned by the store")
    created_at: Optional[datetime] = Field(
        default=None,
        exclude=True,
        description="Timestamp of insertion; never sent to clients",
    )
    title: str = Field(default="", description="Movie title")
    year: int = Field(default=0, description="Release year")
    runtime: Runtime = Field(default=0, description="Runtime in minutes")
    genres: Optional[List[str]] = Field(default=None, description="Genres, e.g. drama or comedy")
    version: int = Field(default=0, description="Starts at 1 and increases on every update")

    @model_serializer(mode="wrap")
    def _omit_empty(self, handler: SerializerFunctionWrapHandler) -> Dict[str, Any]:
        data = handler(self)
        for name in _OMIT_WHEN_EMPTY:
            if not getattr(self, name):
                data.pop(name, None)
        return data


class CreateMovieInput(BaseModel):
    """Request body accepted when creating a movie."""
    model_config = ConfigDict(extra="forbid", strict=True)

    title: Annotated[str, _null_as("")] = ""
    year: Annotated[YearInput, _null_as(0)] = 0
    runtime: RuntimeInput = 0
    genres: Optional[List[str]] = None

    def to_domain(self) -> Movie:
        return Movie(
            title=self.title,
            year=self.year,
            runtime=self.runtime,
            genres=list(self.genres) if self.genres is not None else None,
        )


class UpdateMovieInput(BaseModel):
    """Request body for a partial update; fields left as None are unchanged."""
    model_config = ConfigDict(extra="forbid", strict=True)

    title: Optional[str] = None
    year: Optional[YearInput] = None
    runtime: Optional[RuntimeInput] = None
    genres: Optional[List[str]] = None

    def apply_to(self, movie: Movie) -> None:
        if self.title is not None:
            movie.title = self.title
        if self.year is not None:
            movie.year = self.year
        if self.runtime is not None:
            movie.runtime = self.runtime
        if self.genres is not None:
            movie.genres = list(self.genres)


def validate_movie(v: Validator, movie: Movie) -> None:
    """Runs the movie rules against movie, recording failures on v."""
    v.check(movie.title != "", "title", "must be provided")
    v.check(len(movie.title.encode("utf-8")) <= MAX_TITLE_BYTES, "title", f"must not be more than {MAX_TITLE_BYTES} bytes long")

    v.check(movie.year != 0, "year", "must be provided")
    v.check(movie.year >= EARLIEST_YEAR, "year", f"must be greater than {EARLIEST_YEAR}")
    v.check(movie.year <= datetime.now().year, "year", "must not be in the future")

    v.check(movie.runtime != 0, "runtime", "must be provided")
    v.check(movie.runtime > 0, "runtime", "must be a positive integer")

    genres = movie.genres
    v.check(genres is not None, "genres", "must be provided")
    v.check(genres is not None and len(genres) >= 1, "genres", "must contain at least 1 genre")
    v.check(genres is None or len(genres) <= MAX_GENRES, "genres", f"must not contain more than {MAX_GENRES} genres")
    v.check(genres is None or unique(genres), "genres", "must not contain duplicate values")
