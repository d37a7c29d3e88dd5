import asyncio
from contextlib import asynccontextmanager
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncConnection, create_async_engine
from sqlalchemy.dialects.postgresql import ARRAY
from sqlalchemy import (
    BigInteger, CheckConstraint, Column, DateTime, Integer, MetaData, Table, Text,
    delete, insert, select, text, update,
)

from src.domain.exceptions import DatabaseException, EditConflictException, RecordNotFoundException
from src.domain.models import MAX_MOVIE_ID, Movie
from src.infrastructure.acl import MovieRowTranslator

# Upper bound for a single store operation, in seconds.
QUERY_TIMEOUT = 3

# SQLAlchemy core Table definition
metadata = MetaData()
movies_table = Table(
    'movies', metadata,
    Column('id', BigInteger, primary_key=True, autoincrement=True),
    Column('created_at', DateTime(timezone=True), nullable=False, server_default=text('NOW()')),
    Column('title', Text, nullable=False),
    Column('year', Integer, nullable=False),
    Column('runtime', Integer, nullable=False),
    Column('genres', ARRAY(Text), nullable=False),
    Column('version', Integer, nullable=False, server_default=text('1')),
    CheckConstraint('runtime >= 0', name='movies_runtime_check'),
    CheckConstraint("year BETWEEN 1888 AND date_part('year', now())", name='movies_year_check'),
    CheckConstraint('array_length(genres, 1) BETWEEN 1 AND 5', name='genres_length_check'),
)

_MOVIE_COLUMNS = (
    movies_table.c.id,
    movies_table.c.created_at,
    movies_table.c.title,
    movies_table.c.year,
    movies_table.c.runtime,
    movies_table.c.genres,
    movies_table.c.version,
)


class PostgresMovieRepository:
    """
    Repository class for interacting with the PostgreSQL database.
    Stores movies and guards updates with the version column.
    """

    def __init__(self, db_url: str, pool_size: int = 25, pool_recycle: int = 900):
        self.engine = create_async_engine(
            db_url,
            echo=False,
            pool_size=pool_size,
            max_overflow=0,
            pool_recycle=pool_recycle,
        )

    @asynccontextmanager
    async def _transaction(self, operation: str) -> AsyncIterator[AsyncConnection]:
        """Opens a transaction bounded by QUERY_TIMEOUT, wrapping driver errors."""
        try:
            async with asyncio.timeout(QUERY_TIMEOUT):
                async with self.engine.begin() as conn:
                    yield conn
        except TimeoutError as e:
            raise DatabaseException(f"{operation} timed out after {QUERY_TIMEOUT}s") from e
        except SQLAlchemyError as e:
            raise DatabaseException(f"{operation} failed: {e}") from e

    async def create_schema(self) -> None:
        """Creates the movies table if it does not exist yet."""
        async with self._transaction("create schema") as conn:
            await conn.run_sync(metadata.create_all)

    async def insert(self, movie: Movie) -> None:
        """
        Inserts a movie and copies the generated id, created_at and version onto it.

        Args:
            movie (Movie): A validated movie without store-owned fields.
        """
        stmt = (
            insert(movies_table)
            .values(**MovieRowTranslator.to_row(movie))
            .returning(movies_table.c.id, movies_table.c.created_at, movies_table.c.version)
        )

        async with self._transaction("insert movie") as conn:
            row = (await conn.execute(stmt)).mappings().one()

        movie.id = row['id']
        movie.created_at = row['created_at']
        movie.version = row['version']

    async def get(self, movie_id: int) -> Movie:
        # Ids outside the BIGINT range starting at 1 cannot exist.
        if not 1 <= movie_id <= MAX_MOVIE_ID:
            raise RecordNotFoundException(movie_id)

        stmt = select(*_MOVIE_COLUMNS).where(movies_table.c.id == movie_id)

        async with self._transaction("get movie") as conn:
            row = (await conn.execute(stmt)).mappings().first()

        if row is None:
            raise RecordNotFoundException(movie_id)
        return MovieRowTranslator.to_domain(row)

    async def update(self, movie: Movie) -> None:
        """
        Writes movie back only if the stored version still equals movie.version.

        The version comparison and increment happen in one conditional UPDATE,
        so two writers holding the same version cannot both succeed.
        """
        if not 1 <= movie.id <= MAX_MOVIE_ID:
            raise RecordNotFoundException(movie.id)

        stmt = (
            update(movies_table)
            .where(movies_table.c.id == movie.id, movies_table.c.version == movie.version)
            .values(**MovieRowTranslator.to_row(movie), version=movies_table.c.version + 1)
            .returning(movies_table.c.version)
        )

        async with self._transaction("update movie") as conn:
            row = (await conn.execute(stmt)).mappings().first()
            if row is None:
                # Nothing matched: either the movie is gone or its version moved on.
                exists = (await conn.execute(
                    select(movies_table.c.id).where(movies_table.c.id == movie.id)
                )).first()
                if exists is None:
                    raise RecordNotFoundException(movie.id)
                raise EditConflictException(movie.id, movie.version)

        movie.version = row['version']

    async def delete(self, movie_id: int) -> None:
        if not 1 <= movie_id <= MAX_MOVIE_ID:
            raise RecordNotFoundException(movie_id)

        stmt = delete(movies_table).where(movies_table.c.id == movie_id)

        async with self._transaction("delete movie") as conn:
            result = await conn.execute(stmt)

        if result.rowcount == 0:
            raise RecordNotFoundException(movie_id)

    async def close(self) -> None:
        await self.engine.dispose()
