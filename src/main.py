import asyncio
import os
import sys
import logging
from dotenv import load_dotenv
from aiohttp import web

from src.api.routes import create_app
from src.application.movie_service import MovieService
from src.domain.exceptions import DatabaseException
from src.domain.repository import MovieRepository
from src.infrastructure.database import PostgresMovieRepository
from src.infrastructure.memory import InMemoryMovieRepository

logger = logging.getLogger(__name__)

STORES = ("postgres", "memory")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s [%(levelname)s] %(message)s",
        handlers=[
            logging.StreamHandler(sys.stdout)
        ]
    )


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError:
        logger.error(f"{name} must be an integer, got {raw!r}.")
        sys.exit(1)


async def build_repository(store: str) -> MovieRepository:
    """Selects the storage variant named by MOVIE_STORE."""
    if store == "memory":
        logger.info("Using in-memory movie store.")
        return InMemoryMovieRepository()

    db_url = os.getenv("DATABASE_URL")
    if not db_url:
        logger.error("DATABASE_URL is not set in the environment.")
        sys.exit(1)

    repository = PostgresMovieRepository(
        db_url=db_url,
        pool_size=_int_env("DB_MAX_OPEN_CONNS", 25),
        pool_recycle=_int_env("DB_CONN_MAX_LIFETIME", 900),
    )
    await repository.create_schema()
    logger.info("Database connection pool established.")
    return repository


async def main():
    # Load environment variables from .env file
    load_dotenv()
    configure_logging(os.getenv("LOG_LEVEL", "INFO"))

    port = _int_env("PORT", 4000)
    environment = os.getenv("APP_ENV", "development")
    store = os.getenv("MOVIE_STORE", "postgres")

    if store not in STORES:
        logger.error(f"MOVIE_STORE must be one of {', '.join(STORES)}, got {store!r}.")
        sys.exit(1)

    try:
        repository = await build_repository(store)
    except DatabaseException as e:
        logger.error(f"Could not prepare the movie store: {e}")
        sys.exit(1)

    app = create_app(MovieService(repository), environment=environment)

    runner = web.AppRunner(app)
    await runner.setup()
    site = web.TCPSite(runner, port=port)

    try:
        await site.start()
        logger.info(f"Starting {environment} server on port {port}.")
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        logger.info("Server shutting down.")
    except Exception as e:
        logger.exception(f"An unexpected error occurred: {e}")
        sys.exit(1)
    finally:
        await runner.cleanup()

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        pass
