import json
from functools import partial
from typing import Any, Dict, Mapping, Optional, Type, TypeVar

from aiohttp import web
from pydantic import BaseModel, ValidationError

from src.domain.exceptions import DecodeException, RecordNotFoundException
from src.domain.models import MAX_MOVIE_ID

# Largest request body accepted, in bytes (1MB).
MAX_BODY_BYTES = 1_048_576

ModelT = TypeVar("ModelT", bound=BaseModel)

_dumps = partial(json.dumps, indent="\t")


def write_json(
    data: Mapping[str, Any],
    status: int = 200,
    headers: Optional[Mapping[str, str]] = None,
) -> web.Response:
    """Serializes an envelope as tab-indented JSON."""
    return web.json_response(dict(data), status=status, headers=headers, dumps=_dumps)


def read_id_param(request: web.Request) -> int:
    """
    Reads the positive integer id path parameter.

    Raises:
        RecordNotFoundException: If the parameter is not an integer in
            1..MAX_MOVIE_ID; no such movie can exist.
    """
    raw = request.match_info.get("id", "")
    if not raw.isascii() or not raw.isdigit():
        raise RecordNotFoundException(0)

    movie_id = int(raw)
    if not 1 <= movie_id <= MAX_MOVIE_ID:
        raise RecordNotFoundException(movie_id)
    return movie_id


def _describe(error: Dict[str, Any]) -> str:
    field = ".".join(str(part) for part in error.get("loc", ()))
    kind = error.get("type", "")

    if kind == "extra_forbidden":
        return f'body contains unknown key "{field}"'
    if kind == "invalid_runtime_format":
        return error.get("msg", "invalid runtime format")
    if field:
        return f'body contains incorrect JSON type for field "{field}"'
    return "body contains incorrect JSON type"


async def read_json(request: web.Request, model: Type[ModelT]) -> ModelT:
    """
    Decodes the request body into model.

    Raises:
        DecodeException: If the body is too large, empty, not a single JSON
            object, has unknown keys or values of the wrong type.
    """
    try:
        body = await request.read()
    except web.HTTPRequestEntityTooLarge as e:
        raise DecodeException(f"body must not be larger than {MAX_BODY_BYTES} bytes") from e

    if not body.strip():
        raise DecodeException("body must not be empty")

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as e:
        if e.msg == "Extra data":
            raise DecodeException("body must only contain a single JSON value") from e
        raise DecodeException(f"body contains badly-formed JSON (at character {e.pos})") from e
    except UnicodeDecodeError as e:
        raise DecodeException("body contains badly-formed JSON") from e

    if not isinstance(payload, dict):
        raise DecodeException("body must contain a JSON object")

    try:
        return model.model_validate(payload)
    except ValidationError as e:
        raise DecodeException(_describe(e.errors()[0])) from e
