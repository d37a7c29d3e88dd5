import logging
from typing import Any, Mapping

from aiohttp import web

from src.api.helpers import write_json
from src.domain.exceptions import (
    DatabaseException,
    DecodeException,
    EditConflictException,
    RecordNotFoundException,
    ValidationFailedException,
)

logger = logging.getLogger(__name__)


def error_response(status: int, message: Any) -> web.Response:
    return write_json({"error": message}, status=status)


def server_error_response(request: web.Request, exc: BaseException) -> web.Response:
    # The detail goes to the log only; clients get a generic message.
    logger.error(f"{request.method} {request.rel_url}: {exc}", exc_info=exc)
    return error_response(500, "the server encountered a problem and could not process your request")


def not_found_response() -> web.Response:
    return error_response(404, "the requested resource could not be found")


def method_not_allowed_response(method: str) -> web.Response:
    return error_response(405, f"the {method} method is not supported for this resource")


def bad_request_response(message: str) -> web.Response:
    return error_response(400, message)


def failed_validation_response(errors: Mapping[str, str]) -> web.Response:
    return error_response(422, dict(errors))


def edit_conflict_response() -> web.Response:
    return error_response(409, "unable to update the record due to an edit conflict, please try again")


@web.middleware
async def error_middleware(request: web.Request, handler) -> web.StreamResponse:
    """Translates exceptions raised by handlers into JSON error responses."""
    try:
        return await handler(request)
    except DecodeException as e:
        return bad_request_response(str(e))
    except ValidationFailedException as e:
        return failed_validation_response(e.errors)
    except RecordNotFoundException:
        return not_found_response()
    except EditConflictException:
        return edit_conflict_response()
    except DatabaseException as e:
        return server_error_response(request, e)
    except web.HTTPNotFound:
        return not_found_response()
    except web.HTTPMethodNotAllowed:
        return method_not_allowed_response(request.method)
    except web.HTTPException:
        raise
    except Exception as e:
        return server_error_response(request, e)
