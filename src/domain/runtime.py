import json
import re
from typing import Annotated, Any, Union

from pydantic import BeforeValidator, PlainSerializer
from pydantic_core import PydanticCustomError

from src.domain.exceptions import InvalidRuntimeFormatException

RUNTIME_UNIT = "mins"
INT32_MIN = -(2 ** 31)
INT32_MAX = 2 ** 31 - 1

_NUMBER_PATTERN = re.compile(r"[+-]?[0-9]+")


def format_runtime(value: int) -> str:
    """Renders a runtime as the unquoted text "<value> mins"."""
    return f"{value} {RUNTIME_UNIT}"


def parse_runtime(text: str) -> int:
    """
    Parses the unquoted text "<value> mins" back into minutes.

    Only the format is checked here. Whether the number makes sense as a
    runtime is decided by the movie validation rules.

    Raises:
        InvalidRuntimeFormatException: If the text does not follow the format.
    """
    parts = text.split(" ")
    if len(parts) != 2 or parts[1] != RUNTIME_UNIT:
        raise InvalidRuntimeFormatException()

    if not _NUMBER_PATTERN.fullmatch(parts[0]):
        raise InvalidRuntimeFormatException()

    value = int(parts[0])
    if not INT32_MIN <= value <= INT32_MAX:
        raise InvalidRuntimeFormatException()
    return value


def encode_runtime(value: int) -> str:
    """
    Encodes a runtime as a quoted JSON string, e.g. 102 -> '"102 mins"'.
    """
    return json.dumps(format_runtime(value))


def decode_runtime(raw: Union[str, bytes]) -> int:
    """
    Decodes a quoted JSON string such as '"102 mins"' into minutes.

    Raises:
        InvalidRuntimeFormatException: If the value is not a JSON string or
            its content is not "<int32> mins".
    """
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as e:
            raise InvalidRuntimeFormatException() from e

    if len(raw) < 2 or not (raw.startswith('"') and raw.endswith('"')):
        raise InvalidRuntimeFormatException()

    try:
        unquoted = json.loads(raw)
    except ValueError as e:
        raise InvalidRuntimeFormatException() from e

    if not isinstance(unquoted, str):
        raise InvalidRuntimeFormatException()
    return parse_runtime(unquoted)


def _parse_wire_runtime(value: Any) -> int:
    # The JSON layer has already removed the quotes, so only strings are valid.
    if not isinstance(value, str):
        raise PydanticCustomError("invalid_runtime_format", "invalid runtime format")
    try:
        return parse_runtime(value)
    except InvalidRuntimeFormatException as e:
        raise PydanticCustomError("invalid_runtime_format", str(e)) from e


_runtime_serializer = PlainSerializer(format_runtime, return_type=str, when_used="json")

# Integer minutes internally, "<n> mins" in JSON output.
Runtime = Annotated[int, _runtime_serializer]

# Runtime as read from a request body: must be the "<n> mins" string.
RuntimeInput = Annotated[int, BeforeValidator(_parse_wire_runtime), _runtime_serializer]
