import re
from types import MappingProxyType
from typing import Any, Dict, Hashable, Iterable, Mapping, Pattern, Union


class Validator:
    """
    Collects field validation errors for a single validation pass.

    Every check runs regardless of earlier failures, so one pass reports all
    the broken rules at once. Create a new Validator for each pass.
    """

    def __init__(self) -> None:
        self._errors: Dict[str, str] = {}

    @property
    def errors(self) -> Mapping[str, str]:
        """Read-only view of the field -> message map."""
        return MappingProxyType(self._errors)

    def valid(self) -> bool:
        return not self._errors

    def add_error(self, key: str, message: str) -> None:
        # A later message for the same key replaces the earlier one.
        self._errors[key] = message

    def check(self, ok: bool, key: str, message: str) -> None:
        """Records message under key when ok is false."""
        if not ok:
            self.add_error(key, message)


def unique(values: Iterable[Hashable]) -> bool:
    """True if no two values are equal."""
    seen = set()
    for value in values:
        if value in seen:
            return False
        seen.add(value)
    return True


def permitted_value(value: Any, *permitted: Any) -> bool:
    return value in permitted


def matches(value: str, pattern: Union[str, Pattern[str]]) -> bool:
    """True if the whole of value matches the regular expression."""
    return re.fullmatch(pattern, value) is not None
