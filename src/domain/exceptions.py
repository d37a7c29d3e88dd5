from typing import Dict


class MovieApiException(Exception):
    """Base exception for all movie API errors."""
    pass

class DecodeException(MovieApiException):
    """Raised when request input is malformed before a movie can be built."""
    pass

class InvalidRuntimeFormatException(DecodeException):
    """Raised when a runtime value does not match the "<n> mins" wire format."""
    def __init__(self, message: str = "invalid runtime format"):
        super().__init__(message)

class ValidationFailedException(MovieApiException):
    """Raised when a well-formed movie breaks one or more validation rules."""
    def __init__(self, errors: Dict[str, str]):
        self.errors = dict(errors)
        super().__init__(f"Validation failed for fields: {', '.join(sorted(self.errors))}")

class RecordNotFoundException(MovieApiException):
    """Raised when no movie exists under the requested id."""
    def __init__(self, movie_id: int):
        self.movie_id = movie_id
        super().__init__(f"record not found: movie {movie_id}")

class EditConflictException(MovieApiException):
    """Raised when an update carries a version that is no longer current."""
    def __init__(self, movie_id: int, expected_version: int):
        self.movie_id = movie_id
        self.expected_version = expected_version
        super().__init__(f"edit conflict on movie {movie_id} at version {expected_version}")

class DatabaseException(MovieApiException):
    """Raised when a database operation fails."""
    pass
