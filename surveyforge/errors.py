# surveyforge/errors.py
from __future__ import annotations

from typing import List, Optional, Sequence


class APIError(Exception):
    """A backend call failed. `status` is the HTTP status (or a synthetic one)."""

    def __init__(self, message: str, status: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status = status

    @property
    def is_not_found(self) -> bool:
        return self.status == 404

    def __repr__(self) -> str:
        return f"APIError(status={self.status!r}, message={self.message!r})"


class ValidationError(ValueError):
    """Form validation failed. str() is the first message, like the toast the user sees."""

    def __init__(self, errors: Sequence[str]):
        self.errors: List[str] = [e for e in errors if e]
        super().__init__(self.errors[0] if self.errors else "Validation failed")
