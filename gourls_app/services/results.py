"""
Outcome types for directory operations.

Reserved words, duplicates, missing entries and permission denials are
expected outcomes, so they travel back as values instead of exceptions.
The API layer maps them to HTTP status codes.
"""

from enum import Enum
from pydantic import BaseModel, Field
from typing import Optional

from gourls_app.schemas.url_entry import UrlEntryResponse


class ErrorKind(str, Enum):
    """Machine-readable failure tags"""
    RESERVED_WORD = "reserved_word"
    DUPLICATE = "duplicate"
    NOT_FOUND = "not_found"
    FORBIDDEN = "forbidden"


class OperationError(BaseModel):
    kind: ErrorKind = Field(..., description="Failure category")
    message: str = Field(..., description="Human readable explanation")


class OperationResult(BaseModel):
    """
    Either an entry (or nothing, for delete) or an error.

    Never both: a failed operation leaves the store untouched.
    """

    entry: Optional[UrlEntryResponse] = None
    error: Optional[OperationError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, entry: Optional[UrlEntryResponse] = None) -> "OperationResult":
        return cls(entry=entry)

    @classmethod
    def failure(cls, kind: ErrorKind, message: str) -> "OperationResult":
        return cls(error=OperationError(kind=kind, message=message))

    @classmethod
    def reserved(cls, short_name: str) -> "OperationResult":
        return cls.failure(
            ErrorKind.RESERVED_WORD,
            f"'{short_name}' is a reserved word and cannot be used as a short URL.",
        )

    @classmethod
    def duplicate(cls, short_name: str) -> "OperationResult":
        return cls.failure(
            ErrorKind.DUPLICATE,
            f"Short name '{short_name}' is already taken.",
        )

    @classmethod
    def not_found(cls, what: str = "URL entry") -> "OperationResult":
        return cls.failure(ErrorKind.NOT_FOUND, f"{what} not found")

    @classmethod
    def forbidden(cls, action: str) -> "OperationResult":
        return cls.failure(
            ErrorKind.FORBIDDEN,
            f"You don't have permission to {action} this URL entry.",
        )
