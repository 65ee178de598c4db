"""
Reserved short names.

Built once at startup from configuration and passed to whoever needs it.
A missing list is a fatal configuration error: the app refuses to start.
"""

import logging
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)


class ReservedWordsNotConfiguredError(RuntimeError):
    """Raised at startup when RESERVED_WORDS is missing or empty."""


class ReservedWords:
    """Immutable, case-insensitive set of forbidden short names."""

    def __init__(self, words: Iterable[str]):
        ordered = []
        for word in words:
            normalized = word.strip().lower()
            if normalized and normalized not in ordered:
                ordered.append(normalized)
        self._words = tuple(ordered)
        self._lookup = frozenset(ordered)

    @classmethod
    def from_csv(cls, raw: Optional[str]) -> "ReservedWords":
        """
        Parse a comma-separated list such as "admin, api,create".

        Raises:
            ReservedWordsNotConfiguredError: if raw is missing or has no words
        """
        if not raw or not raw.strip():
            raise ReservedWordsNotConfiguredError(
                "RESERVED_WORDS environment variable is not set"
            )

        reserved = cls(raw.split(","))
        if not reserved.words:
            raise ReservedWordsNotConfiguredError(
                "RESERVED_WORDS does not contain any words"
            )

        logger.info("Loaded %d reserved words", len(reserved.words))
        return reserved

    @property
    def words(self) -> List[str]:
        """Configured words, in order, for display."""
        return list(self._words)

    def is_reserved(self, candidate: str) -> bool:
        return candidate.strip().lower() in self._lookup

    def __contains__(self, candidate: str) -> bool:
        return self.is_reserved(candidate)

    def __len__(self) -> int:
        return len(self._words)
