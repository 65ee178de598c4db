import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Boolean, Uuid
from sqlalchemy.orm import validates
from gourls_app.database.connection import Base


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def normalize_short_name(short_name: str) -> str:
    """Key used for reserved-word and uniqueness checks"""
    return short_name.strip().lower()


class UrlEntry(Base):
    """
    A short name → long URL mapping.

    Audit fields:
    - created_by / created_at are written once, at creation
    - updated_by / updated_at stay NULL until the first successful edit
    - is_system_entry marks seeded rows; only the "system" identity may touch them
    """
    __tablename__ = "url_entries"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    # Stored trimmed, original casing kept for display
    short_name = Column(String(255), nullable=False, index=True)
    # Lowercased in Python (Unicode-aware, unlike SQLite's lower()).
    # Source of truth for uniqueness: the service checks first to produce a
    # readable error, this constraint catches concurrent creates/renames.
    short_name_key = Column(String(255), nullable=False, unique=True)
    # No format validation: any string is used verbatim as the redirect target
    long_url = Column(String, nullable=False)
    created_by = Column(String(255), nullable=False, default="system")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=True)
    updated_by = Column(String(255), nullable=True)
    is_system_entry = Column(Boolean, nullable=False, default=False)

    @validates("short_name")
    def _sync_short_name_key(self, key, value):
        # Every write of short_name, constructor included, refreshes the key
        self.short_name_key = normalize_short_name(value)
        return value

    def __repr__(self) -> str:
        return f"<UrlEntry {self.short_name!r} -> {self.long_url!r}>"
