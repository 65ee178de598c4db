from pydantic import BaseModel, Field, ConfigDict, field_validator
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime
from uuid import UUID

from gourls_app.models.url_entry import UrlEntry


class CamelModel(BaseModel):
    """Base schema: snake_case in Python, camelCase on the wire.

    populate_by_name lets services build schemas with field names while
    clients send and receive {"shortName": ..., "longUrl": ...}.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class UrlEntryBase(CamelModel):
    short_name: str = Field(..., max_length=255, description="Alias typed in place of the long URL")
    long_url: str = Field(..., description="Redirect target, used verbatim")

    @field_validator("short_name", "long_url")
    @classmethod
    def not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("must not be blank")
        return value


class UrlEntryCreate(UrlEntryBase):
    pass


class UrlEntryUpdate(UrlEntryBase):
    pass


class UrlEntryResponse(CamelModel):
    """Entry as seen by the current user.

    can_edit / can_delete are computed per request from the resolved
    identity; they carry the same value since one rule governs both.
    """
    id: UUID
    short_name: str
    long_url: str
    created_by: str
    created_at: datetime
    updated_at: Optional[datetime] = None
    updated_by: Optional[str] = None
    is_system_entry: bool
    can_edit: bool = False
    can_delete: bool = False

    @classmethod
    def from_entry(cls, entry: UrlEntry, can_modify: bool) -> "UrlEntryResponse":
        return cls(
            id=entry.id,
            short_name=entry.short_name,
            long_url=entry.long_url,
            created_by=entry.created_by,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
            updated_by=entry.updated_by,
            is_system_entry=entry.is_system_entry,
            can_edit=can_modify,
            can_delete=can_modify,
        )


class CurrentUserResponse(CamelModel):
    name: str
    is_authenticated: bool


class ReservedWordsResponse(CamelModel):
    reserved_words: List[str]
