import logging
from typing import List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from gourls_app.models.url_entry import UrlEntry, normalize_short_name, utcnow
from gourls_app.schemas.url_entry import UrlEntryResponse
from gourls_app.services.authorization import can_modify
from gourls_app.services.reserved_words import ReservedWords
from gourls_app.services.results import OperationResult

logger = logging.getLogger(__name__)


class UrlService:
    """
    URL directory: CRUD and search over UrlEntry for one request.

    Dependencies are injected (see dependencies.get_url_service):
    - db: request-scoped session
    - reserved_words: gate built once at startup
    - current_user: identity resolved once per request

    Every returned entry is annotated with can_edit / can_delete for
    current_user. Expected failures come back as OperationResult values.

    Note: methods are async for interface consistency with the routers;
    the DB calls themselves are sync.
    """

    def __init__(self, db: Session, reserved_words: ReservedWords, current_user: str):
        self.db = db
        self.reserved_words = reserved_words
        self.current_user = current_user

    def _view(self, entry: UrlEntry) -> UrlEntryResponse:
        return UrlEntryResponse.from_entry(entry, can_modify(self.current_user, entry))

    def _find_by_normalized_name(
        self, normalized: str, exclude_id: Optional[UUID] = None
    ) -> Optional[UrlEntry]:
        query = self.db.query(UrlEntry).filter(UrlEntry.short_name_key == normalized)
        if exclude_id is not None:
            query = query.filter(UrlEntry.id != exclude_id)
        return query.first()

    def _commit(self, short_name: str) -> Optional[OperationResult]:
        """
        Commit, translating a unique-key violation into a duplicate result.

        The pre-check in create/update can race with a concurrent writer;
        the unique short_name_key column is what actually decides.
        """
        try:
            self.db.commit()
        except IntegrityError:
            self.db.rollback()
            logger.warning("Lost race for short name %r, reporting duplicate", short_name)
            return OperationResult.duplicate(short_name)
        return None

    async def list_urls(self) -> List[UrlEntryResponse]:
        entries = self.db.query(UrlEntry).order_by(UrlEntry.short_name_key).all()
        return [self._view(entry) for entry in entries]

    async def search_urls(self, term: Optional[str] = None) -> List[UrlEntryResponse]:
        """Case-insensitive substring search on short_name; empty term lists everything."""
        query = self.db.query(UrlEntry)
        if term:
            # autoescape: '%' and '_' in the term match literally
            query = query.filter(
                UrlEntry.short_name_key.contains(term.lower(), autoescape=True)
            )
        entries = query.order_by(UrlEntry.short_name_key).all()
        logger.debug("Search %r returned %d results", term, len(entries))
        return [self._view(entry) for entry in entries]

    async def get_by_id(self, entry_id: UUID) -> OperationResult:
        entry = self.db.get(UrlEntry, entry_id)
        if not entry:
            return OperationResult.not_found()
        return OperationResult.success(self._view(entry))

    async def get_by_short_name(self, short_name: str) -> OperationResult:
        """Exact (case-sensitive) match"""
        entry = self.db.query(UrlEntry).filter(UrlEntry.short_name == short_name).first()
        if not entry:
            return OperationResult.not_found("Short URL")
        return OperationResult.success(self._view(entry))

    async def create_url(self, short_name: str, long_url: str) -> OperationResult:
        """
        Create a new entry owned by current_user.

        Rejected without touching the store when the short name is reserved
        or already taken (case-insensitive).
        """
        normalized = normalize_short_name(short_name)

        if self.reserved_words.is_reserved(normalized):
            return OperationResult.reserved(short_name)

        if self._find_by_normalized_name(normalized):
            return OperationResult.duplicate(short_name)

        entry = UrlEntry(
            short_name=short_name.strip(),
            long_url=long_url,
            created_by=self.current_user,
            created_at=utcnow(),
            is_system_entry=False,
            updated_at=None,
            updated_by=None,
        )
        self.db.add(entry)

        failure = self._commit(short_name)
        if failure:
            return failure

        self.db.refresh(entry)
        logger.info("%s created %r -> %s", self.current_user, entry.short_name, entry.long_url)
        return OperationResult.success(self._view(entry))

    async def update_url(self, entry_id: UUID, short_name: str, long_url: str) -> OperationResult:
        """
        Overwrite short_name / long_url and stamp updated_at / updated_by.

        created_by, created_at and is_system_entry are never touched.
        """
        entry = self.db.get(UrlEntry, entry_id)
        if not entry:
            return OperationResult.not_found()

        if not can_modify(self.current_user, entry):
            logger.info("%s denied update of %r", self.current_user, entry.short_name)
            return OperationResult.forbidden("modify")

        normalized = normalize_short_name(short_name)
        if normalized != entry.short_name_key:
            if self.reserved_words.is_reserved(normalized):
                return OperationResult.reserved(short_name)
            if self._find_by_normalized_name(normalized, exclude_id=entry.id):
                return OperationResult.duplicate(short_name)

        entry.short_name = short_name.strip()
        entry.long_url = long_url
        entry.updated_at = utcnow()
        entry.updated_by = self.current_user

        failure = self._commit(short_name)
        if failure:
            return failure

        self.db.refresh(entry)
        logger.info("%s updated %r -> %s", self.current_user, entry.short_name, entry.long_url)
        return OperationResult.success(self._view(entry))

    async def delete_url(self, entry_id: UUID) -> OperationResult:
        """Hard delete. Unknown ids are not_found, never forbidden."""
        entry = self.db.get(UrlEntry, entry_id)
        if not entry:
            return OperationResult.not_found()

        if not can_modify(self.current_user, entry):
            logger.info("%s denied delete of %r", self.current_user, entry.short_name)
            return OperationResult.forbidden("delete")

        short_name = entry.short_name
        self.db.delete(entry)
        self.db.commit()

        logger.info("%s deleted %r", self.current_user, short_name)
        return OperationResult.success()
