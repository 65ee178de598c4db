from typing import Optional, Union
from urllib.parse import urlencode, urlsplit

from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from gourls_app.models.url_entry import UrlEntry, normalize_short_name


class RedirectTarget(BaseModel):
    """Short name found: send the visitor to long_url."""
    short_name: str
    long_url: str = Field(..., description="Where the visitor is redirected")


class NeedsCreation(BaseModel):
    """Short name unknown: send the visitor to the create page, name pre-filled."""
    short_name: str
    create_url: str = Field(..., description="Create page URL with shortName filled in")
    # False when create_url would land on the /{short_name} catch-all for this
    # same name; the caller must answer with the prompt instead of redirecting
    redirectable: bool = True


RedirectResolution = Union[RedirectTarget, NeedsCreation]


class RedirectService:
    """
    Resolve a short name for redirection.

    Unlike the directory's get-by-short-name, a miss is not an error here:
    it becomes a NeedsCreation that routes the visitor to the create flow.

    Lookup is case-sensitive unless case_insensitive is set, while creation
    uniqueness is always case-insensitive.
    """

    def __init__(
        self,
        db: Session,
        create_page_url: str = "/create",
        case_insensitive: bool = False,
    ):
        self.db = db
        self.create_page_url = create_page_url
        self.case_insensitive = case_insensitive

    def _find(self, short_name: str) -> Optional[UrlEntry]:
        if self.case_insensitive:
            condition = UrlEntry.short_name_key == normalize_short_name(short_name)
        else:
            condition = UrlEntry.short_name == short_name
        return self.db.query(UrlEntry).filter(condition).first()

    def create_url_for(self, short_name: str) -> str:
        query = urlencode({"shortName": short_name, "available": "true"})
        return f"{self.create_page_url}?{query}"

    def _loops_back(self, short_name: str) -> bool:
        """True when the create page is served by this app's catch-all as short_name itself."""
        parts = urlsplit(self.create_page_url)
        if parts.scheme or parts.netloc:
            return False
        first_segment = parts.path.strip("/").split("/")[0]
        if self.case_insensitive:
            return normalize_short_name(first_segment) == normalize_short_name(short_name)
        return first_segment == short_name

    async def resolve(self, short_name: str) -> RedirectResolution:
        entry = self._find(short_name)
        if not entry:
            return NeedsCreation(
                short_name=short_name,
                create_url=self.create_url_for(short_name),
                redirectable=not self._loops_back(short_name),
            )
        return RedirectTarget(short_name=entry.short_name, long_url=entry.long_url)
