from gourls_app.models.url_entry import UrlEntry

SYSTEM_IDENTITY = "system"


def can_modify(identity: str, entry: UrlEntry) -> bool:
    """
    Decide whether identity may edit or delete entry.

    Rules, in order:
    1. System entries are off limits to everyone but "system"
    2. "system" may modify anything
    3. Otherwise only the creator (case-insensitive match)
    """
    if entry.is_system_entry and identity != SYSTEM_IDENTITY:
        return False

    if identity == SYSTEM_IDENTITY:
        return True

    return (entry.created_by or "").lower() == (identity or "").lower()
