"""
Database models for Go URLs.

UrlEntry is the only persisted entity; permissions (can_edit / can_delete)
are computed per request and never stored.
"""

from .url_entry import UrlEntry

__all__ = ["UrlEntry"]
