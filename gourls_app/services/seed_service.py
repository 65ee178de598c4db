"""
Startup seeding of system entries.

Seeding is idempotent (only ids missing from the store are inserted) and
best-effort: main.py logs and swallows any failure so the service still
starts.
"""

import logging
import uuid
from typing import List, NamedTuple

from sqlalchemy.orm import Session

from gourls_app.models.url_entry import UrlEntry, utcnow
from gourls_app.services.authorization import SYSTEM_IDENTITY

logger = logging.getLogger(__name__)


class SeedEntry(NamedTuple):
    id: uuid.UUID
    short_name: str
    long_url: str


SEED_ENTRIES: List[SeedEntry] = [
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440001"), "pydocs", "https://docs.python.org/3/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440002"), "pypi", "https://pypi.org/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440003"), "fastapi", "https://fastapi.tiangolo.com/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440004"), "sqla", "https://docs.sqlalchemy.org/en/20/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440005"), "pydantic", "https://docs.pydantic.dev/latest/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440006"), "pytest", "https://docs.pytest.org/en/stable/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440007"), "pep8", "https://peps.python.org/pep-0008/"),
    SeedEntry(uuid.UUID("550e8400-e29b-41d4-a716-446655440008"), "gh", "https://github.com/"),
]


def seed_system_entries(db: Session, seeds: List[SeedEntry] = SEED_ENTRIES) -> int:
    """
    Insert the seed entries whose ids are not in the store yet.

    Returns:
        Number of entries inserted
    """
    existing_ids = {
        row[0]
        for row in db.query(UrlEntry.id).filter(UrlEntry.id.in_([seed.id for seed in seeds])).all()
    }
    missing = [seed for seed in seeds if seed.id not in existing_ids]

    if not missing:
        logger.info("All seed data is present in database")
        return 0

    now = utcnow()
    db.add_all(
        UrlEntry(
            id=seed.id,
            short_name=seed.short_name,
            long_url=seed.long_url,
            created_by=SYSTEM_IDENTITY,
            created_at=now,
            is_system_entry=True,
            updated_at=None,
            updated_by=None,
        )
        for seed in missing
    )
    db.commit()

    logger.info("Added %d missing seed URL entries", len(missing))
    for seed in missing:
        logger.debug("Seeded %s -> %s", seed.short_name, seed.long_url)
    return len(missing)
