"""
Soft delete flag handling.

Documents written under the old naming carry ``IsRemoved`` instead of
``is_removed``. Reads exclude a document flagged under any configured
spelling; migrate_removed_flag() rewrites old documents to the canonical
field so the legacy spelling can be dropped from settings.
"""

from pymongo.collection import Collection

from shared.config.constants import RecordFields
from shared.config.logging import get_logger
from shared.config.settings import settings
from shared.infrastructure.db import store_errors

logger = get_logger(__name__)


def removed_flag_fields() -> list[str]:
    """Canonical soft delete flag followed by the legacy spellings."""
    fields = [RecordFields.IS_REMOVED]
    for name in settings.legacy_removed_flags:
        if name not in fields:
            fields.append(name)
    return fields


def migrate_removed_flag(collection: Collection, legacy_field: str | None = None) -> int:
    """
    Move a legacy soft delete flag to the canonical field.

    Documents where the legacy flag is true end up with ``is_removed: true``
    and without the legacy key. The canonical flag is never downgraded: a
    document already removed under the canonical name stays removed.

    Args:
        collection: Collection to migrate
        legacy_field: Legacy flag name (defaults to every configured one)

    Returns:
        Number of documents modified
    """
    canonical = RecordFields.IS_REMOVED
    legacy_fields = [legacy_field] if legacy_field else settings.legacy_removed_flags

    modified = 0
    for legacy in legacy_fields:
        if legacy == canonical:
            continue
        with store_errors("migrate_removed_flag", collection=collection.name, field=legacy):
            flagged = collection.update_many(
                {legacy: True},
                {"$set": {canonical: True}, "$unset": {legacy: ""}},
            )
            cleared = collection.update_many(
                {legacy: {"$exists": True}},
                {"$unset": {legacy: ""}},
            )
        modified += flagged.modified_count + cleared.modified_count
        logger.info(
            "Soft delete flag migrated",
            collection=collection.name,
            legacy_field=legacy,
            flagged=flagged.modified_count,
            cleared=cleared.modified_count,
        )
    return modified
