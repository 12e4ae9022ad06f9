"""
Application settings loaded from environment variables.
Uses pydantic-settings for type-safe configuration.
"""

from functools import lru_cache

from pydantic_settings import BaseSettings

from shared.config.constants import RecordFields


class Settings(BaseSettings):
    """Settings with defaults for local development."""

    # Document store
    mongo_url: str = "mongodb://localhost:27017"
    mongo_database: str = "docstore"
    # Fail fast when no server answers instead of blocking for pymongo's 30s default
    mongo_server_selection_timeout_ms: int = 5000

    # Change log collection shared by every record type
    change_log_collection: str = "ChangeLog"

    # Documents written before the soft delete flag was renamed to is_removed
    # still carry these spellings; reads exclude a document flagged under any of them.
    legacy_removed_flag_fields: str = "IsRemoved"  # Comma-separated, empty after migration

    # Environment
    environment: str = "development"
    debug: bool = True

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False

    @property
    def legacy_removed_flags(self) -> list[str]:
        """Legacy soft delete flag names as a list."""
        return [
            name.strip()
            for name in self.legacy_removed_flag_fields.split(",")
            if name.strip()
        ]

    def validate_production_settings(self) -> list[str]:
        """
        Validate settings for a production deployment.
        Returns a list of validation errors. Empty list means all checks pass.
        """
        errors = []

        if self.environment == "production":
            if self.debug:
                errors.append("DEBUG must be False in production")

            if self.mongo_url.startswith("mongodb://localhost"):
                errors.append("MONGO_URL must point to the production cluster, not localhost")

            if RecordFields.IS_REMOVED in self.legacy_removed_flags:
                errors.append(
                    f"LEGACY_REMOVED_FLAG_FIELDS must not list the canonical {RecordFields.IS_REMOVED}"
                )

        return errors


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()


# Convenience exports
settings = get_settings()

MONGO_URL = settings.mongo_url
MONGO_DATABASE = settings.mongo_database
