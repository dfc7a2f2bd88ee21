"""Configuration management using Pydantic Settings.

This module provides type-safe configuration management with automatic
environment variable loading and validation.

The configuration is organized into logical groups:
- LoggingConfig: Logging levels, files, and debugging options
- StorageConfig: Data directory, document names and write retry behaviour
- ScanConfig: Incremental merge batching and rescan throttling
- PlaylistConfig: Validation policies for playlist edits
"""

from pathlib import Path
from typing import Any

from pydantic import BaseModel, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class LoggingConfig(BaseModel):
    """Logging configuration for console and file output."""

    console_level: str = "INFO"
    file_level: str = "DEBUG"
    log_file: Path = Path("playdeck.log")
    real_time_debug: bool = True


class StorageConfig(BaseModel):
    """Durable document storage configuration."""

    data_dir: Path = Path("data")
    playlists_document: str = "playlists.json"
    library_document: str = "library_cache.json"
    write_retry_count: int = 3
    write_retry_max_delay: float = 2.0


class ScanConfig(BaseModel):
    """Library rescan and merge configuration."""

    merge_batch_size: int = 200
    min_rescan_interval_minutes: float = 15.0
    prune_missing: bool = True


class PlaylistConfig(BaseModel):
    """Playlist edit validation policies."""

    # Reject updateTrackOrder calls that are not a permutation of the members
    strict_reorder: bool = True
    # Allow a cover track that is not a member of the playlist
    allow_foreign_cover: bool = True


class Settings(BaseSettings):
    """Main application settings with environment variable support.

    Environment variables can be set using flat naming or nested naming:
    - Flat: DATA_DIR, CONSOLE_LOG_LEVEL, LOG_FILE
    - Nested: STORAGE__DATA_DIR, LOGGING__CONSOLE_LEVEL, SCAN__MERGE_BATCH_SIZE

    The .env file is automatically loaded for development convenience.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    logging: LoggingConfig = LoggingConfig()
    storage: StorageConfig = StorageConfig()
    scan: ScanConfig = ScanConfig()
    playlists: PlaylistConfig = PlaylistConfig()

    @model_validator(mode="before")
    @classmethod
    def transform_flat_env_vars(cls, data: Any) -> Any:
        """Transform flat environment variables to nested structure.

        Handles legacy flat env vars (DATA_DIR) and maps them to the
        nested structure expected by the models (storage.data_dir).
        """
        if not isinstance(data, dict):
            return data

        transformed: dict[str, dict[str, Any]] = {}

        storage_mapping = {
            "data_dir": "data_dir",
            "playlists_document": "playlists_document",
            "library_document": "library_document",
        }
        for env_key, field_key in storage_mapping.items():
            if env_key in data:
                transformed.setdefault("storage", {})[field_key] = data.pop(env_key)

        log_mapping = {
            "console_log_level": "console_level",
            "file_log_level": "file_level",
            "log_file": "log_file",
            "log_real_time_debug": "real_time_debug",
        }
        for env_key, field_key in log_mapping.items():
            if env_key in data:
                transformed.setdefault("logging", {})[field_key] = data.pop(env_key)

        for section, values in transformed.items():
            existing = data.get(section)
            if isinstance(existing, dict):
                data[section] = {**existing, **values}
            else:
                data[section] = values

        return data


# Singleton instance for application use
settings = Settings()


# =============================================================================
# FLAT KEY ACCESS
# =============================================================================

_FLAT_KEY_MAP = {
    "CONSOLE_LOG_LEVEL": lambda: settings.logging.console_level,
    "FILE_LOG_LEVEL": lambda: settings.logging.file_level,
    "LOG_FILE": lambda: settings.logging.log_file,
    "LOG_REAL_TIME_DEBUG": lambda: settings.logging.real_time_debug,
    "DATA_DIR": lambda: settings.storage.data_dir,
    "PLAYLISTS_DOCUMENT": lambda: settings.storage.playlists_document,
    "LIBRARY_DOCUMENT": lambda: settings.storage.library_document,
    "WRITE_RETRY_COUNT": lambda: settings.storage.write_retry_count,
    "WRITE_RETRY_MAX_DELAY": lambda: settings.storage.write_retry_max_delay,
    "SCAN_MERGE_BATCH_SIZE": lambda: settings.scan.merge_batch_size,
    "SCAN_MIN_RESCAN_INTERVAL_MINUTES": lambda: settings.scan.min_rescan_interval_minutes,
    "SCAN_PRUNE_MISSING": lambda: settings.scan.prune_missing,
    "PLAYLIST_STRICT_REORDER": lambda: settings.playlists.strict_reorder,
    "PLAYLIST_ALLOW_FOREIGN_COVER": lambda: settings.playlists.allow_foreign_cover,
}


def get_config(key: str, default=None):
    """Get configuration value by flat key with optional default.

    Args:
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default

    Example:
        >>> batch_size = get_config("SCAN_MERGE_BATCH_SIZE", 200)
    """
    if key in _FLAT_KEY_MAP:
        return _FLAT_KEY_MAP[key]()
    return default
