"""Tracker host configuration via environment variables."""

from pydantic import Field
from pydantic_settings import BaseSettings


class StorageSettings(BaseSettings):
    model_config = {"env_prefix": "TRACKER_"}

    # JSON file backing the key-value store (players, games, settings)
    storage_file: str = Field(default="backend/data/tracker.json", min_length=1)

    log_dir: str = Field(default="backend/logs", min_length=1)
