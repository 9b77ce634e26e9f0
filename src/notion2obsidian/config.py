"""Configuration management using pydantic-settings."""

from functools import lru_cache
from pathlib import Path

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from notion2obsidian.exceptions import ConfigurationError
from notion2obsidian.models import ImportRequest

DEFAULT_NOTION_VERSION = "2022-06-28"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        populate_by_name=True,
    )

    # Notion configuration
    notion_token: str = Field(alias="NOTION_TOKEN")
    database_id: str | None = Field(default=None, alias="NOTION_DATABASE_ID")
    notion_version: str = Field(default=DEFAULT_NOTION_VERSION, alias="NOTION_VERSION")

    # Output configuration
    output_dir: Path = Field(default=Path("Notion"), alias="NOTION_OUTPUT_DIR")
    create_base_file: bool = Field(default=True, alias="NOTION_CREATE_BASE_FILE")

    def to_import_request(
        self,
        database_id: str | None = None,
        output_folder: str | None = None,
        create_base_file: bool | None = None,
    ) -> ImportRequest:
        """Build the immutable request for one import run.

        Explicit arguments win over values loaded from the environment.
        """
        database_id = database_id or self.database_id
        if not database_id:
            raise ConfigurationError(
                "No database selected. Pass DATABASE_ID or set NOTION_DATABASE_ID."
            )

        return ImportRequest(
            token=self.notion_token,
            database_id=database_id,
            output_folder=output_folder or str(self.output_dir),
            create_base_file=self.create_base_file if create_base_file is None else create_base_file,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
