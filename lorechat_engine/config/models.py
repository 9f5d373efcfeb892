"""Pydantic models for configuration validation."""

from pathlib import Path
from typing import Optional
from pydantic import BaseModel, Field, field_validator, ConfigDict


class PathsConfig(BaseModel):
    """File path configuration."""

    data: Path = Path("data")

    @field_validator('data')
    @classmethod
    def validate_path(cls, v: Path) -> Path:
        """Ensure paths are cross-platform."""
        return Path(v)


class DatabaseConfig(BaseModel):
    """Database configuration."""

    url: Optional[str] = Field(
        default=None,
        description="SQLAlchemy URL; defaults to data/lorechat.db under paths.data"
    )
    echo: bool = False

    @field_validator('url')
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        """Only SQLite URLs are supported."""
        if v is not None and not v.startswith('sqlite'):
            raise ValueError('database url must be a sqlite URL')
        return v


class ImportConfig(BaseModel):
    """Character card import settings."""

    default_avatar: str = "🐱"
    my_nickname: str = "我"
    default_group: str = "未分组"
    max_upload_bytes: int = Field(default=20 * 1024 * 1024, gt=0)


class SystemConfig(BaseModel):
    """Top-level system configuration."""

    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    paths: PathsConfig = Field(default_factory=PathsConfig)
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    import_: ImportConfig = Field(default_factory=ImportConfig, alias='import')
    debug: bool = False
    api_host: str = "localhost"
    api_port: int = Field(default=8080, gt=0, le=65535)

    @property
    def database_url(self) -> str:
        """Resolved database URL."""
        if self.database.url:
            return self.database.url
        return f"sqlite:///{self.paths.data / 'lorechat.db'}"
