"""Configuration management for the URL shortener application.

This module provides centralized configuration management using Pydantic BaseSettings
with environment variable support and caching for performance.

Flow Diagram — get_settings()
=============================
::
    ┌─────────────┐
    │  Call get_  │
    │  settings() │
    └──────┬──────┘
           ▼
    ┌─────────────┐
    │ Check cache  │
    │ (lru_cache)  │
    └──────┬──────┘
    HIT?  │
    ┌─────┴─────┐
    │ NO         │ YES
    ▼            ▼
┌─────────┐  ┌─────────┐
│ Create  │  │ Return  │
│ Settings│  │ cached  │
│ instance│  │ value   │
└─────────┘  └─────────┘

How to Use
===========
**Step 1 — Import**::
    from urlshortener.config import get_settings

**Step 2 — Get settings**::
    settings = get_settings()
    alphabet = settings.TOKEN_CHARACTERS

**Step 3 — Override through the environment**::
    BASE_URL=https://sho.rt/ TOKEN_LENGTH=8 uvicorn urlshortener.main:app

Key Behaviours
===============
- Settings are cached after first access and never change afterwards.
- Environment variables override defaults automatically.
- Blank strings and non-positive token sizes raise ValidationError at startup.

Classes:
    Settings:  Pydantic model for all configuration values.

"""

__all__ = ["Settings", "get_settings"]

import string
from functools import lru_cache

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    APP_NAME: str = "url-shortener"
    APP_ENV: str = "development"
    LOG_LEVEL: str = "INFO"

    # Public prefix of every short url, the token is appended to it
    BASE_URL: str = "http://localhost:8080/"

    # PostgreSQL
    DATABASE_URL: str = "postgresql+asyncpg://urlshortener:urlshortener@db:5432/urlshortener"

    # Token generation
    TOKEN_LENGTH: int = Field(10, gt=0)
    TOKEN_MAX_ATTEMPTS: int = Field(5, gt=0)
    TOKEN_CHARACTERS: str = string.ascii_letters + string.digits

    # Error message rendering
    DEFAULT_LOCALE: str = "en"

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=True,
        frozen=True,
    )

    @field_validator("BASE_URL", "TOKEN_CHARACTERS", "DATABASE_URL")
    @classmethod
    def validate_not_blank(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("must not be blank")
        return v


@lru_cache()
def get_settings() -> Settings:
    return Settings()
