# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

import sys
from functools import lru_cache
from typing import Annotated

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, NoDecode, SettingsConfigDict

_SECTION_CONFIG = SettingsConfigDict(
    env_file=".env",
    env_file_encoding="utf-8",
    validate_by_name=True,
    extra="ignore",
)


def _parse_bool(value: str | bool) -> bool:
    if isinstance(value, str):
        return value.lower() in ("1", "true", "yes")
    return bool(value)


def _parse_csv(value: str | list[str]) -> list[str]:
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    return value


class DatabaseConfig(BaseSettings):
    url: str = Field("sqlite:///userhub.db", alias="DATABASE_URL")
    pool_size: int = Field(10, ge=1, alias="DATABASE_POOL_SIZE")
    max_overflow: int = Field(10, ge=0, alias="DATABASE_MAX_OVERFLOW")
    pool_timeout: float = Field(2.0, ge=0.1, alias="DATABASE_POOL_TIMEOUT")

    model_config = _SECTION_CONFIG


class AuthConfig(BaseSettings):
    jwt_secret: str | None = Field(None, alias="JWT_SECRET")
    jwt_algorithm: str = Field("HS256", alias="JWT_ALGORITHM")
    token_ttl_seconds: int = Field(24 * 60 * 60, ge=1, alias="TOKEN_TTL_SECONDS")
    admin_emails: Annotated[list[str], NoDecode] = Field([], alias="ADMIN_EMAILS")

    model_config = _SECTION_CONFIG

    @field_validator("admin_emails", mode="before")
    @classmethod
    def _parse_admin_emails(cls, value: str | list[str]) -> list[str]:
        return [email.lower() for email in _parse_csv(value)]


class SecurityConfig(BaseSettings):
    # CORS
    allowed_origins: Annotated[list[str], NoDecode] = Field(["*"], alias="ALLOWED_ORIGINS")

    # Rate limiting
    enable_rate_limit: bool = Field(True, alias="ENABLE_RATE_LIMIT")
    rate_limit_requests: int = Field(10, alias="RL_LIMIT")
    rate_limit_window: float = Field(60.0, alias="RL_WINDOW")

    # Reverse proxies whose X-Forwarded-For hop is trusted; 0 trusts none.
    trusted_proxies: int = Field(0, ge=0, alias="TRUSTED_PROXIES")

    # HSTS
    enable_hsts: bool = Field(False, alias="ENABLE_HSTS")

    model_config = _SECTION_CONFIG

    @field_validator("allowed_origins", mode="before")
    @classmethod
    def _parse_origins(cls, value: str | list[str]) -> list[str]:
        return _parse_csv(value)

    @field_validator("enable_rate_limit", "enable_hsts", mode="before")
    @classmethod
    def _parse_flags(cls, value: str | bool) -> bool:
        return _parse_bool(value)


def _database_config_factory() -> DatabaseConfig:
    return DatabaseConfig()  # type: ignore[call-arg]


def _auth_config_factory() -> AuthConfig:
    return AuthConfig()  # type: ignore[call-arg]


def _security_config_factory() -> SecurityConfig:
    return SecurityConfig()  # type: ignore[call-arg]


class AppConfig(BaseSettings):
    app_env: str = Field("development", alias="APP_ENV")
    secret_key: str = Field("dev", alias="SECRET_KEY")
    debug_logging: bool = Field(False, alias="DEBUG_LOGGING")

    database: DatabaseConfig = Field(default_factory=_database_config_factory)
    auth: AuthConfig = Field(default_factory=_auth_config_factory)
    security: SecurityConfig = Field(default_factory=_security_config_factory)

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        validate_assignment=True,
        extra="ignore",
    )

    @field_validator("debug_logging", mode="before")
    @classmethod
    def _parse_debug_logging(cls, value: str | bool) -> bool:
        return _parse_bool(value)

    @model_validator(mode="after")
    def _validate_production_settings(self) -> "AppConfig":
        if not self.is_production():
            return self

        if self.token_secret() in ("dev", "development", "test", ""):
            print(
                "\nCRITICAL SECURITY ERROR: insecure JWT_SECRET/SECRET_KEY in production.\n"
                "   Generate one with: python -c \"import secrets; print(secrets.token_urlsafe(32))\"\n",
                file=sys.stderr,
            )
            sys.exit(1)

        if "*" in self.security.allowed_origins:
            print("\nWARNING: CORS allows wildcard (*) origins in production.\n", file=sys.stderr)

        return self

    def is_production(self) -> bool:
        return self.app_env.lower() in ("production", "prod")

    def token_secret(self) -> str:
        return self.auth.jwt_secret or self.secret_key


@lru_cache(maxsize=1)
def load_config() -> AppConfig:
    return AppConfig()


__all__ = ["AppConfig", "AuthConfig", "DatabaseConfig", "SecurityConfig", "load_config"]
