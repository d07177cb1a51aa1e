from __future__ import annotations

import os
from dataclasses import dataclass, field
from typing import Mapping, Optional

from dotenv import dotenv_values
from pydantic import Field, SecretStr, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from mediaops.core.credentials import sanitize_credential

DEFAULT_PROBE_TIMEOUT_SECONDS = 5.0


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field("dev", alias="APP_ENV")
    database_url: str = Field(...)
    cors_origin: str = Field("")

    aws_region: str = Field("us-east-1", alias="AWS_REGION")
    s3_bucket_name: str = Field("", alias="S3_BUCKET_NAME")
    cloudfront_domain: str = Field("", alias="CLOUDFRONT_DOMAIN")
    aws_access_key_id: SecretStr = Field(SecretStr(""), alias="AWS_ACCESS_KEY_ID")
    aws_secret_access_key: SecretStr = Field(SecretStr(""), alias="AWS_SECRET_ACCESS_KEY")

    health_probe_timeout_seconds: float = Field(
        DEFAULT_PROBE_TIMEOUT_SECONDS, alias="HEALTH_PROBE_TIMEOUT_SECONDS"
    )

    @field_validator("database_url", mode="before")
    @classmethod
    def _normalize_database_url(cls, v: object) -> object:
        """
        Accept common Postgres URL forms and normalize to psycopg(v3) for SQLAlchemy.

        - postgres://...            -> postgresql+psycopg://...
        - postgresql://...          -> postgresql+psycopg://...
        - anything else (sqlite, postgresql+psycopg) -> keep as-is
        """
        if not isinstance(v, str):
            return v

        if v.startswith("postgres://"):
            return "postgresql+psycopg://" + v.split("://", 1)[1]

        if v.startswith("postgresql://"):
            return "postgresql+psycopg://" + v.split("://", 1)[1]

        return v

    @field_validator("aws_access_key_id", "aws_secret_access_key", mode="before")
    @classmethod
    def _sanitize_keys(cls, v: object) -> object:
        if isinstance(v, SecretStr):
            v = v.get_secret_value()
        if isinstance(v, str):
            return sanitize_credential(v)
        return v

    @field_validator("s3_bucket_name", "cloudfront_domain", "aws_region", mode="before")
    @classmethod
    def _strip(cls, v: object) -> object:
        return v.strip() if isinstance(v, str) else v

    @model_validator(mode="after")
    def _validate_timeout(self) -> "Settings":
        if self.health_probe_timeout_seconds <= 0:
            raise ValueError("HEALTH_PROBE_TIMEOUT_SECONDS must be positive")
        return self

    def has_credentials(self) -> bool:
        return bool(
            self.aws_access_key_id.get_secret_value()
            and self.aws_secret_access_key.get_secret_value()
        )


@dataclass(frozen=True)
class AwsConfig:
    """Read-only slice of the settings that the health probes consume."""

    region: str
    bucket: str
    cdn_domain: str
    access_key_id: str = field(repr=False)
    secret_access_key: str = field(repr=False)
    probe_timeout_seconds: float = DEFAULT_PROBE_TIMEOUT_SECONDS

    @classmethod
    def from_settings(cls, s: Settings) -> "AwsConfig":
        return cls(
            region=s.aws_region or "us-east-1",
            bucket=s.s3_bucket_name,
            cdn_domain=s.cloudfront_domain,
            access_key_id=s.aws_access_key_id.get_secret_value(),
            secret_access_key=s.aws_secret_access_key.get_secret_value(),
            probe_timeout_seconds=s.health_probe_timeout_seconds,
        )


settings = Settings()


def settings_source(env_file: Optional[str] = None, environ: Optional[Mapping[str, str]] = None) -> dict[str, str]:
    """
    Raw variables as `Settings` resolves them: the env file first, then the
    process environment on top of it.
    """
    path = env_file if env_file is not None else Settings.model_config.get("env_file")
    merged: dict[str, str] = {}
    if path:
        merged.update({k: v for k, v in dotenv_values(path).items() if v is not None})
    merged.update(os.environ if environ is None else environ)
    return merged
