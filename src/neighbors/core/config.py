"""Configuration management for the Neighbors relay.

This module provides centralized configuration management using Pydantic Settings.
All configuration is loaded from environment variables (no prefix, so the names
already used by the hosting environment work unchanged) with ``.env`` support.

Environment Variable Loading
-----------------------------
Configuration values are loaded in the following priority order:
1. Environment variables (``PORT``, ``CORS_ORIGIN``, ...)
2. .env file in the working directory
3. Default values defined in NeighborsConfig

Example .env file:
    PORT=3001
    CORS_ORIGIN=https://neighbors.framer.website
    OPENAI_API_KEY=sk-...
    OPENAI_IMAGE_MODEL=gpt-image-1
    SUPABASE_URL=https://xyzcompany.supabase.co
    SUPABASE_SERVICE_ROLE_KEY=eyJ...

Fail-fast Loading
-----------------
The credentials and service URLs have no defaults.  :func:`load_config` is
called once from the application lifespan so that a missing variable stops the
process at startup instead of surfacing as a broken request later.  The
resulting :class:`ConfigurationError` names the missing variables but never
echoes any configured value.

Usage Example
-------------
    from neighbors.core.config import load_config

    config = load_config()
    print(config.storage_bucket)
"""

from __future__ import annotations

import logging
from typing import Literal

from pydantic import Field, SecretStr
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from neighbors.core.errors import ConfigurationError

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class NeighborsConfig(BaseSettings):
    """Main configuration for the Neighbors relay.

    Attributes
    ----------
    Server Settings:
        host : str
            Bind address for uvicorn.
        port : int
            Bind port for uvicorn.
        cors_origin : str
            The single frontend origin allowed to call the API.

    Image Generation:
        openai_api_key : SecretStr
            Credential for the image-editing API.
        openai_image_model : str
            Model identifier passed to ``images.edit``.
        image_size : str
            Target resolution of the generated image.
        image_background : Literal["transparent", "opaque", "auto"]
            Background mode of the generated image.

    Storage and Database:
        supabase_url : str
            Project URL of the storage/database service.
        supabase_service_role_key : SecretStr
            Service credential (bypasses row level security, server only).
        storage_bucket : str
            Bucket holding original and generated images.
        members_table : str
            Table holding member records.

    Notes
    -----
    - Secrets are ``SecretStr`` so they render as ``**********`` in reprs
      and log lines.
    - Configuration is immutable after initialization.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        frozen=True,
    )

    # Server settings
    host: str = Field(
        default="0.0.0.0",
        description="Server bind address",
    )
    port: int = Field(
        default=3001,
        description="Server port",
        ge=1,
        le=65535,
    )
    cors_origin: str = Field(
        ...,
        description="Frontend origin allowed by CORS",
    )

    # Image generation
    openai_api_key: SecretStr = Field(
        ...,
        description="Image generation API credential",
    )
    openai_image_model: str = Field(
        ...,
        description="Image generation model identifier",
    )
    image_size: str = Field(
        default="1024x1024",
        description="Target resolution of generated images",
    )
    image_background: Literal["transparent", "opaque", "auto"] = Field(
        default="transparent",
        description="Background mode of generated images",
    )

    # Storage and database
    supabase_url: str = Field(
        ...,
        description="Storage/database service URL",
    )
    supabase_service_role_key: SecretStr = Field(
        ...,
        description="Storage/database service credential",
    )
    storage_bucket: str = Field(
        default="neighbors",
        description="Bucket for original and generated images",
    )
    members_table: str = Field(
        default="community_members",
        description="Table for member records",
    )

    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = Field(
        default="INFO",
        description="Root log level used by the CLI entry point",
    )


def load_config(**overrides) -> NeighborsConfig:
    """Load configuration from the environment, failing fast on missing values.

    Args:
        **overrides: Explicit field values (used by tests and embedding code).

    Returns:
        A validated :class:`NeighborsConfig`.

    Raises:
        ConfigurationError: If required variables are absent or invalid.  The
            message lists the offending variable names only.
    """
    try:
        return NeighborsConfig(**overrides)
    except PydanticValidationError as e:
        names = sorted({str(err["loc"][0]).upper() for err in e.errors() if err["loc"]})
        raise ConfigurationError(
            f"Missing or invalid configuration: {', '.join(names)}"
        ) from None


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging for the server process."""
    logging.basicConfig(level=level, format=LOG_FORMAT)
