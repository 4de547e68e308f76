from __future__ import annotations

import os
from pathlib import Path
from typing import Literal, Optional

from dotenv import load_dotenv
from pydantic import BaseModel, Field, ValidationError, field_validator, model_validator

DEFAULT_ALLOWED_TYPES = ("image/jpeg", "image/png", "image/webp")
DEFAULT_MAX_SIZE_MB = 4.0
DEFAULT_API_VERSION = "2024-12-01-preview"

ProviderName = Literal["azure_gpt_image", "azure_flux", "bfl"]


class UploadConfig(BaseModel):
    """Limits applied by the media validator."""

    allowed_types: tuple[str, ...] = Field(
        default=DEFAULT_ALLOWED_TYPES,
        description="MIME types accepted for uploaded photos",
    )
    max_size_mb: float = Field(
        default=DEFAULT_MAX_SIZE_MB,
        gt=0,
        description="Largest accepted upload, in megabytes",
    )

    @field_validator("allowed_types")
    @classmethod
    def _normalize_types(cls, value: tuple[str, ...]) -> tuple[str, ...]:
        normalized = tuple(item.strip().lower() for item in value if item.strip())
        if not normalized:
            raise ValueError("At least one upload MIME type must be allowed")
        return normalized

    @property
    def max_size_bytes(self) -> int:
        return int(self.max_size_mb * 1024 * 1024)


class ExportConfig(BaseModel):
    """Where and under which name generated looks are saved."""

    product_name: str = Field(default="outfit-studio", min_length=1)
    root_dir: Path = Field(default_factory=lambda: Path("output"))


class AzureGPTImageConfig(BaseModel):
    """Settings required to access an Azure GPT-Image-1 deployment."""

    endpoint: str = Field(..., description="Azure GPT-Image-1 endpoint URL")
    api_key: str = Field(..., description="Azure API key for GPT-Image-1")
    deployment: str = Field(default="gpt-image-1", description="Azure GPT-Image-1 deployment name")
    api_version: str = Field(default=DEFAULT_API_VERSION)
    poll_interval_seconds: float = Field(
        default=2.0,
        ge=0.1,
        le=30.0,
        description="Delay between polling attempts when waiting for operations",
    )
    max_poll_attempts: int = Field(default=60, ge=1, le=600)


class AzureFluxConfig(BaseModel):
    """Settings required to access the Azure-hosted Flux deployment."""

    endpoint: str = Field(..., description="Azure Cognitive Services endpoint URL")
    api_key: str = Field(..., description="Azure API key with permissions for the Flux deployment")
    deployment: str = Field(..., description="Azure Flux deployment name")
    api_version: str = Field(default=DEFAULT_API_VERSION)
    poll_interval_seconds: float = Field(default=2.0, ge=0.1, le=30.0)
    max_poll_attempts: int = Field(default=60, ge=1, le=600)


class BFLFluxConfig(BaseModel):
    """Settings required to access the official BFL Flux API."""

    api_url: str = Field(
        default="https://api.bfl.ai/v1/images",
        description="Base URL for the BFL Flux image endpoint",
    )
    api_key: str = Field(..., description="BFL Flux API key")


class AppConfig(BaseModel):
    """Top-level configuration consumed by the CLI and the service factory."""

    provider: ProviderName = "azure_gpt_image"
    azure_gpt_image: AzureGPTImageConfig | None = None
    azure_flux: AzureFluxConfig | None = None
    bfl: BFLFluxConfig | None = None
    upload: UploadConfig = Field(default_factory=UploadConfig)
    export: ExportConfig = Field(default_factory=ExportConfig)
    http_timeout_seconds: float = Field(
        default=120.0,
        gt=0,
        description="Per-request HTTP timeout applied by provider clients",
    )

    @model_validator(mode="after")
    def _validate_provider(self) -> "AppConfig":
        if self.provider == "azure_gpt_image" and self.azure_gpt_image is None:
            raise ValueError("Azure GPT-Image configuration is required when provider is 'azure_gpt_image'")
        if self.provider == "azure_flux" and self.azure_flux is None:
            raise ValueError("Azure Flux configuration is required when provider is 'azure_flux'")
        if self.provider == "bfl" and self.bfl is None:
            raise ValueError("BFL configuration is required when provider is 'bfl'")
        return self


def _float_from_env(value: Optional[str], default: float) -> float:
    if value is None:
        return default
    try:
        return float(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid float value: {value}") from exc


def _int_from_env(value: Optional[str], default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except ValueError as exc:
        raise RuntimeError(f"Invalid integer value: {value}") from exc


def _list_from_env(value: Optional[str], default: tuple[str, ...]) -> tuple[str, ...]:
    if value is None:
        return default
    return tuple(part.strip() for part in value.split(",") if part.strip())


def load_config(dotenv_path: str | Path | None = None) -> AppConfig:
    """
    Load configuration from environment variables (optionally seeded by a .env file).

    Only the block for the selected ``OUTFIT_PROVIDER`` is read.

    Raises
    ------
    RuntimeError
        If required configuration values are missing or malformed.
    """
    env_path = Path(dotenv_path) if dotenv_path else Path(".env")
    if env_path.exists():
        load_dotenv(env_path)

    provider = os.getenv("OUTFIT_PROVIDER", "azure_gpt_image").strip().lower()

    data: dict[str, object] = {
        "provider": provider,
        "upload": {
            "allowed_types": _list_from_env(os.getenv("UPLOAD_ALLOWED_TYPES"), DEFAULT_ALLOWED_TYPES),
            "max_size_mb": _float_from_env(os.getenv("UPLOAD_MAX_SIZE_MB"), DEFAULT_MAX_SIZE_MB),
        },
        "export": {
            "product_name": os.getenv("EXPORT_PRODUCT_NAME", "outfit-studio"),
            "root_dir": Path(os.getenv("OUTPUT_ROOT_DIR", "output")),
        },
        "http_timeout_seconds": _float_from_env(os.getenv("HTTP_TIMEOUT_SECONDS"), 120.0),
    }

    if provider == "azure_gpt_image":
        data["azure_gpt_image"] = {
            "endpoint": os.getenv("AZURE_GPT_IMAGE_ENDPOINT"),
            "api_key": os.getenv("AZURE_GPT_IMAGE_API_KEY"),
            "deployment": os.getenv("AZURE_GPT_IMAGE_DEPLOYMENT", "gpt-image-1"),
            "api_version": os.getenv("AZURE_GPT_IMAGE_API_VERSION", DEFAULT_API_VERSION),
            "poll_interval_seconds": _float_from_env(os.getenv("AZURE_GPT_IMAGE_POLL_INTERVAL"), 2.0),
            "max_poll_attempts": _int_from_env(os.getenv("AZURE_GPT_IMAGE_MAX_POLL_ATTEMPTS"), 60),
        }
    elif provider == "azure_flux":
        data["azure_flux"] = {
            "endpoint": os.getenv("AZURE_FLUX_ENDPOINT"),
            "api_key": os.getenv("AZURE_FLUX_API_KEY"),
            "deployment": os.getenv("AZURE_FLUX_DEPLOYMENT"),
            "api_version": os.getenv("AZURE_FLUX_API_VERSION", DEFAULT_API_VERSION),
            "poll_interval_seconds": _float_from_env(os.getenv("AZURE_FLUX_POLL_INTERVAL"), 2.0),
            "max_poll_attempts": _int_from_env(os.getenv("AZURE_FLUX_MAX_POLL_ATTEMPTS"), 60),
        }
    elif provider == "bfl":
        data["bfl"] = {
            "api_url": os.getenv("BFL_FLUX_API_URL", "https://api.bfl.ai/v1/images"),
            "api_key": os.getenv("BFL_FLUX_API_KEY"),
        }

    try:
        config = AppConfig.model_validate(data)
    except ValidationError as exc:
        missing = {"/".join(str(part) for part in err["loc"]) or "config" for err in exc.errors()}
        missing_str = ", ".join(sorted(missing))
        raise RuntimeError(f"Missing or invalid configuration values: {missing_str}") from exc

    return config
