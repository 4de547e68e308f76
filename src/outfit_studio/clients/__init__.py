"""
Transformation service adapters for Azure GPT-Image, Azure Flux, and BFL Flux.
"""
from ..config import AppConfig
from .azure_flux import AzureFluxClient
from .azure_gpt_image import AzureGPTImageClient
from .base import TransformationService
from .bfl_flux import BFLFluxClient


def create_service(config: AppConfig) -> AzureGPTImageClient | AzureFluxClient | BFLFluxClient:
    """Build the client for ``config.provider``."""
    timeout = config.http_timeout_seconds
    if config.provider == "azure_gpt_image" and config.azure_gpt_image is not None:
        return AzureGPTImageClient(config.azure_gpt_image, timeout_seconds=timeout)
    if config.provider == "azure_flux" and config.azure_flux is not None:
        return AzureFluxClient(config.azure_flux, timeout_seconds=timeout)
    if config.provider == "bfl" and config.bfl is not None:
        return BFLFluxClient(config.bfl, timeout_seconds=timeout)
    raise ValueError(f"Unknown or unconfigured provider: {config.provider}")


__all__ = [
    "AzureFluxClient",
    "AzureGPTImageClient",
    "BFLFluxClient",
    "TransformationService",
    "create_service",
]
