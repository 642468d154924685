"""Adapter implementations for external services."""

from .asset_bundle import install_bundle
from .reference_data import ReferenceDataClient

__all__ = ["ReferenceDataClient", "install_bundle"]
