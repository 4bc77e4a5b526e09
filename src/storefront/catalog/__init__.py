"""Catalog service factory.

Provides get_catalog() / set_catalog() to swap implementations:
- FakeCatalog for development and testing (default)
- HttpCatalog when STOREFRONT_API_URL is set
"""

from storefront.catalog.fake_adapter import FakeCatalog
from storefront.catalog.http_adapter import HttpCatalog
from storefront.catalog.port import CatalogService
from storefront.config import load_settings

_current_catalog: CatalogService | None = None


def get_catalog() -> CatalogService:
    """Return the current catalog service."""
    global _current_catalog
    if _current_catalog is None:
        settings = load_settings()
        if settings.uses_remote_services:
            _current_catalog = HttpCatalog(settings.api_url, timeout=settings.http_timeout)
        else:
            _current_catalog = FakeCatalog()
    return _current_catalog


def set_catalog(catalog: CatalogService) -> None:
    """Override the active catalog service (useful for tests)."""
    global _current_catalog
    _current_catalog = catalog


def reset_catalog() -> None:
    """Reset to the configured default catalog."""
    global _current_catalog
    _current_catalog = None
