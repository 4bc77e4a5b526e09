"""Durable store factory.

Provides get_store() / set_store() to swap implementations:
- MemoryStore for development and testing (default)
- FileStore when STOREFRONT_STORAGE=file
"""

from storefront.config import load_settings
from storefront.persistence.file_store import FileStore
from storefront.persistence.memory_store import MemoryStore
from storefront.persistence.port import KeyValueStore

_current_store: KeyValueStore | None = None


def get_store() -> KeyValueStore:
    """Return the current store, building it from settings on first use."""
    global _current_store
    if _current_store is None:
        settings = load_settings()
        if settings.storage == "file":
            _current_store = FileStore(settings.storage_dir)
        else:
            _current_store = MemoryStore()
    return _current_store


def set_store(store: KeyValueStore) -> None:
    """Override the active store (useful for tests)."""
    global _current_store
    _current_store = store


def reset_store() -> None:
    """Reset to the configured default store."""
    global _current_store
    _current_store = None
