"""In-memory key-value store for development and testing.

Can be configured at runtime to fail reads or writes so that callers'
degradation paths can be exercised.
"""

from storefront.exceptions import PersistenceError
from storefront.persistence.port import KeyValueStore


class MemoryStore(KeyValueStore):
    """Process-local store backed by a dict."""

    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.readable: bool = True
        self.writable: bool = True

    def configure(self, readable: bool = True, writable: bool = True) -> None:
        """Configure store behavior at runtime."""
        self.readable = readable
        self.writable = writable

    def get(self, key: str) -> str | None:
        if not self.readable:
            raise PersistenceError(f"Store is not readable (key {key!r})")
        return self.data.get(key)

    def set(self, key: str, value: str) -> None:
        if not self.writable:
            raise PersistenceError(f"Store is not writable (key {key!r})")
        self.data[key] = value

    def delete(self, key: str) -> None:
        if not self.writable:
            raise PersistenceError(f"Store is not writable (key {key!r})")
        self.data.pop(key, None)

    def reset(self) -> None:
        """Clear stored data and restore default behavior (useful between tests)."""
        self.data.clear()
        self.readable = True
        self.writable = True
