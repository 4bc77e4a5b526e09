"""Key-value store port (abstract interface).

Defines the contract every durable store used by the persistence adapter
must implement. Values are opaque JSON text; stores never interpret them.
Implementations raise ``PersistenceError`` on I/O failure.
"""

from abc import ABC, abstractmethod


class KeyValueStore(ABC):
    """Abstract durable key-value store."""

    @abstractmethod
    def get(self, key: str) -> str | None:
        """Return the stored text for ``key``, or None when absent."""
        ...

    @abstractmethod
    def set(self, key: str, value: str) -> None:
        """Store ``value`` under ``key``, replacing any previous value."""
        ...

    @abstractmethod
    def delete(self, key: str) -> None:
        """Remove ``key``. Deleting a missing key is not an error."""
        ...
