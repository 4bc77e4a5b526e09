"""Persistence adapter — failure-tolerant load/save/clear of named slots.

Each slot names one piece of session state (cart items, checkout form,
applied promo), the type it deserializes to, and the default returned when
nothing usable is stored. Persistence is best-effort: every read or write
failure is logged and absorbed here, so callers always get a value back and
a UI mutation is never blocked by the store.
"""

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

import structlog
from pydantic import TypeAdapter, ValidationError

from storefront.exceptions import PersistenceError
from storefront.persistence.port import KeyValueStore

logger = structlog.get_logger(__name__)


@dataclass(frozen=True)
class Slot:
    """A named persisted value with its type and default."""

    name: str
    type_: Any
    default_factory: Callable[[], Any]
    adapter: TypeAdapter = field(init=False, repr=False, compare=False)

    def __post_init__(self):
        object.__setattr__(self, "adapter", TypeAdapter(self.type_))

    def default(self) -> Any:
        return self.default_factory()


class PersistenceAdapter:
    def __init__(self, store: KeyValueStore, key_prefix: str = "storefront") -> None:
        self.store = store
        self.key_prefix = key_prefix

    def key_for(self, slot: Slot) -> str:
        return f"{self.key_prefix}_{slot.name}" if self.key_prefix else slot.name

    def load(self, slot: Slot) -> Any:
        """Return the stored value for ``slot``, or the slot default."""
        key = self.key_for(slot)
        try:
            raw = self.store.get(key)
        except PersistenceError as exc:
            logger.warning("slot_load_failed", slot=slot.name, key=key, error=str(exc))
            return slot.default()

        if raw is None:
            return slot.default()

        try:
            value = slot.adapter.validate_json(raw)
        except ValidationError as exc:
            logger.warning("slot_load_corrupt", slot=slot.name, key=key, errors=exc.error_count())
            return slot.default()

        return slot.default() if value is None else value

    def save(self, slot: Slot, value: Any) -> None:
        """Serialize and write ``value``. Failures are logged, never raised."""
        key = self.key_for(slot)
        try:
            raw = slot.adapter.dump_json(value)
            self.store.set(key, raw.decode("utf-8"))
        except (PersistenceError, ValueError, TypeError) as exc:
            logger.warning("slot_save_failed", slot=slot.name, key=key, error=str(exc))

    def clear(self, slot: Slot) -> None:
        """Remove the stored value outright (distinct from saving an empty one)."""
        key = self.key_for(slot)
        try:
            self.store.delete(key)
        except PersistenceError as exc:
            logger.warning("slot_clear_failed", slot=slot.name, key=key, error=str(exc))
