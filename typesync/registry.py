"""
Process-wide registry of exported types.

This is an optional convenience: passing a TypeCollection explicitly is the
primary interface. Producers decorated with `export_type` are recorded
here when their module is imported, and `collect()` runs them all into a
fresh collection.

The registry only supports "insert if absent" and "snapshot". If a producer
raised while a previous `collect()` was running, the producers already
stored are still valid and later calls proceed normally.
"""

from __future__ import annotations

import threading
from collections.abc import Callable

from .collection import Producer, TypeCollection
from .datatype import TypeId
from .logger import get_logger

logger = get_logger(__name__)


class Registry:
    """Lock-guarded mapping of type ids to producers."""

    def __init__(self):
        self._lock = threading.Lock()
        self._producers: dict[TypeId, Producer] = {}

    def insert(self, type_id: TypeId, produce: Producer) -> bool:
        """
        Record a producer unless one is already stored for `type_id`.

        Returns:
            True if the producer was stored
        """
        with self._lock:
            if type_id in self._producers:
                return False
            self._producers[type_id] = produce
            return True

    def snapshot(self) -> dict[TypeId, Producer]:
        """Copy of all stored producers."""
        with self._lock:
            return dict(self._producers)

    def collect(self) -> TypeCollection:
        """Run every stored producer into a new collection."""
        types = TypeCollection()
        # Producers run outside the lock so they may register further types
        for type_id, produce in sorted(self.snapshot().items()):
            types.register(type_id, produce)
        logger.debug(f"Collected {len(types)} type(s) from the registry")
        return types

    def clear(self) -> None:
        with self._lock:
            self._producers.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._producers)


_default_registry = Registry()


def default_registry() -> Registry:
    return _default_registry


def export_type(type_id: TypeId | None = None, registry: Registry | None = None) -> Callable[[Producer], Producer]:
    """
    Decorator recording a producer in the process-wide registry.

    The decorated function gets a `type_id` attribute so other producers can
    reference it with `types.reference(produce.type_id, produce)`.

    Args:
        type_id: Id of the produced type; derived from the function when omitted
        registry: Registry to record into; the process-wide one by default

    Returns:
        The decorator
    """

    def decorator(produce: Producer) -> Producer:
        resolved = type_id if type_id is not None else TypeId.of(produce)
        produce.type_id = resolved
        (registry if registry is not None else _default_registry).insert(resolved, produce)
        return produce

    return decorator


def collect() -> TypeCollection:
    """Collect every type recorded in the process-wide registry."""
    return _default_registry.collect()
