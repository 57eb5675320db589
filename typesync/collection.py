"""
Type collection.

A TypeCollection maps stable ids to named type records for one export
operation. It is the arena that Reference nodes index into: producers
register their dependencies through it, and an in-progress marker is held
for an id while its producer runs so that self-references resolve to a
Reference instead of recursing forever.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator

from .datatype import DataType, NamedType, Reference, TypeId
from .errors import InvariantViolation
from .logger import get_logger

logger = get_logger(__name__)

# A producer builds the record for one host type, registering its dependencies
Producer = Callable[["TypeCollection"], NamedType]


class TypeCollection:
    """Registry of named types, keyed by TypeId."""

    def __init__(self, types: Iterable[NamedType] = ()):
        # None marks an entry whose producer is still running
        self._map: dict[TypeId, NamedType | None] = {}
        for ndt in types:
            self.insert(ndt.id, ndt)

    def register(self, type_id: TypeId, produce: Producer) -> TypeCollection:
        """
        Register a type, running its producer unless the id is already known.

        Args:
            type_id: Stable id of the host type
            produce: Function building the record; it may register other types

        Returns:
            The collection, for chaining

        Raises:
            InvariantViolation: If the producer returns a record for another id
        """
        if type_id in self._map:
            return self

        self._map[type_id] = None
        try:
            ndt = produce(self)
        except BaseException:
            # A failed producer must not leave a marker other ids could reference
            del self._map[type_id]
            raise

        if ndt.id != type_id:
            del self._map[type_id]
            raise InvariantViolation(f"producer registered as {type_id} returned a record for {ndt.id}")

        self._map[type_id] = ndt
        logger.debug(f"Registered {ndt.name} ({type_id})")
        return self

    def reference(self, type_id: TypeId, produce: Producer, generics: Iterable[DataType] = ()) -> Reference:
        """
        Register a type if needed and return a Reference to it.

        This is what producers call for each dependency. When `type_id` is in
        progress (a self-reference), no producer runs and only the Reference
        is returned.

        Args:
            type_id: Stable id of the referenced type
            produce: Producer for the referenced type
            generics: Arguments bound to the referenced type's generic parameters

        Returns:
            A Reference to `type_id`
        """
        self.register(type_id, produce)
        return Reference(type_id, tuple(generics))

    def declare(self, ndt: NamedType) -> Reference:
        """
        Insert a record built at runtime under a fresh virtual id.

        The record's own id is replaced by the issued one.

        Args:
            ndt: Record to declare; it must not have generic parameters

        Returns:
            A Reference to the declared type
        """
        if ndt.generics:
            raise ValueError(f"cannot declare {ndt.name}: declared types cannot be generic")
        type_id = TypeId.virtual(ndt.name)
        self._map[type_id] = NamedType(
            id=type_id,
            name=ndt.name,
            inner=ndt.inner,
            docs=ndt.docs,
            deprecated=ndt.deprecated,
            location=ndt.location,
            module_path=ndt.module_path,
        )
        return Reference(type_id)

    def insert(self, type_id: TypeId, ndt: NamedType) -> TypeCollection:
        """
        Insert a record directly.

        Prefer `register`, which keeps ids and records consistent. Callers of
        `insert` are responsible for `ndt.id == type_id` and for every id the
        record references also being present.
        """
        self._map[type_id] = ndt
        return self

    def placeholder(self, type_id: TypeId) -> TypeCollection:
        """Mark `type_id` as in progress without running any producer."""
        self._map[type_id] = None
        return self

    def resolve(self, type_id: TypeId) -> NamedType | None:
        """Return the finalized record, or None if unknown or still in progress."""
        return self._map.get(type_id)

    get = resolve

    def is_in_progress(self, type_id: TypeId) -> bool:
        return type_id in self._map and self._map[type_id] is None

    def extend(self, other: TypeCollection) -> TypeCollection:
        """
        Merge another collection into this one.

        Finalized incoming entries win over existing ones. An incoming
        in-progress marker never replaces a finalized entry.
        """
        for type_id, ndt in other._map.items():
            if ndt is None:
                self._map.setdefault(type_id, None)
            else:
                self._map[type_id] = ndt
        return self

    def remove(self, type_id: TypeId) -> NamedType | None:
        """Remove a type, returning its record if it was finalized."""
        return self._map.pop(type_id, None)

    def placeholders(self) -> list[TypeId]:
        return sorted(type_id for type_id, ndt in self._map.items() if ndt is None)

    def assert_complete(self) -> None:
        """
        Check that no producer left its in-progress marker behind.

        Raises:
            InvariantViolation: If any id is still in progress
        """
        dangling = self.placeholders()
        if dangling:
            names = ", ".join(str(type_id) for type_id in dangling)
            raise InvariantViolation(f"type collection holds unfinished entries: {names}")

    def copy(self) -> TypeCollection:
        other = TypeCollection()
        other._map = dict(self._map)
        return other

    def __iter__(self) -> Iterator[NamedType]:
        """Finalized records sorted by display name, ties broken by id."""
        records = [ndt for ndt in self._map.values() if ndt is not None]
        return iter(sorted(records, key=lambda ndt: (ndt.name, ndt.id)))

    def __len__(self) -> int:
        return sum(1 for ndt in self._map.values() if ndt is not None)

    def __contains__(self, type_id: object) -> bool:
        return type_id in self._map

    def __repr__(self) -> str:
        return f"TypeCollection({[ndt.name for ndt in self]!r})"
