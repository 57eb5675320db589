"""
Tests for the process-wide registry and the export_type decorator.
"""

from __future__ import annotations

import threading

import pytest

from typesync.datatype import TypeId, sid
from typesync.registry import Registry, default_registry, export_type

from .factories import I32, STRING, named, struct


def test_insert_if_absent():
    registry = Registry()
    type_id = sid("A", "tests.A")

    assert registry.insert(type_id, lambda _: named("A", struct("A")))
    assert not registry.insert(type_id, lambda _: named("A", struct("A", x=I32)))
    assert len(registry) == 1


def test_export_type_records_producer():
    registry = Registry()

    @export_type(sid("A", "tests.A"), registry=registry)
    def a(types):
        return named("A", struct("A", x=I32))

    @export_type(sid("B", "tests.B"), registry=registry)
    def b(types):
        return named("B", struct("B", a=types.reference(a.type_id, a)))

    assert set(registry.snapshot()) == {a.type_id, b.type_id}
    types = registry.collect()
    assert [ndt.name for ndt in types] == ["A", "B"]


def test_export_type_derives_id_from_function():
    registry = Registry()

    @export_type(registry=registry)
    def widget(types):
        return named("Widget", struct("Widget"))

    assert widget.type_id == TypeId.of(widget)
    assert widget.type_id in registry.snapshot()


def test_snapshot_is_a_copy():
    registry = Registry()
    registry.insert(sid("A", "tests.A"), lambda _: named("A", struct("A")))
    snapshot = registry.snapshot()
    snapshot.clear()
    assert len(registry) == 1


def test_collect_after_interrupted_run():
    registry = Registry()
    attempts = []

    @export_type(sid("A", "tests.A"), registry=registry)
    def a(types):
        return named("A", struct("A"))

    @export_type(sid("Flaky", "tests.Flaky"), registry=registry)
    def flaky(types):
        attempts.append(1)
        if len(attempts) == 1:
            raise RuntimeError("interrupted")
        return named("Flaky", struct("Flaky"))

    with pytest.raises(RuntimeError):
        registry.collect()

    # Stored producers are still valid after the failure
    assert len(registry) == 2
    assert [ndt.name for ndt in registry.collect()] == ["A", "Flaky"]


def test_concurrent_inserts():
    registry = Registry()
    type_ids = [sid(f"T{i}", f"tests.T{i}") for i in range(50)]
    results = []

    def worker():
        for type_id in type_ids:
            results.append(registry.insert(type_id, lambda _: None))

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert len(registry) == 50
    assert results.count(True) == 50


def test_clear():
    registry = Registry()
    registry.insert(sid("A", "tests.A"), lambda _: named("A", struct("A")))
    registry.clear()
    assert len(registry) == 0


def test_default_registry_is_shared():
    assert default_registry() is default_registry()


def test_explicit_registry_leaves_default_untouched():
    registry = Registry()
    before = default_registry().snapshot()

    @export_type(sid("Scoped", "tests.Scoped"), registry=registry)
    def scoped(types):
        return named("Scoped", struct("Scoped"))

    assert list(registry.snapshot()) == [scoped.type_id]
    assert default_registry().snapshot() == before


def test_field_called_name():
    registry = Registry()
    registry.insert(sid("Label", "tests.Label"), lambda _: named("Label", struct("Label", name=STRING)))

    (label,) = registry.collect()
    assert [f.name for f in label.inner.fields.fields] == ["name"]
