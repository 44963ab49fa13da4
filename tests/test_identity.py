import threading

import pytest

from chart_document import Data, IdentityRegistry, Title, next_id


def test_ids_strictly_increase():
    ids = IdentityRegistry()
    seq = [ids.next_id() for _ in range(5)]
    assert seq == [1, 2, 3, 4, 5]

def test_default_registry_never_reuses():
    a, b = next_id(), next_id()
    assert b > a
    t = Title("x")
    assert t.id > b

def test_parts_draw_from_injected_registry():
    ids = IdentityRegistry(start=100)
    t = Title("x", ids=ids)
    d = Data(1, 2, ids=ids)
    assert (t.id, d.id) == (100, 101)

def test_id_is_read_only():
    t = Title("x")
    with pytest.raises(AttributeError):
        t.id = 5

def test_concurrent_ids_are_unique():
    ids = IdentityRegistry()
    out = []
    lock = threading.Lock()

    def worker():
        got = [ids.next_id() for _ in range(500)]
        with lock:
            out.extend(got)

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert len(out) == 4000
    assert len(set(out)) == 4000
