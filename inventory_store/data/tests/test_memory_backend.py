import threading
from concurrent.futures import ThreadPoolExecutor

import pytest
from pydantic import ValidationError
from inventory_store.data.backends.memory_backend import FIRST_ITEM_ID, MemoryInventoryStore
from inventory_store.data.errors import NotFoundError
from inventory_store.data.models import InventoryPayload, U64_MAX

@pytest.fixture
def store(clock):
    return MemoryInventoryStore(clock=clock)

def bolt(quantity=100, price=0.5):
    return InventoryPayload(name="bolt", quantity=quantity, price=price)

def test_bolt_lifecycle(store):
    """Add, update, delete and look up the same item."""
    added = store.add_item(bolt())
    assert added.id == 1
    assert (added.name, added.quantity, added.price) == ("bolt", 100, 0.5)
    assert added.updated_at is None

    updated = store.update_item(1, bolt(quantity=90, price=0.55))
    assert updated.id == 1
    assert (updated.quantity, updated.price) == (90, 0.55)
    assert updated.created_at == added.created_at
    assert updated.updated_at is not None

    removed = store.delete_item(1)
    assert removed == updated

    with pytest.raises(NotFoundError):
        store.get_item(1)

def test_get_returns_added_item(store):
    added = store.add_item(InventoryPayload(name="washer", quantity=7, price=0.02))
    assert store.get_item(added.id) == added
    assert store.get_item(added.id).updated_at is None

def test_first_id_and_sequence(store):
    ids = [store.add_item(bolt()).id for _ in range(3)]
    assert ids == [FIRST_ITEM_ID, FIRST_ITEM_ID + 1, FIRST_ITEM_ID + 2]

def test_ids_not_reused_after_delete(store):
    first = store.add_item(bolt())
    second = store.add_item(bolt())
    store.delete_item(second.id)
    store.delete_item(first.id)
    third = store.add_item(bolt())
    assert third.id not in (first.id, second.id)
    assert third.id == second.id + 1

def test_update_stamps_updated_at_after_created_at(store, clock):
    added = store.add_item(bolt())
    updated = store.update_item(added.id, InventoryPayload(name="hex bolt", quantity=1, price=-3.0))
    assert updated.name == "hex bolt"
    assert updated.price == -3.0
    assert updated.updated_at == clock.now
    assert updated.updated_at >= updated.created_at

def test_update_clamps_clock_going_backwards(clock):
    store = MemoryInventoryStore(clock=clock)
    added = store.add_item(bolt())
    clock.now -= 10_000_000
    updated = store.update_item(added.id, bolt(quantity=5))
    assert updated.updated_at == added.created_at

def test_second_update_moves_updated_at(store):
    added = store.add_item(bolt())
    first = store.update_item(added.id, bolt(quantity=1))
    second = store.update_item(added.id, bolt(quantity=2))
    assert second.updated_at > first.updated_at
    assert store.get_item(added.id) == second

def test_returned_items_are_not_changed_by_later_updates(store):
    added = store.add_item(bolt())
    store.update_item(added.id, bolt(quantity=1))
    assert added.quantity == 100
    assert added.updated_at is None
    with pytest.raises(ValidationError):
        added.quantity = 5

@pytest.mark.parametrize("item_id", [0, 42, U64_MAX, U64_MAX + 1, -1])
def test_missing_ids_raise_not_found(store, item_id):
    store.add_item(bolt())
    with pytest.raises(NotFoundError, match=f"id={item_id}"):
        store.get_item(item_id)
    with pytest.raises(NotFoundError, match="couldn't update"):
        store.update_item(item_id, bolt())
    with pytest.raises(NotFoundError, match="couldn't delete"):
        store.delete_item(item_id)
    assert len(store.list_items()) == 1

def test_not_found_messages(store):
    with pytest.raises(NotFoundError) as exc:
        store.get_item(7)
    assert str(exc.value) == "An item with id=7 not found"
    assert exc.value.item_id == 7
    with pytest.raises(NotFoundError) as exc:
        store.update_item(7, bolt())
    assert str(exc.value) == "couldn't update an item with id=7. item not found"
    with pytest.raises(NotFoundError) as exc:
        store.delete_item(7)
    assert str(exc.value) == "couldn't delete an item with id=7. item not found."

def test_failed_update_leaves_store_unchanged(store):
    added = store.add_item(bolt())
    with pytest.raises(NotFoundError):
        store.update_item(added.id + 1, bolt(quantity=1))
    assert store.list_items() == [added]

def test_list_items_after_n_adds(store):
    for i in range(10):
        store.add_item(InventoryPayload(name=f"item {i}", quantity=i, price=float(i)))
    items = store.list_items()
    assert len(items) == 10
    assert len({item.id for item in items}) == 10
    assert [item.id for item in items] == sorted(item.id for item in items)

def test_list_items_is_a_snapshot(store):
    store.add_item(bolt())
    snapshot = store.list_items()
    store.add_item(bolt())
    store.delete_item(1)
    assert [item.id for item in snapshot] == [1]
    assert [item.id for item in store.list_items()] == [2]

def test_empty_store_lists_nothing(store):
    assert store.list_items() == []

def test_counter_exhaustion_returns_none(store):
    store.add_item(bolt())
    store._state.next_id = U64_MAX
    last = store.add_item(bolt())
    assert last.id == U64_MAX
    assert store.add_item(bolt()) is None
    assert [item.id for item in store.list_items()] == [1, U64_MAX]
    # still exhausted after a delete: ids are never recycled
    store.delete_item(1)
    assert store.add_item(bolt()) is None

def test_concurrent_adds_get_unique_contiguous_ids(store):
    """Parallel creators never share an id and never skip one."""
    with ThreadPoolExecutor(max_workers=8) as pool:
        items = list(pool.map(lambda i: store.add_item(bolt(quantity=i)), range(400)))
    ids = sorted(item.id for item in items)
    assert ids == list(range(FIRST_ITEM_ID, FIRST_ITEM_ID + 400))
    assert len(store.list_items()) == 400

def test_readers_never_see_half_applied_updates(store):
    """Every observed item has quantity and price from the same payload."""
    added = store.add_item(bolt(quantity=0, price=0.0))
    stop = threading.Event()
    torn = []

    def writer():
        for n in range(1, 500):
            store.update_item(added.id, bolt(quantity=n, price=float(n)))
        stop.set()

    def reader():
        while not stop.is_set():
            item = store.get_item(added.id)
            if float(item.quantity) != item.price:
                torn.append(item)
            for listed in store.list_items():
                if float(listed.quantity) != listed.price:
                    torn.append(listed)

    threads = [threading.Thread(target=writer)] + [threading.Thread(target=reader) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()
    assert torn == []
    assert store.get_item(added.id).quantity == 499

@pytest.mark.parametrize("item_id", [True, False, 1.0, "1"])
def test_non_int_ids_are_missing(store, item_id):
    store.add_item(bolt())
    store.add_item(bolt())
    with pytest.raises(NotFoundError):
        store.get_item(item_id)
    with pytest.raises(NotFoundError):
        store.update_item(item_id, bolt(quantity=1))
    with pytest.raises(NotFoundError):
        store.delete_item(item_id)
    assert [item.quantity for item in store.list_items()] == [100, 100]

def test_failed_persist_restores_counter_and_mapping(store, monkeypatch):
    """A create, update or delete whose write fails leaves no trace."""
    added = store.add_item(bolt())

    def broken(counter_changed):
        raise OSError("disk full")

    monkeypatch.setattr(store, "_persist", broken)
    with pytest.raises(OSError):
        store.add_item(bolt(quantity=2))
    with pytest.raises(OSError):
        store.update_item(added.id, bolt(quantity=3))
    with pytest.raises(OSError):
        store.delete_item(added.id)
    assert store.list_items() == [added]

    monkeypatch.undo()
    assert store.add_item(bolt(quantity=4)).id == added.id + 1
