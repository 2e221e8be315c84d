"""Tests for the per-device tally store."""

from prayer_room.services.tally import TallyStoreDirectory, tally_key


def test_tally_key_uses_prefix() -> None:
    assert tally_key(42) == "prayed_42"
    assert tally_key(42, prefix="room1_") == "room1_42"


def test_device_store_set_get_remove() -> None:
    store = TallyStoreDirectory().for_device("phone")

    assert store.get("prayed_1") is False
    store.set("prayed_1")
    assert store.get("prayed_1") is True
    store.remove("prayed_1")
    store.remove("prayed_1")
    assert store.get("prayed_1") is False


def test_directory_keeps_devices_apart() -> None:
    directory = TallyStoreDirectory()

    directory.for_device("phone").set("prayed_7")

    assert directory.for_device("phone").get("prayed_7") is True
    assert directory.for_device("laptop").get("prayed_7") is False


def test_unmarked_devices_take_no_entry() -> None:
    directory = TallyStoreDirectory()

    for device in ("a", "b", "c"):
        store = directory.for_device(device)
        assert store.get("prayed_1") is False
        store.remove("prayed_1")

    assert len(directory) == 0


def test_device_entry_dropped_with_last_mark() -> None:
    directory = TallyStoreDirectory()
    store = directory.for_device("phone")

    store.set("prayed_1")
    store.set("prayed_2")
    assert len(directory) == 1

    store.remove("prayed_1")
    assert len(directory) == 1
    store.remove("prayed_2")
    assert len(directory) == 0
    assert directory.marks == {}
