import threading

import pytest

from exchange.ledger import MessageLedger, plan_rotation


def _names(store):
    return sorted(p.name for p in store.received_messages_dir.iterdir())


def test_plan_rotation_is_descending():
    assert plan_rotation([0, 2, 1]) == [(2, 3), (1, 2), (0, 1)]
    assert plan_rotation([]) == []


def test_first_message_is_index_zero(store):
    ledger = MessageLedger(store)

    assert ledger.submit("hello") == 1
    assert _names(store) == ["0.txt"]
    assert ledger.read(0) == "hello"


def test_rotation_keeps_indices_contiguous(store):
    ledger = MessageLedger(store)
    texts = [f"message {n}" for n in range(12)]

    for n, text in enumerate(texts, start=1):
        assert ledger.submit(text) == n
        assert ledger.indices() == list(range(n))
        assert ledger.read(0) == text

    # index i holds the (i+1)-th newest message
    for index, text in enumerate(reversed(texts)):
        assert ledger.read(index) == text


def test_existing_messages_shift_up_without_loss(store):
    for index, text in enumerate(["newest", "middle", "oldest"]):
        (store.received_messages_dir / f"{index}.txt").write_text(text)
    ledger = MessageLedger(store)

    assert ledger.submit("x") == 4

    assert ledger.indices() == [0, 1, 2, 3]
    assert [ledger.read(i) for i in range(4)] == ["x", "newest", "middle", "oldest"]


def test_non_message_files_are_left_alone(store):
    d = store.received_messages_dir
    (d / "0.txt").write_text("zero")
    (d / "notes.txt").write_text("keep")
    (d / "007.txt").write_text("padded")
    (d / "5.txt.bak").write_text("backup")
    (d / "3.txt").mkdir()
    ledger = MessageLedger(store)

    ledger.submit("new")

    assert _names(store) == ["0.txt", "007.txt", "1.txt", "3.txt", "5.txt.bak", "notes.txt"]
    assert (d / "notes.txt").read_text() == "keep"
    assert ledger.read(1) == "zero"


def test_unicode_round_trip(store):
    ledger = MessageLedger(store)
    ledger.submit("💌 привет")
    assert (store.received_messages_dir / "0.txt").read_bytes() == "💌 привет".encode("utf-8")


def test_rename_failure_surfaces_oserror(store, monkeypatch):
    for index in range(3):
        (store.received_messages_dir / f"{index}.txt").write_text(str(index))
    ledger = MessageLedger(store)
    real_rename = store.rename

    def flaky_rename(src, dst, replace=True):
        if src.name == "1.txt":
            raise OSError("disk full")
        real_rename(src, dst, replace)

    monkeypatch.setattr(store, "rename", flaky_rename)

    with pytest.raises(OSError):
        ledger.submit("lost")
    # no rollback: 2.txt already moved to 3.txt
    assert (store.received_messages_dir / "3.txt").read_text() == "2"


def test_concurrent_submits_are_serialized(store):
    ledger = MessageLedger(store)
    workers = 8
    barrier = threading.Barrier(workers)
    results = []

    def submit(n):
        barrier.wait()
        results.append(ledger.submit(f"from worker {n}"))

    threads = [threading.Thread(target=submit, args=(n,)) for n in range(workers)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert sorted(results) == list(range(1, workers + 1))
    assert ledger.indices() == list(range(workers))
    stored = {ledger.read(i) for i in range(workers)}
    assert stored == {f"from worker {n}" for n in range(workers)}


def test_two_concurrent_submits_on_empty_ledger(store):
    ledger = MessageLedger(store)
    barrier = threading.Barrier(2)

    def submit(text):
        barrier.wait()
        ledger.submit(text)

    threads = [threading.Thread(target=submit, args=(t,)) for t in ("a", "b")]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert ledger.indices() == [0, 1]
    assert {ledger.read(0), ledger.read(1)} == {"a", "b"}
