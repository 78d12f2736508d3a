import asyncio
import io
from dataclasses import dataclass
from typing import BinaryIO

import pytest

from exchange.errors import EmptyMessageError, SharedFileNotFound
from exchange.models import LandingStatus


@dataclass
class FakeUpload:
    filename: str | None
    file: BinaryIO


def test_submit_message_rejects_empty_text(manager):
    with pytest.raises(EmptyMessageError):
        asyncio.run(manager.submit_message(""))
    assert manager.ledger.count() == 0


def test_submit_message_returns_count(manager):
    assert asyncio.run(manager.submit_message("one")) == 1
    assert asyncio.run(manager.submit_message("two")) == 2


def test_concurrent_submissions_keep_every_message(manager):
    async def submit_all():
        return await asyncio.gather(
            *(manager.submit_message(f"msg {n}") for n in range(10))
        )

    counts = asyncio.run(submit_all())

    assert sorted(counts) == list(range(1, 11))
    assert manager.ledger.indices() == list(range(10))


def test_land_uploads_keeps_submission_order(manager):
    uploads = [
        FakeUpload("b.txt", io.BytesIO(b"b")),
        FakeUpload(None, io.BytesIO(b"")),
        FakeUpload("a.txt", io.BytesIO(b"a")),
    ]

    outcomes = asyncio.run(manager.land_uploads(uploads))

    assert [(o.name, o.status) for o in outcomes] == [
        ("b.txt", LandingStatus.LANDED),
        ("", LandingStatus.SKIPPED),
        ("a.txt", LandingStatus.LANDED),
    ]


def test_land_uploads_reports_staging_failure(manager):
    class BrokenStream(io.RawIOBase):
        def readinto(self, b):
            raise OSError("connection reset")

    uploads = [
        FakeUpload("bad.bin", BrokenStream()),
        FakeUpload("good.bin", io.BytesIO(b"ok")),
    ]

    outcomes = asyncio.run(manager.land_uploads(uploads))

    assert [o.status for o in outcomes] == [LandingStatus.FAILED, LandingStatus.LANDED]
    leftovers = [
        p for p in manager.store.received_files_dir.iterdir()
        if p.name.startswith(".upload-")
    ]
    assert leftovers == []


def test_list_and_resolve_shared(manager):
    hosted = manager.store.hosted_files_dir
    (hosted / "doc.txt").write_text("doc")

    assert asyncio.run(manager.list_shared()) == ["doc.txt"]
    assert asyncio.run(manager.resolve_download("doc.txt")) == hosted / "doc.txt"
    with pytest.raises(SharedFileNotFound):
        asyncio.run(manager.resolve_download("nope.txt"))
