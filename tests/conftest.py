from __future__ import annotations

import asyncio
from typing import Optional

import pytest


class FakeSink:
    """In-memory ByteSink. ``saturate_at`` makes that write block until ``drain()``."""

    def __init__(
        self,
        saturate_at: Optional[int] = None,
        fail_at: Optional[int] = None,
        exc: Optional[BaseException] = None,
    ):
        self.chunks: list[bytes] = []
        self.saturate_at = saturate_at
        self.fail_at = fail_at
        self.exc = exc or ConnectionResetError("peer went away")
        self.close_exc: Optional[BaseException] = None
        self.closing = False
        self.closed = 0
        self.suspended = asyncio.Event()
        self._drained = asyncio.Event()

    @property
    def written(self) -> int:
        return sum(len(c) for c in self.chunks)

    async def write(self, chunk: bytes) -> None:
        n = len(self.chunks) + 1
        if self.fail_at is not None and n == self.fail_at:
            raise self.exc
        self.chunks.append(chunk)
        if self.saturate_at is not None and n == self.saturate_at:
            self.suspended.set()
            await self._drained.wait()

    def drain(self) -> None:
        self._drained.set()

    async def close(self) -> None:
        self.closed += 1
        if self.close_exc is not None:
            raise self.close_exc


class FakeSource:
    """In-memory ByteSource yielding ``fragments``, then raising ``exc`` if given."""

    def __init__(self, fragments: list[bytes], exc: Optional[BaseException] = None):
        self.fragments = fragments
        self.exc = exc
        self.pulled = 0
        self.destroyed = False

    async def __aiter__(self):
        for fragment in self.fragments:
            self.pulled += 1
            yield fragment
        if self.exc is not None:
            raise self.exc

    def destroy(self) -> None:
        self.destroyed = True


@pytest.fixture
def sink_factory():
    return FakeSink


@pytest.fixture
def source_factory():
    return FakeSource
