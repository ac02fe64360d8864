from __future__ import annotations

from typing import AsyncIterator, Protocol

from aiohttp import web


class ByteSink(Protocol):
    """Outbound byte stream with flow control.

    ``write`` suspends only while the sink's buffer is saturated and resumes
    once it has drained; otherwise it returns without yielding to the loop.
    """

    @property
    def closing(self) -> bool: ...

    async def write(self, chunk: bytes) -> None: ...

    async def close(self) -> None: ...


class ByteSource(Protocol):
    """Inbound byte stream. Stopping iteration pauses it; ``destroy`` drops the connection."""

    def __aiter__(self) -> AsyncIterator[bytes]: ...

    def destroy(self) -> None: ...


class ResponseSink:
    def __init__(self, request: web.BaseRequest, response: web.StreamResponse):
        self.request = request
        self.response = response

    @property
    def closing(self) -> bool:
        transport = self.request.transport
        return transport is None or transport.is_closing()

    async def write(self, chunk: bytes) -> None:
        if self.closing:
            raise ConnectionResetError("connection closed by peer")
        await self.response.write(chunk)

    async def close(self) -> None:
        await self.response.write_eof()


class RequestSource:
    def __init__(self, request: web.BaseRequest):
        self.request = request

    async def __aiter__(self) -> AsyncIterator[bytes]:
        async for chunk in self.request.content.iter_any():
            yield chunk

    def destroy(self) -> None:
        transport = self.request.transport
        if transport is not None:
            transport.close()
