from __future__ import annotations

import os
import time
from dataclasses import dataclass
from typing import AsyncIterator, Optional

import aiohttp

from .constants import CHUNK_SIZE, CONTENT_TYPE_OCTET, DEFAULT_SIZE


@dataclass(frozen=True, slots=True)
class ProbeResult:
    direction: str
    bytes_transferred: int
    duration_s: float
    throughput_mbps: float


def _result(direction: str, nbytes: int, started: float) -> ProbeResult:
    duration_s = max(0.001, time.perf_counter() - started)
    return ProbeResult(
        direction=direction,
        bytes_transferred=nbytes,
        duration_s=duration_s,
        throughput_mbps=(nbytes * 8 / 1_000_000) / duration_s,
    )


async def _payload(size: int, chunk_size: int) -> AsyncIterator[bytes]:
    remaining = size
    while remaining > 0:
        n = min(chunk_size, remaining)
        remaining -= n
        yield os.urandom(n)


async def probe_download(
    http: aiohttp.ClientSession, base_url: str, size: int, chunk_size: int = CHUNK_SIZE
) -> ProbeResult:
    started = time.perf_counter()
    received = 0
    async with http.get(f"{base_url}/download", params={"size": str(size)}) as resp:
        resp.raise_for_status()
        async for chunk in resp.content.iter_chunked(chunk_size):
            received += len(chunk)
    return _result("download", received, started)


async def probe_upload(
    http: aiohttp.ClientSession, base_url: str, size: int, chunk_size: int = CHUNK_SIZE
) -> ProbeResult:
    started = time.perf_counter()
    async with http.post(
        f"{base_url}/upload",
        data=_payload(size, chunk_size),
        headers={"Content-Type": CONTENT_TYPE_OCTET},
    ) as resp:
        resp.raise_for_status()
        body = await resp.json()
    return _result("upload", int(body["bytes"]), started)


async def run_probe(
    base_url: str,
    *,
    size_bytes: int = DEFAULT_SIZE,
    session: Optional[aiohttp.ClientSession] = None,
) -> list[ProbeResult]:
    if session is None:
        async with aiohttp.ClientSession() as http:
            return await run_probe(base_url, size_bytes=size_bytes, session=http)

    base_url = base_url.rstrip("/")
    return [
        await probe_download(session, base_url, size_bytes),
        await probe_upload(session, base_url, size_bytes),
    ]
