from __future__ import annotations

import asyncio
from dataclasses import dataclass

from .session import TerminalState, TransferSession
from .transport import ByteSource


@dataclass(frozen=True, slots=True)
class UploadReport:
    id: str
    state: TerminalState
    bytes: int
    millis: int
    limit: int


@dataclass(slots=True)
class UploadAccountant:
    """Counts inbound bytes and stops at the first fragment that crosses ``limit``.

    The ceiling is checked after every fragment, so at most one fragment past
    the limit is ever accounted. Stopping iteration is what pauses the source;
    dropping the connection is left to the caller once it has replied.
    """

    session: TransferSession
    limit: int

    async def run(self, source: ByteSource) -> UploadReport:
        session = self.session
        try:
            async for chunk in source:
                if session.add(len(chunk)) > self.limit:
                    session.oversize(self.limit)
                    break
        except asyncio.CancelledError:
            session.abort()
            raise
        except ConnectionError:
            session.abort()
        except Exception as e:
            session.fail(e)
        else:
            session.complete()

        assert session.state is not None
        return UploadReport(
            id=session.id,
            state=session.state,
            bytes=session.bytes_so_far,
            millis=session.millis,
            limit=self.limit,
        )
