from __future__ import annotations

import asyncio
import logging
import os
from dataclasses import dataclass

from .constants import CHUNK_SIZE
from .session import TerminalState, TransferSession
from .transport import ByteSink

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class DownloadGenerator:
    """Writes ``session.total_bytes`` random bytes to ``sink`` in fixed-size chunks.

    The only suspension point is ``sink.write`` while the sink is saturated.
    A chunk is generated only after the previous one was accepted, so memory
    stays bounded by ``chunk_size`` whatever the total.
    """

    sink: ByteSink
    session: TransferSession
    chunk_size: int = CHUNK_SIZE

    @property
    def remaining(self) -> int:
        return self.session.total_bytes - self.session.bytes_so_far

    async def run(self) -> TerminalState:
        session = self.session
        try:
            while self.remaining > 0:
                if session.finished:
                    break
                if self.sink.closing:
                    session.abort()
                    break
                n = min(self.chunk_size, self.remaining)
                await self.sink.write(os.urandom(n))
                session.add(n)
        except asyncio.CancelledError:
            session.abort()
            raise
        except ConnectionError:
            session.abort()
        except OSError as e:
            logger.error("%s error: id=%s err=%s", session.route, session.id, e)
            session.abort()

        if not session.finished:
            await self._close()
        assert session.state is not None
        return session.state

    async def _close(self) -> None:
        # every byte has been handed to the sink: a failure to close no longer aborts
        try:
            await self.sink.close()
        except OSError as e:
            logger.debug(
                "%s close failed after last byte: id=%s err=%s",
                self.session.route,
                self.session.id,
                e,
            )
        finally:
            self.session.complete()
