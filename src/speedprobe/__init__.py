"""Speedprobe: HTTP throughput measurement

Two primitives, each driven as a one-shot transfer session:
- a download stream of caller-sized random bytes, written under flow control
- an upload sink that counts inbound bytes and fails fast past a ceiling

Every session reaches exactly one terminal state and logs it once.
"""

__all__ = []
