"""Per-session log context using structlog contextvars.

Usage::

    with session_context("session-42"):
        log.info("Starting risk assessment")   # carries session_id=session-42
"""

from __future__ import annotations

from contextlib import contextmanager
from typing import Generator

import structlog


def bind_session(session_id: str) -> None:
    """Bind ``session_id`` to every log record emitted in the current context."""
    structlog.contextvars.bind_contextvars(session_id=session_id)


@contextmanager
def session_context(session_id: str) -> Generator[str, None, None]:
    """Bind ``session_id`` for the duration of the block, then unbind it."""
    bind_session(session_id)
    try:
        yield session_id
    finally:
        structlog.contextvars.unbind_contextvars("session_id")
