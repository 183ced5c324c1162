"""Runtime hooks: structured logging setup and per-session log context."""

from __future__ import annotations

from clinical_risk.hooks.logging_config import setup_logging
from clinical_risk.hooks.session_context import bind_session, session_context

__all__ = [
    "bind_session",
    "session_context",
    "setup_logging",
]
