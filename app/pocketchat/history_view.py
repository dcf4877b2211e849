"""
Read + selection helpers behind the history browser.
The browser never edits message content: it lists sessions, switches the
current one, or deletes one and lets the controller pick a replacement.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime

from .controller import ChatSessionController
from .interfaces import HistoryStore

TITLE_MAX_CHARS = 48


@dataclass(frozen=True)
class HistoryEntry:
    session_id: str
    title: str
    provider: str
    created_at: datetime
    last_modified: datetime
    is_current: bool


def list_entries(store: HistoryStore, current_id: str) -> list[HistoryEntry]:
    """One row per stored session, newest first."""
    return [
        HistoryEntry(
            session_id=s.id,
            title=s.title,
            provider=s.provider,
            created_at=s.created_at,
            last_modified=s.last_modified,
            is_current=s.id == current_id,
        )
        for s in store.sessions
    ]


def short_title(title: str, max_chars: int = TITLE_MAX_CHARS) -> str:
    """Single line, truncated with an ellipsis."""
    line = " ".join((title or "").split())
    if len(line) > max_chars:
        line = line[: max_chars - 1].rstrip() + "…"
    return line


def format_entry_date(value: datetime) -> str:
    """Medium date + short time in local time, e.g. 'Oct 18, 2026 15:38'."""
    return value.astimezone().strftime("%b %d, %Y %H:%M")


def select_session(
    store: HistoryStore, controller: ChatSessionController, session_id: str
) -> bool:
    session = store.get_session(session_id)
    if session is None:
        return False
    return controller.switch_to(session)


def delete_session(
    store: HistoryStore, controller: ChatSessionController, session_id: str
) -> bool:
    removed = store.delete_session(session_id)
    controller.on_session_deleted(session_id)
    return removed
