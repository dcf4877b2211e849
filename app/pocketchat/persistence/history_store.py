"""
Purpose: Durable session history backed by a single JSON document.
Why: Reopen past conversations; the file is the source of truth and the
in-memory list is a cache kept in sync by rewriting the whole document on
every mutation.

What is inside:
JsonHistoryStore with load/flush, save_session (upsert), delete_session,
create_session (factory only) and a listener hook for UI refreshes.

One instance is shared by every browser session of the Streamlit server, and
each session runs its script on its own thread, so reads, mutations and
flushes hold a lock. Listeners are called after the lock is released.

Failure policy: lossy but never crashing. A corrupt document resets the
in-memory list to empty and is left untouched until the next successful
flush. A failed flush keeps the in-memory list authoritative for the rest of
the process.
"""

from __future__ import annotations
import json
import logging
import os
import tempfile
import threading
from pathlib import Path
from typing import Callable, Optional

from ..interfaces import SessionsListener
from ..models import ChatSession, utcnow

logger = logging.getLogger(__name__)


class JsonHistoryStore:
    def __init__(self, path: str | os.PathLike) -> None:
        self.path = Path(path).expanduser()
        self._sessions: list[ChatSession] = []
        self._listeners: list[SessionsListener] = []
        self._lock = threading.RLock()
        logger.info(f"History file: {self.path}")
        self.load()

    # --------- listing --------- #

    @property
    def sessions(self) -> list[ChatSession]:
        """Snapshot of the history, newest first."""
        with self._lock:
            return list(self._sessions)

    def most_recent(self) -> Optional[ChatSession]:
        with self._lock:
            return self._sessions[0].copy() if self._sessions else None

    def get_session(self, session_id: str) -> Optional[ChatSession]:
        with self._lock:
            for s in self._sessions:
                if s.id == session_id:
                    return s.copy()
        return None

    def contains(self, session_id: str) -> bool:
        with self._lock:
            return any(s.id == session_id for s in self._sessions)

    def subscribe(self, listener: SessionsListener) -> Callable[[], None]:
        """Call `listener(sessions)` after every load/save/delete. Returns an unsubscribe."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            snapshot = list(self._sessions)
            listeners = list(self._listeners)
        for listener in listeners:
            listener(snapshot)

    # --------- document I/O --------- #

    def load(self) -> None:
        """
        Read the document. Missing file -> empty history.
        Unreadable or malformed file -> empty history (logged, file left as is).
        """
        try:
            if self.path.exists():
                raw = json.loads(self.path.read_text(encoding="utf-8"))
                if not isinstance(raw, list):
                    raise ValueError("History document must be a JSON array")
                sessions = [ChatSession.from_dict(item) for item in raw]
            else:
                logger.info("No history file yet, starting empty")
                sessions = []
        except (OSError, ValueError, TypeError, KeyError, RecursionError) as e:
            logger.error(f"Error loading chat history from {self.path}: {e}")
            sessions = []

        sessions.sort(key=lambda s: s.created_at, reverse=True)

        seen: set[str] = set()
        unique: list[ChatSession] = []
        for s in sessions:
            if s.id in seen:
                logger.warning(f"Dropping duplicate session {s.id} from history")
                continue
            seen.add(s.id)
            unique.append(s)

        with self._lock:
            self._sessions = unique
        logger.info(f"Loaded {len(unique)} session(s)")
        self._notify()

    def flush(self) -> bool:
        """
        Write the full history atomically: temp file in the same directory,
        fsync, then os.replace over the document. Returns False on I/O failure.
        """
        with self._lock:
            payload = json.dumps(
                [s.to_dict() for s in self._sessions], ensure_ascii=False, indent=2
            )
            tmp_path = None
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                # NamedTemporaryFile creates the file with owner-only permissions.
                with tempfile.NamedTemporaryFile(
                    "w",
                    encoding="utf-8",
                    dir=self.path.parent,
                    prefix=f".{self.path.name}.",
                    suffix=".tmp",
                    delete=False,
                ) as tmp:
                    tmp_path = tmp.name
                    tmp.write(payload)
                    tmp.flush()
                    os.fsync(tmp.fileno())
                os.replace(tmp_path, self.path)
                return True
            except OSError as e:
                logger.error(f"Error saving chat history to {self.path}: {e}")
                if tmp_path:
                    try:
                        os.remove(tmp_path)
                    except OSError:
                        pass
                return False

    # --------- mutations --------- #

    def save_session(self, session: ChatSession) -> ChatSession:
        """
        Upsert by id and flush. Existing sessions keep their position; new ones
        go to the front (newest first) regardless of created_at.
        Returns a copy of what was stored.
        """
        stored = session.copy()
        stored.last_modified = utcnow()

        with self._lock:
            for i, s in enumerate(self._sessions):
                if s.id == stored.id:
                    self._sessions[i] = stored
                    break
            else:
                self._sessions.insert(0, stored)
            self.flush()

        self._notify()
        return stored.copy()

    def delete_session(self, session_id: str) -> bool:
        """Remove every entry with this id and flush. Absent id is a no-op."""
        with self._lock:
            remaining = [s for s in self._sessions if s.id != session_id]
            if len(remaining) == len(self._sessions):
                return False
            self._sessions = remaining
            self.flush()

        self._notify()
        return True

    def create_session(self, provider: str) -> ChatSession:
        """New empty session. Not inserted or flushed until the caller saves it."""
        return ChatSession(provider=provider)
