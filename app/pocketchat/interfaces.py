"""
Abstractions for pluggable services. The controller depends on these
protocols, not on the concrete JSON store, scheduler or responder, so tests
can drive it with fakes (in-memory store, manual clock).

Common protocols:
- HistoryStore: durable CRUD over sessions + change listeners.
- Scheduler.schedule(delay, callback) / run_due() for the deferred reply.
- Responder.reply(text, provider) -> str
"""

from __future__ import annotations
from typing import Callable, Optional, Protocol

from .models import ChatSession

SessionsListener = Callable[[list[ChatSession]], None]


class HistoryStore(Protocol):
    @property
    def sessions(self) -> list[ChatSession]: ...

    def load(self) -> None: ...

    def flush(self) -> bool: ...

    def save_session(self, session: ChatSession) -> ChatSession: ...

    def delete_session(self, session_id: str) -> bool: ...

    def create_session(self, provider: str) -> ChatSession: ...

    def most_recent(self) -> Optional[ChatSession]: ...

    def get_session(self, session_id: str) -> Optional[ChatSession]: ...

    def contains(self, session_id: str) -> bool: ...

    def subscribe(self, listener: SessionsListener) -> Callable[[], None]: ...


class Scheduler(Protocol):
    def schedule(self, delay: float, callback: Callable[[], None]) -> None: ...

    def run_due(self) -> int: ...

    def seconds_until_next(self) -> Optional[float]: ...


class Responder(Protocol):
    def reply(self, text: str, provider: str) -> str: ...
