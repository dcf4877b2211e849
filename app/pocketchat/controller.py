"""
Purpose: The single orchestration point for the chat screen. Owns the
"current" session and the rules for creating, switching and appending to it.
Prevents the UI from knowing how history is persisted or how replies are
produced.

Key responsibilities:
- Resume the most recent session, or start a fresh unsaved one.
- Append user messages and persist on every mutation.
- Schedule the simulated assistant reply and drop it if it went stale.
- Replace `current` when it is deleted from history.

`current` is an owned copy: edits stay local until handed to
`store.save_session`, and the store never aliases it.

Testing: Pure unit tests with a temp-file store and a manual clock for the
scheduler. No Streamlit needed.
"""

from __future__ import annotations
import logging
from typing import Optional

from .interfaces import HistoryStore, Responder, Scheduler
from .models import ChatMessage, ChatSession, Role
from .services.responder import EchoResponder

logger = logging.getLogger(__name__)

DEFAULT_REPLY_DELAY = 0.5


class ChatSessionController:
    def __init__(
        self,
        store: HistoryStore,
        provider: str,
        *,
        scheduler: Scheduler,
        responder: Optional[Responder] = None,
        reply_delay: float = DEFAULT_REPLY_DELAY,
    ):
        self.store: HistoryStore = store
        self.provider: str = provider
        self.scheduler: Scheduler = scheduler
        self.responder: Responder = responder or EchoResponder()
        self.reply_delay: float = reply_delay

        self.draft_text: str = ""
        self.current: ChatSession
        # True once `current` is known to be in the store; a saved session that
        # later goes missing was deleted from another browser session.
        self._persisted: bool = False
        self.initialize()

    def _adopt(self, session: ChatSession, *, persisted: bool) -> None:
        self.current = session
        self._persisted = persisted

    def initialize(self) -> None:
        """Resume the newest stored session, or start a fresh (unsaved) one."""
        latest = self.store.most_recent()
        if latest is not None:
            self._adopt(latest, persisted=True)
            logger.info(f"Loaded latest session: {latest.id}")
        else:
            self._adopt(self.store.create_session(self.provider), persisted=False)
            logger.info(f"No existing sessions, created new one: {self.current.id}")

    def is_current(self, session_id: str) -> bool:
        return self.current.id == session_id

    def sync_with_store(self) -> bool:
        """
        Replace `current` if it was saved but is no longer in the store, i.e. it
        was deleted through another controller sharing the store.
        Returns True when a replacement happened.
        """
        if not self._persisted or self.store.contains(self.current.id):
            return False
        logger.info(f"Current session {self.current.id} was deleted elsewhere")
        self.on_session_deleted(self.current.id)
        return True

    def send_message(self, text: Optional[str] = None) -> Optional[ChatMessage]:
        """
        Append a user message (defaults to the draft), persist right away and
        schedule the assistant reply. Empty input is ignored.
        """
        user_text = self.draft_text if text is None else text
        if not user_text:
            return None

        self.sync_with_store()
        user_message = ChatMessage(role=Role.USER, content=user_text)
        self.current.messages.append(user_message)
        self.draft_text = ""

        # First save is also what makes a brand-new session visible in history.
        self._adopt(self.store.save_session(self.current), persisted=True)

        self.scheduler.schedule(
            self.reply_delay, lambda: self._deliver_reply(user_message)
        )
        return user_message

    def _deliver_reply(self, trigger: ChatMessage) -> bool:
        """Append the reply only if `trigger` is still the last message of `current`."""
        self.sync_with_store()
        last = self.current.last_message
        if last is None or last.id != trigger.id:
            logger.info(
                f"Discarding stale reply for message {trigger.id}; "
                f"current session is {self.current.id}"
            )
            return False

        reply = ChatMessage(
            role=Role.ASSISTANT,
            content=self.responder.reply(trigger.content, self.provider),
        )
        self.current.messages.append(reply)
        self._adopt(self.store.save_session(self.current), persisted=True)
        return True

    def poll(self) -> int:
        """Drop a `current` deleted elsewhere, then run deferred replies that are due."""
        self.sync_with_store()
        return self.scheduler.run_due()

    def seconds_until_next_reply(self) -> Optional[float]:
        return self.scheduler.seconds_until_next()

    def _persist_unsaved_current(self) -> None:
        if self._persisted or not self.current.messages:
            return
        if not self.store.contains(self.current.id):
            logger.info(f"Saving unsaved session {self.current.id} before leaving it")
            self._adopt(self.store.save_session(self.current), persisted=True)

    def _replace_with_new_session(self) -> None:
        self._adopt(self.store.create_session(self.provider), persisted=False)
        logger.info(f"Created and set new session: {self.current.id}")

    def start_new_chat(self) -> None:
        """Start an empty session; it only shows up in history once saved."""
        self.sync_with_store()
        self._persist_unsaved_current()
        self._replace_with_new_session()
        self.draft_text = ""

    def switch_to(self, session: ChatSession) -> bool:
        """Make `session` (already in history) current. Returns False if it already is."""
        self.sync_with_store()
        if session.id == self.current.id:
            return False
        self._persist_unsaved_current()
        self._adopt(session.copy(), persisted=True)
        logger.info(f"Switched to session {session.id}")
        return True

    def on_session_deleted(self, deleted_id: str) -> None:
        """Keep `current` pointing at a live session after a history deletion."""
        if deleted_id != self.current.id:
            return
        latest = self.store.most_recent()
        if latest is not None:
            self._adopt(latest, persisted=True)
            logger.info(f"Current session deleted, moved to {latest.id}")
        else:
            # Not start_new_chat(): the deleted session must not be saved again.
            self._replace_with_new_session()
            self.draft_text = ""
