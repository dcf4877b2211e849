"""
UI layer
Purpose: Streamlit-only glue. Renders the welcome gate, the chat transcript and
the history sidebar, collects user input, and delegates all work to the
controller and the history store. Keeps UI concerns separate from session
rules so those can be unit tested without Streamlit.
"""

import time

import streamlit as st

from pocketchat import history_view
from pocketchat.config import get_settings
from pocketchat.controller import ChatSessionController
from pocketchat.persistence.history_store import JsonHistoryStore
from pocketchat.services.responder import EchoResponder
from pocketchat.services.scheduler import DeferredScheduler
from pocketchat.utils.logging import configure_logging
from pocketchat.welcome import can_continue, resolve_provider

settings = get_settings()
configure_logging(settings.log_level)

# ---------------------------
# Page config
# ---------------------------
st.set_page_config(
    page_title=settings.app_title,
    page_icon="💬",
    layout="centered",
    initial_sidebar_state="collapsed",
)


# ---------------------------
# Shared store (one per process)
# ---------------------------
@st.cache_resource
def get_history_store() -> JsonHistoryStore:
    return JsonHistoryStore(settings.history_path)


# ---------------------------
# Session state init
# ---------------------------
st_session = st.session_state
st_session.setdefault("provider", None)
st_session.setdefault("controller", None)


# ---------------------------
# Helpers
# ---------------------------
def get_controller():
    """Return the controller object."""
    return st_session.get("controller")


def open_chat(provider: str) -> None:
    """Create the chat controller over the shared store and leave the welcome screen."""
    st_session.provider = provider
    st_session.controller = ChatSessionController(
        get_history_store(),
        provider,
        scheduler=DeferredScheduler(),
        responder=EchoResponder(),
        reply_delay=settings.reply_delay_seconds,
    )


def on_continue():
    provider = resolve_provider(st_session.get("api_key_input"), settings.provider_label)
    if provider:
        open_chat(provider)


def on_select_session(session_id: str):
    history_view.select_session(get_history_store(), get_controller(), session_id)


def on_delete_session(session_id: str):
    history_view.delete_session(get_history_store(), get_controller(), session_id)


def on_new_chat():
    get_controller().start_new_chat()


# ---------------------------
# Welcome
# ---------------------------
def render_welcome() -> None:
    st.title(settings.app_title)
    st.markdown("#### Enter your OpenAI API Key")
    api_key = st.text_input(
        "API key",
        type="password",
        key="api_key_input",
        placeholder="Enter API key",
        label_visibility="collapsed",
    )
    st.button(
        "Continue",
        type="primary",
        disabled=not can_continue(api_key),
        on_click=on_continue,
        use_container_width=True,
    )


# ---------------------------
# History sidebar
# ---------------------------
def render_history(controller: ChatSessionController) -> None:
    with st.sidebar:
        st.button(
            "New chat",
            icon="📝",
            type="primary",
            on_click=on_new_chat,
            use_container_width=True,
        )
        st.markdown("## Chat History")

        entries = history_view.list_entries(get_history_store(), controller.current.id)
        if not entries:
            st.caption("No saved chats yet.")

        for entry in entries:
            title_col, delete_col = st.columns([5, 1])
            title_col.button(
                history_view.short_title(entry.title),
                key=f"open_{entry.session_id}",
                type="primary" if entry.is_current else "secondary",
                on_click=on_select_session,
                args=(entry.session_id,),
                use_container_width=True,
            )
            delete_col.button(
                "🗑",
                key=f"delete_{entry.session_id}",
                help="Delete this chat",
                on_click=on_delete_session,
                args=(entry.session_id,),
            )
            title_col.caption(
                f"Created: {history_view.format_entry_date(entry.created_at)}  \n"
                f"Last Modified: {history_view.format_entry_date(entry.last_modified)}"
            )


# ---------------------------
# Chat
# ---------------------------
def render_chat(controller: ChatSessionController) -> None:
    # Replies whose delay elapsed land before anything is drawn.
    controller.poll()

    render_history(controller)

    for msg in controller.current.messages:
        with st.chat_message(msg.role.value):
            st.markdown(msg.content)

    raw = st.chat_input("Ask anything")
    if raw:
        controller.draft_text = raw
        controller.send_message()
        st.rerun()

    wait = controller.seconds_until_next_reply()
    if wait is not None:
        with st.chat_message("assistant"):
            with st.spinner("Thinking…"):
                time.sleep(wait)
        st.rerun()


controller = get_controller()
if controller is None:
    render_welcome()
else:
    render_chat(controller)
