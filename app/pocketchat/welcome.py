"""
Purpose: Navigational gate in front of the chat screen.
The API key is only checked for presence: it is never validated, stored or
sent anywhere. A non-empty key unlocks the chat with the configured provider.
"""

from __future__ import annotations
from typing import Optional


def can_continue(api_key: Optional[str]) -> bool:
    return bool(api_key)


def resolve_provider(api_key: Optional[str], provider_label: str) -> Optional[str]:
    """Provider label to open the chat with, or None while the key is empty."""
    if not can_continue(api_key):
        return None
    return provider_label
