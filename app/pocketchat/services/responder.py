"""
Purpose: Produce the assistant's reply text.
There is no model call: the reply is a templated echo of the user's text and
the provider label. Other responders can be swapped in behind the
Responder protocol without touching the controller.
"""

from __future__ import annotations

REPLY_TEMPLATE = 'Response for: "{text}" (Provider: {provider})'


class EchoResponder:
    def __init__(self, template: str = REPLY_TEMPLATE) -> None:
        self.template = template

    def reply(self, text: str, provider: str) -> str:
        return self.template.format(text=text, provider=provider)
