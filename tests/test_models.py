"""Tests for chat message/session records and timestamp handling."""

from __future__ import annotations

import unittest
from datetime import datetime, timedelta, timezone

from pocketchat.models import (
    ChatMessage,
    ChatSession,
    Role,
    format_timestamp,
    parse_timestamp,
    utcnow,
)


def _ts(hour: int = 12, minute: int = 0) -> datetime:
    return datetime(2026, 10, 18, hour, minute, 0, tzinfo=timezone.utc)


class TimestampTests(unittest.TestCase):
    def test_format_uses_utc_z_suffix_without_fraction(self) -> None:
        value = datetime(2026, 10, 18, 17, 38, 5, 123456, tzinfo=timezone(timedelta(hours=2)))
        self.assertEqual(format_timestamp(value), "2026-10-18T15:38:05Z")

    def test_parse_accepts_common_iso_forms(self) -> None:
        expected = datetime(2026, 10, 18, 15, 38, 5, tzinfo=timezone.utc)
        self.assertEqual(parse_timestamp("2026-10-18T15:38:05Z"), expected)
        self.assertEqual(parse_timestamp("2026-10-18T17:38:05+02:00"), expected)
        self.assertEqual(parse_timestamp("2026-10-18T15:38:05"), expected)
        self.assertEqual(
            parse_timestamp("2026-10-18T15:38:05.250Z"),
            expected + timedelta(milliseconds=250),
        )

    def test_parse_rejects_garbage(self) -> None:
        with self.assertRaises(ValueError):
            parse_timestamp("yesterday")
        with self.assertRaises(TypeError):
            parse_timestamp(1700000000)

    def test_format_zero_pads_small_years(self) -> None:
        value = datetime(1, 1, 1, tzinfo=timezone.utc)
        self.assertEqual(format_timestamp(value), "0001-01-01T00:00:00Z")
        self.assertEqual(parse_timestamp(format_timestamp(value)), value)

    def test_parse_out_of_range_offset_is_a_value_error(self) -> None:
        with self.assertRaises(ValueError):
            parse_timestamp("0001-01-01T00:00:00+05:00")

    def test_utcnow_is_aware_and_second_precision(self) -> None:
        now = utcnow()
        self.assertEqual(now.tzinfo, timezone.utc)
        self.assertEqual(now.microsecond, 0)


class ChatSessionRecordTests(unittest.TestCase):
    def test_new_session_has_matching_timestamps_and_no_messages(self) -> None:
        session = ChatSession(provider="GPT")
        self.assertEqual(session.messages, [])
        self.assertEqual(session.created_at, session.last_modified)
        self.assertNotEqual(session.id, ChatSession(provider="GPT").id)

    def test_to_dict_uses_document_keys(self) -> None:
        msg = ChatMessage(role=Role.USER, content="Hi", id="m1", timestamp=_ts(9))
        session = ChatSession(
            provider="GPT",
            id="s1",
            messages=[msg],
            created_at=_ts(9),
            last_modified=_ts(10),
        )
        self.assertEqual(
            session.to_dict(),
            {
                "id": "s1",
                "messages": [
                    {
                        "id": "m1",
                        "role": "user",
                        "content": "Hi",
                        "timestamp": "2026-10-18T09:00:00Z",
                    }
                ],
                "provider": "GPT",
                "createdAt": "2026-10-18T09:00:00Z",
                "lastModified": "2026-10-18T10:00:00Z",
            },
        )

    def test_from_dict_restores_an_equal_session(self) -> None:
        session = ChatSession(
            provider="GPT",
            messages=[
                ChatMessage(role=Role.USER, content="Hi", timestamp=_ts(9)),
                ChatMessage(role=Role.ASSISTANT, content="Hello", timestamp=_ts(9, 1)),
            ],
            created_at=_ts(9),
            last_modified=_ts(9, 1),
        )
        self.assertEqual(ChatSession.from_dict(session.to_dict()), session)

    def test_from_dict_rejects_schema_mismatch(self) -> None:
        good = ChatSession(provider="GPT", created_at=_ts()).to_dict()

        missing = dict(good)
        del missing["provider"]
        with self.assertRaises(KeyError):
            ChatSession.from_dict(missing)

        bad_role = dict(good)
        bad_role["messages"] = [
            {"id": "m", "role": "system", "content": "x", "timestamp": "2026-10-18T09:00:00Z"}
        ]
        with self.assertRaises(ValueError):
            ChatSession.from_dict(bad_role)

        with self.assertRaises(TypeError):
            ChatSession.from_dict(["not", "an", "object"])

    def test_title_prefers_first_user_message(self) -> None:
        session = ChatSession(provider="GPT")
        self.assertEqual(session.title, "Empty Chat")

        session.messages.append(ChatMessage(role=Role.ASSISTANT, content="Welcome"))
        self.assertEqual(session.title, "Welcome")

        session.messages.append(ChatMessage(role=Role.USER, content="What is RAG?"))
        session.messages.append(ChatMessage(role=Role.USER, content="Second"))
        self.assertEqual(session.title, "What is RAG?")

    def test_copy_does_not_share_message_list(self) -> None:
        session = ChatSession(provider="GPT")
        clone = session.copy()
        clone.messages.append(ChatMessage(role=Role.USER, content="Hi"))
        self.assertEqual(session.messages, [])
        self.assertEqual(clone.id, session.id)


if __name__ == "__main__":
    unittest.main()
