from __future__ import annotations

import pytest

from agency.transcript import Role, Transcript, Turn


def test_reset_replaces_system_and_clears_history():
    t = Transcript()
    t.append(Role.USER, "hi")
    t.append(Role.ASSISTANT, "hello")
    t.reset("be terse")
    assert len(t) == 0
    assert t.system == Turn(Role.SYSTEM, "be terse")
    assert t.messages() == [{"role": "system", "content": "be terse"}]


def test_messages_order_and_empty_system_is_omitted():
    t = Transcript()
    t.reset("")
    t.append("user", "u1")
    t.append(Role.ASSISTANT, "a1")
    assert [m["role"] for m in t.messages()] == ["user", "assistant"]
    assert [turn.text for turn in t] == ["u1", "a1"]


def test_system_turns_cannot_be_appended():
    with pytest.raises(ValueError):
        Transcript().append(Role.SYSTEM, "nope")


def test_turns_are_immutable():
    turn = Turn(Role.USER, "x")
    with pytest.raises(AttributeError):
        turn.text = "y"  # type: ignore[misc]
