"""Conversation turns and the transcript a client keeps across calls."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Iterator, List, Optional


class Role(str, Enum):
    SYSTEM = "system"
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Turn:
    """One labeled message in a conversation."""
    role: Role
    text: str

    def as_message(self) -> Dict[str, str]:
        return {"role": self.role.value, "content": self.text}


class Transcript:
    """
    Ordered turn history with an optional system turn kept apart from it.

    The system turn is always the first message sent to the provider.
    Replacing it clears everything that followed; user and assistant turns
    are only ever appended.
    """

    def __init__(self) -> None:
        self.system: Optional[Turn] = None
        self.history: List[Turn] = []

    def reset(self, system_text: str) -> None:
        self.system = Turn(Role.SYSTEM, system_text)
        self.history = []

    def append(self, role: Role, text: str) -> Turn:
        role = Role(role)
        if role is Role.SYSTEM:
            raise ValueError("system turns are set with reset(), not appended")
        turn = Turn(role, text)
        self.history.append(turn)
        return turn

    def turns(self) -> List[Turn]:
        """System turn (when non-empty) followed by the history."""
        out: List[Turn] = []
        if self.system is not None and self.system.text:
            out.append(self.system)
        out.extend(self.history)
        return out

    def messages(self) -> List[Dict[str, str]]:
        return [t.as_message() for t in self.turns()]

    def __len__(self) -> int:
        return len(self.history)

    def __iter__(self) -> Iterator[Turn]:
        return iter(self.history)
