"""Line-oriented task scripts driven against a ConversationClient.

Grammar (one directive per line, prefixes are case-sensitive):

    # comment                  ignored
    <blank>                    ignored
    SYSTEM:<text>              replace the system prompt
    PROMPT:<text>              ask the model
    DECISION:<text>            ask the model, shown as a decision
    COMMAND:<text>             ask the model, shown as a command
    anything else              same as PROMPT with the whole line

The payload is whatever follows the prefix on the trimmed line, so a space
after the colon is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import IO, Callable, Iterator, List, Optional, Sequence, Tuple, Union

from .errors import ResourceUnavailable
from .io_utils import read_text
from .llm import ConversationClient

logger = logging.getLogger(__name__)

Out = Callable[[str], None]

_WHITESPACE = " \t\n\r"


# -----------------------------
# Directives
# -----------------------------
@dataclass(frozen=True)
class SystemDirective:
    text: str
    line: str = ""
    kind = "system"


@dataclass(frozen=True)
class PromptDirective:
    text: str
    line: str = ""
    kind = "prompt"


@dataclass(frozen=True)
class DecisionDirective:
    text: str
    line: str = ""
    kind = "decision"


@dataclass(frozen=True)
class CommandDirective:
    text: str
    line: str = ""
    kind = "command"


Directive = Union[SystemDirective, PromptDirective, DecisionDirective, CommandDirective]

# Longest first so a longer prefix always wins.
_PREFIXES: Tuple[Tuple[str, type], ...] = tuple(
    sorted(
        (
            ("PROMPT:", PromptDirective),
            ("SYSTEM:", SystemDirective),
            ("DECISION:", DecisionDirective),
            ("COMMAND:", CommandDirective),
        ),
        key=lambda p: len(p[0]),
        reverse=True,
    )
)


def classify_line(raw: str) -> Optional[Directive]:
    """Turn one line into a Directive, or None for blanks and comments."""
    line = raw.strip(_WHITESPACE)
    if not line or line.startswith("#"):
        return None
    for prefix, cls in _PREFIXES:
        if line.startswith(prefix):
            return cls(text=line[len(prefix):], line=line)
    return PromptDirective(text=line, line=line)


class Script:
    """Immutable ordered sequence of directives."""

    def __init__(self, directives: Sequence[Directive] = ()) -> None:
        self._directives: Tuple[Directive, ...] = tuple(directives)

    def __iter__(self) -> Iterator[Directive]:
        return iter(self._directives)

    def __len__(self) -> int:
        return len(self._directives)

    def __getitem__(self, index: int) -> Directive:
        return self._directives[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Script):
            return self._directives == other._directives
        return NotImplemented

    def __repr__(self) -> str:
        return f"Script({list(self._directives)!r})"


def parse_script(text: str) -> Script:
    directives: List[Directive] = []
    for raw in (text or "").split("\n"):
        d = classify_line(raw)
        if d is not None:
            directives.append(d)
    return Script(directives)


# -----------------------------
# Interpreter
# -----------------------------
class InterpreterState(str, Enum):
    EMPTY = "empty"
    LOADED = "loaded"
    PARSED = "parsed"
    EXECUTING = "executing"
    DONE = "done"


class DirectiveStatus(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"


_LABELS = {
    DecisionDirective: "Decision",
    CommandDirective: "Command",
    PromptDirective: "Response",
}


class ScriptInterpreter:
    """
    Load, parse and execute a script against a ConversationClient.

    States move empty -> loaded -> parsed -> executing -> done. ``load`` and
    ``parse`` can be called again at any time and discard whatever came
    after them. Execution is strictly sequential and never stops early: a
    failed completion is just an empty answer.
    """

    def __init__(self, out: Optional[Out] = None) -> None:
        self.out: Out = out or print
        self.text: str = ""
        self.script: Script = Script()
        self.statuses: List[DirectiveStatus] = []
        self.state: InterpreterState = InterpreterState.EMPTY

    def load(self, source: Union[str, Path, IO[str]]) -> Optional[str]:
        """Read the raw script text. Returns None (and logs) on failure."""
        try:
            text = read_text(source)
        except ResourceUnavailable as e:
            logger.error("Error: %s", e)
            return None
        self.text = text
        self.script = Script()
        self.statuses = []
        self.state = InterpreterState.LOADED
        return text

    def parse(self, text: Optional[str] = None) -> Script:
        """Parse ``text`` (default: the loaded text), replacing the current script."""
        self.script = parse_script(self.text if text is None else text)
        self.statuses = [DirectiveStatus.PENDING] * len(self.script)
        self.state = InterpreterState.PARSED
        return self.script

    def execute(
        self,
        script: Optional[Script],
        client: ConversationClient,
        out: Optional[Out] = None,
    ) -> List[str]:
        """Run every directive in order. Returns the answer of each model call."""
        if script is None:
            script = self.script
        emit = out or self.out

        self.statuses = [DirectiveStatus.PENDING] * len(script)
        self.state = InterpreterState.EXECUTING
        answers: List[str] = []

        for i, d in enumerate(script):
            emit("\n=== Instruction ===")
            emit(d.line or d.text)
            if isinstance(d, SystemDirective):
                client.set_system_prompt(d.text)
                emit("System prompt set.")
            else:
                answer = client.complete(d.text, stream=False)
                answers.append(answer)
                emit(f"{_LABELS[type(d)]}: {answer}")
            self.statuses[i] = DirectiveStatus.COMPLETED

        self.state = InterpreterState.DONE
        return answers

    def run(self, client: ConversationClient, out: Optional[Out] = None) -> List[str]:
        """Parse the loaded text if needed, then execute it."""
        if self.state in (InterpreterState.EMPTY, InterpreterState.LOADED):
            self.parse()
        return self.execute(self.script, client, out)
