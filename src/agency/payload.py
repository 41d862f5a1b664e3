"""Request serialization and content extraction for OpenAI-compatible payloads.

Two extraction strategies share one signature ``(text) -> str``:

- ``extract_content``: lightweight scanner. Finds the first ``"content"``
  literal, the first colon after it, and returns whatever sits between the
  next pair of double quotes. It does not unescape, does not know about
  nesting, and returns ``""`` on any miss.
- ``decode_content``: decodes the payload with :mod:`json` and walks the
  usual chat-completion shapes.

The scanner is the default; providers vary and it tolerates payloads a
strict decoder rejects.
"""

from __future__ import annotations

import json
from typing import Any, Callable, Dict, Iterable, Iterator, List, Mapping, Sequence

Extractor = Callable[[str], str]

EVENT_PREFIX = "data: "
DONE_SENTINEL = "[DONE]"

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\b": "\\b",
    "\f": "\\f",
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
}


# -----------------------------
# Request side
# -----------------------------
def escape_json(text: str) -> str:
    """Escape ``text`` for embedding in a JSON string literal.

    Only quote, backslash and the five named control characters are
    escaped; everything else passes through verbatim.
    """
    return "".join(_ESCAPES.get(ch, ch) for ch in text)


def build_request(model: str, stream: bool, messages: Sequence[Mapping[str, str]]) -> str:
    """Serialize a chat-completion request body."""
    parts: List[str] = []
    for m in messages:
        parts.append(
            '{"role": "%s", "content": "%s"}' % (escape_json(m["role"]), escape_json(m["content"]))
        )
    return '{"model": "%s", "stream": %s, "messages": [%s]}' % (
        escape_json(model),
        "true" if stream else "false",
        ", ".join(parts),
    )


# -----------------------------
# Response side
# -----------------------------
def extract_content(text: str) -> str:
    """Best-effort scan for the first ``content`` field value."""
    key = text.find('"content"')
    if key < 0:
        return ""
    colon = text.find(":", key)
    if colon < 0:
        return ""
    open_quote = text.find('"', colon)
    if open_quote < 0:
        return ""
    close_quote = text.find('"', open_quote + 1)
    if close_quote < 0:
        return ""
    return text[open_quote + 1 : close_quote]


def decode_content(text: str) -> str:
    """Decode ``text`` as JSON and return the assistant content, if any."""
    try:
        data = json.loads(text)
    except ValueError:
        return ""
    if not isinstance(data, dict):
        return ""

    choices = data.get("choices")
    if isinstance(choices, list) and choices and isinstance(choices[0], dict):
        first: Dict[str, Any] = choices[0]
        for key in ("message", "delta"):
            part = first.get(key)
            if isinstance(part, dict) and isinstance(part.get("content"), str):
                return part["content"]

    content = data.get("content")
    return content if isinstance(content, str) else ""


_EXTRACTORS: Dict[str, Extractor] = {
    "scan": extract_content,
    "json": decode_content,
}


def get_extractor(name: str = "scan") -> Extractor:
    try:
        return _EXTRACTORS[(name or "scan").strip().lower()]
    except KeyError:
        raise ValueError(
            f"Unknown extraction strategy {name!r}; expected one of {sorted(_EXTRACTORS)}"
        ) from None


def iter_stream_payloads(lines: Iterable[str]) -> Iterator[str]:
    """Yield the JSON chunks of a streamed response.

    The event prefix is stripped; empty lines and the ``[DONE]`` sentinel
    are skipped without ending the iteration.
    """
    for line in lines:
        if line.startswith(EVENT_PREFIX):
            line = line[len(EVENT_PREFIX):]
        if not line or line == DONE_SENTINEL:
            continue
        yield line
