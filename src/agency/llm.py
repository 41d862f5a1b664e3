"""Conversational client for an OpenAI-compatible chat-completion endpoint."""

from __future__ import annotations

import logging
import sys
import threading
from typing import Any, Callable, Dict, List, Optional

import httpx

from .config import ClientConfig
from .errors import TransportError
from .payload import build_request, get_extractor, iter_stream_payloads
from .transcript import Role, Transcript

logger = logging.getLogger(__name__)

Sink = Callable[[str], str]
Output = Callable[[str], None]

HEADERS = {"Content-Type": "application/json"}


def _identity(chunk: str) -> str:
    return chunk


def _write_stdout(text: str) -> None:
    sys.stdout.write(text)
    sys.stdout.flush()


class ConversationClient:
    """Keeps a transcript and talks to the completion endpoint.

    Usage:
        with ConversationClient(ClientConfig()) as llm:
            llm.set_system_prompt("You are terse.")
            answer = llm.complete("Hello")
            llm.complete("Tell me more", stream=True, sink=str.upper)

    Notes:
        - The HTTP connection pool is owned by the client; call ``close()``
          or use it as a context manager.
        - Transport failures never raise out of ``complete``: they are
          logged and the answer is ``""``.
        - Streaming always writes fragments to ``output`` as they arrive;
          the blocking path writes only when ``show=True``.
    """

    def __init__(
        self,
        config: Optional[ClientConfig] = None,
        *,
        transport: Optional[httpx.BaseTransport] = None,
        output: Optional[Output] = None,
    ) -> None:
        self.config = config or ClientConfig()
        self._extract = get_extractor(self.config.extraction)
        self._output: Output = output or _write_stdout
        self._transcript = Transcript()
        # re-entrant so sink and output callbacks may call back into the client
        self._lock = threading.RLock()
        self._http = httpx.Client(transport=transport, timeout=self.config.timeout)

    # ----------------------------
    # Lifecycle
    # ----------------------------
    def close(self) -> None:
        self._http.close()

    def __enter__(self) -> "ConversationClient":
        return self

    def __exit__(self, *exc: Any) -> None:
        self.close()

    @property
    def transcript(self) -> Transcript:
        return self._transcript

    # ----------------------------
    # Public API
    # ----------------------------
    def set_system_prompt(self, text: str) -> None:
        """Replace the system instruction and forget all prior turns."""
        with self._lock:
            self._transcript.reset(text)

    def complete(
        self,
        user_text: str,
        stream: bool = False,
        sink: Optional[Sink] = None,
        show: bool = False,
    ) -> str:
        """Send ``user_text`` with the transcript and return the assistant text.

        Parameters
        ----------
        user_text : str
            The new user message; empty strings are sent as-is.
        stream : bool
            Request a streamed response and consume it line by line.
        sink : callable | None
            Streaming only. Called once per content fragment; its return
            value is what gets written to the output and accumulated.
            Returning an empty string drops the fragment.
        show : bool
            Blocking only. Write the full answer to the output channel.
        """
        with self._lock:
            self._transcript.append(Role.USER, user_text)
            body = build_request(self.config.model, stream, self._transcript.messages())

            try:
                if stream:
                    text = self._post_streaming(body, sink or _identity)
                else:
                    text = self._post(body)
                    if show:
                        self._output(text + "\n")
            except TransportError as e:
                logger.error("API request failed: %s", e)
                text = ""

            self._transcript.append(Role.ASSISTANT, text)
            return text

    # ----------------------------
    # Internals
    # ----------------------------
    def _post(self, body: str) -> str:
        logger.debug("POST %s (%d bytes)", self.config.api_endpoint, len(body))
        try:
            resp = self._http.post(
                self.config.api_endpoint, content=body.encode("utf-8"), headers=HEADERS
            )
            resp.raise_for_status()
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e
        return self._extract(resp.text)

    def _post_streaming(self, body: str, sink: Sink) -> str:
        logger.debug("POST %s (%d bytes, streaming)", self.config.api_endpoint, len(body))
        parts: List[str] = []
        try:
            with self._http.stream(
                "POST", self.config.api_endpoint, content=body.encode("utf-8"), headers=HEADERS
            ) as resp:
                resp.raise_for_status()
                for chunk in iter_stream_payloads(resp.iter_lines()):
                    content = self._extract(chunk)
                    if not content:
                        continue
                    processed = sink(content)
                    if not processed:
                        continue
                    self._output(processed)
                    parts.append(processed)
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise TransportError(str(e) or type(e).__name__) from e
        return "".join(parts)


# -----------------------------
# Convenience factory
# -----------------------------
def create_from_config(cfg: Optional[Dict[str, Any]], **kwargs: Any) -> ConversationClient:
    """Create a ConversationClient from a config dict (e.g., loaded YAML)."""
    return ConversationClient(ClientConfig.from_config(cfg), **kwargs)
