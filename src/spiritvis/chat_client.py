import logging
import threading
from dataclasses import dataclass

import httpx

from spiritvis.config import (
    DEFAULT_PROXY_URL,
    FALLBACK_REPLY,
    NO_REPLY,
    OPENING_LINE,
    SYSTEM_PROMPT,
)

logger = logging.getLogger(__name__)

USER = "you"
SPIRIT = "spirit"


@dataclass(frozen=True)
class TranscriptEntry:
    speaker: str
    text: str
    kind: str  # "user" or "ai"


class ChatSession:
    """
    Client side of the conversation with the spirit.

    `conversation` is what goes upstream (system prompt first, append-only);
    `transcript` is what the chat panel shows, starting with the opening line.
    Only one request may be in flight; a submit while waiting is dropped.
    """

    def __init__(self, proxy_url=DEFAULT_PROXY_URL, on_reply=None, transport=None):
        self.proxy_url = proxy_url
        self.on_reply = on_reply
        self.transport = transport
        self.conversation = [{"role": "system", "content": SYSTEM_PROMPT}]
        self.transcript = []
        self._in_flight = threading.Lock()
        self.render(SPIRIT, OPENING_LINE, "ai")

    @property
    def busy(self):
        return self._in_flight.locked()

    def render(self, speaker, text, kind):
        self.transcript.append(TranscriptEntry(speaker, text, kind))
        logger.info(f"[{speaker}] {text}")

    def recent(self, n):
        return list(self.transcript[-n:])

    def submit(self, executor, text):
        """Send `text` on `executor` without blocking the caller."""
        return executor.submit(self.send, text)

    def send(self, text):
        """
        Send one user message and wait for the reply.

        Returns the text shown as the spirit's turn, or None when nothing was
        sent (empty input, or a request already in flight).
        """
        text = (text or "").strip()
        if not text:
            return None
        if not self._in_flight.acquire(blocking=False):
            logger.warning("[!] Still waiting for the last reply; message not sent")
            return None

        try:
            self.render(USER, text, "user")
            self.conversation.append({"role": "user", "content": text})

            try:
                with httpx.Client(transport=self.transport, timeout=None) as client:
                    response = client.post(
                        self.proxy_url, json={"messages": list(self.conversation)}
                    )
                data = response.json()
            except (httpx.HTTPError, ValueError) as e:
                logger.error(f"[!] Chat request failed: {e}")
                self.render(SPIRIT, FALLBACK_REPLY, "ai")
                self.conversation.append({"role": "assistant", "content": FALLBACK_REPLY})
                return FALLBACK_REPLY

            reply = (data.get("reply") if isinstance(data, dict) else None) or NO_REPLY
            self.render(SPIRIT, reply, "ai")
            self.conversation.append({"role": "assistant", "content": reply})

            # visual pulse when the spirit speaks
            if self.on_reply is not None:
                self.on_reply(reply)
            return reply
        finally:
            self._in_flight.release()
