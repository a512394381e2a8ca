"""Chat log persisted as a JSON list of messages."""

from __future__ import annotations

import json
import logging
import secrets
import threading
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from pathlib import Path

from filedeck.errors import IOFailure

logger = logging.getLogger(__name__)


class EmptyMessage(ValueError):
    """Message text was blank after stripping."""


@dataclass
class ChatMessage:
    id: str
    text: str
    sender: str
    timestamp: str  # ISO-8601, UTC


class ChatLog:
    """Append-only message list stored in a single JSON file."""

    def __init__(self, path: str | Path):
        self._path = Path(path)
        self._lock = threading.Lock()

    def read_messages(self) -> list[ChatMessage]:
        if not self._path.exists():
            return []
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Chat log %s unreadable: %s", self._path, e)
            raise IOFailure("Chat log is unreadable") from e
        if not isinstance(data, list):
            raise IOFailure("Chat log is malformed")
        try:
            return [ChatMessage(**item) for item in data]
        except TypeError as e:
            logger.error("Chat log %s has malformed entries: %s", self._path, e)
            raise IOFailure("Chat log is malformed") from e

    def add_message(self, text: str, sender: str | None = None) -> ChatMessage:
        text = (text or "").strip()
        if not text:
            raise EmptyMessage("Message text is required")

        message = ChatMessage(
            id=f"{int(time.time() * 1000)}{secrets.token_hex(4)}",
            text=text,
            sender=sender or "You",
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        with self._lock:
            messages = self.read_messages()
            messages.append(message)
            self._write(messages)
        return message

    def clear(self) -> None:
        with self._lock:
            self._write([])
        logger.info("Chat log cleared")

    def _write(self, messages: list[ChatMessage]) -> None:
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps([asdict(m) for m in messages], indent=2), encoding="utf-8"
            )
        except OSError as e:
            raise IOFailure(f"Could not write chat log: {e.strerror or e}") from e
