"""Conversation messages and named sessions persisted as JSON files."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List

from .errors import SessionError

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str):
        raise TypeError(f"timestamp must be a string, not {type(value).__name__}")
    # Files written by other tools may use the RFC 3339 "Z" suffix.
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return datetime.fromisoformat(value)


class Role(str, Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class Message:
    """One turn in a conversation."""

    role: Role
    content: str
    timestamp: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "role": self.role.value,
            "content": self.content,
            "timestamp": self.timestamp.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        return cls(
            role=Role(data["role"]),
            content=data["content"],
            timestamp=_parse_timestamp(data["timestamp"]),
        )


@dataclass
class Session:
    """A named conversation together with the model it was held with."""

    id: str
    model: str
    messages: List[Message] = field(default_factory=list)
    created_at: datetime = field(default_factory=utcnow)
    updated_at: datetime = field(default_factory=utcnow)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "model": self.model,
            "messages": [m.to_dict() for m in self.messages],
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Session":
        return cls(
            id=data["id"],
            model=data["model"],
            messages=[Message.from_dict(m) for m in data["messages"]],
            created_at=_parse_timestamp(data["created_at"]),
            updated_at=_parse_timestamp(data["updated_at"]),
        )


class SessionStore:
    """Reads and writes sessions under ``<config_dir>/sessions``."""

    FILENAME_SUFFIX = ".json"

    def __init__(self, config_dir: Path) -> None:
        self.sessions_dir = Path(config_dir) / "sessions"

    def path_for(self, name: str) -> Path:
        return self.sessions_dir / f"{name}{self.FILENAME_SUFFIX}"

    def save(self, session: Session) -> Path:
        """Write *session* to disk, replacing any file with the same name."""
        self.sessions_dir.mkdir(parents=True, exist_ok=True)
        path = self.path_for(session.id)
        tmp_path = path.with_suffix(".tmp")
        tmp_path.write_text(
            json.dumps(session.to_dict(), ensure_ascii=False, indent=2),
            encoding="utf-8",
        )
        tmp_path.replace(path)
        logger.info("saved session %r (%d messages) to %s", session.id, len(session.messages), path)
        return path

    def load(self, name: str) -> Session:
        path = self.path_for(name)
        if not path.exists():
            raise FileNotFoundError(f"Session '{name}' does not exist.")
        try:
            session = Session.from_dict(json.loads(path.read_text(encoding="utf-8")))
        except (ValueError, KeyError, TypeError, AttributeError) as exc:
            raise SessionError(f"Session '{name}' is malformed: {exc}") from exc
        logger.info("loaded session %r from %s", name, path)
        return session
