#!/usr/bin/env python3
"""
Bot Session - Auto-Reply Bot
============================

The application state (transcript, style profile, on/off flag), its JSON
form, the local key-value file it is mirrored to, and backup export/import.
"""

import json
import os
import tempfile
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import pandas as pd
from rich.console import Console

from style_analyzer import StyleProfile

console = Console()

STORAGE_KEY = "whatsappBotData"
BACKUP_PREFIX = "whatsapp-bot-backup"


class BackupImportError(ValueError):
    """Raised when a backup file can't be turned into bot state."""

    def __init__(self, reason: str = ""):
        self.reason = reason
        super().__init__("Invalid backup file")


def utc_now() -> datetime:
    """Current UTC time at millisecond precision, like a browser Date."""
    now = datetime.now(timezone.utc)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def epoch_ms(moment: Optional[datetime] = None) -> int:
    return int((moment or utc_now()).timestamp() * 1000)


def format_timestamp(moment: datetime) -> str:
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=timezone.utc)
    stamp = moment.astimezone(timezone.utc).isoformat(timespec="milliseconds")
    return stamp.replace("+00:00", "Z")


def parse_timestamp(value: str) -> datetime:
    if not isinstance(value, str):
        raise ValueError(f"timestamp must be a string, got {type(value).__name__}")
    parsed = pd.to_datetime(value, utc=True)
    if pd.isna(parsed):
        raise ValueError(f"empty timestamp: {value!r}")
    return parsed.to_pydatetime()


def new_message_id(prefix: str, index: Optional[int] = None) -> str:
    parts = [prefix, str(epoch_ms())]
    if index is not None:
        parts.append(str(index))
    parts.append(uuid.uuid4().hex[:6])
    return "-".join(parts)


@dataclass
class Message:
    """One transcript entry. ``is_user`` marks text written as the owner."""
    id: str
    text: str
    timestamp: datetime
    is_user: bool

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'text': self.text,
            'timestamp': format_timestamp(self.timestamp),
            'isUser': self.is_user,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Message":
        if not isinstance(data, dict):
            raise ValueError("message must be an object")
        return cls(
            id=str(data['id']),
            text=str(data['text']),
            timestamp=parse_timestamp(data['timestamp']),
            is_user=bool(data.get('isUser', False)),
        )


@dataclass
class BotState:
    messages: List[Message] = field(default_factory=list)
    style_data: StyleProfile = field(default_factory=StyleProfile)
    is_active: bool = False


def serialize_state(state: BotState) -> Dict[str, Any]:
    """State -> JSON-ready mapping."""
    return {
        'messages': [m.to_dict() for m in state.messages],
        'styleData': state.style_data.to_dict(),
        'isActive': state.is_active,
    }


def deserialize_state(data: Dict[str, Any],
                      fallback_style: Optional[StyleProfile] = None) -> BotState:
    """JSON mapping -> state.

    Missing pieces fall back to an empty transcript, ``fallback_style`` (or
    the default profile) and an inactive bot. Anything malformed raises
    ``ValueError``.
    """
    if not isinstance(data, dict):
        raise ValueError(f"expected an object, got {type(data).__name__}")

    raw_messages = data.get('messages') or []
    if not isinstance(raw_messages, list):
        raise ValueError("messages must be a list")

    raw_style = data.get('styleData')
    if raw_style:
        style = StyleProfile.from_dict(raw_style)
    else:
        style = StyleProfile(**vars(fallback_style)) if fallback_style else StyleProfile()

    try:
        messages = [Message.from_dict(m) for m in raw_messages]
    except KeyError as e:
        raise ValueError(f"message missing field {e}") from e

    return BotState(
        messages=messages,
        style_data=style,
        is_active=bool(data.get('isActive') or False),
    )


class LocalStorage:
    """A tiny JSON-file key-value store standing in for browser storage."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as e:
            console.print(f"[yellow]⚠️  Could not read {self.path}: {e}[/yellow]")
            return {}
        return data if isinstance(data, dict) else {}

    def get_item(self, key: str) -> Optional[Any]:
        return self._read_all().get(key)

    def set_item(self, key: str, value: Any) -> None:
        data = self._read_all()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        # The store file is only ever replaced whole
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(data, f, ensure_ascii=False)
            os.replace(tmp_name, self.path)
        except BaseException:
            if os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise


def load_state(storage: LocalStorage) -> BotState:
    """Restore saved state, or a fresh one if nothing usable is stored."""
    saved = storage.get_item(STORAGE_KEY)
    if saved is None:
        return BotState()
    try:
        state = deserialize_state(saved)
    except (ValueError, TypeError, OverflowError) as e:
        console.print(f"[yellow]⚠️  Ignoring saved bot data: {e}[/yellow]")
        return BotState()
    console.print(f"📂 Loaded {len(state.messages)} messages from local storage")
    return state


def save_state(storage: LocalStorage, state: BotState) -> None:
    storage.set_item(STORAGE_KEY, serialize_state(state))


def build_export(state: BotState, exported_at: Optional[datetime] = None) -> Dict[str, Any]:
    """Backup payload: the stored shape plus an export timestamp."""
    payload = serialize_state(state)
    payload['exportDate'] = format_timestamp(exported_at or utc_now())
    return payload


def export_filename(exported_at: Optional[datetime] = None) -> str:
    return f"{BACKUP_PREFIX}-{epoch_ms(exported_at)}.json"


def dump_backup(state: BotState, exported_at: Optional[datetime] = None) -> str:
    return json.dumps(build_export(state, exported_at), indent=2, ensure_ascii=False)


def parse_backup(raw: Union[str, bytes], current: BotState) -> BotState:
    """Parse backup text into a new state; ``current`` is never modified."""
    try:
        if isinstance(raw, bytes):
            raw = raw.decode("utf-8")
        data = json.loads(raw)
        return deserialize_state(data, fallback_style=current.style_data)
    except (UnicodeDecodeError, ValueError, TypeError, OverflowError) as e:
        raise BackupImportError(str(e)) from e
