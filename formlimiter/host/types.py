"""Host trigger types."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Literal


@dataclass
class Trigger:
    """A registered callback owned by the host."""
    id: str
    handler: str
    kind: Literal["at", "event"] = "at"
    # For "at": when to fire
    at: datetime | None = None
    # For "event": the event name, e.g. "form_submit"
    event: str | None = None
    created_at_ms: int = 0


@dataclass
class TriggerStoreData:
    """Persistent store for triggers."""
    version: int = 1
    triggers: list[Trigger] = field(default_factory=list)
