"""Trigger store: a JSON-backed trigger registry for running without a host."""

from __future__ import annotations

import json
import time
import uuid
from datetime import datetime
from pathlib import Path

from loguru import logger

from formlimiter.host.base import TriggerRegistry
from formlimiter.host.types import Trigger, TriggerStoreData


def _now_ms() -> int:
    return int(time.time() * 1000)


class TriggerStore(TriggerRegistry):
    """Keep triggers in memory and, when *store_path* is set, in a JSON file.

    The file is loaded lazily and rewritten on every change, so a restarted
    process picks up the triggers armed before it stopped.
    """

    def __init__(self, store_path: Path | None = None):
        self.store_path = store_path
        self._store: TriggerStoreData | None = None

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def _load_store(self) -> TriggerStoreData:
        if self._store is not None:
            return self._store

        if self.store_path and self.store_path.exists():
            try:
                data = json.loads(self.store_path.read_text(encoding="utf-8"))
                triggers = [self._from_dict(t) for t in data.get("triggers", [])]
                self._store = TriggerStoreData(version=data.get("version", 1), triggers=triggers)
            except Exception as exc:
                logger.warning("Failed to load trigger store: {}", exc)
                self._store = TriggerStoreData()
        else:
            self._store = TriggerStoreData()

        return self._store

    def _save_store(self) -> None:
        if not self._store or not self.store_path:
            return
        self.store_path.parent.mkdir(parents=True, exist_ok=True)
        data = {
            "version": self._store.version,
            "triggers": [self._to_dict(t) for t in self._store.triggers],
        }
        self.store_path.write_text(
            json.dumps(data, indent=2, ensure_ascii=False), encoding="utf-8"
        )

    @staticmethod
    def _to_dict(trigger: Trigger) -> dict:
        d: dict = {
            "id": trigger.id,
            "handler": trigger.handler,
            "kind": trigger.kind,
            "createdAtMs": trigger.created_at_ms,
        }
        if trigger.at is not None:
            d["at"] = trigger.at.isoformat()
        if trigger.event:
            d["event"] = trigger.event
        return d

    @staticmethod
    def _from_dict(data: dict) -> Trigger:
        at = data.get("at")
        return Trigger(
            id=data["id"],
            handler=data["handler"],
            kind=data.get("kind", "at"),
            at=datetime.fromisoformat(at) if at else None,
            event=data.get("event"),
            created_at_ms=data.get("createdAtMs", 0),
        )

    # ------------------------------------------------------------------
    # TriggerRegistry
    # ------------------------------------------------------------------

    def list_triggers(self) -> list[Trigger]:
        return list(self._load_store().triggers)

    def delete_trigger(self, trigger: Trigger) -> bool:
        store = self._load_store()
        before = len(store.triggers)
        store.triggers = [t for t in store.triggers if t.id != trigger.id]
        if len(store.triggers) == before:
            return False
        self._save_store()
        logger.debug("Triggers: deleted {} ({})", trigger.id, trigger.handler)
        return True

    def create_one_shot_trigger(self, handler: str, at: datetime) -> Trigger:
        trigger = Trigger(
            id=str(uuid.uuid4())[:8],
            handler=handler,
            kind="at",
            at=at,
            created_at_ms=_now_ms(),
        )
        self._add(trigger)
        logger.info("Triggers: {} at {} ({})", handler, at.isoformat(), trigger.id)
        return trigger

    def create_event_trigger(self, handler: str, event: str) -> Trigger:
        trigger = Trigger(
            id=str(uuid.uuid4())[:8],
            handler=handler,
            kind="event",
            event=event,
            created_at_ms=_now_ms(),
        )
        self._add(trigger)
        logger.info("Triggers: {} on {} ({})", handler, event, trigger.id)
        return trigger

    def _add(self, trigger: Trigger) -> None:
        self._load_store().triggers.append(trigger)
        self._save_store()

    # ------------------------------------------------------------------
    # Queries used by the runner
    # ------------------------------------------------------------------

    def due(self, now: datetime) -> list[Trigger]:
        """One-shot triggers whose time has come, earliest first."""
        ready = [
            t for t in self._load_store().triggers
            if t.kind == "at" and t.at is not None and t.at <= now
        ]
        return sorted(ready, key=lambda t: t.at)

    def next_due_at(self) -> datetime | None:
        times = [t.at for t in self._load_store().triggers if t.kind == "at" and t.at is not None]
        return min(times) if times else None

    def event_triggers(self, event: str) -> list[Trigger]:
        return [t for t in self._load_store().triggers if t.kind == "event" and t.event == event]
