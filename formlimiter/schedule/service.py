"""Form scheduler: weekly cycles, state reconciliation and the response limit."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Literal

from loguru import logger

from formlimiter.errors import CollaboratorError
from formlimiter.host.base import FormProvider, IdentityProvider, Notifier, TriggerRegistry
from formlimiter.host.types import Trigger
from formlimiter.schedule.planner import plan_cycle
from formlimiter.schedule.types import (
    HANDLERS,
    CyclePlan,
    NotifyFlag,
    ScheduleConfig,
    TriggerIntent,
)

SUBJECT_OPEN = "Your form is now accepting responses"
SUBJECT_CLOSE = "Your form is no longer accepting responses"
SUBJECT_LIMIT = "Your form reached the response limit"


@contextmanager
def _collaborator(operation: str) -> Iterator[None]:
    try:
        yield
    except CollaboratorError:
        raise
    except Exception as exc:
        logger.error("Scheduler: {} failed: {}", operation, exc)
        raise CollaboratorError(operation, exc) from exc


@dataclass
class CycleReport:
    """Outcome of one reconciliation cycle."""
    plan: CyclePlan
    correction: Literal["open", "close"] | None = None
    deleted: int = 0
    created: list[Trigger] = field(default_factory=list)


class FormScheduler:
    """Open and close a form on a weekly window.

    Each cycle clears the triggers this scheduler owns, arms fresh ones for
    the next open and close edges, corrects the form state when both edges
    are known, arms the response-limit watcher and finally arms its own
    re-run one week later.  Waiting is left entirely to the *registry*.
    """

    def __init__(
        self,
        config: ScheduleConfig,
        registry: TriggerRegistry,
        form: FormProvider,
        notifier: Notifier,
        identity: IdentityProvider,
        clock: Callable[[], datetime] | None = None,
    ):
        self.config = config
        self._registry = registry
        self._form = form
        self._notifier = notifier
        self._identity = identity
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    # ------------------------------------------------------------------
    # Cycle
    # ------------------------------------------------------------------

    def initialize(self, now: datetime | None = None) -> CycleReport:
        """Bootstrap the first cycle."""
        logger.info("Scheduler: initializing")
        return self.run_cycle(now)

    def run_cycle(self, now: datetime | None = None) -> CycleReport:
        now = now or self._clock()
        plan = plan_cycle(self.config, now)
        report = CycleReport(plan=plan)

        report.deleted = self._clear()

        for intent in plan.edge_triggers:
            report.created.append(self._arm(intent))

        if plan.should_be_open is None:
            logger.debug("Scheduler: open and close rules not both set, skipping reconciliation")
        else:
            report.correction = self._reconcile(plan.should_be_open)

        if plan.limit_trigger:
            report.created.append(self._arm(plan.limit_trigger))
        if plan.reinit_trigger:
            report.created.append(self._arm(plan.reinit_trigger))

        logger.info(
            "Scheduler: cycle done (next open {}, next close {}, {} trigger(s) armed)",
            plan.next_open.isoformat() if plan.next_open else "-",
            plan.next_close.isoformat() if plan.next_close else "-",
            len(report.created),
        )
        return report

    def _clear(self) -> int:
        with _collaborator("list triggers"):
            triggers = self._registry.list_triggers()
        deleted = 0
        for trigger in triggers:
            if trigger.handler not in HANDLERS:
                continue
            with _collaborator(f"delete trigger {trigger.id}"):
                self._registry.delete_trigger(trigger)
            deleted += 1
        if deleted:
            logger.debug("Scheduler: cleared {} trigger(s)", deleted)
        return deleted

    def _arm(self, intent: TriggerIntent) -> Trigger:
        with _collaborator(f"create {intent.handler} trigger"):
            if intent.kind == "event":
                return self._registry.create_event_trigger(intent.handler, intent.event)
            return self._registry.create_one_shot_trigger(intent.handler, intent.at)

    def _reconcile(self, should_be_open: bool) -> Literal["open", "close"] | None:
        # Always re-read, never trust state from an earlier call
        with _collaborator("read form state"):
            accepting = self._form.is_accepting()
        if should_be_open and not accepting:
            logger.info("Scheduler: form should be open but is closed, opening")
            self.open_form()
            return "open"
        if not should_be_open and accepting:
            logger.info("Scheduler: form should be closed but is open, closing")
            self.close_form()
            return "close"
        return None

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def open_form(self) -> None:
        with _collaborator("open form"):
            self._form.set_accepting(True)
        logger.info("Scheduler: form opened")
        if self.config.notifies(NotifyFlag.ON_OPEN):
            self._inform(SUBJECT_OPEN)

    def close_form(self) -> None:
        with _collaborator("close form"):
            self._form.set_accepting(False)
        logger.info("Scheduler: form closed")
        if self.config.notifies(NotifyFlag.ON_CLOSE):
            self._inform(SUBJECT_CLOSE)

    def check_limit(self) -> bool:
        """Close the form once the response limit is reached."""
        limit = self.config.response_limit
        if limit is None:
            return False
        with _collaborator("read response count"):
            count = self._form.get_response_count()
        if count < limit:
            return False
        logger.info("Scheduler: response limit reached ({}/{})", count, limit)
        if self.config.notifies(NotifyFlag.ON_LIMIT):
            self._inform(SUBJECT_LIMIT)
        self.close_form()
        return True

    def dispatch(self, handler: str, now: datetime | None = None) -> None:
        """Run the action a fired trigger names."""
        if handler == "open_form":
            self.open_form()
        elif handler == "close_form":
            self.close_form()
        elif handler == "check_limit":
            self.check_limit()
        elif handler == "reinit":
            self.run_cycle(now)
        else:
            raise ValueError(f"Unknown trigger handler: {handler}")

    def _inform(self, subject: str) -> None:
        with _collaborator("send notification"):
            recipient = self._identity.get_current_user_email()
            body = self._form.get_public_url()
            self._notifier.send(recipient, subject, body)
