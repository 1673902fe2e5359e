"""Wire a scheduler to the local collaborators from a config."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from formlimiter.config.schema import FormLimiterConfig
from formlimiter.host.base import Notifier
from formlimiter.host.memory import InMemoryForm, LogNotifier, StaticIdentity
from formlimiter.host.runner import TriggerRunner
from formlimiter.host.store import TriggerStore
from formlimiter.host.webhook import WebhookNotifier
from formlimiter.schedule.service import FormScheduler


@dataclass
class LocalHost:
    scheduler: FormScheduler
    store: TriggerStore
    form: InMemoryForm
    runner: TriggerRunner
    notifier: Notifier

    def close(self) -> None:
        """Stop the runner and release the webhook's HTTP client, if any."""
        self.runner.stop()
        if isinstance(self.notifier, WebhookNotifier):
            self.notifier.close()


def build_local_host(config: FormLimiterConfig, store_path: Path | None = None) -> LocalHost:
    """Build a scheduler backed by a JSON trigger store and an in-memory form.

    *store_path* overrides ``config.store_path``.
    """
    store = TriggerStore(store_path or Path(config.store_path).expanduser())
    form = InMemoryForm(public_url=config.form.public_url, accepting=config.form.accepting)

    notifier: Notifier
    if config.notifier.webhook_url:
        notifier = WebhookNotifier(config.notifier.webhook_url, timeout_s=config.notifier.timeout_s)
    else:
        notifier = LogNotifier()

    scheduler = FormScheduler(
        config=config.to_schedule(),
        registry=store,
        form=form,
        notifier=notifier,
        identity=StaticIdentity(config.form.owner_email),
    )
    runner = TriggerRunner(scheduler, store, poll_interval_s=config.poll_interval_s)
    return LocalHost(scheduler=scheduler, store=store, form=form, runner=runner, notifier=notifier)
