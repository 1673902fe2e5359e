"""Host collaborators: trigger registry, form, notifier, identity."""

from formlimiter.host.base import FormProvider, IdentityProvider, Notifier, TriggerRegistry
from formlimiter.host.memory import InMemoryForm, LogNotifier, StaticIdentity
from formlimiter.host.store import TriggerStore
from formlimiter.host.types import Trigger
from formlimiter.host.webhook import WebhookNotifier

__all__ = [
    "TriggerRegistry",
    "FormProvider",
    "Notifier",
    "IdentityProvider",
    "Trigger",
    "TriggerStore",
    "InMemoryForm",
    "StaticIdentity",
    "LogNotifier",
    "WebhookNotifier",
]
