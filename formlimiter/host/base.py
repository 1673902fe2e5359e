"""Collaborator interfaces the scheduler depends on."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime

from formlimiter.host.types import Trigger


class TriggerRegistry(ABC):
    """Host facility that fires handlers at a time or on an event."""

    @abstractmethod
    def list_triggers(self) -> list[Trigger]:
        pass

    @abstractmethod
    def delete_trigger(self, trigger: Trigger) -> bool:
        pass

    @abstractmethod
    def create_one_shot_trigger(self, handler: str, at: datetime) -> Trigger:
        pass

    @abstractmethod
    def create_event_trigger(self, handler: str, event: str) -> Trigger:
        pass


class FormProvider(ABC):
    """The form whose availability is being scheduled."""

    @abstractmethod
    def is_accepting(self) -> bool:
        pass

    @abstractmethod
    def set_accepting(self, accepting: bool) -> None:
        pass

    @abstractmethod
    def get_response_count(self) -> int:
        pass

    @abstractmethod
    def get_public_url(self) -> str:
        pass


class Notifier(ABC):
    @abstractmethod
    def send(self, recipient: str, subject: str, body: str) -> None:
        pass


class IdentityProvider(ABC):
    @abstractmethod
    def get_current_user_email(self) -> str:
        pass
