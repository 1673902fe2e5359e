"""In-process collaborators: a local form, a fixed identity and a log sink."""

from __future__ import annotations

from loguru import logger

from formlimiter.host.base import FormProvider, IdentityProvider, Notifier


class InMemoryForm(FormProvider):
    """A form that counts submissions while it is accepting them."""

    def __init__(self, public_url: str = "", accepting: bool = False, responses: int = 0):
        self.public_url = public_url
        self._accepting = accepting
        self._responses = responses

    def is_accepting(self) -> bool:
        return self._accepting

    def set_accepting(self, accepting: bool) -> None:
        self._accepting = accepting

    def get_response_count(self) -> int:
        return self._responses

    def get_public_url(self) -> str:
        return self.public_url

    def submit(self) -> bool:
        """Record a response; returns False when the form is closed."""
        if not self._accepting:
            logger.debug("Form: rejected submission, form is closed")
            return False
        self._responses += 1
        return True


class StaticIdentity(IdentityProvider):
    def __init__(self, email: str):
        self.email = email

    def get_current_user_email(self) -> str:
        return self.email


class LogNotifier(Notifier):
    """Write notifications to the log instead of delivering them."""

    def send(self, recipient: str, subject: str, body: str) -> None:
        logger.info("Notify {}: {} ({})", recipient or "<nobody>", subject, body)
