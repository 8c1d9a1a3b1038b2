from dataclasses import dataclass, field
from datetime import datetime, timezone

from shared.utils.logging_config import get_logger
from marketplace_api.application.interfaces.service_interfaces import EmailServiceInterface

logger = get_logger(__name__)


@dataclass
class SentEmail:
    recipients: list[str]
    subject: str
    text_body: str
    html_body: str | None = None
    sent_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


class InMemoryEmailService(EmailServiceInterface):
    """Keeps sent messages in an outbox instead of talking to a mail server."""

    def __init__(self):
        self.outbox: list[SentEmail] = []

    async def send_email(self,
                         recipients: list[str],
                         subject: str,
                         text_body: str,
                         html_body: str | None = None) -> int:
        if not recipients:
            return 0
        self.outbox.append(SentEmail(list(recipients), subject, text_body, html_body))
        logger.info(f"Email queued in memory: {subject}", extra={"recipient_count": len(recipients)})
        return len(recipients)

    async def close(self) -> None:
        pass
