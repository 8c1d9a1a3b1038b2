"""
SMTP transport for outgoing notification emails.
"""
import asyncio
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr

from shared.config.settings import settings
from shared.utils.exceptions import EmailDeliveryException
from shared.utils.logging_config import get_logger
from marketplace_api.application.interfaces.service_interfaces import EmailServiceInterface

logger = get_logger(__name__)


class SmtpEmailService(EmailServiceInterface):
    """
    Sends one multipart (plain text + HTML) message per call.

    Recipients go in Bcc so subscribers never see each other's addresses.
    smtplib is blocking, so the SMTP conversation runs in a worker thread.
    """

    def __init__(self,
                 host: str = None,
                 port: int = None,
                 user: str = None,
                 password: str = None,
                 use_tls: bool = None,
                 from_email: str = None,
                 from_name: str = None,
                 timeout: int = None):
        self.host = host or settings.smtp_host
        self.port = port or settings.smtp_port
        self.user = user if user is not None else settings.smtp_user
        self.password = password if password is not None else settings.smtp_password
        self.use_tls = settings.smtp_use_tls if use_tls is None else use_tls
        self.from_email = from_email or settings.email_from
        self.from_name = from_name or settings.email_from_name
        self.timeout = timeout or settings.smtp_timeout_seconds

    def build_message(self, recipients: list[str], subject: str, text_body: str, html_body: str | None) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.from_name, self.from_email))
        msg["To"] = self.from_email
        msg["Bcc"] = ", ".join(recipients)
        msg.attach(MIMEText(text_body, "plain"))
        if html_body:
            msg.attach(MIMEText(html_body, "html"))
        return msg

    async def send_email(self,
                         recipients: list[str],
                         subject: str,
                         text_body: str,
                         html_body: str | None = None) -> int:
        if not recipients:
            logger.info("No recipients, email not sent", extra={"subject": subject})
            return 0

        msg = self.build_message(recipients, subject, text_body, html_body)
        await asyncio.to_thread(self._send, msg, recipients)
        logger.info("Email sent", extra={"subject": subject, "recipient_count": len(recipients)})
        return len(recipients)

    def _send(self, msg: MIMEMultipart, recipients: list[str]) -> None:
        try:
            with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
                if self.use_tls:
                    server.starttls()
                if self.user and self.password:
                    server.login(self.user, self.password)
                # send_message drops the Bcc header before transmitting
                server.send_message(msg, from_addr=self.from_email, to_addrs=recipients)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"SMTP delivery failed: {e}",
                         extra={"smtp_host": self.host, "recipient_count": len(recipients)})
            raise EmailDeliveryException(str(e)) from e

    async def close(self) -> None:
        pass
