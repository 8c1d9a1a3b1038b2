import smtplib

import pytest
from unittest.mock import patch

from shared.utils.exceptions import EmailDeliveryException
from marketplace_api.infrastructure.notifications.smtp_email_service import SmtpEmailService

SMTP_PATH = "marketplace_api.infrastructure.notifications.smtp_email_service.smtplib.SMTP"


class TestSmtpEmailService:

    @pytest.fixture
    def email_service(self):
        return SmtpEmailService(host="smtp.example.com", port=587, user="mailer", password="secret",
                                use_tls=True, from_email="no-reply@example.com", from_name="Marketplace",
                                timeout=5)

    def test_build_message(self, email_service: SmtpEmailService):
        msg = email_service.build_message(["a@example.com", "b@example.com"], "Hi", "plain", "<p>html</p>")

        assert msg["Subject"] == "Hi"
        assert msg["To"] == "no-reply@example.com"
        assert msg["Bcc"] == "a@example.com, b@example.com"
        assert "Marketplace" in msg["From"]
        assert [part.get_content_type() for part in msg.get_payload()] == ["text/plain", "text/html"]

    @pytest.mark.asyncio
    async def test_send_email(self, email_service: SmtpEmailService):
        with patch(SMTP_PATH) as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value

            sent = await email_service.send_email(["a@example.com", "b@example.com"], "Hi", "plain")

        assert sent == 2
        mock_smtp.assert_called_once_with("smtp.example.com", 587, timeout=5)
        server.starttls.assert_called_once()
        server.login.assert_called_once_with("mailer", "secret")
        server.send_message.assert_called_once()
        assert server.send_message.call_args.kwargs["to_addrs"] == ["a@example.com", "b@example.com"]
        assert server.send_message.call_args.kwargs["from_addr"] == "no-reply@example.com"

    @pytest.mark.asyncio
    async def test_send_without_credentials_skips_login(self):
        service = SmtpEmailService(host="localhost", port=25, user="", password="", use_tls=False,
                                   from_email="no-reply@example.com", from_name="Marketplace")
        with patch(SMTP_PATH) as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value

            await service.send_email(["a@example.com"], "Hi", "plain")

        server.starttls.assert_not_called()
        server.login.assert_not_called()

    @pytest.mark.asyncio
    async def test_no_recipients(self, email_service: SmtpEmailService):
        with patch(SMTP_PATH) as mock_smtp:
            sent = await email_service.send_email([], "Hi", "plain")

        assert sent == 0
        mock_smtp.assert_not_called()

    @pytest.mark.asyncio
    async def test_delivery_failure(self, email_service: SmtpEmailService):
        with patch(SMTP_PATH) as mock_smtp:
            server = mock_smtp.return_value.__enter__.return_value
            server.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad credentials")

            with pytest.raises(EmailDeliveryException):
                await email_service.send_email(["a@example.com"], "Hi", "plain")

    @pytest.mark.asyncio
    async def test_connection_refused(self, email_service: SmtpEmailService):
        with patch(SMTP_PATH, side_effect=ConnectionRefusedError("refused")):
            with pytest.raises(EmailDeliveryException):
                await email_service.send_email(["a@example.com"], "Hi", "plain")
