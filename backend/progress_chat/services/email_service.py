"""
Outgoing email over SMTP (password reset links)
"""
import asyncio
import html
import logging
import smtplib
from email.mime.text import MIMEText
from email.mime.multipart import MIMEMultipart
from typing import Tuple

from ..config.settings import settings

logger = logging.getLogger(__name__)


class EmailService:
    """Sends transactional email through the configured SMTP server"""

    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_username = settings.SMTP_USERNAME
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.SENDER_EMAIL

    @property
    def configured(self) -> bool:
        return bool(self.smtp_host and self.smtp_username and self.smtp_password)

    def _create_reset_email_content(self, first_name: str, reset_link: str) -> Tuple[str, str, str]:
        subject = "Reset your Progress password"
        text_content = (
            f"Hi {first_name},\n\n"
            "We received a request to reset your Progress password.\n"
            f"Open this link to choose a new one: {reset_link}\n\n"
            f"The link expires in {settings.RESET_TOKEN_EXPIRATION_HOURS} hours. "
            "If you didn't ask for this, you can ignore this email.\n"
        )
        safe_name = html.escape(first_name or "")
        safe_link = html.escape(reset_link, quote=True)
        html_content = f"""
        <html>
          <body style="font-family: sans-serif;">
            <p>Hi {safe_name},</p>
            <p>We received a request to reset your Progress password.</p>
            <p><a href="{safe_link}">Choose a new password</a></p>
            <p>The link expires in {settings.RESET_TOKEN_EXPIRATION_HOURS} hours.
               If you didn't ask for this, you can ignore this email.</p>
          </body>
        </html>
        """
        return subject, html_content, text_content

    def _send_smtp(self, to_email: str, subject: str, html_content: str, text_content: str):
        msg = MIMEMultipart('alternative')
        msg['Subject'] = subject
        msg['From'] = self.from_email
        msg['To'] = to_email

        msg.attach(MIMEText(text_content, 'plain'))
        msg.attach(MIMEText(html_content, 'html'))

        with smtplib.SMTP(self.smtp_host, int(self.smtp_port)) as server:
            server.starttls()
            server.login(self.smtp_username, self.smtp_password)
            server.sendmail(self.from_email, [to_email], msg.as_string())

    async def send_password_reset(self, to_email: str, first_name: str, reset_link: str) -> Tuple[bool, str]:
        """Send the reset link; returns (sent, detail)"""
        if not self.configured:
            logger.warning("⚠️ No SMTP server configured - skipping password reset email")
            return False, "Email server not configured"

        subject, html_content, text_content = self._create_reset_email_content(first_name, reset_link)
        try:
            await asyncio.to_thread(self._send_smtp, to_email, subject, html_content, text_content)
            logger.info(f"✅ Password reset email sent to {to_email}")
            return True, "Email sent successfully via SMTP"
        except Exception as e:
            error_msg = f"SMTP email error: {str(e)}"
            logger.error(f"❌ {error_msg}")
            return False, error_msg
