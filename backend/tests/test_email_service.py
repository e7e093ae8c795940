import asyncio

from progress_chat.services.email_service import EmailService


def test_reset_email_escapes_user_supplied_name():
    subject, html_content, text_content = EmailService()._create_reset_email_content(
        "<script>alert(1)</script>", "https://progress.example/reset-password?token=a&b=1"
    )

    assert "<script>" not in html_content
    assert "&lt;script&gt;alert(1)&lt;/script&gt;" in html_content
    assert 'href="https://progress.example/reset-password?token=a&amp;b=1"' in html_content
    assert "Hi <script>alert(1)</script>," in text_content
    assert subject == "Reset your Progress password"


def test_reset_email_is_skipped_without_smtp():
    sent, _ = asyncio.run(EmailService().send_password_reset("ada@example.com", "Ada", "https://x/reset"))
    assert sent is False
