"""Tests for emailing study guide links."""
import smtplib
from unittest.mock import MagicMock, patch

import pytest
from fastapi import status

from app.dependencies import get_email_service
from app.errors import InvalidInput, UpstreamError
from app.main import app
from app.services.sharing import EmailService, render_share_email

SHARE = {
    "to": "friend@example.com",
    "studyGuideTitle": "Cell Biology",
    "studyGuideUrl": "https://casanovastudy.example.com/guides/123",
    "senderName": "Grace",
    "message": "Good for Friday's quiz",
}


def test_share_study_guide(client, email_service):
    response = client.post("/share-study-guide", json=SHARE)
    assert response.status_code == status.HTTP_200_OK
    assert response.json()["success"] is True

    sent = email_service.sent[0]
    assert sent["to"] == "friend@example.com"
    assert sent["subject"] == "Study Guide Shared: Cell Biology"
    assert "Grace has shared" in sent["html"]
    assert "https://casanovastudy.example.com/guides/123" in sent["html"]


@pytest.mark.parametrize("field", ["to", "studyGuideTitle", "studyGuideUrl"])
def test_share_requires_fields(client, email_service, field):
    body = {k: v for k, v in SHARE.items() if k != field}
    response = client.post("/share-study-guide", json=body)
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Missing required fields: to, studyGuideTitle, studyGuideUrl"
    assert email_service.sent == []


@pytest.mark.parametrize("address", ["not-an-email", "a@b", "two words@example.com"])
def test_share_rejects_invalid_email(client, address):
    response = client.post("/share-study-guide", json={**SHARE, "to": address})
    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json()["error"] == "Invalid email format"


def test_share_without_email_configuration(client, email_service):
    email_service.configured = False
    response = client.post("/share-study-guide", json=SHARE)
    assert response.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert response.json()["error"] == "Email service not configured"


def test_render_escapes_user_text():
    html = render_share_email(
        "<script>alert(1)</script>",
        "https://example.com/?a=1&b=2",
        sender_name="Eve <eve@example.com>",
        message='"quoted" & <b>bold</b>',
    )
    assert "<script>" not in html
    assert "&lt;script&gt;" in html
    assert "Eve &lt;eve@example.com&gt; has shared" in html
    assert "&lt;b&gt;bold&lt;/b&gt;" in html
    assert "https://example.com/?a=1&amp;b=2" in html


def test_render_without_sender_or_message():
    html = render_share_email("Cells", "https://example.com/g/1")
    assert "Someone has shared" in html
    assert "&quot;" not in html


def test_email_service_sends_over_starttls():
    service = EmailService("smtp.example.com", 587, "user@example.com", "secret")
    server = MagicMock()
    with patch("app.services.sharing.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value = server
        service.send_html("friend@example.com", "Subject", "<p>Hi</p>")

    smtp.assert_called_once_with("smtp.example.com", 587, timeout=10)
    server.starttls.assert_called_once()
    server.login.assert_called_once_with("user@example.com", "secret")
    message = server.send_message.call_args.args[0]
    assert message["To"] == "friend@example.com"
    assert message["From"] == "CasanovaStudy <user@example.com>"


def test_email_service_wraps_smtp_errors():
    service = EmailService("smtp.example.com", 587, "user@example.com", "secret")
    with patch("app.services.sharing.smtplib.SMTP") as smtp:
        smtp.return_value.__enter__.return_value.login.side_effect = smtplib.SMTPAuthenticationError(535, b"bad")
        with pytest.raises(UpstreamError, match="Failed to send email"):
            service.send_html("friend@example.com", "Subject", "<p>Hi</p>")


def test_email_service_not_configured():
    service = EmailService(None, 587, None, None)
    assert service.configured is False
    with pytest.raises(UpstreamError):
        service.send_html("friend@example.com", "Subject", "<p>Hi</p>")


@pytest.mark.parametrize("field, value", [
    ("studyGuideTitle", "Cells\nBcc: everyone@example.com"),
    ("studyGuideTitle", "Cells\r\nBcc: everyone@example.com"),
    ("senderName", "Grace\nBcc: everyone@example.com"),
])
def test_share_rejects_line_breaks_in_header_text(client, field, value):
    app.dependency_overrides[get_email_service] = lambda: EmailService(
        "smtp.example.com", 587, "user@example.com", "secret"
    )
    with patch("app.services.sharing.smtplib.SMTP") as smtp:
        response = client.post("/share-study-guide", json={**SHARE, field: value})

    assert response.status_code == status.HTTP_400_BAD_REQUEST
    assert response.json() == {
        "success": False,
        "error": "studyGuideTitle and senderName cannot contain line breaks",
    }
    smtp.assert_not_called()


def test_email_service_rejects_line_breaks_in_subject():
    service = EmailService("smtp.example.com", 587, "user@example.com", "secret")
    with patch("app.services.sharing.smtplib.SMTP") as smtp:
        with pytest.raises(InvalidInput, match="line breaks"):
            service.send_html("friend@example.com", "Cells\nBcc: everyone@example.com", "<p>Hi</p>")
    smtp.assert_not_called()
