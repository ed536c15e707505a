"""Emailing a study guide link to someone."""
import logging
import re
import smtplib
from datetime import datetime, UTC
from email.message import EmailMessage
from html import escape
from typing import Optional

from ..errors import InvalidInput, UpstreamError
from ..schemas import ShareRequest

logger = logging.getLogger(__name__)

EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
LINE_BREAK_RE = re.compile(r"[\r\n]")

SHARE_TEMPLATE = """<!DOCTYPE html>
<html lang="en">
  <head>
    <meta charset="utf-8">
    <meta name="viewport" content="width=device-width, initial-scale=1">
    <title>Study Guide Shared with You</title>
  </head>
  <body style="margin:0;padding:0;background-color:#f4f6f8;font-family:Arial,Helvetica,sans-serif;">
    <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="background-color:#f4f6f8;">
      <tr>
        <td align="center" style="padding:24px 12px;">
          <table role="presentation" width="100%" cellpadding="0" cellspacing="0" style="max-width:600px;background-color:#ffffff;border-radius:8px;">
            <tr>
              <td style="padding:24px;background-color:#4facfe;color:#ffffff;font-size:24px;font-weight:bold;">CasanovaStudy</td>
            </tr>
            <tr>
              <td style="padding:32px 24px 16px 24px;">
                <div style="font-size:22px;color:#0f172a;font-weight:700;margin-bottom:8px;">A Study Guide Has Been Shared With You!</div>
                <div style="font-size:15px;color:#64748b;">{sender} shared the following study guide with you:</div>
              </td>
            </tr>
            <tr>
              <td style="padding:0 24px 16px 24px;">
                <div style="font-size:18px;color:#4facfe;font-weight:600;padding:16px;background-color:#f0f9ff;border-radius:8px;border:1px solid #bae6fd;">{title}</div>
              </td>
            </tr>
            {personal_message}
            <tr>
              <td align="center" style="padding:16px 24px 32px 24px;">
                <a href="{url}" target="_blank" style="background-color:#4facfe;border-radius:8px;color:#ffffff;display:inline-block;font-size:16px;font-weight:bold;line-height:52px;text-align:center;text-decoration:none;width:280px;">View Study Guide</a>
              </td>
            </tr>
            <tr>
              <td style="padding:0 24px 24px 24px;font-size:12px;color:#94a3b8;">
                Or copy this link: <a href="{url}" style="color:#4facfe;word-break:break-all;">{url}</a>
              </td>
            </tr>
            <tr>
              <td align="center" style="padding:20px 24px;background-color:#f8fafc;border-top:1px solid #e2e8f0;font-size:12px;color:#94a3b8;">
                &copy; {year} CasanovaStudy &bull; AI-Powered Study Guides
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>"""

MESSAGE_ROW = """<tr>
              <td style="padding:0 24px 16px 24px;">
                <div style="font-size:14px;color:#475569;background-color:#f1f5f9;padding:16px;border-radius:8px;border-left:4px solid #4facfe;">&quot;{message}&quot;</div>
              </td>
            </tr>"""


def render_share_email(title: str, url: str, sender_name: Optional[str] = None, message: Optional[str] = None) -> str:
    """HTML body for a share email. All caller text is escaped."""
    sender = f"{escape(sender_name)} has" if sender_name else "Someone has"
    personal_message = MESSAGE_ROW.format(message=escape(message)) if message else ""
    return SHARE_TEMPLATE.format(
        sender=sender,
        title=escape(title),
        url=escape(url, quote=True),
        personal_message=personal_message,
        year=datetime.now(UTC).year,
    )


class EmailService:
    """SMTP sender built once at startup."""

    def __init__(
        self,
        host: Optional[str],
        port: int,
        user: Optional[str],
        password: Optional[str],
        sender: Optional[str] = None,
    ):
        self.host = host
        self.port = port
        self.user = user
        self.password = password
        self.sender = sender or user

    @property
    def configured(self) -> bool:
        return bool(self.host and self.user and self.password and self.sender)

    def send_html(self, to: str, subject: str, html: str) -> None:
        if not self.configured:
            raise UpstreamError("Email service not configured")

        if LINE_BREAK_RE.search(subject) or LINE_BREAK_RE.search(to):
            raise InvalidInput("Email headers cannot contain line breaks")

        msg = EmailMessage()
        msg["Subject"] = subject
        msg["From"] = f"CasanovaStudy <{self.sender}>"
        msg["To"] = to
        msg.set_content("This message contains HTML content. Open it in an HTML capable mail client.")
        msg.add_alternative(html, subtype="html")

        try:
            with smtplib.SMTP(self.host, self.port, timeout=10) as server:
                server.starttls()
                server.login(self.user, self.password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Email send failed: {e}", exc_info=True)
            raise UpstreamError("Failed to send email") from e


def share_study_guide(email_service: EmailService, payload: ShareRequest) -> None:
    if not payload.to or not payload.study_guide_title or not payload.study_guide_url:
        raise InvalidInput("Missing required fields: to, studyGuideTitle, studyGuideUrl")
    if not EMAIL_RE.match(payload.to):
        raise InvalidInput("Invalid email format")
    if LINE_BREAK_RE.search(payload.study_guide_title) or LINE_BREAK_RE.search(payload.sender_name or ""):
        raise InvalidInput("studyGuideTitle and senderName cannot contain line breaks")
    if not email_service.configured:
        raise UpstreamError("Email service not configured")

    html = render_share_email(
        payload.study_guide_title,
        payload.study_guide_url,
        sender_name=payload.sender_name,
        message=payload.message,
    )
    email_service.send_html(payload.to, f"Study Guide Shared: {payload.study_guide_title}", html)
    logger.info("Shared study guide by email")
