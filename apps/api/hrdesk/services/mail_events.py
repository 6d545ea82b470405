from __future__ import annotations

import html

from ..core.config import settings
from ..models.account import Account
from .mail_service import MailPayload, send_mail


def _link(path: str, token: str) -> str:
    base = settings.app_base_url.rstrip("/")
    return f"{base}/{path}?token={token}"


def _esc(value: str | None) -> str:
    return html.escape(value or "-")


def _render_html(heading: str, greeting: str, lines: list[str], link_url: str) -> str:
    paragraphs = "".join(f"<p>{_esc(line)}</p>" for line in lines)
    return (
        f"<h4>{_esc(heading)}</h4>"
        f"<p>{_esc(greeting)}</p>"
        f"{paragraphs}"
        f"<p><a href=\"{html.escape(link_url)}\">{_esc(link_url)}</a></p>"
    )


def _render_plain(heading: str, greeting: str, lines: list[str], link_url: str) -> str:
    return "\n".join([heading, "", greeting, "", *lines, "", link_url])


def _greeting(account: Account) -> str:
    return f"Hello {account.first_name},"


def notify_verification(account: Account) -> str:
    url = _link("verify-email", account.verification_token or "")
    lines = ["Thanks for registering!", "Please click the link below to verify your email address."]
    return send_mail(
        MailPayload(
            event_type="verify_email",
            subject="Verify your email address",
            body_html=_render_html("Verify Email", _greeting(account), lines, url),
            body_text=_render_plain("Verify Email", _greeting(account), lines, url),
            recipient_email=account.email,
        )
    )


def notify_password_reset(account: Account) -> str:
    url = _link("reset-password", account.reset_token or "")
    lines = [
        "Please click the link below to reset your password.",
        f"The link is valid for {settings.reset_token_hours} hours.",
    ]
    return send_mail(
        MailPayload(
            event_type="reset_password",
            subject="Reset your password",
            body_html=_render_html("Reset Password", _greeting(account), lines, url),
            body_text=_render_plain("Reset Password", _greeting(account), lines, url),
            recipient_email=account.email,
        )
    )
