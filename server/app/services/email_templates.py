from __future__ import annotations

from typing import Sequence

from app.core.config import settings
from app.models.user import User

ACCENT = "#10b981"
BG = "#020617"
CARD = "#0f172a"
TEXT = "#e2e8f0"
MUTED = "#94a3b8"
BRAND_NAME = settings.EMAIL_FROM_NAME or "Ummah Way"


def _wrap_brand_email(
    *,
    headline: str,
    body_html: str,
    preview_text: str | None = None,
    cta_label: str | None = None,
    cta_url: str | None = None,
    footer_lines: Sequence[str] | None = None,
) -> str:
    preview = preview_text or headline
    footer_html = ""
    if footer_lines:
        footer_html = (
            '<p style="margin:20px 0 0 0; color:{muted}; font-size:13px; line-height:1.5;">{footer}</p>'.format(
                muted=MUTED, footer="<br>".join(footer_lines)
            )
        )
    cta_block = ""
    if cta_label and cta_url:
        cta_block = f"""
        <div style="text-align:center; margin:28px 0 14px;">
            <a href="{cta_url}" style="background:{ACCENT}; color:#022c22; text-decoration:none; padding:14px 22px; border-radius:12px; display:inline-block; font-weight:700;">{cta_label}</a>
        </div>
        """
    return f"""<!doctype html>
<html>
  <head>
    <meta charset="UTF-8" />
    <title>{headline}</title>
  </head>
  <body style="margin:0; padding:0; background:{BG}; color:{TEXT}; font-family:'Inter','Segoe UI',Arial,sans-serif;">
    <div style="display:none; max-height:0; overflow:hidden; opacity:0; color:transparent;">{preview}</div>
    <table role="presentation" cellpadding="0" cellspacing="0" width="100%" style="background:{BG}; padding:32px 0;">
      <tr>
        <td align="center">
          <table role="presentation" cellpadding="0" cellspacing="0" width="620" style="background:{CARD}; border-radius:18px; overflow:hidden;">
            <tr>
              <td style="padding:20px 24px; border-bottom:1px solid #1e293b;">
                <div style="font-size:12px; letter-spacing:0.25em; text-transform:uppercase; color:{ACCENT};">{BRAND_NAME}</div>
                <div style="font-size:22px; font-weight:700; margin-top:6px;">{headline}</div>
              </td>
            </tr>
            <tr>
              <td style="padding:28px;">
                <div style="font-size:15px; line-height:1.6; color:{TEXT};">
                  {body_html}
                </div>
                {cta_block}
                {footer_html}
              </td>
            </tr>
          </table>
        </td>
      </tr>
    </table>
  </body>
</html>"""


def render_password_recovery_email(user: User, link: str) -> tuple[str, str, str]:
    """Return (subject, html, text) for a password reset link."""

    greeting = f"Hi {user.full_name}," if user.full_name else "Hi,"
    minutes = settings.RECOVERY_TOKEN_EXPIRE_MINUTES
    body_html = f"""
      <p style="margin:0 0 12px 0;">{greeting}</p>
      <p style="margin:0 0 16px 0;">We received a request to reset the password for your {BRAND_NAME} admin account. Use the button below to choose a new one.</p>
      <p style="margin:16px 0 0 0; color:{MUTED};">If you did not ask for this, you can ignore this email.</p>
    """
    html = _wrap_brand_email(
        headline="Reset your password",
        body_html=body_html,
        preview_text=f"Reset your {BRAND_NAME} password",
        cta_label="Set a new password",
        cta_url=link,
        footer_lines=[f"This link expires in {minutes} minutes.", f"Sent automatically by {BRAND_NAME}."],
    )
    text = (
        f"{greeting}\n\n"
        f"Reset your {BRAND_NAME} password: {link}\n"
        f"This link expires in {minutes} minutes.\n"
    )
    return f"{BRAND_NAME}: reset your password", html, text
