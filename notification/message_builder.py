import html
from dataclasses import dataclass


@dataclass
class EmailContent:
    subject: str
    text: str
    html: str


_FOOTER = "Matchrimoney - Helping couples save on their dream wedding"


def _wrap_html(title: str, greeting: str, intro: str, button_label: str, url: str, expiry_note: str, closing: str) -> str:
    safe_url = html.escape(url, quote=True)
    return f"""<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h1 style="color: #ec4899; text-align: center;">{html.escape(title)}</h1>
  <p>{html.escape(greeting)}</p>
  <p>{html.escape(intro)}</p>
  <div style="text-align: center; margin: 30px 0;">
    <a href="{safe_url}" style="background-color: #ec4899; color: white; padding: 12px 30px; text-decoration: none; border-radius: 6px; display: inline-block;">{html.escape(button_label)}</a>
  </div>
  <p>If the button doesn't work, you can copy and paste this link into your browser:</p>
  <p style="word-break: break-all; color: #666;">{safe_url}</p>
  <p>{html.escape(expiry_note)}</p>
  <p>{html.escape(closing)}</p>
  <hr style="margin: 30px 0; border: none; border-top: 1px solid #eee;">
  <p style="font-size: 12px; color: #666; text-align: center;">{_FOOTER}</p>
</div>"""


class NotificationMessageBuilder:
    """Renders account emails. Links point at the frontend, which posts the token back."""

    def __init__(self, frontend_url: str):
        self.frontend_url = frontend_url.rstrip('/')

    def verification_email(self, display_name: str, token: str, expires_hours: int = 24) -> EmailContent:
        url = f"{self.frontend_url}/verify-email?token={token}"
        greeting = f"Hi {display_name},"
        intro = ("Thank you for joining Matchrimoney! To complete your registration, "
                 "please verify your email address.")
        expiry = f"This link will expire in {expires_hours} hours for security purposes."
        closing = "If you didn't create an account with Matchrimoney, you can safely ignore this email."

        text = "\n\n".join([greeting, intro, url, expiry, closing, _FOOTER])
        return EmailContent(
            subject="Verify Your Email - Matchrimoney",
            text=text,
            html=_wrap_html("Welcome to Matchrimoney!", greeting, intro, "Verify Email Address", url, expiry, closing),
        )

    def password_reset_email(self, display_name: str, token: str, expires_hours: int = 1) -> EmailContent:
        url = f"{self.frontend_url}/reset-password?token={token}"
        greeting = f"Hi {display_name},"
        intro = "We received a request to reset your password for your Matchrimoney account."
        unit = "hour" if expires_hours == 1 else "hours"
        expiry = f"This link will expire in {expires_hours} {unit} for security purposes."
        closing = "If you didn't request a password reset, you can safely ignore this email."

        text = "\n\n".join([greeting, intro, url, expiry, closing, _FOOTER])
        return EmailContent(
            subject="Reset Your Password - Matchrimoney",
            text=text,
            html=_wrap_html("Password Reset Request", greeting, intro, "Reset Password", url, expiry, closing),
        )
