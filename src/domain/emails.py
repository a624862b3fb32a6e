"""
Transactional email bodies.
"""

from dataclasses import dataclass
from datetime import datetime
from html import escape


@dataclass(frozen=True)
class EmailMessage:
    subject: str
    html_body: str


def verification_email(
    brand_name: str,
    first_name: str | None,
    code: str,
    expires_at: datetime,
    ttl_minutes: int,
) -> EmailMessage:
    """Build the signup verification email carrying the one-time code."""
    brand = escape(brand_name)
    name = escape(first_name or "there")
    html_body = f"""
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <div style="background: #2c3e50; color: white; padding: 30px; text-align: center;">
    <h1 style="margin: 0; font-size: 28px;">{brand}</h1>
  </div>
  <div style="padding: 40px; background: white; border: 1px solid #ddd; border-top: none;">
    <h2 style="color: #2c3e50; margin-top: 0;">Hello {name}!</h2>
    <p>Thank you for creating an account with {brand}. To complete your registration,
    please use the verification code below:</p>
    <div style="text-align: center; margin: 40px 0;">
      <div style="font-size: 14px; color: #7f8c8d; letter-spacing: 2px;">VERIFICATION CODE</div>
      <div style="font-size: 42px; font-weight: bold; letter-spacing: 15px; font-family: 'Courier New', monospace;">{code}</div>
    </div>
    <p><strong>This code expires in {ttl_minutes} minutes</strong><br>
    Expires at: {expires_at.strftime("%H:%M")} UTC</p>
    <p>If you didn't create an account with {brand}, please ignore this email.</p>
    <p><strong>The {brand} Team</strong></p>
  </div>
</div>
"""
    return EmailMessage(subject=f"Verify Your Email - {brand_name}", html_body=html_body)
