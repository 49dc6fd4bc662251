"""Payment request email bodies.

The payment URL is interpolated exactly as received. It is already a fully
encoded URL, so it is never decoded or re-encoded here; the HTML body only
applies HTML attribute escaping (`&` -> `&amp;`), which mail clients undo.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from html import escape
from typing import Optional

CURRENCY_SYMBOLS = {
    "usd": "$",
    "eur": "€",
    "gbp": "£",
    "jpy": "¥",
    "cad": "CA$",
    "aud": "A$",
}

CARD_FEE_NOTE = "Credit/Debit Cards (Visa, MasterCard, AmEx) - 3% processing fee"
ACH_FEE_NOTE = "ACH Bank Transfer - 0.8% processing fee (max $5)"


def format_amount(amount: str, currency: str) -> str:
    """Format a minor-unit amount, e.g. ("99900", "usd") -> "$999.00"."""
    value = (Decimal(int(amount)) / 100).quantize(Decimal("0.01"))
    symbol = CURRENCY_SYMBOLS.get(currency.lower(), currency.upper())
    return f"{symbol}{value:,}"


def format_date(value: date) -> str:
    return f"{value:%B} {value.day}, {value.year}"


def payment_link_subject(amount: str, currency: str) -> str:
    return f"Payment Request - {format_amount(amount, currency)}"


def payment_link_text(
    *,
    customer_name: str,
    amount: str,
    currency: str,
    payment_url: str,
    invoice_description: str,
    invoice_date: date,
    business_name: Optional[str] = None,
    expires_at: Optional[date] = None,
    portal_name: str = "PayPortal",
) -> str:
    formatted = format_amount(amount, currency)
    lines = [
        f"Payment Request - {formatted}",
        "",
        f"Dear {customer_name},",
        "",
        "You have received a payment request for the following invoice:",
        "",
        f"Amount Due: {formatted}",
        f"Description: {invoice_description}",
        f"Invoice Date: {format_date(invoice_date)}",
    ]
    if business_name:
        lines.append(f"Business: {business_name}")
    lines += [
        "",
        "To pay securely, open the link below in your browser:",
        payment_url,
    ]
    if expires_at:
        lines += [
            "",
            f"IMPORTANT: This payment link expires on {format_date(expires_at)}. "
            "Please complete your payment before then.",
        ]
    lines += [
        "",
        "Payment Methods Accepted:",
        f"- {CARD_FEE_NOTE}",
        f"- {ACH_FEE_NOTE}",
        "",
        "This payment is processed securely through Stripe.",
        "",
        "This is an automated payment request. Please do not reply to this email.",
        "",
        f"© {date.today().year} {portal_name}. All rights reserved.",
    ]
    return "\n".join(lines)


def payment_link_html(
    *,
    customer_name: str,
    amount: str,
    currency: str,
    payment_url: str,
    invoice_description: str,
    invoice_date: date,
    business_name: Optional[str] = None,
    expires_at: Optional[date] = None,
    portal_name: str = "PayPortal",
) -> str:
    formatted = escape(format_amount(amount, currency))
    business_row = (
        f'<tr><td class="label">Business</td><td>{escape(business_name)}</td></tr>'
        if business_name
        else ""
    )
    expiry_notice = (
        f'<p class="notice"><strong>Important:</strong> This payment link expires on '
        f"{format_date(expires_at)}. Please complete your payment before then.</p>"
        if expires_at
        else ""
    )
    return f"""<!DOCTYPE html>
<html>
  <head>
    <meta charset="UTF-8">
    <style>
      body {{ font-family: -apple-system, 'Segoe UI', Roboto, sans-serif; color: #1F2937; }}
      .container {{ max-width: 600px; margin: 0 auto; }}
      .amount {{ font-size: 2.5rem; font-weight: 700; text-align: center; }}
      .label {{ font-weight: 600; color: #6B7280; padding-right: 16px; }}
      .button {{ display: inline-block; background: #1F2937; color: #FFFFFF;
                 padding: 16px 32px; border-radius: 12px; text-decoration: none; }}
      .notice {{ background: #FEF3C7; padding: 12px; border-radius: 8px; }}
    </style>
  </head>
  <body>
    <div class="container">
      <h1>Payment Request</h1>
      <p>Dear {escape(customer_name)},</p>
      <p>You have received a payment request for the following invoice:</p>
      <p class="amount">{formatted}</p>
      <table>
        <tr><td class="label">Description</td><td>{escape(invoice_description)}</td></tr>
        <tr><td class="label">Invoice Date</td><td>{format_date(invoice_date)}</td></tr>
        {business_row}
      </table>
      <p><a class="button" href="{escape(payment_url, quote=True)}">Pay Now</a></p>
      {expiry_notice}
      <h3>Payment Methods Accepted</h3>
      <ul>
        <li>{escape(CARD_FEE_NOTE)}</li>
        <li>{escape(ACH_FEE_NOTE)}</li>
      </ul>
      <p>This payment is processed securely through Stripe.</p>
      <p>&copy; {date.today().year} {escape(portal_name)}. All rights reserved.</p>
    </div>
  </body>
</html>
"""
