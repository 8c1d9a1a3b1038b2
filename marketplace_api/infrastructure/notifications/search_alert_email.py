"""
Templates for the "new listing matches your search" email.
"""
from dataclasses import dataclass
from html import escape

from shared.models.listing import Listing

SEARCH_ALERT_SUBJECT = "New listing added matching your interest"


@dataclass
class EmailContent:
    subject: str
    text_body: str
    html_body: str


def _format_price(price: float) -> str:
    return f"{price:,.2f}" if price else "Free"


def render_search_alert_email(listing: Listing) -> EmailContent:
    """Render the subject, plain-text and HTML bodies for an approved listing."""
    price = _format_price(listing.price)
    text_body = (
        "Hello,\n\n"
        "A new listing matching your saved search was just published.\n\n"
        f"{listing.title}\n"
        f"Category: {listing.category}\n"
        f"Price: {price}\n"
        f"Location: {listing.location}\n"
    )
    html_body = (
        "<p>Hello,</p>"
        "<p>A new listing matching your saved search was just published.</p>"
        f"<p><b>{escape(listing.title)}</b><br>"
        f"Category: {escape(listing.category)}<br>"
        f"Price: {escape(price)}<br>"
        f"Location: {escape(listing.location)}</p>"
    )
    return EmailContent(subject=SEARCH_ALERT_SUBJECT, text_body=text_body, html_body=html_body)
