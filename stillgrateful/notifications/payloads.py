"""Template context for gratitude emails."""

from typing import Dict
from urllib.parse import urlparse

from stillgrateful.domain.models import SendRequest


def build_notification_context(
    request: SendRequest,
    subject: str,
    site_url: str = "https://stillgrateful.app",
) -> Dict:
    """Build the template context for one gratitude email.

    The sender is described only by the display phrase of the context tag.

    Args:
        request: Validated send request
        subject: Subject line
        site_url: Link shown in the footer

    Returns:
        Dictionary with template context keys:
        - message: Message text (escaped by the HTML template only)
        - display_name: Phrase for the relationship, e.g. "A former teacher"
        - context_tag: Raw tag value
        - subject: Subject line
        - site_url, site_host: Footer link and its host name
    """
    site_host = urlparse(site_url).netloc or site_url

    return {
        "message": request.message,
        "display_name": request.context_tag.display_name,
        "context_tag": request.context_tag.value,
        "subject": subject,
        "site_url": site_url,
        "site_host": site_host,
    }
