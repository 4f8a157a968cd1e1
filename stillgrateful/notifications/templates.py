"""Jinja2 rendering of the gratitude email.

Only the HTML body is autoescaped; the subject and plain-text body are sent
as text and rendered verbatim.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict

from jinja2 import Environment, PackageLoader, StrictUndefined, TemplateError, select_autoescape

from .models import NotificationTemplateError

logger = logging.getLogger(__name__)

REQUIRED_CONTEXT_KEYS = ("message", "display_name", "subject", "site_url", "site_host")


@dataclass(frozen=True)
class RenderedEmail:
    """The three rendered parts of one email."""

    subject: str
    html_body: str
    text_body: str


class TemplateRenderer:
    """Renders the subject, HTML body and text body of a gratitude email.

    Templates are loaded from the stillgrateful.notifications package and
    cached by the Jinja2 environment after first use.
    """

    def __init__(
        self,
        template_dir: str = "email_templates",
        subject_template: str = "gratitude_subject.j2",
        html_template: str = "gratitude_body.html.j2",
        text_template: str = "gratitude_body.txt.j2",
    ):
        """
        Args:
            template_dir: Directory name within the stillgrateful.notifications package
            subject_template: Filename of subject line template
            html_template: Filename of HTML body template (autoescaped)
            text_template: Filename of plain text body template
        """
        self.subject_template_name = subject_template
        self.html_template_name = html_template
        self.text_template_name = text_template

        self.env = Environment(
            loader=PackageLoader("stillgrateful.notifications", template_dir),
            autoescape=select_autoescape(
                enabled_extensions=("html.j2",),
                disabled_extensions=(),
                default_for_string=False,
                default=False,
            ),
            undefined=StrictUndefined,
        )

    def render(self, context: Dict[str, Any]) -> RenderedEmail:
        """Render all three parts of the email.

        Args:
            context: Template variables from build_notification_context()

        Returns:
            RenderedEmail with a single-line subject

        Raises:
            NotificationTemplateError: If a variable is missing or a template fails
        """
        missing = [key for key in REQUIRED_CONTEXT_KEYS if key not in context]
        if missing:
            raise NotificationTemplateError(
                f"Template context is missing: {', '.join(missing)}"
            )

        subject = self._render(self.subject_template_name, context)
        rendered = RenderedEmail(
            subject=" ".join(subject.split()),
            html_body=self._render(self.html_template_name, context),
            text_body=self._render(self.text_template_name, context),
        )

        logger.debug(
            "Rendered gratitude email for context tag %s", context.get("context_tag", "unknown")
        )
        return rendered

    def _render(self, template_name: str, context: Dict[str, Any]) -> str:
        try:
            return self.env.get_template(template_name).render(context)
        except TemplateError as e:
            error_msg = f"Template {template_name} failed to render: {e}"
            logger.error(error_msg)
            raise NotificationTemplateError(error_msg) from e
