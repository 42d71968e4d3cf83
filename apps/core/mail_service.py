"""
Outbound mail gateway.

Fire-and-forget from the callers' perspective: failures are logged and
never retried here.
"""
import logging
from typing import Iterable, Optional

from django.conf import settings
from django.core.mail import EmailMultiAlternatives
from django.template.loader import render_to_string
from django.utils.html import strip_tags

logger = logging.getLogger(__name__)


class MailService:

    def __init__(self, from_email: Optional[str] = None):
        self.from_email = from_email or settings.DEFAULT_FROM_EMAIL

    def send_email(
        self,
        to: Iterable[str],
        subject: str,
        html: Optional[str] = None,
        template: Optional[str] = None,
        context: Optional[dict] = None,
    ) -> bool:
        recipients = [address for address in to if address]
        if not recipients:
            logger.info(f"No recipients for '{subject}', skipping")
            return False

        if template:
            html = render_to_string(template, context or {})

        message = EmailMultiAlternatives(
            subject=subject,
            body=strip_tags(html or ''),
            from_email=self.from_email,
            to=recipients,
        )
        if html:
            message.attach_alternative(html, 'text/html')

        try:
            message.send()
            return True
        except Exception as e:
            logger.exception(f"Failed to send '{subject}' to {recipients}: {e}")
            return False
