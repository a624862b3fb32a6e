"""
Console email sender adapter - Implements EmailSender protocol.

This module provides a console-based implementation of the domain's
email sender port, logging messages to stdout for local development.
"""

import logging
import re

logger = logging.getLogger(__name__)

_TAGS = re.compile(r"<[^>]+>")
_BLANKS = re.compile(r"\s+")


class ConsoleEmailSender:
    """
    Implements EmailSender protocol via console logging.

    Uses structural subtyping - no explicit inheritance from Protocol.
    Used whenever no delivery service is configured.
    """

    def send(self, to: str, subject: str, html_body: str) -> None:
        """
        Log the message to console (simulates email delivery).

        The HTML is flattened to text so the verification code is readable
        in docker-compose logs.

        Args:
            to: Recipient email address
            subject: Message subject
            html_body: HTML message body
        """
        text = _BLANKS.sub(" ", _TAGS.sub(" ", html_body)).strip()
        logger.info("[EMAIL] To: %s Subject: %s Body: %s", to, subject, text)
