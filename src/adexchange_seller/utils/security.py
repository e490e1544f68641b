"""Secure logging with automatic credential redaction.

Log records pass through :class:`SanitizingFormatter`, which replaces
bearer credentials and OAuth2 access tokens with a redaction marker
before the record is written anywhere.
"""

import logging
import re
import sys

# Patterns for sensitive data detection
SENSITIVE_PATTERNS = {
    "bearer_token": re.compile(r"Bearer\s+[A-Za-z0-9._~+/=-]+", re.IGNORECASE),
    "oauth_access_token": re.compile(r"ya29\.[A-Za-z0-9._-]+"),
    "access_token_param": re.compile(r"access_token=[^&\s]+", re.IGNORECASE),
}


def sanitize_string(value: str) -> str:
    """Redact every credential found in a string.

    :param value: String to sanitize
    :type value: str
    :return: String with credentials replaced by ``<name:REDACTED>``
    :rtype: str
    """
    if not value:
        return value
    for pattern_name, pattern in SENSITIVE_PATTERNS.items():
        value = pattern.sub(f"<{pattern_name}:REDACTED>", value)
    return value


class SanitizingFormatter(logging.Formatter):
    """Formatter that redacts credentials from the rendered message."""

    def format(self, record: logging.LogRecord) -> str:
        if record.args:
            try:
                message = record.msg % record.args
            except (TypeError, ValueError):
                message = str(record.msg)
                record.args = tuple(
                    sanitize_string(a) if isinstance(a, str) else a
                    for a in record.args
                )
            else:
                record.args = None
            record.msg = sanitize_string(message)
        else:
            record.msg = sanitize_string(str(record.msg))
        return super().format(record)


# Global flag to track if logging has been set up
_LOGGING_CONFIGURED = False


def setup_secure_logging(level: str = "INFO") -> None:
    """Set up root logging with automatic sanitization.

    Repeated calls are ignored so handlers are never duplicated.

    :param level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    :type level: str
    """
    global _LOGGING_CONFIGURED

    if _LOGGING_CONFIGURED:
        logging.getLogger(__name__).debug(
            "Logging already configured, skipping duplicate setup"
        )
        return

    formatter = SanitizingFormatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    # stdout carries command output, so logs go to stderr
    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)

    logging.basicConfig(
        level=getattr(logging, level.upper()),
        handlers=[handler],
        force=True,
    )

    # httpx logs full request lines at INFO; keep them at our level or above
    logging.getLogger("httpx").setLevel(max(logging.WARNING, getattr(logging, level.upper())))

    _LOGGING_CONFIGURED = True
