from __future__ import annotations

import logging
import os
import re

_REPLACEMENTS = [
    (re.compile(r"\b(AKIA|ASIA)[A-Z0-9]{12,}\b"), r"\1-REDACTED"),
    (
        re.compile(r"(aws_secret_access_key|AWS_SECRET_ACCESS_KEY)(\s*[:=]\s*)\S+"),
        r"\1\2REDACTED",
    ),
    (re.compile(r"Bearer\s+[A-Za-z0-9._-]+"), "Bearer REDACTED"),
]

_PATCHED = False


def _apply_redaction(text: str) -> str:
    sanitized = text
    for pattern, repl in _REPLACEMENTS:
        sanitized = pattern.sub(repl, sanitized)
    return sanitized


def install_log_redaction_filter() -> None:
    global _PATCHED
    if _PATCHED or os.getenv("DISABLE_LOG_REDACTION", "0") == "1":
        return
    original_get_message = logging.LogRecord.getMessage

    def redacted_get_message(self: logging.LogRecord) -> str:  # type: ignore[override]
        message = original_get_message(self)
        return _apply_redaction(message)

    logging.LogRecord.getMessage = redacted_get_message  # type: ignore[assignment]
    _PATCHED = True


def configure_logging(level: str | None = None) -> None:
    """Attach a basic stderr handler once and turn on redaction."""
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(
            level=(level or os.getenv("LOG_LEVEL", "INFO")).upper(),
            format="%(asctime)s %(name)s %(levelname)s %(message)s",
        )
    install_log_redaction_filter()
