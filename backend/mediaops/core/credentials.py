from __future__ import annotations

import re
from typing import Mapping

# whitespace plus C0/C1 control characters
_UNSAFE_CHARS_RE = re.compile(r"[\s\x00-\x1f\x7f-\x9f]")

ACCESS_KEY_LENGTH = (16, 32)
SECRET_KEY_LENGTH = (32, 64)


def sanitize_credential(value: str | None) -> str:
    if not value:
        return ""
    return _UNSAFE_CHARS_RE.sub("", value)


def _check_key(name: str, raw: str | None, bounds: tuple[int, int]) -> list[str]:
    if not raw:
        return []
    issues: list[str] = []
    value = raw.strip()
    if "\n" in value or "\r" in value:
        issues.append(f"{name} contains newline characters")
    low, high = bounds
    if len(value) < low or len(value) > high:
        issues.append(f"{name} has unusual length")
    return issues


def credential_issues(env: Mapping[str, str]) -> list[str]:
    """
    Inspect raw (unsanitized) AWS credential values for common copy/paste damage.

    Only the shape of the values is examined; nothing here ever echoes them back.
    """
    issues: list[str] = []
    issues += _check_key("AWS_ACCESS_KEY_ID", env.get("AWS_ACCESS_KEY_ID"), ACCESS_KEY_LENGTH)
    issues += _check_key("AWS_SECRET_ACCESS_KEY", env.get("AWS_SECRET_ACCESS_KEY"), SECRET_KEY_LENGTH)
    return issues
