from __future__ import annotations

import re
import secrets
import time
from dataclasses import dataclass
from typing import Optional

from mediaops.core.errors import ValidationError

_S3_URL_RE = re.compile(r"^https?://([^.]+)\.s3\.([^.]+)\.amazonaws\.com/(.+)$")


@dataclass(frozen=True)
class MediaUrls:
    direct_url: str
    cdn_url: Optional[str] = None


@dataclass(frozen=True)
class S3Location:
    bucket: str
    region: str
    key: str


def _clean_key(key: str | None) -> str:
    cleaned = (key or "").strip().lstrip("/")
    if not cleaned:
        raise ValidationError("Object key is required")
    return cleaned


def _clean_domain(domain: str | None) -> str:
    d = (domain or "").strip()
    for scheme in ("https://", "http://"):
        if d.startswith(scheme):
            d = d[len(scheme):]
    return d.rstrip("/")


def build_media_urls(bucket: str, region: str, key: str, cdn_domain: str | None) -> MediaUrls:
    k = _clean_key(key)
    direct = f"https://{bucket}.s3.{region}.amazonaws.com/{k}"
    domain = _clean_domain(cdn_domain)
    return MediaUrls(direct_url=direct, cdn_url=f"https://{domain}/{k}" if domain else None)


def parse_s3_url(url: str) -> S3Location | None:
    match = _S3_URL_RE.match((url or "").strip())
    if not match:
        return None
    return S3Location(bucket=match.group(1), region=match.group(2), key=match.group(3))


def generate_object_key(prefix: str, filename: str) -> str:
    """`<prefix>/<epoch ms>-<random>.<ext>`; extension taken from the original filename."""
    stamp = int(time.time() * 1000)
    token = secrets.token_hex(6)
    ext = filename.rsplit(".", 1)[-1].lower() if "." in filename else "bin"
    return f"{prefix.strip('/')}/{stamp}-{token}.{ext}"
