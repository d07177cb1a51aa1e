#!/usr/bin/env python3
from __future__ import annotations

import argparse
import os
import re
from dataclasses import dataclass
from typing import Iterable, Mapping
from urllib.parse import urlparse

from mediaops.core.credentials import credential_issues

_REGION_RE = re.compile(r"^[a-z]{2}(-gov)?-[a-z]+-\d$")
_BUCKET_RE = re.compile(r"^[a-z0-9][a-z0-9.-]{1,61}[a-z0-9]$")


@dataclass
class CheckResult:
    name: str
    ok: bool
    message: str
    warning: bool = False


def format_report(results: Iterable[CheckResult]) -> str:
    lines: list[str] = []
    for res in results:
        status = "WARN" if res.warning else ("OK" if res.ok else "FAIL")
        lines.append(f"[{status}] {res.name}: {res.message}")
    return "\n".join(lines) if lines else "No checks executed."


def validate_env(strict: bool = False, env: Mapping[str, str] | None = None) -> tuple[bool, list[CheckResult]]:
    env_map = dict(os.environ if env is None else env)
    checks: list[CheckResult] = []

    def add(name: str, ok: bool, message: str, *, warning: bool = False) -> None:
        checks.append(CheckResult(name=name, ok=ok, message=message, warning=warning))

    db_url = env_map.get("DATABASE_URL")
    if not db_url:
        add("database_url", False, "DATABASE_URL is required")
    else:
        parsed = urlparse(db_url)
        ok = bool(parsed.scheme and (parsed.netloc or parsed.path))
        add("database_url", ok, f"scheme={parsed.scheme or '<missing>'} host={parsed.hostname or '<missing>'}")

    region = (env_map.get("AWS_REGION") or "").strip()
    if not region:
        add("aws_region", True, "AWS_REGION not set; us-east-1 will be used", warning=True)
    else:
        add("aws_region", bool(_REGION_RE.match(region)), f"AWS_REGION={region}")

    bucket = (env_map.get("S3_BUCKET_NAME") or "").strip()
    if not bucket:
        add("s3_bucket_name", False, "S3_BUCKET_NAME is required")
    else:
        add("s3_bucket_name", bool(_BUCKET_RE.match(bucket)), f"S3_BUCKET_NAME={bucket}")

    has_key = bool((env_map.get("AWS_ACCESS_KEY_ID") or "").strip())
    has_secret = bool((env_map.get("AWS_SECRET_ACCESS_KEY") or "").strip())
    add(
        "aws_credentials",
        has_key and has_secret,
        "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY present"
        if has_key and has_secret
        else "AWS_ACCESS_KEY_ID and AWS_SECRET_ACCESS_KEY are both required",
    )
    for issue in credential_issues(env_map):
        add("aws_credential_format", True, issue, warning=True)

    if not (env_map.get("CLOUDFRONT_DOMAIN") or "").strip():
        add("cloudfront_domain", True, "CLOUDFRONT_DOMAIN not set; media served directly from S3", warning=True)

    timeout = env_map.get("HEALTH_PROBE_TIMEOUT_SECONDS")
    if timeout is not None:
        try:
            add("health_probe_timeout", float(timeout) > 0, f"HEALTH_PROBE_TIMEOUT_SECONDS={timeout}")
        except ValueError:
            add("health_probe_timeout", False, "HEALTH_PROBE_TIMEOUT_SECONDS must be a number")

    passed = all(check.ok for check in checks)
    warnings_present = any(check.warning for check in checks)
    overall = passed and (not strict or not warnings_present)
    return overall, checks


def main() -> int:
    parser = argparse.ArgumentParser(description="Validate the deployment environment for mediaops.")
    parser.add_argument("--strict", action="store_true", help="Treat warnings as failures")
    args = parser.parse_args()

    ok, results = validate_env(strict=args.strict)
    print(format_report(results))
    return 0 if ok else 1


if __name__ == "__main__":
    raise SystemExit(main())
