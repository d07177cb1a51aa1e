from __future__ import annotations

from typing import Any

import boto3
from botocore.config import Config as BotoConfig
from botocore.exceptions import ClientError

from mediaops.core.config import AwsConfig


def make_s3_client(config: AwsConfig, timeout_seconds: float | None = None) -> Any:
    timeout = timeout_seconds if timeout_seconds is not None else config.probe_timeout_seconds
    kwargs: dict[str, Any] = {}
    if config.access_key_id and config.secret_access_key:
        kwargs["aws_access_key_id"] = config.access_key_id
        kwargs["aws_secret_access_key"] = config.secret_access_key
    # boto3 sessions are not thread-safe; each probe thread builds its own
    session = boto3.session.Session(region_name=config.region)
    # health probes must fail fast: one attempt, socket timeouts bounded by the probe budget
    return session.client(
        "s3",
        config=BotoConfig(
            retries={"max_attempts": 1, "mode": "standard"},
            connect_timeout=timeout,
            read_timeout=timeout,
        ),
        **kwargs,
    )


class BucketUnreachable(Exception):
    pass


class S3Storage:
    def __init__(self, config: AwsConfig, client: Any | None = None) -> None:
        self.bucket = config.bucket
        self.region = config.region
        self._client = client if client is not None else make_s3_client(config)

    def check_bucket(self) -> None:
        """HeadBucket against the configured bucket; raises BucketUnreachable with the AWS reason."""
        try:
            self._client.head_bucket(Bucket=self.bucket)
        except ClientError as e:
            error = e.response.get("Error") or {}
            code = error.get("Code") or "Unknown"
            message = error.get("Message") or str(e)
            if code in {"404", "NoSuchBucket", "NotFound"}:
                raise BucketUnreachable(f"bucket {self.bucket!r} does not exist") from e
            if code in {"403", "AccessDenied", "Forbidden"}:
                raise BucketUnreachable(f"access denied to bucket {self.bucket!r}") from e
            raise BucketUnreachable(f"{code}: {message}") from e
